"""Collection names."""

USERS = "users"
VIDEOS = "videos"
COMMENTS = "comments"
LIKES = "likes"
TWEETS = "tweets"
PLAYLISTS = "playlists"
SUBSCRIPTIONS = "subscriptions"
