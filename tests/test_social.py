"""Tests for the video and social-interaction services."""

import re
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from vidtube.errors import BadRequestError, ForbiddenError, NotFoundError
from vidtube.modules.aggregation import AggregationQueries
from vidtube.modules.comments import CommentService
from vidtube.modules.dashboard import DashboardService
from vidtube.modules.likes import LikeService
from vidtube.modules.playlists import PlaylistService
from vidtube.modules.storage import INDEXES
from vidtube.modules.subscriptions import SubscriptionService
from vidtube.modules.tweets import TweetService
from vidtube.modules.videos import VideoService

OWNER = ObjectId()
STRANGER = ObjectId()


@pytest.fixture
def users_mock():
    users = MagicMock()
    users.find_by_id = AsyncMock(return_value={"_id": OWNER, "username": "alice"})
    users.add_reference = AsyncMock()
    users.remove_reference = AsyncMock()
    users.record_watch = AsyncMock()
    return users


@pytest.fixture
def queries(mock_store):
    return AggregationQueries(mock_store)


@pytest.fixture
def blobs():
    store = MagicMock()
    store.upload = AsyncMock(return_value={"url": "https://cdn.example.com/v.mp4", "duration": 42.0})
    return store


@pytest.fixture
def videos(mock_store, users_mock, queries, blobs):
    return VideoService(mock_store, users_mock, queries, blobs)


def _owned(owner=OWNER, **fields):
    return {"_id": ObjectId(), "owner": owner, **fields}


# Videos


@pytest.mark.asyncio
async def test_list_videos_filters_and_paginates(videos, mock_store):
    mock_store.count.return_value = 25
    owner = ObjectId()

    result = await videos.list_videos(page="2", limit="10", query="cat (funny)", sort_by="views", sort_type="asc", user_id=str(owner))

    filter = mock_store.find_many.call_args.args[1]
    assert filter["is_published"] is True
    assert filter["owner"] == owner
    assert filter["$or"][0]["title"]["$regex"] == re.escape("cat (funny)")
    kwargs = mock_store.find_many.call_args.kwargs
    assert kwargs["sort"][0] == ("views", 1)
    assert kwargs["skip"] == 10
    assert kwargs["limit"] == 10
    assert result["pagination"] == {"total_count": 25, "total_pages": 3, "current_page": 2, "page_size": 10}


@pytest.mark.asyncio
@pytest.mark.parametrize("page,limit", [("0", "10"), ("1", "0"), ("abc", "10")])
async def test_list_videos_rejects_bad_paging(videos, page, limit):
    with pytest.raises(BadRequestError):
        await videos.list_videos(page=page, limit=limit)


@pytest.mark.asyncio
async def test_list_videos_rejects_unknown_sort(videos):
    with pytest.raises(BadRequestError):
        await videos.list_videos(sort_by="password")


@pytest.mark.asyncio
async def test_publish_requires_video_file(videos, blobs):
    with pytest.raises(BadRequestError, match="Video file is required"):
        await videos.publish(OWNER, "Title", "Description", None, None)
    blobs.upload.assert_not_called()


@pytest.mark.asyncio
async def test_publish_creates_video(videos, mock_store, users_mock):
    video = await videos.publish(OWNER, " Title ", "Description", "/tmp/v.mp4", None)

    assert video["title"] == "Title"
    assert video["duration"] == 42.0
    assert video["views"] == 0
    assert video["thumbnail"] == ""
    assert video["owner"] == OWNER
    users_mock.add_reference.assert_awaited_once_with(OWNER, "videos", video["_id"])


@pytest.mark.asyncio
async def test_get_video_counts_view_and_records_history(videos, mock_store, users_mock):
    video_id = ObjectId()
    mock_store.aggregate.return_value = [
        {"_id": video_id, "views": 4, "is_published": True, "owner_id": OWNER}
    ]

    video = await videos.get_video(video_id, STRANGER)

    assert video["views"] == 5
    mock_store.update_one.assert_awaited_once_with("videos", {"_id": video_id}, {"$inc": {"views": 1}})
    users_mock.record_watch.assert_awaited_once_with(STRANGER, video_id)


@pytest.mark.asyncio
async def test_unpublished_video_hidden_from_others(videos, mock_store, users_mock):
    mock_store.aggregate.return_value = [{"_id": ObjectId(), "is_published": False, "owner_id": OWNER}]

    with pytest.raises(NotFoundError):
        await videos.get_video(ObjectId(), STRANGER)
    users_mock.record_watch.assert_not_called()


@pytest.mark.asyncio
async def test_update_video_by_stranger_forbidden(videos, mock_store):
    mock_store.find_by_id.return_value = _owned()

    with pytest.raises(ForbiddenError):
        await videos.update_video(ObjectId(), STRANGER, "New title", None, None)
    mock_store.update_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_delete_missing_video(videos):
    with pytest.raises(NotFoundError):
        await videos.delete_video(ObjectId(), OWNER)


@pytest.mark.asyncio
async def test_delete_video_cascades(videos, mock_store, users_mock):
    video = _owned()
    comment_id = ObjectId()
    mock_store.find_by_id.return_value = video
    mock_store.find_many.return_value = [{"_id": comment_id}]

    await videos.delete_video(video["_id"], OWNER)

    mock_store.delete_by_id.assert_awaited_once_with("videos", video["_id"])
    mock_store.delete_many.assert_any_await("likes", {"comment": {"$in": [comment_id]}})
    mock_store.delete_many.assert_any_await("likes", {"video": video["_id"]})
    mock_store.update_many.assert_any_await(
        "playlists", {"videos": video["_id"]}, {"$pull": {"videos": video["_id"]}}
    )
    users_mock.remove_reference.assert_awaited_once_with(OWNER, "videos", video["_id"])


@pytest.mark.asyncio
async def test_toggle_publish_flips_in_one_update(videos, mock_store):
    video = _owned(is_published=True)
    mock_store.find_by_id.return_value = video
    mock_store.update_by_id.return_value = {**video, "is_published": False}

    result = await videos.toggle_publish(video["_id"], OWNER)

    assert result["is_published"] is False
    update = mock_store.update_by_id.call_args.args[2]
    assert update == [{"$set": {"is_published": {"$not": ["$is_published"]}}}]


# Comments


@pytest.mark.asyncio
async def test_comment_on_missing_video(mock_store, queries):
    with pytest.raises(NotFoundError, match="Video not found"):
        await CommentService(mock_store, queries).add_comment(ObjectId(), OWNER, "hi")


@pytest.mark.asyncio
async def test_empty_comment_rejected(mock_store, queries):
    with pytest.raises(BadRequestError):
        await CommentService(mock_store, queries).add_comment(ObjectId(), OWNER, "   ")
    mock_store.insert.assert_not_called()


@pytest.mark.asyncio
async def test_comment_edit_by_stranger_forbidden(mock_store, queries):
    mock_store.find_by_id.return_value = _owned(content="hi")

    with pytest.raises(ForbiddenError):
        await CommentService(mock_store, queries).update_comment(ObjectId(), STRANGER, "edited")


@pytest.mark.asyncio
async def test_list_comments_pages(mock_store, queries):
    video_id = ObjectId()
    mock_store.find_by_id.return_value = {"_id": video_id}
    mock_store.count.return_value = 3

    result = await CommentService(mock_store, queries).list_comments(video_id, "1", "2")

    assert result["pagination"] == {"total_count": 3, "current_page": 1, "page_size": 2}
    assert mock_store.aggregate.call_args.args[0] == "comments"


# Likes


@pytest.mark.asyncio
async def test_like_toggle_creates_then_removes(mock_store, queries):
    likes = LikeService(mock_store, queries)
    video_id = ObjectId()
    mock_store.find_by_id.return_value = {"_id": video_id}

    mock_store.delete_one.return_value = False
    assert await likes.toggle("video", video_id, OWNER) == {"is_liked": True}
    mock_store.insert.assert_awaited_once_with("likes", {"liked_by": OWNER, "video": video_id})

    mock_store.delete_one.return_value = True
    assert await likes.toggle("video", video_id, OWNER) == {"is_liked": False}


@pytest.mark.asyncio
async def test_concurrent_like_is_idempotent(mock_store, queries):
    mock_store.find_by_id.return_value = {"_id": ObjectId()}
    mock_store.insert.side_effect = DuplicateKeyError("E11000")

    assert await LikeService(mock_store, queries).toggle("comment", ObjectId(), OWNER) == {"is_liked": True}


@pytest.mark.parametrize("target", ["video", "comment", "tweet"])
def test_one_like_per_user_and_target(target):
    options = next(
        options
        for collection, keys, options in INDEXES
        if collection == "likes" and keys == [("liked_by", 1), (target, 1)]
    )

    assert options == {"unique": True, "partialFilterExpression": {target: {"$exists": True}}}


@pytest.mark.asyncio
async def test_like_missing_tweet(mock_store, queries):
    with pytest.raises(NotFoundError, match="Tweet not found"):
        await LikeService(mock_store, queries).toggle("tweet", ObjectId(), OWNER)


# Tweets


@pytest.mark.asyncio
async def test_create_tweet_links_owner(mock_store, users_mock, queries):
    tweet = await TweetService(mock_store, users_mock, queries).create_tweet(OWNER, " hello ")

    assert tweet["content"] == "hello"
    users_mock.add_reference.assert_awaited_once_with(OWNER, "tweets", tweet["_id"])


@pytest.mark.asyncio
async def test_delete_tweet_by_stranger_forbidden(mock_store, users_mock, queries):
    mock_store.find_by_id.return_value = _owned(content="hi")

    with pytest.raises(ForbiddenError):
        await TweetService(mock_store, users_mock, queries).delete_tweet(ObjectId(), STRANGER)
    mock_store.delete_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_tweets_of_unknown_user(mock_store, users_mock, queries):
    users_mock.find_by_id.return_value = None

    with pytest.raises(NotFoundError):
        await TweetService(mock_store, users_mock, queries).user_tweets(ObjectId())


# Playlists


@pytest.mark.asyncio
async def test_create_playlist_requires_name(mock_store, users_mock, queries):
    with pytest.raises(BadRequestError):
        await PlaylistService(mock_store, users_mock, queries).create_playlist(OWNER, " ", "d")


@pytest.mark.asyncio
async def test_add_video_to_playlist(mock_store, users_mock, queries):
    playlist = _owned(videos=[])
    video_id = ObjectId()
    mock_store.find_by_id.side_effect = [playlist, {"_id": video_id}]
    mock_store.update_by_id.return_value = {**playlist, "videos": [video_id]}

    result = await PlaylistService(mock_store, users_mock, queries).add_video(video_id, playlist["_id"], OWNER)

    assert result["videos"] == [video_id]
    mock_store.update_by_id.assert_awaited_once_with(
        "playlists", playlist["_id"], {"$addToSet": {"videos": video_id}}
    )


@pytest.mark.asyncio
async def test_add_video_to_foreign_playlist(mock_store, users_mock, queries):
    mock_store.find_by_id.return_value = _owned(videos=[])

    with pytest.raises(ForbiddenError):
        await PlaylistService(mock_store, users_mock, queries).add_video(ObjectId(), ObjectId(), STRANGER)


@pytest.mark.asyncio
async def test_remove_video_not_in_playlist(mock_store, users_mock, queries):
    mock_store.find_by_id.return_value = _owned(videos=[])

    with pytest.raises(NotFoundError):
        await PlaylistService(mock_store, users_mock, queries).remove_video(ObjectId(), ObjectId(), OWNER)


# Subscriptions


@pytest.mark.asyncio
async def test_cannot_subscribe_to_self(mock_store, users_mock, queries):
    with pytest.raises(BadRequestError):
        await SubscriptionService(mock_store, users_mock, queries).toggle(OWNER, OWNER)
    mock_store.insert.assert_not_called()


@pytest.mark.asyncio
async def test_subscribe_when_no_edge(mock_store, users_mock, queries):
    channel = ObjectId()

    state = await SubscriptionService(mock_store, users_mock, queries).toggle(channel, OWNER)

    assert state == {"subscribed": True}
    mock_store.insert.assert_awaited_once_with("subscriptions", {"subscriber": OWNER, "channel": channel})


@pytest.mark.asyncio
async def test_unsubscribe_when_edge_exists(mock_store, users_mock, queries):
    mock_store.delete_one.return_value = True

    state = await SubscriptionService(mock_store, users_mock, queries).toggle(ObjectId(), OWNER)

    assert state == {"subscribed": False}
    mock_store.insert.assert_not_called()


@pytest.mark.asyncio
async def test_concurrent_subscribe_is_idempotent(mock_store, users_mock, queries):
    mock_store.insert.side_effect = DuplicateKeyError("E11000")

    state = await SubscriptionService(mock_store, users_mock, queries).toggle(ObjectId(), OWNER)

    assert state == {"subscribed": True}


@pytest.mark.asyncio
async def test_subscribe_to_missing_channel(mock_store, users_mock, queries):
    users_mock.find_by_id.return_value = None

    with pytest.raises(NotFoundError, match="Channel not found"):
        await SubscriptionService(mock_store, users_mock, queries).toggle(ObjectId(), OWNER)


# Dashboard


@pytest.mark.asyncio
async def test_dashboard_videos_include_unpublished(videos, mock_store, queries):
    await DashboardService(queries, videos).channel_videos(OWNER)

    assert mock_store.find_many.call_args.args[1] == {"owner": OWNER}
