"""
Aggregation pipeline builders.

Pure functions returning MongoDB pipelines; nothing here touches the
database. Conventions every builder follows:

- joins are left outer $lookup stages on foreign-key equality
- stages that reduce a joined set ($size, $first, $in) come after the
  $lookup that produced it
- the last stage is an inclusion $project, so unlisted fields never leak
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId

Pipeline = List[Dict[str, Any]]

# Reduced profile used whenever another user is embedded in a response
PROFILE_FIELDS = {"full_name": 1, "username": 1, "avatar": 1}

CHANNEL_PROFILE_FIELDS = {
    "_id": 1,
    "full_name": 1,
    "username": 1,
    "email": 1,
    "avatar": 1,
    "cover_image": 1,
    "subscriber_count": 1,
    "channels_subscribed_to_count": 1,
    "is_subscribed": 1,
}

VIDEO_FIELDS = {
    "_id": 1,
    "video_file": 1,
    "thumbnail": 1,
    "title": 1,
    "description": 1,
    "duration": 1,
    "views": 1,
    "is_published": 1,
    "owner": 1,
    "created_at": 1,
    "updated_at": 1,
}

PLAYLIST_FIELDS = {
    "_id": 1,
    "name": 1,
    "description": 1,
    "owner": 1,
    "videos": 1,
    "total_videos": 1,
    "total_views": 1,
    "created_at": 1,
    "updated_at": 1,
}


def lookup_profile(local_field: str, as_field: str, include_id: bool = False) -> Pipeline:
    """
    Join a user reference to a reduced profile and collapse it to one object.

    Returns two stages: the $lookup producing a 0-or-1 element array and the
    $addFields replacing that array with its first element.
    """
    projection = dict(PROFILE_FIELDS)
    if not include_id:
        projection["_id"] = 0

    return [
        {
            "$lookup": {
                "from": "users",
                "localField": local_field,
                "foreignField": "_id",
                "as": as_field,
                "pipeline": [{"$project": projection}],
            }
        },
        {"$addFields": {as_field: {"$first": f"${as_field}"}}},
    ]


def visible_to(viewer_id: Optional[ObjectId]) -> Dict[str, Any]:
    """Match stage keeping published videos plus the viewer's own unpublished ones."""
    return {"$match": {"$or": [{"is_published": True}, {"owner": viewer_id}]}}


def in_reference_order(ids_field: str, joined_field: str) -> Dict[str, Any]:
    """
    Expression reordering joined documents to follow a stored id list.

    $lookup returns matches in collection order; this maps every stored id to
    its joined document and drops ids whose document no longer exists.
    """
    return {
        "$filter": {
            "input": {
                "$map": {
                    "input": {"$ifNull": [f"${ids_field}", []]},
                    "as": "ref",
                    "in": {
                        "$first": {
                            "$filter": {
                                "input": f"${joined_field}",
                                "as": "doc",
                                "cond": {"$eq": ["$$doc._id", "$$ref"]},
                            }
                        }
                    },
                }
            },
            "as": "doc",
            "cond": {"$eq": [{"$type": "$$doc"}, "object"]},
        }
    }


def channel_profile_pipeline(username: str, viewer_id: Optional[ObjectId]) -> Pipeline:
    """Channel page: the user plus subscriber/subscription cardinalities."""
    return [
        {"$match": {"username": username.strip().lower()}},
        {
            "$lookup": {
                "from": "subscriptions",
                "localField": "_id",
                "foreignField": "channel",
                "as": "subscribers",
            }
        },
        {
            "$lookup": {
                "from": "subscriptions",
                "localField": "_id",
                "foreignField": "subscriber",
                "as": "subscribed_to",
            }
        },
        {
            "$addFields": {
                "subscriber_count": {"$size": "$subscribers"},
                "channels_subscribed_to_count": {"$size": "$subscribed_to"},
                "is_subscribed": {
                    "$cond": {
                        "if": {"$in": [viewer_id, "$subscribers.subscriber"]},
                        "then": True,
                        "else": False,
                    }
                },
            }
        },
        {"$project": CHANNEL_PROFILE_FIELDS},
    ]


def watch_history_pipeline(user_id: ObjectId) -> Pipeline:
    """A user's watch history as full videos, each with its owner's profile."""
    return [
        {"$match": {"_id": user_id}},
        {
            "$lookup": {
                "from": "videos",
                "localField": "watch_history",
                "foreignField": "_id",
                "as": "watched_videos",
                "pipeline": [
                    visible_to(user_id),
                    *lookup_profile("owner", "owner"),
                    {"$project": VIDEO_FIELDS},
                ],
            }
        },
        {"$addFields": {"watch_history": in_reference_order("watch_history", "watched_videos")}},
        {"$project": {"_id": 0, "watch_history": 1}},
    ]


def playlist_pipeline(playlist_id: ObjectId, viewer_id: Optional[ObjectId]) -> Pipeline:
    """A playlist hydrated with its videos (in playlist order) and owner profile."""
    return [
        {"$match": {"_id": playlist_id}},
        *lookup_profile("owner", "owner"),
        {
            "$lookup": {
                "from": "videos",
                "localField": "videos",
                "foreignField": "_id",
                "as": "playlist_videos",
                "pipeline": [visible_to(viewer_id), {"$project": VIDEO_FIELDS}],
            }
        },
        {
            "$addFields": {
                "videos": in_reference_order("videos", "playlist_videos"),
                "total_videos": {"$size": "$playlist_videos"},
                "total_views": {"$sum": "$playlist_videos.views"},
            }
        },
        {"$project": PLAYLIST_FIELDS},
    ]


def user_playlists_pipeline(user_id: ObjectId) -> Pipeline:
    """Every playlist owned by a user, most recently updated first."""
    return [
        {"$match": {"_id": user_id}},
        {
            "$lookup": {
                "from": "playlists",
                "localField": "_id",
                "foreignField": "owner",
                "as": "playlists",
            }
        },
        {"$unwind": "$playlists"},
        {"$replaceRoot": {"newRoot": "$playlists"}},
        {"$addFields": {"total_videos": {"$size": {"$ifNull": ["$videos", []]}}}},
        {"$sort": {"updated_at": -1}},
        {"$project": {key: 1 for key in PLAYLIST_FIELDS if key != "total_views"}},
    ]


def video_detail_pipeline(video_id: ObjectId, viewer_id: Optional[ObjectId]) -> Pipeline:
    """One video with its owner profile, like count and the viewer's like state."""
    return [
        {"$match": {"_id": video_id}},
        {
            "$lookup": {
                "from": "likes",
                "localField": "_id",
                "foreignField": "video",
                "as": "likes",
            }
        },
        {
            "$lookup": {
                "from": "subscriptions",
                "localField": "owner",
                "foreignField": "channel",
                "as": "owner_subscribers",
            }
        },
        {
            "$addFields": {
                "owner_id": "$owner",
                "likes_count": {"$size": "$likes"},
                "is_liked": {"$in": [viewer_id, "$likes.liked_by"]},
                "owner_subscriber_count": {"$size": "$owner_subscribers"},
            }
        },
        *lookup_profile("owner", "owner"),
        {
            "$project": {
                **VIDEO_FIELDS,
                "owner_id": 1,
                "likes_count": 1,
                "is_liked": 1,
                "owner_subscriber_count": 1,
            }
        },
    ]


def video_comments_pipeline(video_id: ObjectId, page: int, limit: int) -> Pipeline:
    """One page of a video's comments, newest first, with author profiles."""
    return [
        {"$match": {"video": video_id}},
        {"$sort": {"created_at": -1}},
        {"$skip": (page - 1) * limit},
        {"$limit": limit},
        {
            "$lookup": {
                "from": "likes",
                "localField": "_id",
                "foreignField": "comment",
                "as": "likes",
            }
        },
        {"$addFields": {"likes_count": {"$size": "$likes"}}},
        *lookup_profile("owner", "owner", include_id=True),
        {
            "$project": {
                "_id": 1,
                "content": 1,
                "video": 1,
                "owner": 1,
                "likes_count": 1,
                "created_at": 1,
                "updated_at": 1,
            }
        },
    ]


def liked_videos_pipeline(user_id: ObjectId) -> Pipeline:
    """Videos a user liked, most recent like first."""
    return [
        {"$match": {"liked_by": user_id, "video": {"$exists": True, "$ne": None}}},
        {"$sort": {"created_at": -1}},
        {
            "$lookup": {
                "from": "videos",
                "localField": "video",
                "foreignField": "_id",
                "as": "liked_video",
                "pipeline": [
                    visible_to(user_id),
                    *lookup_profile("owner", "owner"),
                    {"$project": VIDEO_FIELDS},
                ],
            }
        },
        {"$unwind": "$liked_video"},
        {"$replaceRoot": {"newRoot": "$liked_video"}},
        {"$project": VIDEO_FIELDS},
    ]


def user_tweets_pipeline(owner_id: ObjectId) -> Pipeline:
    """A user's tweets, newest first, with like counts and author profile."""
    return [
        {"$match": {"owner": owner_id}},
        {"$sort": {"created_at": -1}},
        {
            "$lookup": {
                "from": "likes",
                "localField": "_id",
                "foreignField": "tweet",
                "as": "likes",
            }
        },
        {"$addFields": {"likes_count": {"$size": "$likes"}}},
        *lookup_profile("owner", "owner", include_id=True),
        {
            "$project": {
                "_id": 1,
                "content": 1,
                "owner": 1,
                "likes_count": 1,
                "created_at": 1,
                "updated_at": 1,
            }
        },
    ]


def channel_subscribers_pipeline(channel_id: ObjectId) -> Pipeline:
    """Profiles of everyone subscribed to a channel."""
    return [
        {"$match": {"channel": channel_id}},
        {"$sort": {"created_at": -1}},
        *lookup_profile("subscriber", "subscriber", include_id=True),
        {"$project": {"_id": 0, "subscriber": 1, "subscribed_at": "$created_at"}},
    ]


def subscribed_channels_pipeline(subscriber_id: ObjectId) -> Pipeline:
    """Profiles of every channel a user subscribes to."""
    return [
        {"$match": {"subscriber": subscriber_id}},
        {"$sort": {"created_at": -1}},
        *lookup_profile("channel", "channel", include_id=True),
        {"$project": {"_id": 0, "channel": 1, "subscribed_at": "$created_at"}},
    ]


def channel_stats_pipeline(channel_id: ObjectId) -> Pipeline:
    """Totals across a channel's videos: count, views and likes."""
    return [
        {"$match": {"owner": channel_id}},
        {
            "$lookup": {
                "from": "likes",
                "localField": "_id",
                "foreignField": "video",
                "as": "likes",
            }
        },
        {
            "$group": {
                "_id": None,
                "total_videos": {"$sum": 1},
                "total_views": {"$sum": "$views"},
                "total_likes": {"$sum": {"$size": "$likes"}},
            }
        },
        {"$project": {"_id": 0, "total_videos": 1, "total_views": 1, "total_likes": 1}},
    ]
