"""
Service container.

Holds every module instance the routes need. Built once in the application
lifespan and stored on app.state.
"""

from dataclasses import dataclass
from typing import Optional

from vidtube.config.provider import APIConfig, CloudinaryConfig, UploadConfig
from vidtube.modules.accounts import AccountService
from vidtube.modules.aggregation import AggregationQueries
from vidtube.modules.auth import AuthStack
from vidtube.modules.comments import CommentService
from vidtube.modules.dashboard import DashboardService
from vidtube.modules.likes import LikeService
from vidtube.modules.media import CloudinaryBlobStore, UploadStager
from vidtube.modules.playlists import PlaylistService
from vidtube.modules.storage import DocumentStore
from vidtube.modules.subscriptions import SubscriptionService
from vidtube.modules.tweets import TweetService
from vidtube.modules.videos import VideoService


@dataclass
class ServiceContainer:
    store: DocumentStore
    auth: AuthStack
    stager: UploadStager
    accounts: AccountService
    videos: VideoService
    comments: CommentService
    likes: LikeService
    tweets: TweetService
    playlists: PlaylistService
    subscriptions: SubscriptionService
    dashboard: DashboardService
    cookie_secure: bool = True


def build_services(
    store: DocumentStore,
    auth: AuthStack,
    api_config: APIConfig,
    cloudinary_config: CloudinaryConfig,
    upload_config: UploadConfig,
    blobs: Optional[CloudinaryBlobStore] = None,
) -> ServiceContainer:
    """Wire the domain services on top of the storage and auth stacks."""
    queries = AggregationQueries(store)
    blobs = blobs or CloudinaryBlobStore(cloudinary_config)
    videos = VideoService(store, auth.users, queries, blobs)

    return ServiceContainer(
        store=store,
        auth=auth,
        stager=UploadStager(upload_config.temp_dir, upload_config.max_bytes),
        accounts=AccountService(auth.users, auth.hasher, auth.issuer, queries, blobs),
        videos=videos,
        comments=CommentService(store, queries),
        likes=LikeService(store, queries),
        tweets=TweetService(store, auth.users, queries),
        playlists=PlaylistService(store, auth.users, queries),
        subscriptions=SubscriptionService(store, auth.users, queries),
        dashboard=DashboardService(queries, videos),
        cookie_secure=api_config.cookie_secure,
    )
