"""Tweet routes."""

from fastapi import APIRouter, Depends

from vidtube.modules.auth import AuthenticatedUser
from vidtube.modules.storage import to_object_id

from ..container import ServiceContainer
from ..dependencies import get_current_user, get_services
from ..models import ContentRequest
from ..responses import respond


def create_tweets_router() -> APIRouter:
    router = APIRouter(prefix="/tweets", tags=["tweets"], dependencies=[Depends(get_current_user)])

    @router.post("")
    async def create_tweet(
        body: ContentRequest,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        tweet = await services.tweets.create_tweet(user.id, body.content)
        return respond(201, tweet, "Tweet created successfully")

    @router.get("/user/{user_id}")
    async def user_tweets(user_id: str, services: ServiceContainer = Depends(get_services)):
        tweets = await services.tweets.user_tweets(to_object_id(user_id, "user id"))
        return respond(200, tweets, "Tweets fetched successfully")

    @router.patch("/{tweet_id}")
    async def update_tweet(
        tweet_id: str,
        body: ContentRequest,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        tweet = await services.tweets.update_tweet(
            to_object_id(tweet_id, "tweet id"), user.id, body.content
        )
        return respond(200, tweet, "Tweet updated successfully")

    @router.delete("/{tweet_id}")
    async def delete_tweet(
        tweet_id: str,
        user: AuthenticatedUser = Depends(get_current_user),
        services: ServiceContainer = Depends(get_services),
    ):
        await services.tweets.delete_tweet(to_object_id(tweet_id, "tweet id"), user.id)
        return respond(200, {}, "Tweet deleted successfully")

    return router
