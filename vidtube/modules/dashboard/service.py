"""Channel dashboard: aggregate stats and the owner's own video list."""

from typing import Any, Dict, List

from bson import ObjectId

from vidtube.modules.aggregation import AggregationQueries


class DashboardService:
    def __init__(self, queries: AggregationQueries, videos):
        """
        Args:
            queries: AggregationQueries for the stats rollup
            videos: VideoService listing the channel's videos
        """
        self.queries = queries
        self.videos = videos

    async def channel_stats(self, channel_id: ObjectId) -> Dict[str, Any]:
        return await self.queries.channel_stats(channel_id)

    async def channel_videos(self, channel_id: ObjectId) -> List[Dict[str, Any]]:
        return await self.videos.channel_videos(channel_id)
