"""
YouTube video search for spot-tube.

Each track is searched once through the YouTube Data API v3 and only the
top result is kept. The service is built from the bootstrapped OAuth
credentials, so an expired cached token is refreshed transparently by
google-auth on the first request.

Usage:
    searcher = VideoSearcher.from_credentials(credentials)
    video_id = searcher.search("Imagine John Lennon")
"""

from typing import Any

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from spot_tube.core.exceptions import YouTubeError
from spot_tube.core.logger import get_logger

logger = get_logger(__name__)


WATCH_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"


def watch_url(video_id: str) -> str:
    """
    Build the watch URL handed to the downloader.

    Example:
        watch_url("dQw4w9WgXcQ")  # "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    """
    return WATCH_URL_TEMPLATE.format(video_id=video_id)


class VideoSearcher:
    """
    Finds the top YouTube video for a free-text query.

    Attributes:
        _service: A googleapiclient Resource for the 'youtube' v3 API.
    """

    def __init__(self, service: Any) -> None:
        self._service = service

    @classmethod
    def from_credentials(cls, credentials: Credentials) -> "VideoSearcher":
        """Build the YouTube v3 service from OAuth credentials."""
        service = build("youtube", "v3", credentials=credentials, cache_discovery=False)
        return cls(service)

    def search(self, query: str) -> str:
        """
        Return the video ID of the top result for query.

        Raises:
            YouTubeError: If the API call fails or returns no video.
        """
        try:
            response = self._service.search().list(
                part="id,snippet",
                q=query,
                maxResults=1,
                type="video",
            ).execute()
        except HttpError as e:
            raise YouTubeError(
                f"YouTube API error {e.resp.status}: {e}",
                details={"search_query": query, "http_status": e.resp.status}
            ) from e
        except GoogleAuthError as e:
            raise YouTubeError(
                f"YouTube authentication failed: {e}",
                details={"search_query": query, "original_error": str(e)}
            ) from e
        except (httplib2.HttpLib2Error, OSError) as e:
            raise YouTubeError(
                f"YouTube request failed: {e}",
                details={"search_query": query, "original_error": str(e)}
            ) from e

        items = response.get("items", [])
        if not items:
            raise YouTubeError(
                f"no results found for query: {query}",
                details={"search_query": query}
            )

        video_id = items[0].get("id", {}).get("videoId")
        if not video_id:
            raise YouTubeError(
                f"top result for query is not a video: {query}",
                details={"search_query": query}
            )

        logger.debug(f"Top result for '{query}': {video_id}")
        return video_id
