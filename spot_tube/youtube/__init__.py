"""
YouTube module for spot-tube.

    - search: VideoSearcher (top-result search) and watch_url()
"""

from spot_tube.youtube.search import VideoSearcher, watch_url

__all__ = [
    "VideoSearcher",
    "watch_url",
]
