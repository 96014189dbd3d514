"""
ZappingTV - terminal client for the Zapping IPTV service

- Device activation against the Zapping activation API
- Channel catalog browsing and search
- Live playback through mpv
- Catch-up playback from natural-language times ("2 hours ago")
"""

__version__ = "1.0.0"
__author__ = "ZappingTV Contributors"
__license__ = "MIT"

from zappingtv.config import get_config, load_config

__all__ = [
    "__version__",
    "get_config",
    "load_config",
]
