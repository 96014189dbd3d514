"""
ZappingTV service layer

- ZappingAPIClient: activation, play tokens and channel catalog
- DeviceActivator: device activation flow
- TokenStore: device token persistence
- PlayerService: mpv playback with session heartbeats
"""

from zappingtv.services.api_client import ActivationError, ZappingAPIClient, ZappingAPIError
from zappingtv.services.auth import DeviceActivator
from zappingtv.services.channels import filter_channels, find_channel
from zappingtv.services.credentials import TokenStore
from zappingtv.services.models import Channel
from zappingtv.services.player import PlayerError, PlayerService, build_stream_url

__all__ = [
    "ActivationError",
    "Channel",
    "DeviceActivator",
    "PlayerError",
    "PlayerService",
    "TokenStore",
    "ZappingAPIClient",
    "ZappingAPIError",
    "build_stream_url",
    "filter_channels",
    "find_channel",
]
