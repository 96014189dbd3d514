"""Channel lookup and search helpers."""

from typing import Iterable, Optional

from .models import Channel


def find_channel(channels: Iterable[Channel], query: str) -> Optional[Channel]:
    """First channel whose name contains ``query`` or whose number equals it."""
    needle = query.strip().lower()
    if not needle:
        return None
    for channel in channels:
        if needle in channel.name.lower() or str(channel.number) == needle:
            return channel
    return None


def filter_channels(channels: Iterable[Channel], term: str) -> list[Channel]:
    """Channels whose name or number contains ``term`` (all when blank)."""
    needle = term.strip().lower()
    if not needle:
        return list(channels)
    return [
        channel
        for channel in channels
        if needle in channel.name.lower() or needle in str(channel.number)
    ]
