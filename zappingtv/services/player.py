"""
mpv playback of Zapping channels.

A playback session fetches a play token, builds the stream URL (with
``startTime``/``endTime`` for catch-up), keeps the session alive with
periodic heartbeats, and waits for mpv to exit.
"""

import asyncio
import contextlib
import logging
import shutil
from typing import Optional

import httpx

from ..config import PlayerConfig, get_config
from .api_client import ZappingAPIClient, ZappingAPIError
from .models import Channel

logger = logging.getLogger(__name__)


class PlayerError(Exception):
    """The media player could not be started."""


def build_stream_url(
    channel_url: str,
    play_token: str,
    start_time: Optional[int] = None,
    end_time: Optional[int] = None,
) -> str:
    """
    Stream URL for a channel.

    Existing query parameters of ``channel_url`` are preserved; ``token``
    and, for catch-up, ``startTime``/``endTime`` (UNIX seconds) are added.
    """
    params: dict[str, str] = {"token": play_token}
    if start_time is not None:
        params["startTime"] = str(start_time)
    if end_time is not None:
        params["endTime"] = str(end_time)
    return str(httpx.URL(channel_url).copy_merge_params(params))


class PlayerService:
    """Runs mpv for a channel while keeping the upstream session alive."""

    def __init__(
        self,
        client: ZappingAPIClient,
        config: PlayerConfig | None = None,
        user_agent: str | None = None,
    ):
        self.client = client
        self.config = config or get_config().player
        self.user_agent = user_agent or client.config.user_agent
        self._play_token: Optional[str] = None

    def build_command(self, stream_url: str) -> list[str]:
        """mpv command line for ``stream_url``."""
        return [
            self.config.path,
            f"--user-agent={self.user_agent}",
            *self.config.extra_args,
            stream_url,
        ]

    async def play_channel(self, channel: Channel, token: str) -> int:
        """Play the live stream. Returns mpv's exit code."""
        logger.info(f"Starting playback for channel {channel.number}: {channel.name}")
        return await self._play(channel, token)

    async def play_channel_at_time(
        self,
        channel: Channel,
        token: str,
        start_time: int,
        end_time: Optional[int] = None,
    ) -> int:
        """Play from ``start_time`` (UNIX seconds), optionally up to ``end_time``."""
        logger.info(
            f"Starting time-based playback for channel {channel.number}: {channel.name} "
            f"at timestamp {start_time}" + (f" until {end_time}" if end_time else "")
        )
        return await self._play(channel, token, start_time, end_time)

    async def _play(
        self,
        channel: Channel,
        token: str,
        start_time: Optional[int] = None,
        end_time: Optional[int] = None,
    ) -> int:
        logger.info("Getting play token...")
        self._play_token = await self.client.get_play_token(token)
        stream_url = build_stream_url(channel.url, self._play_token, start_time, end_time)
        logger.debug(f"Stream URL: {stream_url}")

        heartbeat = asyncio.create_task(self._heartbeat_loop(self._play_token))
        try:
            return await self._run_player(stream_url)
        finally:
            heartbeat.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await heartbeat
            self._play_token = None

    async def _run_player(self, stream_url: str) -> int:
        cmd = self.build_command(stream_url)
        logger.info(f"Starting mpv: {' '.join(cmd[:-1])}")

        try:
            process = await asyncio.create_subprocess_exec(*cmd)
        except OSError as e:
            logger.error(f"Failed to start mpv: {e}")
            raise PlayerError(f"Failed to start {self.config.path}: {e}") from e

        try:
            returncode = await process.wait()
        except asyncio.CancelledError:
            logger.info("Playback cancelled, terminating mpv")
            raise
        finally:
            if process.returncode is None:
                process.terminate()
                try:
                    await asyncio.wait_for(process.wait(), timeout=5)
                except asyncio.TimeoutError:
                    process.kill()
                    await process.wait()

        logger.info(f"Playback ended (exit code: {returncode})")
        return returncode

    async def _heartbeat_loop(self, play_token: str) -> None:
        """Ping the session right away, then every ``heartbeat_interval`` seconds."""
        while True:
            try:
                logger.debug("Sending heartbeat")
                await self.client.send_heartbeat(play_token)
            except ZappingAPIError as e:
                logger.error(f"Heartbeat failed: {e}")
            await asyncio.sleep(self.config.heartbeat_interval)

    @staticmethod
    async def check_mpv_available(path: str = "mpv") -> bool:
        """True if ``path --version`` runs successfully."""
        if shutil.which(path) is None:
            return False
        try:
            process = await asyncio.create_subprocess_exec(
                path,
                "--version",
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError:
            return False
        return await process.wait() == 0
