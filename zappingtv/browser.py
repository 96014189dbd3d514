"""
Interactive channel browser.

A prompt-driven loop: search the catalog, pick a channel, choose live or
catch-up playback, and come back to the search after mpv exits.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from zappingtv.services.api_client import ZappingAPIError
from zappingtv.services.channels import filter_channels
from zappingtv.services.models import Channel
from zappingtv.services.player import PlayerError, PlayerService
from zappingtv.timeparse import ParsedTime, get_examples, resolve
from zappingtv.utils import log_exception

logger = logging.getLogger(__name__)

QUIT_WORDS = ("q", "quit", "exit")


class ChannelBrowser:
    """Prompt loop over a loaded channel catalog."""

    def __init__(
        self,
        channels: list[Channel],
        player: PlayerService,
        token: str,
        console: Optional[Console] = None,
    ):
        self.channels = channels
        self.player = player
        self.token = token
        self.console = console or Console()

    async def run(self) -> None:
        """Browse until the user quits."""
        while True:
            term = Prompt.ask(
                "\n[bold]Search[/bold] (name or number, empty for all, q to quit)",
                default="",
                show_default=False,
                console=self.console,
            )
            if term.strip().lower() in QUIT_WORDS:
                return

            matches = filter_channels(self.channels, term)
            if not matches:
                self.console.print(f"[yellow]No channels match '{escape(term)}'[/yellow]")
                continue

            channel = self.choose_channel(matches)
            if channel is None:
                continue

            mode = Prompt.ask(
                f"[bold]{escape(channel.name)}[/bold] - playback mode",
                choices=["live", "time"],
                default="live",
                console=self.console,
            )
            if mode == "time":
                parsed = self.prompt_time(channel)
                if parsed is None:
                    continue
                await self.play(channel, parsed)
            else:
                await self.play(channel)

    def show_channels(self, channels: list[Channel]) -> None:
        table = Table(title=f"Channels ({len(channels)}/{len(self.channels)})")
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Name")
        for channel in channels:
            table.add_row(str(channel.number), escape(channel.name))
        self.console.print(table)

    def choose_channel(self, matches: list[Channel]) -> Optional[Channel]:
        """Let the user pick one of ``matches``; None goes back to search."""
        if len(matches) == 1:
            return matches[0]

        self.show_channels(matches)
        by_number = {str(channel.number): channel for channel in matches}
        while True:
            choice = Prompt.ask(
                "Channel number (empty to search again)",
                default="",
                show_default=False,
                console=self.console,
            ).strip()
            if not choice:
                return None
            if choice in by_number:
                return by_number[choice]
            self.console.print(f"[red]Not in the list: {escape(choice)}[/red]")

    def prompt_time(self, channel: Channel) -> Optional[ParsedTime]:
        """
        Ask for a time expression until one resolves.

        An empty answer cancels and returns None.
        """
        examples = "\n".join(f"  - {example}" for example in get_examples())
        self.console.print(
            Panel(
                f"Enter a time expression for previous programming:\n\n{examples}",
                title=f"{escape(channel.name)} - Catch-up",
                border_style="yellow",
            )
        )
        while True:
            expression = Prompt.ask(
                "Time (empty to cancel)",
                default="",
                show_default=False,
                console=self.console,
            ).strip()
            if not expression:
                return None

            parsed = resolve(expression)
            if parsed is not None:
                return parsed

            self.console.print(
                f"[red]Invalid or future time expression: \"{escape(expression)}\"[/red]\n"
                'Use natural language like "2 hours ago" or "yesterday 3pm"'
            )

    async def play(self, channel: Channel, parsed: Optional[ParsedTime] = None) -> None:
        """Play ``channel`` live, or from ``parsed`` when given."""
        if not await PlayerService.check_mpv_available(self.player.config.path):
            self.console.print("[red]MPV player not found. Please install mpv to play channels.[/red]")
            return

        try:
            if parsed is None:
                self.console.print(f"Playing {escape(channel.name)}: Live")
                await self.player.play_channel(channel, self.token)
            else:
                self.console.print(f"Playing {escape(channel.name)}: {escape(parsed.description)}")
                logger.info(f"Playing {channel.name}: {parsed.description}")
                await self.player.play_channel_at_time(channel, self.token, parsed.timestamp)
        except (ZappingAPIError, PlayerError) as e:
            log_exception(logger, e, f"Failed to play channel {channel.name}")
            self.console.print(f"[red]Failed to play channel: {escape(str(e))}[/red]")
