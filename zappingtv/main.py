"""
ZappingTV command line entry point.

Usage:
    zappingtv                                   # interactive browser
    zappingtv --list
    zappingtv --channel 13
    zappingtv --channel "canal 13" --time "2 hours ago"
    zappingtv --channel 13 --time "yesterday 9pm" --until "yesterday 10pm"
    zappingtv --examples
"""

import argparse
import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt

from zappingtv import __version__
from zappingtv.browser import ChannelBrowser
from zappingtv.config import ZappingConfig, load_config
from zappingtv.services import (
    DeviceActivator,
    PlayerError,
    PlayerService,
    TokenStore,
    ZappingAPIClient,
    ZappingAPIError,
    find_channel,
)
from zappingtv.timeparse import ParsedTime, format_timestamp, get_examples, local_now, resolve
from zappingtv.utils import setup_from_config

logger = logging.getLogger(__name__)

console = Console()
error_console = Console(stderr=True, style="bold red")

TimeWindow = tuple[ParsedTime, Optional[ParsedTime]]


class TimeWindowError(ValueError):
    """A --time/--until expression did not resolve to a usable window."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zappingtv",
        description="Watch Zapping TV channels live or from earlier programming",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --list
  %(prog)s --channel 13
  %(prog)s --channel "canal 13" --time "2 hours ago"
  %(prog)s --channel 13 --time "yesterday 9pm" --until "yesterday 10pm"

Without --list or --channel an interactive channel browser starts.
        """,
    )
    parser.add_argument(
        "-c",
        "--channel",
        help="Channel name (substring) or number to play",
    )
    parser.add_argument(
        "-t",
        "--time",
        metavar="EXPRESSION",
        help='Play previous programming from this time (e.g. "2 hours ago", "yesterday 3pm")',
    )
    parser.add_argument(
        "-u",
        "--until",
        metavar="EXPRESSION",
        help="Stop catch-up playback at this time (requires --time)",
    )
    parser.add_argument(
        "-l",
        "--list",
        action="store_true",
        help="List available channels",
    )
    parser.add_argument(
        "-e",
        "--examples",
        action="store_true",
        help="Show examples of supported time expressions",
    )
    parser.add_argument(
        "--logout",
        action="store_true",
        help="Forget the saved device token",
    )
    parser.add_argument(
        "--config",
        help="Path to config.yaml",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def resolve_window(
    start_expression: str,
    end_expression: Optional[str] = None,
    now: Optional[datetime] = None,
) -> TimeWindow:
    """
    Resolve the catch-up window given on the command line.

    Both ends are resolved against the same ``now``.

    Raises:
        TimeWindowError: An expression did not resolve, or the end is not
            after the start
    """
    if now is None:
        now = local_now()

    start = resolve(start_expression, now)
    if start is None:
        raise TimeWindowError(f"Invalid time expression: {start_expression}")

    end = None
    if end_expression is not None:
        end = resolve(end_expression, now)
        if end is None:
            raise TimeWindowError(f"Invalid time expression: {end_expression}")
        if end.timestamp <= start.timestamp:
            raise TimeWindowError(
                f"End time ({end.description}) must be after start time ({start.description})"
            )

    return start, end


def print_examples() -> None:
    console.print("Supported time expressions:")
    for example in get_examples():
        console.print(f"  - {example}", highlight=False)


def _wait_for_activation(activation_url: str) -> Callable[[str], None]:
    def wait(code: str) -> None:
        console.print(
            Panel(
                f"[bold]Visit:[/bold] {activation_url}\n\n"
                f"[bold]Code:[/bold] [yellow]{escape(code)}[/yellow]",
                title="Zapping Login",
                border_style="yellow",
            )
        )
        Prompt.ask(
            "Press [green]ENTER[/green] once you've entered the code",
            default="",
            show_default=False,
            console=console,
        )

    return wait


async def run(args: argparse.Namespace, config: ZappingConfig, window: Optional[TimeWindow] = None) -> int:
    """Authenticate, load the catalog and carry out the requested action."""
    store = TokenStore(config.credentials.token_path)

    async with ZappingAPIClient(config.api) as client:
        try:
            activator = DeviceActivator(client, store)
            token = await activator.authenticate(_wait_for_activation(config.api.endpoints.smart_tv))
            channels = await client.get_channel_list(token)
        except ZappingAPIError as e:
            logger.error(f"Initialization failed: {e}")
            error_console.print(f"Error: {escape(str(e))}")
            if e.status_code in (401, 403):
                error_console.print("The saved token may have expired, try --logout")
            error_console.print(f"Detailed logs: {config.logging.file}", style="dim")
            return 1

        if args.list:
            console.print("Available channels:")
            for channel in channels:
                console.print(f"  {channel.number}: {escape(channel.name)}", highlight=False)
            return 0

        player = PlayerService(client, config.player)

        if not args.channel:
            await ChannelBrowser(channels, player, token, console).run()
            return 0

        channel = find_channel(channels, args.channel)
        if channel is None:
            error_console.print(f"Channel not found: {escape(args.channel)}")
            error_console.print("Use --list to see available channels")
            return 1

        if not await PlayerService.check_mpv_available(config.player.path):
            error_console.print("MPV player not found. Please install mpv to play channels.")
            return 1

        try:
            if window is not None:
                start, end = window
                console.print(f"Playing {escape(channel.name)}: {escape(start.description)}")
                if end is not None:
                    console.print(f"Until {format_timestamp(end.timestamp)}", style="dim")
                await player.play_channel_at_time(
                    channel,
                    token,
                    start.timestamp,
                    end.timestamp if end is not None else None,
                )
            else:
                console.print(f"Playing {escape(channel.name)}: Live")
                await player.play_channel(channel, token)
        except (ZappingAPIError, PlayerError) as e:
            logger.error(f"Playback failed: {e}")
            error_console.print(f"Error: {escape(str(e))}")
            return 1

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if (args.time or args.until) and not args.channel:
        parser.error("--time and --until require --channel")
    if args.until and not args.time:
        parser.error("--until requires --time")

    config = load_config(args.config)
    setup_from_config(config.logging, args.log_level)
    logger.info(f"Starting ZappingTV {__version__}")

    if args.examples:
        print_examples()
        return 0

    if args.logout:
        if TokenStore(config.credentials.token_path).clear():
            console.print("Device token removed")
        else:
            console.print("No saved device token")
        return 0

    window = None
    if args.time:
        try:
            window = resolve_window(args.time, args.until)
        except TimeWindowError as e:
            error_console.print(escape(str(e)))
            error_console.print("Use --examples to see supported formats")
            return 1

    try:
        return asyncio.run(run(args, config, window))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
