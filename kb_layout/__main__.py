"""CLI entry point for kb.

Usage:
    kb                 Print the current layout
    kb --set fr        Switch to the 'fr' layout
    kb --next --quiet  Cycle to the next layout in $LAYOUTS without notification
"""

import argparse
import os
import sys

from rich.console import Console
from rich.markup import escape

from . import __version__, configure_logging
from .controller import LayoutController
from .errors import KbError
from .models import LayoutConfig


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Command-line arguments. Defaults to sys.argv[1:].

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="kb",
        description="Manage your keyboard layouts easily with setxkbmap.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  LAYOUTS               Comma separated layouts for --next (default: us,fr)
  KEYBOARD_LAYOUT_FILE  File recording the last layout set (default: $HOME/.layout)

Examples:
  %(prog)s --set fr
      Set the keyboard layout to 'fr'

  LAYOUTS=us,de,fr %(prog)s --next --quiet
      Cycle to the next layout without a desktop notification
""",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-g",
        "--get",
        action="store_true",
        help="Get the current keyboard layout",
    )

    parser.add_argument(
        "-s",
        "--set",
        dest="set_layout",
        metavar="LAYOUT",
        help="Set the keyboard layout to a given value",
    )

    parser.add_argument(
        "-n",
        "--next",
        dest="next_layout",
        action="store_true",
        help=(
            "Set the current keyboard layout to the next layout available. "
            "Read the LAYOUTS environment variable. Values must be comma separated, "
            "such as 'us,fr'."
        ),
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Disable desktop notifications",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for kb.

    Args:
        argv: Command-line arguments. Defaults to sys.argv[1:].

    Returns:
        Exit code (0 for success, the error code of a KbError otherwise).
    """
    args = parse_args(argv)
    logger = configure_logging(args.log_level)
    console = Console(stderr=True, highlight=False)

    try:
        config = LayoutConfig.from_env(os.environ)
        controller = LayoutController(config)
        logger.debug("Configured layouts: %s", ",".join(config.layouts))

        # --get wins over --set, which wins over --next
        if args.get:
            print(controller.get_current_layout())
        elif args.set_layout is not None:
            controller.set_layout(args.set_layout, quiet=args.quiet)
        elif args.next_layout:
            controller.advance_layout(quiet=args.quiet)
        else:
            print(controller.get_current_layout())

    except KbError as e:
        logger.debug("Error details: %s", e.to_dict())
        console.print(f"[bold red]Error:[/bold red] {escape(e.message)}")
        if e.suggestion:
            console.print(f"  [dim]→ {escape(e.suggestion)}[/dim]")
        return e.exit_code

    return 0


if __name__ == "__main__":
    sys.exit(main())
