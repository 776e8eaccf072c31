"""Command-line configuration for the autotiling daemon.

There are no configuration files; everything comes from CLI flags and a
couple of environment variables (LOG_LEVEL, SWAYSOCK/I3SOCK).
"""

import argparse
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from . import __version__

DEFAULT_RATIO = 1.0
RECONNECT_DELAY = 5.0  # Seconds between reconnect attempts

DESCRIPTION = "Automatically switch between horizontal/vertical split layout for sway/i3."

EPILOG = """\
Runs in the background listening for window focus events and predicts the
best split direction for the next window from the dimensions of the focused
window, automating the manual splith/splitv toggling.
"""


@dataclass(frozen=True)
class AutotilingConfig:
    """Runtime options for the daemon."""

    ratio: float = DEFAULT_RATIO
    workspaces: Tuple[str, ...] = ()
    once: bool = False
    quiet: bool = False
    reconnect_delay: float = RECONNECT_DELAY

    def __post_init__(self) -> None:
        """Validate ratio and delay."""
        if not math.isfinite(self.ratio) or self.ratio <= 0:
            raise ValueError(f"Ratio must be a positive number, got {self.ratio}")
        if self.reconnect_delay < 0:
            raise ValueError(f"Reconnect delay cannot be negative, got {self.reconnect_delay}")

    def allows_workspace(self, name: Optional[str]) -> bool:
        """Check a workspace name against the allow-list (empty list allows all)."""
        if not self.workspaces:
            return True
        return name is not None and name in self.workspaces


def _ratio(value: str) -> float:
    try:
        ratio = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ratio: '{value}'")
    if not math.isfinite(ratio) or ratio <= 0:
        raise argparse.ArgumentTypeError(f"ratio must be a positive number, got '{value}'")
    return ratio


def _workspace_list(value: str) -> List[str]:
    # Names are matched exactly, so only drop empty entries ("1,,2" or a trailing comma)
    return [name for name in value.split(",") if name]


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="async-autotiling",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--ratio",
        type=_ratio,
        default=DEFAULT_RATIO,
        metavar="RATIO",
        help=(
            "Aspect ratio threshold for a vertical split: when "
            "window_height > window_width / ratio the next split is vertical. "
            "1.0 splits any window taller than wide vertically; 1.618 (golden "
            "ratio) is a popular alternative (default: %(default)s)"
        ),
    )
    parser.add_argument(
        "--workspace",
        dest="workspaces",
        type=_workspace_list,
        action="extend",
        default=[],
        metavar="NAMES",
        help=(
            "Only act on these workspaces (comma-separated, repeatable). "
            'Example: --workspace 1,dev,"Web Browsing". Default: all workspaces'
        ),
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run the layout logic once and exit",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress all log output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> AutotilingConfig:
    """Parse CLI arguments into an AutotilingConfig.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Validated configuration
    """
    args = build_parser().parse_args(argv)
    return AutotilingConfig(
        ratio=args.ratio,
        workspaces=tuple(args.workspaces),
        once=args.once,
        quiet=args.quiet,
    )
