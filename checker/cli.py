import argparse
import sys
import time
from typing import TextIO

import httpx

from checker.core.observability import configure_logging
from checker.core.observability import init_sentry
from checker.core.security import MissingCredentials
from checker.core.security import validate_credentials
from checker.services.calendar_service import CalendarModel
from checker.services.calendar_service import ContributedToday
from checker.services.calendar_service import GridCell
from checker.services.fetch_service import FetchCoordinator
from checker.services.fetch_service import PollingLoop
from checker.services.fetch_service import Succeeded
from checker.settings import Settings


LEVEL_GLYPHS = " .:*#"
ROW_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def render_cell(cell: GridCell | None, color: bool) -> str:
    if cell is None:
        return "  "
    if not color:
        return LEVEL_GLYPHS[cell.level] * 2
    red, green, blue = cell.rgb
    return f"\x1b[48;2;{red};{green};{blue}m  \x1b[0m"


def render_grid(cells: list[GridCell], color: bool = True) -> str:
    """Render grid cells as seven text rows, one column per week."""

    columns = max((cell.column for cell in cells), default=-1) + 1
    positioned = {(cell.row, cell.column): cell for cell in cells}

    lines: list[str] = []
    for row, label in enumerate(ROW_LABELS):
        line = "".join(
            render_cell(positioned.get((row, column)), color)
            for column in range(columns)
        )
        lines.append(f"{label} {line}")
    return "\n".join(lines)


def render_model(
    model: CalendarModel,
    username: str,
    today: str | None,
    color: bool,
) -> str:
    status = model.today_status(today)
    if isinstance(status, ContributedToday):
        today_line = f"Today ({status.date}): {status.count} contributions"
    else:
        today_line = f"Today ({status.date}): no data"

    return "\n".join(
        [
            f"{username}: {model.total_contributions} contributions in the last year",
            today_line,
            "",
            render_grid(model.grid(), color=color),
        ]
    )


def wait_for_outcome(
    coordinator: FetchCoordinator, polling_loop: PollingLoop, interval: float
) -> None:
    coordinator.trigger()
    while not polling_loop.tick():
        time.sleep(interval)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show a GitHub user's contribution calendar in the terminal."
    )
    parser.add_argument(
        "--today",
        default=None,
        help="Date to report as today, YYYY-MM-DD (default: local date)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between polling ticks (default: POLL_INTERVAL_SECONDS)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Render contribution levels as glyphs instead of 24-bit colors",
    )
    return parser


def main(
    argv: list[str] | None = None,
    app_settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None,
    out: TextIO | None = None,
) -> int:
    args = build_parser().parse_args(argv)
    if app_settings is None:
        app_settings = Settings()
    if out is None:
        out = sys.stdout

    configure_logging(app_settings)
    init_sentry(app_settings)

    credentials = validate_credentials(app_settings)
    if isinstance(credentials, MissingCredentials):
        print(f"error: {credentials.message}", file=sys.stderr)
        return 2

    coordinator = FetchCoordinator(
        credentials=credentials,
        graphql_url=app_settings.github_graphql_url,
        user_agent=app_settings.user_agent,
        transport=transport,
    )
    polling_loop = PollingLoop(coordinator)
    interval = args.interval if args.interval is not None else app_settings.poll_interval_seconds

    wait_for_outcome(coordinator, polling_loop, interval)

    if not isinstance(coordinator.state, Succeeded) or coordinator.model is None:
        print(f"error: {coordinator.error}", file=sys.stderr)
        return 1

    print(
        render_model(
            coordinator.model,
            username=credentials.username,
            today=args.today,
            color=not args.no_color,
        ),
        file=out,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
