from dataclasses import dataclass
from datetime import date

from checker.api.schemas.calendar import ContributionCalendar
from checker.api.schemas.calendar import ContributionDay
from checker.api.schemas.calendar import Week


FALLBACK_RGB = (128, 128, 128)
HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True)
class ContributedToday:
    date: str
    count: int
    color: str


@dataclass(frozen=True)
class NoDataForToday:
    """Today has no entry in the calendar, e.g. across a year boundary."""

    date: str


TodayStatus = ContributedToday | NoDataForToday


@dataclass(frozen=True)
class GridCell:
    column: int
    row: int
    date: str
    count: int
    level: int
    rgb: tuple[int, int, int]


def decode_color(color: str) -> tuple[int, int, int]:
    """Decode `#rrggbb` or `rrggbb` into an RGB triple.

    Anything that is not exactly six hex digits decodes to gray.
    """

    hex_part = color.removeprefix("#")
    if len(hex_part) != 6 or not all(char in HEX_DIGITS for char in hex_part):
        return FALLBACK_RGB

    return (
        int(hex_part[0:2], 16),
        int(hex_part[2:4], 16),
        int(hex_part[4:6], 16),
    )


def contribution_level(count: int) -> int:
    """Map daily contribution count to a heatmap level in range 0..4."""

    if count <= 0:
        return 0
    if count <= 2:
        return 1
    if count <= 5:
        return 2
    if count <= 9:
        return 3
    return 4


def find_today(calendar: ContributionCalendar, today: str) -> ContributionDay | None:
    """Return the first day whose date equals `today`, scanning in stored order."""

    for week in calendar.weeks:
        for day in week.contribution_days:
            if day.date == today:
                return day
    return None


def today_status(calendar: ContributionCalendar, today: str) -> TodayStatus:
    day = find_today(calendar, today)
    if day is None:
        return NoDataForToday(date=today)
    return ContributedToday(date=day.date, count=day.contribution_count, color=day.color)


def weekday_row(day: ContributionDay, position: int) -> int:
    # Sunday-first rows, matching GitHub's calendar weeks.
    try:
        parsed_day = date.fromisoformat(day.date)
    except ValueError:
        return position
    return (parsed_day.weekday() + 1) % 7


def build_grid(calendar: ContributionCalendar) -> list[GridCell]:
    """Lay out days as cells: one column per week, one row per weekday."""

    cells: list[GridCell] = []
    for column, week in enumerate(calendar.weeks):
        for position, day in enumerate(week.contribution_days):
            cells.append(
                GridCell(
                    column=column,
                    row=weekday_row(day, position),
                    date=day.date,
                    count=day.contribution_count,
                    level=contribution_level(day.contribution_count),
                    rgb=decode_color(day.color),
                )
            )
    return cells


class CalendarModel:
    """Loaded contribution calendar with its derived views."""

    def __init__(self, calendar: ContributionCalendar) -> None:
        self.calendar = calendar

    @property
    def total_contributions(self) -> int:
        return self.calendar.total_contributions

    @property
    def weeks(self) -> list[Week]:
        return self.calendar.weeks

    def today_status(self, today: str | None = None) -> TodayStatus:
        if today is None:
            today = date.today().isoformat()
        return today_status(self.calendar, today)

    def grid(self) -> list[GridCell]:
        return build_grid(self.calendar)
