import pytest

from checker.api.schemas.calendar import ContributionCalendar
from checker.services.calendar_service import FALLBACK_RGB
from checker.services.calendar_service import CalendarModel
from checker.services.calendar_service import ContributedToday
from checker.services.calendar_service import NoDataForToday
from checker.services.calendar_service import build_grid
from checker.services.calendar_service import contribution_level
from checker.services.calendar_service import decode_color
from checker.services.calendar_service import find_today


def make_calendar(*weeks: list[tuple[str, int, str]], total: int = 0) -> ContributionCalendar:
    return ContributionCalendar.model_validate(
        {
            "totalContributions": total,
            "weeks": [
                {
                    "contributionDays": [
                        {"date": day, "contributionCount": count, "color": color}
                        for day, count, color in week
                    ]
                }
                for week in weeks
            ],
        }
    )


@pytest.mark.parametrize(
    ("color", "expected"),
    [
        ("#1a2b3c", (26, 43, 60)),
        ("1A2B3C", (26, 43, 60)),
        ("#40c463", (64, 196, 99)),
        ("#ebedf0", (235, 237, 240)),
    ],
)
def test_decode_color_parses_hex(color: str, expected: tuple[int, int, int]) -> None:
    assert decode_color(color) == expected


@pytest.mark.parametrize("color", ["zz0000", "abc", "", "#", "##1a2b3c", "#1a2b3c4", "+1+2+3"])
def test_decode_color_falls_back_to_gray(color: str) -> None:
    assert decode_color(color) == FALLBACK_RGB == (128, 128, 128)


@pytest.mark.parametrize(
    ("count", "level"),
    [(0, 0), (1, 1), (2, 1), (3, 2), (5, 2), (6, 3), (9, 3), (10, 4), (120, 4)],
)
def test_contribution_level_buckets(count: int, level: int) -> None:
    assert contribution_level(count) == level


def test_find_today_returns_matching_day() -> None:
    calendar = make_calendar(
        [("2024-05-26", 0, "#ebedf0"), ("2024-05-27", 1, "#9be9a8")],
        [("2024-06-01", 3, "#40c463")],
        total=4,
    )

    day = find_today(calendar, "2024-06-01")

    assert day is not None
    assert day.contribution_count == 3


def test_find_today_returns_first_match_only() -> None:
    calendar = make_calendar(
        [("2024-06-01", 3, "#40c463")],
        [("2024-06-01", 7, "#216e39")],
    )

    assert find_today(calendar, "2024-06-01").contribution_count == 3


def test_today_status_distinguishes_missing_day() -> None:
    model = CalendarModel(make_calendar([("2024-06-01", 3, "#40c463")], total=3))

    assert model.today_status("2024-06-01") == ContributedToday(
        date="2024-06-01", count=3, color="#40c463"
    )
    assert model.today_status("2024-06-02") == NoDataForToday(date="2024-06-02")


def test_today_status_with_zero_count_still_matches() -> None:
    model = CalendarModel(make_calendar([("2024-06-01", 0, "#ebedf0")]))

    assert model.today_status("2024-06-01") == ContributedToday(
        date="2024-06-01", count=0, color="#ebedf0"
    )


def test_model_keeps_reported_total() -> None:
    model = CalendarModel(make_calendar([("2024-06-01", 3, "#40c463")], total=1000))

    assert model.total_contributions == 1000


def test_build_grid_places_weeks_as_columns_and_weekdays_as_rows() -> None:
    # 2024-06-01 is a Saturday, 2024-06-02 a Sunday.
    calendar = make_calendar(
        [("2024-05-31", 2, "#9be9a8"), ("2024-06-01", 12, "#216e39")],
        [("2024-06-02", 0, "#ebedf0")],
    )

    cells = build_grid(calendar)

    assert [(cell.column, cell.row, cell.date) for cell in cells] == [
        (0, 5, "2024-05-31"),
        (0, 6, "2024-06-01"),
        (1, 0, "2024-06-02"),
    ]
    assert [cell.level for cell in cells] == [1, 4, 0]
    assert cells[1].rgb == (33, 110, 57)


def test_build_grid_uses_position_for_unparseable_dates() -> None:
    calendar = make_calendar([("not-a-date", 1, "bogus"), ("also-bad", 0, "#ebedf0")])

    cells = build_grid(calendar)

    assert [cell.row for cell in cells] == [0, 1]
    assert cells[0].rgb == FALLBACK_RGB
