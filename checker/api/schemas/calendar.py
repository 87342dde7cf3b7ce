from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class ContributionDay(BaseModel):
    """Single calendar day as reported by GitHub GraphQL."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    date: str
    contribution_count: int = Field(alias="contributionCount", ge=0)
    color: str


class Week(BaseModel):
    """Week column containing days ordered by weekday."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    contribution_days: list[ContributionDay] = Field(alias="contributionDays")


class ContributionCalendar(BaseModel):
    """Contribution calendar with the server reported total."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    total_contributions: int = Field(alias="totalContributions", ge=0)
    weeks: list[Week]


class ContributionsCollection(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    contribution_calendar: ContributionCalendar = Field(alias="contributionCalendar")


class GitHubUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    contributions_collection: ContributionsCollection = Field(
        alias="contributionsCollection"
    )


class GraphQLData(BaseModel):
    user: GitHubUser | None = None


class GraphQLError(BaseModel):
    message: str


class GraphQLResponse(BaseModel):
    """Top-level GraphQL envelope separating `data` from `errors`.

    `data` stays untyped here so reported errors are readable even when the
    server returns a partial tree; `GraphQLData` validates it afterwards.
    """

    data: dict[str, Any] | None = None
    errors: list[GraphQLError] | None = None


class TodayResponse(BaseModel):
    """Today's contribution status."""

    status: str
    date: str
    count: int | None = None
    color: str | None = None


class GridCellResponse(BaseModel):
    """Single heatmap cell positioned by week column and weekday row."""

    column: int
    row: int
    date: str
    count: int
    level: int
    rgb: tuple[int, int, int]


class CalendarStateResponse(BaseModel):
    """Current fetch state together with the last loaded calendar."""

    state: str
    error: str | None = None
    total_contributions: int | None = None
    weeks: list[Week] = []
