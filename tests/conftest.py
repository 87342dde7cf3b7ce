import json
import threading
from collections.abc import Callable

import httpx
import pytest

from checker.settings import Settings


GRAPHQL_URL = "https://api.github.test/graphql"


def make_envelope(
    total: int = 5,
    days: list[tuple[str, int, str]] | None = None,
) -> dict[str, object]:
    if days is None:
        days = [("2024-01-01", 5, "#40c463")]

    return {
        "data": {
            "user": {
                "contributionsCollection": {
                    "contributionCalendar": {
                        "totalContributions": total,
                        "weeks": [
                            {
                                "contributionDays": [
                                    {
                                        "date": day,
                                        "contributionCount": count,
                                        "color": color,
                                    }
                                    for day, count, color in days
                                ]
                            }
                        ],
                    }
                }
            }
        },
        "errors": None,
    }


@pytest.fixture
def envelope() -> dict[str, object]:
    return make_envelope()


@pytest.fixture
def envelope_factory() -> Callable[..., dict[str, object]]:
    return make_envelope


@pytest.fixture
def settings() -> Settings:
    return Settings(
        github_token="test-token",
        github_username="octocat",
        github_graphql_url=GRAPHQL_URL,
        sentry_dsn=None,
        poll_interval_seconds=0.01,
    )


class RecordingTransport(httpx.MockTransport):
    """Mock GraphQL endpoint that records requests and can hold responses."""

    def __init__(self, body: object, status_code: int = 200) -> None:
        self.requests: list[httpx.Request] = []
        self.release = threading.Event()
        self.release.set()
        self._body = body
        self._status_code = status_code
        super().__init__(self._respond)

    def _respond(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.release.wait(timeout=5)
        if isinstance(self._body, (bytes, str)):
            return httpx.Response(self._status_code, content=self._body)
        return httpx.Response(self._status_code, content=json.dumps(self._body))


@pytest.fixture
def graphql_transport() -> Callable[..., RecordingTransport]:
    return RecordingTransport
