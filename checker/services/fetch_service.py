import logging
import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar

import httpx

from checker.api.schemas.calendar import ContributionCalendar
from checker.core.security import Credentials
from checker.github_api import DEFAULT_USER_AGENT
from checker.github_api import ContributionFetchError
from checker.github_api import fetch_contribution_calendar
from checker.services.calendar_service import CalendarModel


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    name: ClassVar[str] = "idle"


@dataclass(frozen=True)
class InFlight:
    name: ClassVar[str] = "in_flight"


@dataclass(frozen=True)
class Succeeded:
    calendar: ContributionCalendar

    name: ClassVar[str] = "succeeded"


@dataclass(frozen=True)
class Failed:
    message: str

    name: ClassVar[str] = "failed"


FetchState = Idle | InFlight | Succeeded | Failed
FetchOutcome = Succeeded | Failed


class ResultChannel:
    """Single-slot handoff of one fetch outcome from a worker to the poller."""

    def __init__(self) -> None:
        self._slot: queue.Queue[FetchOutcome] = queue.Queue(maxsize=1)

    def send(self, outcome: FetchOutcome) -> None:
        # A second send raises queue.Full.
        self._slot.put_nowait(outcome)

    def try_receive(self) -> FetchOutcome | None:
        try:
            return self._slot.get_nowait()
        except queue.Empty:
            return None


class FetchWorker:
    """Performs one contribution fetch and reports exactly one outcome."""

    def __init__(
        self,
        credentials: Credentials,
        graphql_url: str,
        channel: ResultChannel,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._credentials = credentials
        self._graphql_url = graphql_url
        self._channel = channel
        self._user_agent = user_agent
        self._transport = transport

    def run(self) -> None:
        try:
            calendar = fetch_contribution_calendar(
                username=self._credentials.username,
                token=self._credentials.token,
                graphql_url=self._graphql_url,
                user_agent=self._user_agent,
                transport=self._transport,
            )
        except ContributionFetchError as exc:
            logger.warning("Contribution fetch failed: %s", exc)
            outcome: FetchOutcome = Failed(message=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error while fetching contributions")
            outcome = Failed(message=f"Unexpected error: {exc}")
        else:
            logger.info(
                "Fetched %d contributions across %d weeks for %s",
                calendar.total_contributions,
                len(calendar.weeks),
                self._credentials.username,
            )
            outcome = Succeeded(calendar=calendar)

        self._channel.send(outcome)


class FetchCoordinator:
    """Owns the fetch lifecycle and allows at most one fetch in flight.

    All state changes happen on the thread that calls `trigger()` and
    `complete()`; workers only write to their own `ResultChannel`.
    """

    def __init__(
        self,
        credentials: Credentials,
        graphql_url: str,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.credentials = credentials
        self.graphql_url = graphql_url
        self.user_agent = user_agent
        self.transport = transport
        self.state: FetchState = Idle()
        self.model: CalendarModel | None = None
        self._channel: ResultChannel | None = None
        self._worker: threading.Thread | None = None

    @property
    def in_flight(self) -> bool:
        return isinstance(self.state, InFlight)

    @property
    def worker(self) -> threading.Thread | None:
        """Thread of the outstanding fetch, released once its outcome is applied."""

        return self._worker

    @property
    def error(self) -> str | None:
        if isinstance(self.state, Failed):
            return self.state.message
        return None

    def trigger(self) -> bool:
        """Start a fetch unless one is already outstanding.

        Returns True when a worker was spawned.
        """

        if self.in_flight:
            logger.debug("Fetch already in flight, trigger dropped")
            return False

        channel = ResultChannel()
        worker = FetchWorker(
            credentials=self.credentials,
            graphql_url=self.graphql_url,
            channel=channel,
            user_agent=self.user_agent,
            transport=self.transport,
        )
        thread = threading.Thread(
            target=worker.run, name="contribution-fetch", daemon=True
        )

        self._channel = channel
        self._worker = thread
        self.state = InFlight()
        thread.start()
        logger.info("Started contribution fetch for %s", self.credentials.username)
        return True

    def try_receive(self) -> FetchOutcome | None:
        if self._channel is None:
            return None
        return self._channel.try_receive()

    def complete(self, outcome: FetchOutcome) -> None:
        """Apply a worker outcome and release the channel and worker handle."""

        self.state = outcome
        if isinstance(outcome, Succeeded):
            self.model = CalendarModel(outcome.calendar)
        self._channel = None
        self._worker = None


class PollingLoop:
    """Drains the coordinator's result channel once per UI tick."""

    def __init__(
        self,
        coordinator: FetchCoordinator,
        request_redraw: Callable[[], None] | None = None,
    ) -> None:
        self._coordinator = coordinator
        self._request_redraw = request_redraw

    def tick(self) -> bool:
        """Apply a pending outcome, if any, without blocking.

        Returns True when an outcome was applied and a redraw requested.
        """

        outcome = self._coordinator.try_receive()
        if outcome is None:
            return False

        self._coordinator.complete(outcome)
        if self._request_redraw is not None:
            self._request_redraw()
        return True
