"""Daily contribution checker: one status-or-error slot per participant."""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, timezone, tzinfo
from types import MappingProxyType
from typing import Callable, Iterable, List, Mapping, Sequence

from .constants import DEFAULT_TIMEZONE, FETCH_FAILED_MESSAGE, PUSH_EVENT, UNKNOWN_ERROR_MESSAGE
from .date_window import DateWindow, civil_date_of, compute_window
from .github_client import ContributionData, GitHubAPIError, GitHubClient, GitHubEvent

logger = logging.getLogger(__name__)

COMMITTED = "committed"
PENDING = "pending"
ERROR = "error"


def has_push_event_on(events: Iterable[GitHubEvent], today: date, tz: tzinfo) -> bool:
    """Return True if any push event was created on ``today`` as seen in ``tz``."""
    for event in events:
        if event["type"] != PUSH_EVENT:
            continue
        try:
            if civil_date_of(event["created_at"], tz) == today:
                return True
        except ValueError:
            logger.debug("Skipping event with bad timestamp: %r", event["created_at"])
    return False


def has_contribution_on(data: ContributionData, today: date) -> bool:
    """
    Return True if the calendar counts at least one contribution on ``today``.

    A calendar without an entry for ``today`` yields False.
    """
    target = today.isoformat()
    for week in data["weeks"]:
        for day in week["days"]:
            if day["date"] == target:
                return day["count"] > 0
    return False


class BaseSource(ABC):
    """Where a participant's activity for a day is read from."""

    name: str = ""

    @abstractmethod
    def fetch_status(self, client: GitHubClient, username: str, window: DateWindow) -> bool:
        """
        Decide whether ``username`` contributed inside ``window``.

        Args:
            client: Open GitHub client
            username: GitHub login
            window: Today's window in the configured timezone

        Raises:
            GitHubAPIError: If the activity could not be determined
        """
        pass


class EventsSource(BaseSource):
    """Reads the REST events feed and looks for push events dated today."""

    name = "events"

    def fetch_status(self, client: GitHubClient, username: str, window: DateWindow) -> bool:
        events = client.get_user_events(username)
        return has_push_event_on(events, window.day, window.tz)


class CalendarSource(BaseSource):
    """Reads the GraphQL contribution calendar restricted to today's window."""

    name = "calendar"

    def fetch_status(self, client: GitHubClient, username: str, window: DateWindow) -> bool:
        data = client.get_contribution_calendar(username, window)
        return has_contribution_on(data, window.day)


SOURCES: dict[str, type[BaseSource]] = {
    EventsSource.name: EventsSource,
    CalendarSource.name: CalendarSource,
}


@dataclass(frozen=True)
class CheckResult:
    """Snapshot of one completed check cycle."""

    window: DateWindow
    participants: tuple[str, ...]
    statuses: Mapping[str, bool] = field(default_factory=dict)
    errors: Mapping[str, str] = field(default_factory=dict)
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        object.__setattr__(self, "statuses", MappingProxyType(dict(self.statuses)))
        object.__setattr__(self, "errors", MappingProxyType(dict(self.errors)))

    def outcome(self, username: str) -> str:
        """Return ``committed``, ``pending`` or ``error`` for a participant."""
        if username in self.errors:
            return ERROR
        return COMMITTED if self.statuses.get(username) else PENDING

    def to_dict(self) -> dict:
        return {
            "date": self.window.day.isoformat(),
            "window": {"from": self.window.start_iso, "to": self.window.end_iso},
            "checked_at": self.checked_at.isoformat(),
            "participants": [
                {
                    "username": username,
                    "status": self.outcome(username),
                    "committed": self.statuses.get(username),
                    "error": self.errors.get(username),
                }
                for username in self.participants
            ],
        }


class CommitChecker:
    """Checks a fixed roster, one participant at a time, and publishes the result."""

    def __init__(
        self,
        participants: Sequence[str],
        source: BaseSource,
        client_factory: Callable[[], GitHubClient],
        tz: tzinfo = DEFAULT_TIMEZONE,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize the checker.

        Args:
            participants: Roster in display order
            source: Activity source used for every participant
            client_factory: Returns a fresh GitHubClient for one cycle
            tz: Timezone that defines "today"
            clock: Returns the current instant; defaults to the wall clock
        """
        self.participants: tuple[str, ...] = tuple(participants)
        self.source = source
        self.client_factory = client_factory
        self.tz = tz
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.latest: CheckResult | None = None
        self._lock = threading.Lock()

    @property
    def checking(self) -> bool:
        """True while a cycle is running."""
        return self._lock.locked()

    def run_check(self) -> CheckResult:
        """Run one cycle, waiting for any cycle already in progress to finish."""
        with self._lock:
            return self._run_cycle()

    def latest_or_run(self) -> CheckResult:
        """Return the published result, running a first cycle only if none has finished."""
        if self.latest is not None:
            return self.latest
        with self._lock:
            if self.latest is not None:
                return self.latest
            return self._run_cycle()

    def try_run_check(self) -> CheckResult | None:
        """Run one cycle unless another is in progress, in which case return None."""
        if not self._lock.acquire(blocking=False):
            return None
        try:
            return self._run_cycle()
        finally:
            self._lock.release()

    def _run_cycle(self) -> CheckResult:
        window = compute_window(self.tz, self.clock())
        logger.info(
            "Checking %d participants for %s via %s",
            len(self.participants), window.day.isoformat(), self.source.name,
        )

        statuses: dict[str, bool] = {}
        errors: dict[str, str] = {}
        try:
            client = self.client_factory()
        except Exception:
            logger.exception("Could not create a GitHub client")
            errors = {username: FETCH_FAILED_MESSAGE for username in self.participants}
        else:
            with client:
                for username in self.participants:
                    try:
                        statuses[username] = self.source.fetch_status(client, username, window)
                    except GitHubAPIError as e:
                        logger.warning("Check failed for %s: %s", username, e)
                        errors[username] = str(e)
                    except Exception:
                        logger.exception("Unexpected error while checking %s", username)
                        errors[username] = UNKNOWN_ERROR_MESSAGE

        result = CheckResult(
            window=window,
            participants=self.participants,
            statuses=statuses,
            errors=errors,
            checked_at=self.clock(),
        )
        self.latest = result
        committed: List[str] = [name for name, done in statuses.items() if done]
        logger.info(
            "Check finished: %d committed, %d pending, %d errors",
            len(committed), len(statuses) - len(committed), len(errors),
        )
        return result
