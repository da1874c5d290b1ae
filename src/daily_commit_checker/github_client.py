"""GitHub API client for fetching user events and contribution calendars."""

import logging
from typing import Any, List, TypedDict
from urllib.parse import quote

import httpx

from .constants import (
    DATA_NOT_FOUND_MESSAGE,
    EVENTS_PER_PAGE,
    FETCH_FAILED_MESSAGE,
    GITHUB_API_URL,
    REQUEST_TIMEOUT_SECONDS,
    USER_NOT_FOUND_MESSAGE,
)
from .date_window import DateWindow

logger = logging.getLogger(__name__)

CONTRIBUTION_CALENDAR_QUERY = """
query($login: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $login) {
    contributionsCollection(from: $from, to: $to) {
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            contributionCount
            date
          }
        }
      }
    }
  }
}
"""


class GitHubEvent(TypedDict):
    """A single entry of the public user events feed."""

    type: str
    created_at: str


class ContributionDay(TypedDict):
    """Contribution count for one calendar day."""

    date: str  # ISO date, e.g. "2024-03-06"
    count: int


class ContributionWeek(TypedDict):
    """One column of the contribution calendar."""

    days: List[ContributionDay]


class ContributionData(TypedDict):
    """Contribution calendar of a user over a requested range."""

    username: str
    total_contributions: int
    weeks: List[ContributionWeek]


class GitHubAPIError(Exception):
    """Base error for anything that prevents reading a user's activity."""


class FetchError(GitHubAPIError):
    """Transport failure or a non-success HTTP status."""

    def __init__(self, status_code: int | None = None, detail: str | None = None):
        super().__init__(FETCH_FAILED_MESSAGE)
        self.status_code = status_code
        self.detail = detail


class UserNotFoundError(GitHubAPIError):
    """The requested user does not exist."""

    def __init__(self, username: str):
        super().__init__(USER_NOT_FOUND_MESSAGE)
        self.username = username


class UpstreamError(GitHubAPIError):
    """A successful response that carries an application-level error list."""

    def __init__(self, message: str, errors: list[Any] | None = None):
        super().__init__(message)
        self.errors = errors or []


class DataNotFoundError(GitHubAPIError):
    """A successful response without usable contribution data."""

    def __init__(self):
        super().__init__(DATA_NOT_FOUND_MESSAGE)


class GitHubClient:
    """Thin wrapper over an ``httpx.Client`` for the endpoints we read."""

    def __init__(
        self,
        token: str | None,
        base_url: str = GITHUB_API_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            token: GitHub token sent as a bearer credential. Without one,
                GitHub rejects GraphQL calls and rate-limits REST calls.
            base_url: API root, ``https://api.github.com`` by default
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "daily-commit-checker",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def get_user_events(self, username: str) -> List[GitHubEvent]:
        """
        Fetch the most recent page of a user's public events.

        Raises:
            UserNotFoundError: GitHub answered 404
            FetchError: Transport failure or any other non-success status
            DataNotFoundError: The body is not a list of events
        """
        response = self._send(
            "GET",
            f"/users/{quote(username, safe='')}/events",
            params={"per_page": EVENTS_PER_PAGE},
        )
        if response.status_code == 404:
            raise UserNotFoundError(username)
        self._raise_for_status(response)

        payload = self._json(response)
        if not isinstance(payload, list):
            raise DataNotFoundError()

        events: List[GitHubEvent] = []
        for item in payload:
            if not isinstance(item, dict):
                continue
            event_type = item.get("type")
            created_at = item.get("created_at")
            if isinstance(event_type, str) and isinstance(created_at, str):
                events.append({"type": event_type, "created_at": created_at})
        return events

    def get_contribution_calendar(self, username: str, window: DateWindow) -> ContributionData:
        """
        Fetch the contribution calendar of a user for the given window.

        Args:
            username: GitHub login
            window: Inclusive range passed as ``from``/``to``

        Raises:
            UserNotFoundError: GitHub answered 404
            FetchError: Transport failure or any other non-success status
            UpstreamError: The GraphQL response reports errors
            DataNotFoundError: The calendar could not be extracted
        """
        response = self._send(
            "POST",
            "/graphql",
            json={
                "query": CONTRIBUTION_CALENDAR_QUERY,
                "variables": {
                    "login": username,
                    "from": window.start_iso,
                    "to": window.end_iso,
                },
            },
        )
        if response.status_code == 404:
            raise UserNotFoundError(username)
        self._raise_for_status(response)

        payload = self._json(response)
        if not isinstance(payload, dict):
            raise DataNotFoundError()

        errors = payload.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) else errors
            message = first.get("message") if isinstance(first, dict) else None
            raise UpstreamError(message or str(first), errors if isinstance(errors, list) else [errors])

        return _parse_calendar(username, payload)

    def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.debug("%s %s failed: %s", method, url, e)
            raise FetchError(detail=str(e)) from e

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        raise FetchError(status_code=response.status_code, detail=response.text[:200])

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise DataNotFoundError() from e


def _parse_calendar(username: str, payload: dict) -> ContributionData:
    """Convert a GraphQL calendar payload into ContributionData."""
    try:
        calendar = payload["data"]["user"]["contributionsCollection"]["contributionCalendar"]
        weeks: List[ContributionWeek] = [
            {
                "days": [
                    {"date": str(day["date"]), "count": int(day["contributionCount"])}
                    for day in week["contributionDays"]
                ]
            }
            for week in calendar["weeks"]
        ]
        total = int(calendar.get("totalContributions") or 0)
    except (KeyError, TypeError, ValueError) as e:
        raise DataNotFoundError() from e

    return {"username": username, "total_contributions": total, "weeks": weeks}
