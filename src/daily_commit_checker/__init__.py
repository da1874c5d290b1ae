"""Daily commit checker for a fixed roster of GitHub users."""

from .checker import (
    BaseSource,
    CalendarSource,
    CheckResult,
    CommitChecker,
    EventsSource,
)
from .date_window import DateWindow, compute_window
from .github_client import (
    ContributionData,
    ContributionDay,
    ContributionWeek,
    DataNotFoundError,
    FetchError,
    GitHubAPIError,
    GitHubClient,
    UpstreamError,
    UserNotFoundError,
)

__version__ = "0.1.0"

__all__ = [
    "GitHubClient",
    "GitHubAPIError",
    "FetchError",
    "UserNotFoundError",
    "UpstreamError",
    "DataNotFoundError",
    "ContributionData",
    "ContributionDay",
    "ContributionWeek",
    "DateWindow",
    "compute_window",
    "BaseSource",
    "CalendarSource",
    "EventsSource",
    "CheckResult",
    "CommitChecker",
]
