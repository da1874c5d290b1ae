import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from daily_commit_checker.github_client import GitHubClient

KST = timezone(timedelta(hours=9))

# 08:30 on 2024-03-06 in UTC+9
NOW = datetime(2024, 3, 5, 23, 30, tzinfo=timezone.utc)


def calendar_payload(days):
    """Build a GraphQL calendar response from (date, count) pairs."""
    return {
        "data": {
            "user": {
                "contributionsCollection": {
                    "contributionCalendar": {
                        "totalContributions": sum(count for _, count in days),
                        "weeks": [
                            {
                                "contributionDays": [
                                    {"date": day, "contributionCount": count} for day, count in days
                                ]
                            }
                        ],
                    }
                }
            }
        }
    }


class FakeGitHub:
    """Routes requests to canned responses keyed by login."""

    def __init__(self, events=None, calendars=None):
        self.events = events or {}
        self.calendars = calendars or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/graphql":
            login = json.loads(request.content)["variables"]["login"]
            return self._respond(self.calendars.get(login))
        if request.url.path.startswith("/users/") and request.url.path.endswith("/events"):
            login = request.url.path.split("/")[2]
            return self._respond(self.events.get(login))
        return httpx.Response(404, json={"message": "Not Found"})

    @staticmethod
    def _respond(entry) -> httpx.Response:
        if entry is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if isinstance(entry, Exception):
            raise entry
        if isinstance(entry, httpx.Response):
            return entry
        return httpx.Response(200, json=entry)

    def client(self) -> GitHubClient:
        return GitHubClient("test-token", transport=httpx.MockTransport(self))


@pytest.fixture
def fake_github():
    return FakeGitHub()
