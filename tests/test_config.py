from datetime import timedelta, timezone

import pytest

from daily_commit_checker.checker import CalendarSource, EventsSource
from daily_commit_checker.config import ConfigError, load_settings, parse_participants
from daily_commit_checker.constants import PARTICIPANTS


def test_defaults():
    settings = load_settings({})

    assert settings.token is None
    assert settings.source == "calendar"
    assert settings.tz.utcoffset(None) == timedelta(hours=9)
    assert settings.participants == PARTICIPANTS
    assert settings.check_on_startup is True
    assert isinstance(settings.make_source(), CalendarSource)


def test_values_from_environment():
    settings = load_settings(
        {
            "GITHUB_TOKEN": "fallback",
            "CHECK_SOURCE": "Events",
            "CHECK_TIMEZONE": "UTC",
            "PARTICIPANTS": " alice, bob ,,alice ",
            "GITHUB_API_URL": "https://ghe.example.com/api/v3/",
            "GITHUB_TIMEOUT": "2.5",
            "CHECK_ON_STARTUP": "no",
            "LOG_LEVEL": "debug",
        }
    )

    assert settings.token == "fallback"
    assert isinstance(settings.make_source(), EventsSource)
    assert settings.tz == timezone.utc
    assert settings.participants == ("alice", "bob")
    assert settings.api_url == "https://ghe.example.com/api/v3"
    assert settings.timeout == 2.5
    assert settings.check_on_startup is False
    assert settings.log_level == "DEBUG"


def test_gh_token_wins_over_github_token():
    assert load_settings({"GH_TOKEN": "a", "GITHUB_TOKEN": "b"}).token == "a"


def test_make_checker_uses_settings():
    settings = load_settings({"PARTICIPANTS": "alice", "CHECK_SOURCE": "events"})
    checker = settings.make_checker()

    assert checker.participants == ("alice",)
    assert checker.source.name == "events"
    assert checker.tz is settings.tz


@pytest.mark.parametrize(
    "env",
    [
        {"CHECK_SOURCE": "rss"},
        {"CHECK_TIMEZONE": "Nowhere/Special"},
        {"PARTICIPANTS": " , "},
        {"GITHUB_TIMEOUT": "soon"},
        {"GITHUB_TIMEOUT": "0"},
        {"LOG_LEVEL": "LOUD"},
    ],
)
def test_invalid_values(env):
    with pytest.raises(ConfigError):
        load_settings(env)


def test_non_ascii_token_is_rejected():
    with pytest.raises(ConfigError):
        load_settings({"GH_TOKEN": "t\u00f6ken"})


def test_parse_participants_keeps_order():
    assert parse_participants("c,a,b,a") == ("c", "a", "b")
