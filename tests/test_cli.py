import json

import pytest

from daily_commit_checker import cli
from daily_commit_checker.checker import CommitChecker, EventsSource
from daily_commit_checker.config import Settings

from .conftest import KST, NOW


@pytest.fixture
def run_cli(monkeypatch, fake_github):
    created = {}

    def fake_make_checker(self):
        checker = CommitChecker(
            self.participants, self.make_source(), fake_github.client, tz=self.tz, clock=lambda: NOW
        )
        created["checker"] = checker
        return checker

    monkeypatch.setattr(cli, "load_settings", lambda: Settings(tz=KST, participants=("alice", "ghost")))
    monkeypatch.setattr(Settings, "make_checker", fake_make_checker)
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)

    def run(*argv):
        code = cli.main(list(argv))
        return code, created.get("checker")

    return run


def test_prints_one_line_per_participant(run_cli, fake_github, capsys):
    fake_github.events["alice"] = [{"type": "PushEvent", "created_at": "2024-03-06T01:00:00Z"}]

    code, checker = run_cli("--source", "events")

    out = capsys.readouterr().out
    assert code == 0
    assert isinstance(checker.source, EventsSource)
    assert "Daily commit status for 2024-03-06" in out
    assert "[x] alice: committed" in out
    assert "[!] ghost: user not found" in out


def test_json_output_and_participant_override(run_cli, fake_github, capsys):
    fake_github.events["bob"] = []

    code, _ = run_cli("--source", "events", "--participant", "bob", "--json")

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert [p["username"] for p in payload["participants"]] == ["bob"]
    assert payload["participants"][0]["status"] == "pending"


def test_timezone_override(run_cli, fake_github, capsys):
    fake_github.events["alice"] = []

    code, checker = run_cli("--source", "events", "--participant", "alice", "--timezone", "UTC")

    assert code == 0
    assert checker.latest.window.day.isoformat() == "2024-03-05"


def test_writes_png(run_cli, fake_github, tmp_path):
    fake_github.events["alice"] = []
    target = tmp_path / "board.png"

    code, _ = run_cli("--source", "events", "--png", str(target))

    assert code == 0
    assert target.read_bytes().startswith(b"\x89PNG")


def test_bad_timezone_exits_with_config_error(run_cli, capsys):
    code, checker = run_cli("--timezone", "Mars/Olympus")

    assert code == 2
    assert checker is None
    assert "Configuration error" in capsys.readouterr().err
