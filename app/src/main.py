"""FastAPI web app for the daily commit checker."""

import logging
import threading
from contextlib import asynccontextmanager
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.requests import Request
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates

from daily_commit_checker.checker import SOURCES, CommitChecker
from daily_commit_checker.config import ConfigError, Settings, configure_logging, load_settings
from daily_commit_checker.render import render_status_board

# GitHub logins: alphanumerics and single hyphens, at most 39 characters
LOGIN_PATTERN = r"^[A-Za-z0-9](?:-?[A-Za-z0-9])*$"

load_dotenv()

logger = logging.getLogger(__name__)

_settings: Settings | None = None
_checker: CommitChecker | None = None


def get_settings() -> Settings:
    """Load settings once per process."""
    global _settings
    if _settings is None:
        try:
            _settings = load_settings(use_dotenv=False)
        except ConfigError as e:
            raise HTTPException(status_code=500, detail=f"Invalid configuration: {e}")
    return _settings


def get_checker(settings: Settings = Depends(get_settings)) -> CommitChecker:
    """Return the process-wide checker that owns the published result."""
    global _checker
    if _checker is None:
        _checker = settings.make_checker()
    return _checker


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        settings = get_settings()
    except HTTPException as e:
        logger.error("%s", e.detail)
    else:
        configure_logging(settings.log_level)
        if settings.check_on_startup:
            checker = get_checker(settings)
            threading.Thread(target=checker.try_run_check, daemon=True).start()
    yield


app = FastAPI(title="Daily Commit Checker", lifespan=lifespan)

templates = Jinja2Templates(directory=Path(__file__).parent / "templates")


@app.get("/", response_class=HTMLResponse)
def index(request: Request, checker: CommitChecker = Depends(get_checker)):
    """Serve the status page."""
    result = checker.latest
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "participants": checker.participants,
            "result": result,
            "checking": checker.checking,
            "source": checker.source.name,
        },
    )


@app.get("/api/status")
def status(checker: CommitChecker = Depends(get_checker)):
    """Return the latest check result."""
    result = checker.latest_or_run()
    return {"checking": checker.checking, "source": checker.source.name, **result.to_dict()}


@app.post("/api/refresh")
def refresh(checker: CommitChecker = Depends(get_checker)):
    """Run a new check cycle and return its result."""
    result = checker.try_run_check()
    if result is None:
        raise HTTPException(status_code=409, detail="A check is already running")
    return {"checking": False, "source": checker.source.name, **result.to_dict()}


@app.get("/api/status.png")
def status_image(checker: CommitChecker = Depends(get_checker)):
    """Return the latest check result as a PNG status board."""
    result = checker.latest_or_run()
    return Response(
        content=render_status_board(result, source=checker.source.name),
        media_type="image/png",
        headers={"Cache-Control": "no-store"},
    )


@app.get("/api/check")
def check_user(
    username: str = Query(..., max_length=39, pattern=LOGIN_PATTERN, description="GitHub username"),
    source: str | None = Query(None, description="Activity source; defaults to the configured one"),
    settings: Settings = Depends(get_settings),
):
    """Check a single user without touching the published result."""
    source = source or settings.source
    if source not in SOURCES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid source. Choose from: {', '.join(SOURCES.keys())}",
        )

    checker = replace(settings, source=source, participants=(username,)).make_checker()
    result = checker.run_check()
    return {"source": source, **result.to_dict()}
