"""Constants for the daily commit checker."""

from datetime import timedelta, timezone

# Roster checked on every cycle, in display order
PARTICIPANTS = (
    "gihwan-dev",
    "Baek-Seungyeop",
    "Byeolnabi",
    "tlswl7479",
    "vvalvvizal",
    "yujini1121",
)

# "Today" is evaluated in this fixed offset unless configured otherwise
DEFAULT_TIMEZONE = timezone(timedelta(hours=9))
DEFAULT_TIMEZONE_NAME = "+09:00"

GITHUB_API_URL = "https://api.github.com"
REQUEST_TIMEOUT_SECONDS = 10.0
EVENTS_PER_PAGE = 100

# Event type counted as a commit in the events source
PUSH_EVENT = "PushEvent"

# Per-participant error messages
USER_NOT_FOUND_MESSAGE = "user not found"
FETCH_FAILED_MESSAGE = "failed to fetch"
DATA_NOT_FOUND_MESSAGE = "data not found"
UNKNOWN_ERROR_MESSAGE = "unknown error"

# Status board layout (pixels)
BOARD_WIDTH = 520
ROW_HEIGHT = 36
HEADER_HEIGHT = 48
BOARD_PADDING = 16
ICON_SIZE = 18

# Status board colors (RGBA)
BACKGROUND_COLOR = (13, 17, 23, 255)
TEXT_COLOR = (230, 237, 243, 255)
MUTED_TEXT_COLOR = (139, 148, 158, 255)
SUCCESS_COLOR = (57, 211, 83, 255)
FAILURE_COLOR = (248, 81, 73, 255)
ERROR_COLOR = (210, 153, 34, 255)
DIVIDER_COLOR = (48, 54, 61, 255)
