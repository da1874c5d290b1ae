"""Status board rendering: one row per participant."""

import io
from abc import ABC, abstractmethod
from typing import List, Sequence

from PIL import Image, ImageDraw, ImageFont

from .checker import COMMITTED, ERROR, CheckResult
from .constants import (
    BACKGROUND_COLOR,
    BOARD_PADDING,
    BOARD_WIDTH,
    DIVIDER_COLOR,
    ERROR_COLOR,
    FAILURE_COLOR,
    HEADER_HEIGHT,
    ICON_SIZE,
    MUTED_TEXT_COLOR,
    ROW_HEIGHT,
    SUCCESS_COLOR,
    TEXT_COLOR,
)

COMMITTED_LABEL = "committed today"
PENDING_LABEL = "not yet committed"


class Drawable(ABC):
    """Something that knows how to draw itself at a vertical offset."""

    @abstractmethod
    def draw(self, draw: ImageDraw.ImageDraw, top: int, font: ImageFont.ImageFont) -> None:
        pass


class Header(Drawable):
    """Title line with the civil date being checked."""

    def __init__(self, day: str, source: str | None = None):
        self.day = day
        self.source = source

    def draw(self, draw: ImageDraw.ImageDraw, top: int, font: ImageFont.ImageFont) -> None:
        draw.text((BOARD_PADDING, top + 12), "Daily commit status", fill=TEXT_COLOR, font=font)
        subtitle = self.day if not self.source else f"{self.day} ({self.source})"
        draw.text((BOARD_PADDING, top + 28), subtitle, fill=MUTED_TEXT_COLOR, font=font)
        draw.line(
            [(BOARD_PADDING, top + HEADER_HEIGHT - 1), (BOARD_WIDTH - BOARD_PADDING, top + HEADER_HEIGHT - 1)],
            fill=DIVIDER_COLOR,
        )


class StatusRow(Drawable):
    """A participant name with a check, a cross or an error marker."""

    def __init__(self, username: str, outcome: str, message: str | None = None):
        self.username = username
        self.outcome = outcome
        self.message = message

    def draw(self, draw: ImageDraw.ImageDraw, top: int, font: ImageFont.ImageFont) -> None:
        icon_left = BOARD_PADDING
        icon_top = top + (ROW_HEIGHT - ICON_SIZE) // 2
        self._draw_icon(draw, icon_left, icon_top)

        text_x = icon_left + ICON_SIZE + 10
        text_y = top + ROW_HEIGHT // 2 - 6
        draw.text((text_x, text_y), self.username, fill=TEXT_COLOR, font=font)

        label = self._label()
        color = {COMMITTED: SUCCESS_COLOR, ERROR: ERROR_COLOR}.get(self.outcome, FAILURE_COLOR)
        label_width = draw.textlength(label, font=font)
        draw.text((BOARD_WIDTH - BOARD_PADDING - label_width, text_y), label, fill=color, font=font)

    def _label(self) -> str:
        if self.outcome == ERROR:
            return self.message or "error"
        return COMMITTED_LABEL if self.outcome == COMMITTED else PENDING_LABEL

    def _draw_icon(self, draw: ImageDraw.ImageDraw, x: int, y: int) -> None:
        size = ICON_SIZE
        if self.outcome == COMMITTED:
            draw.ellipse([x, y, x + size, y + size], outline=SUCCESS_COLOR, width=2)
            draw.line(
                [(x + size * 0.25, y + size * 0.5), (x + size * 0.45, y + size * 0.7), (x + size * 0.75, y + size * 0.3)],
                fill=SUCCESS_COLOR,
                width=2,
            )
        elif self.outcome == ERROR:
            draw.ellipse([x, y, x + size, y + size], outline=ERROR_COLOR, width=2)
            center_x = x + size // 2
            draw.line([(center_x, y + 4), (center_x, y + size - 8)], fill=ERROR_COLOR, width=2)
            draw.point([(center_x, y + size - 5)], fill=ERROR_COLOR)
        else:
            draw.ellipse([x, y, x + size, y + size], outline=FAILURE_COLOR, width=2)
            inset = size * 0.3
            draw.line([(x + inset, y + inset), (x + size - inset, y + size - inset)], fill=FAILURE_COLOR, width=2)
            draw.line([(x + size - inset, y + inset), (x + inset, y + size - inset)], fill=FAILURE_COLOR, width=2)


def build_rows(result: CheckResult, participants: Sequence[str] | None = None) -> List[StatusRow]:
    """Build one StatusRow per participant, in roster order."""
    names = participants if participants is not None else result.participants
    return [StatusRow(name, result.outcome(name), result.errors.get(name)) for name in names]


def render_status_board(
    result: CheckResult,
    participants: Sequence[str] | None = None,
    source: str | None = None,
) -> bytes:
    """
    Render a check result as a PNG status board.

    Args:
        result: Completed check cycle
        participants: Rows to draw; defaults to the result's roster
        source: Optional source name shown next to the date

    Returns:
        PNG-encoded image bytes
    """
    rows = build_rows(result, participants)
    height = HEADER_HEIGHT + ROW_HEIGHT * len(rows) + BOARD_PADDING
    image = Image.new("RGBA", (BOARD_WIDTH, height), BACKGROUND_COLOR)
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()

    Header(result.window.day.isoformat(), source).draw(draw, 0, font)
    for index, row in enumerate(rows):
        row.draw(draw, HEADER_HEIGHT + index * ROW_HEIGHT, font)

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
