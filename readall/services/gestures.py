"""
Pointer/touch gesture handling for the reader.

A press-move-release interaction is either a vertical drag, which adjusts
the pacing rate, or a tap. Two taps in quick succession on the same half of
the viewport form a double-tap, which seeks ten chunks back (left half) or
forward (right half).

Timestamps are milliseconds; positions are pixels with y growing downward.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from readall.models.settings import clamp_wpm
from readall.models.state import ReaderState
from readall.services.scheduler import PlaybackScheduler

logger = logging.getLogger(__name__)

# Classification thresholds
DRAG_THRESHOLD_PX = 20
TAP_MAX_DURATION_MS = 300
TAP_MAX_DRIFT_PX = 10
DOUBLE_TAP_WINDOW_MS = 350

# Pacing change per pixel of upward drag
WPM_PER_PIXEL = 0.8

SEEK_STEP = 10

FEEDBACK_OPACITY = 0.5
DRAG_FEEDBACK_HIDE_MS = 1000
SEEK_FEEDBACK_HIDE_MS = 800


class GestureKind(str, Enum):
    DRAG = "drag"
    TAP = "tap"
    DOUBLE_TAP = "double_tap"
    NONE = "none"


@dataclass
class Feedback:
    """Transient overlay text, hidden once ``hide_at`` has passed."""

    text: str = ""
    opacity: float = 0.0
    hide_at: Optional[float] = None

    def visible_at(self, now: float) -> bool:
        if not self.text or self.opacity <= 0:
            return False
        return self.hide_at is None or now < self.hide_at


@dataclass
class _Touch:
    start_x: float
    start_y: float
    start_time: float
    start_wpm: int
    dragging: bool = False


class GestureController:
    """Turns raw pointer events into pacing changes and relative seeks."""

    def __init__(
        self,
        state: ReaderState,
        scheduler: PlaybackScheduler,
        viewport_width: float,
    ) -> None:
        self.state = state
        self.scheduler = scheduler
        self.viewport_width = viewport_width
        self.feedback = Feedback()
        self._touch: Optional[_Touch] = None
        self._last_tap_time: Optional[float] = None
        self._last_tap_left: Optional[bool] = None

    def feedback_text(self, now: float) -> Optional[str]:
        """Return the overlay text if it should still be shown at ``now``."""
        if self.feedback.visible_at(now):
            return self.feedback.text
        return None

    def _show(self, text: str, hide_at: Optional[float] = None) -> None:
        self.feedback = Feedback(text=text, opacity=FEEDBACK_OPACITY, hide_at=hide_at)

    def press(self, x: float, y: float, t: float) -> None:
        """Start an interaction and capture the pacing rate it adjusts from."""
        self._touch = _Touch(start_x=x, start_y=y, start_time=t, start_wpm=self.state.wpm)

    def move(self, x: float, y: float, t: float) -> None:
        """Track movement; a vertical drag beyond the threshold adjusts WPM."""
        touch = self._touch
        if touch is None:
            return

        delta_y = touch.start_y - y  # upward is positive
        if not touch.dragging and abs(delta_y) <= DRAG_THRESHOLD_PX:
            return

        touch.dragging = True
        new_wpm = clamp_wpm(touch.start_wpm + math.floor(delta_y * WPM_PER_PIXEL + 0.5))
        if new_wpm != self.state.wpm:
            self.state.settings.wpm = new_wpm
            self._show(f"{new_wpm} WPM")

    def release(self, x: float, y: float, t: float) -> GestureKind:
        """
        Finish the interaction and classify it.

        Returns:
            The recognised gesture.
        """
        touch = self._touch
        self._touch = None
        if touch is None:
            return GestureKind.NONE

        if touch.dragging:
            if self.feedback.text:
                self.feedback.hide_at = t + DRAG_FEEDBACK_HIDE_MS
            logger.debug("Drag finished at %d WPM", self.state.wpm)
            return GestureKind.DRAG

        duration = t - touch.start_time
        drift = abs(x - touch.start_x)
        if duration >= TAP_MAX_DURATION_MS or drift >= TAP_MAX_DRIFT_PX:
            return GestureKind.NONE

        left_half = touch.start_x < self.viewport_width / 2
        if (
            self._last_tap_time is not None
            and t - self._last_tap_time < DOUBLE_TAP_WINDOW_MS
            and self._last_tap_left == left_half
        ):
            self._double_tap(left_half, t)
            return GestureKind.DOUBLE_TAP

        self._last_tap_time = t
        self._last_tap_left = left_half
        return GestureKind.TAP

    def _double_tap(self, left_half: bool, t: float) -> None:
        if left_half:
            self.scheduler.seek_relative(-SEEK_STEP)
            self._show(f"« {SEEK_STEP} Words", hide_at=t + SEEK_FEEDBACK_HIDE_MS)
        else:
            self.scheduler.seek_relative(SEEK_STEP)
            self._show(f"{SEEK_STEP} Words »", hide_at=t + SEEK_FEEDBACK_HIDE_MS)

        # The pair is consumed; a third tap starts a new sequence
        self._last_tap_time = None
        self._last_tap_left = None
