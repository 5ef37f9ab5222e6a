"""Reader settings surface (pacing, chunking mode and visual passthrough)."""

from pydantic import BaseModel, Field

from readall.models.enums import ChunkingMode, FontFamily, FontSize, Theme

MIN_WPM = 50
MAX_WPM = 1200
DEFAULT_WPM = 350


class ReaderSettings(BaseModel):
    """User-facing reader settings.

    ``wpm`` is the pacing state read by the delay calculator and the
    scheduler. Theme and font fields are opaque to the core.
    """

    wpm: int = Field(DEFAULT_WPM, ge=1)
    chunking_mode: ChunkingMode = ChunkingMode.ALGORITHMIC
    api_key: str = ""
    theme: Theme = Theme.OLED
    font_family: FontFamily = FontFamily.SANS
    font_size: FontSize = FontSize.LG
    show_reticle: bool = True


def clamp_wpm(wpm: int) -> int:
    """Clamp a pacing rate into the gesture-adjustable range."""
    return max(MIN_WPM, min(MAX_WPM, wpm))
