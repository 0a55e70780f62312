"""Loading screen: logo, spinner and pipeline progress."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from destill.tui.styles import Style
from destill.tui.text import visual_width

_LOGO = (
    " ███████▄  ██████████ ▄████████▄ ████████ ████ ██       ██",
    " ██    ██  ██         ██             ██    ██  ██       ██",
    " ██     █  ██████      ████████      ██    ██  ██       ██",
    " ██    ██  ██                 ██     ██    ██  ██       ██",
    "       ███████▀  ██████████ ▀████████▀     ██   ████ ████████ ████████",
)

# Light at the top to dark at the bottom.
_LOGO_GRADIENT = ("#5DADE2", "#3498DB", "#2E86C1", "#2874A6", "#21618C")

SPINNER_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")
SPINNER_INTERVAL = 0.08


@dataclass(frozen=True)
class ProgressMsg:
    """A progress update from the pipeline."""

    stage: str = ""
    current: int = 0
    total: int = 0


@dataclass(frozen=True)
class SpinnerTick:
    """Advances the spinner by one frame."""

    at: float = field(default_factory=time.monotonic)


def _join_centered(*blocks: str) -> str:
    lines = [line for block in blocks for line in block.split("\n")]
    width = max(visual_width(line) for line in lines)
    centered = []
    for line in lines:
        gap = width - visual_width(line)
        left = gap // 2
        centered.append(" " * left + line + " " * (gap - left))
    return "\n".join(centered)


@dataclass
class ProgressModel:
    """State of the loading screen."""

    stage: str = ""
    current: int = 0
    total: int = 0
    done: bool = False
    spinner_frame: int = 0

    def update(self, msg: object) -> float | None:
        """Apply a message; return the delay before the next SpinnerTick is due, if any."""
        if isinstance(msg, ProgressMsg):
            self.stage = msg.stage
            self.current = msg.current
            self.total = msg.total
            if msg.stage == "complete":
                self.done = True
        elif isinstance(msg, SpinnerTick):
            self.spinner_frame = (self.spinner_frame + 1) % len(SPINNER_FRAMES)
            if not self.done:
                return SPINNER_INTERVAL
        return None

    def view(self) -> str:
        """Render the logo and the current status line."""
        logo = "\n".join(
            Style(foreground=_LOGO_GRADIENT[index % len(_LOGO_GRADIENT)], bold=True).render(line)
            for index, line in enumerate(_LOGO)
        )

        if self.done:
            status = Style(foreground="2").render("✓ Complete! Press (r) to refresh")
            return _join_centered(logo, "", status)

        spinner = Style(foreground="#FFD700").render(SPINNER_FRAMES[self.spinner_frame])
        if self.total > 0:
            percent = self.current / self.total * 100
            status = f"{spinner} {self.stage} ({self.current}/{self.total}, {percent:.0f}%)"
        elif self.stage:
            status = f"{spinner} {self.stage}..."
        else:
            status = f"{spinner} Loading..."
        return _join_centered(logo, "", status)