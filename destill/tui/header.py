"""The status bar at the top of the triage screen."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from destill.tui.item import LoadStatus
from destill.tui.styles import Style, StyleConfig, default_styles
from destill.tui.text import visual_width

ALL_JOBS = "ALL"
_FAILED_JOB_COLOR = "#FF0000"


@dataclass
class JobInfo:
    """A job and whether it failed."""

    name: str
    failed: bool = False


def _join_horizontal(*blocks: str) -> str:
    """Place blocks side by side, aligned at the top."""
    split = [block.split("\n") for block in blocks]
    widths = [max(visual_width(line) for line in lines) for lines in split]
    height = max(len(lines) for lines in split)
    rows = []
    for row in range(height):
        parts = []
        for lines, width in zip(split, widths):
            line = lines[row] if row < len(lines) else ""
            parts.append(line + " " * (width - visual_width(line)))
        rows.append("".join(parts))
    return "\n".join(rows)


class Header:
    """Project status, tier counts, job filter and search state."""

    def __init__(
        self,
        project_status: str,
        available_jobs: Iterable[JobInfo] = (),
        styles: StyleConfig | None = None,
    ) -> None:
        self.project_status = project_status
        self.available_jobs: list[JobInfo] = list(available_jobs)
        self.styles = styles if styles is not None else default_styles()
        self._filter_index = 0
        self._filter_name = ALL_JOBS
        self.selected_filter = self._format_filter(ALL_JOBS, False)

        self.search_query = ""
        self.search_mode = False

        self.load_status = LoadStatus.LOADING
        self.card_count = 0
        self.low_confidence_count = 0
        self.job_count = 0
        self.pending_count = 0

        self.unique_count = 0
        self.noise_count = 0
        self.tier_filter = 0  # 0 all, 1 unique only, 2 noise only

    @property
    def filter(self) -> str:
        """The current job filter: "ALL" or a job name."""
        return self._filter_name

    @property
    def filter_index(self) -> int:
        """Position of the current filter; 0 is "ALL"."""
        return self._filter_index

    def _format_filter(self, name: str, failed: bool) -> str:
        display = Style(foreground=_FAILED_JOB_COLOR).render(name) if failed else name
        return f"{display} [{self._filter_index}/{len(self.available_jobs)}]"

    def _select(self, index: int) -> None:
        self._filter_index = index
        if index == 0:
            self._filter_name = ALL_JOBS
            self.selected_filter = self._format_filter(ALL_JOBS, False)
        else:
            job = self.available_jobs[index - 1]
            self._filter_name = job.name
            self.selected_filter = self._format_filter(job.name, job.failed)

    def cycle_filter(self) -> None:
        """Move to the next job filter, wrapping round to "ALL"."""
        self._select((self._filter_index + 1) % (1 + len(self.available_jobs)))

    def cycle_filter_backward(self) -> None:
        """Move to the previous job filter, wrapping round."""
        total = 1 + len(self.available_jobs)
        self._select((self._filter_index - 1 + total) % total)

    def reset_filter(self) -> None:
        """Go back to "ALL"."""
        self._select(0)

    def set_initial_filter(self, job_name: str, failed: bool) -> None:
        """Select a job by name; unknown names leave the filter unchanged."""
        for position, job in enumerate(self.available_jobs, start=1):
            if job.name == job_name:
                self._filter_index = position
                self._filter_name = job_name
                self.selected_filter = self._format_filter(job_name, failed)
                return

    def set_search(self, query: str, mode: bool) -> None:
        """Update the search text and whether it is being typed."""
        self.search_query = query
        self.search_mode = mode

    def set_load_status(self, status: LoadStatus, card_count: int, job_count: int) -> None:
        """Update the loading state and the finding and job counts."""
        self.load_status = status
        self.card_count = card_count
        self.job_count = job_count

    def set_tier_counts(self, unique: int, noise: int) -> None:
        """Update the counts shown for each tier."""
        self.unique_count = unique
        self.noise_count = noise

    def add_job(self, job_name: str, failed: bool) -> None:
        """Add a job; failed jobs go before passing ones. Known jobs may become failed."""
        for job in self.available_jobs:
            if job.name == job_name:
                if failed:
                    job.failed = True
                return

        new_job = JobInfo(job_name, failed)
        if failed:
            insert_at = next(
                (i for i, job in enumerate(self.available_jobs) if not job.failed),
                len(self.available_jobs),
            )
            self.available_jobs.insert(insert_at, new_job)
        else:
            self.available_jobs.append(new_job)

        if self._filter_index == 0:
            self.selected_filter = self._format_filter(ALL_JOBS, False)
        elif self._filter_index - 1 < len(self.available_jobs):
            job = self.available_jobs[self._filter_index - 1]
            self.selected_filter = self._format_filter(job.name, job.failed)

    def _status_text(self) -> str:
        text = self.project_status
        if self.card_count > 0:
            if self.low_confidence_count > 0:
                return (
                    f"{text} ({self.card_count} findings, {self.low_confidence_count} low conf, "
                    f"{self.job_count} jobs)"
                )
            return f"{text} ({self.card_count} findings, {self.job_count} jobs)"
        return text

    def _tiers(self) -> str:
        styles = self.styles
        unique_style = Style(foreground=styles.tier1_color, bold=True)
        noise_style = Style(foreground=styles.tier3_color, bold=True)
        if self.tier_filter == 1:
            noise_style = Style(foreground=styles.text_secondary)
        elif self.tier_filter == 2:
            unique_style = Style(foreground=styles.text_secondary)
        unique = unique_style.render(f"Unique:{self.unique_count}")
        noise = noise_style.render(f"Noise:{self.noise_count}")
        return Style(padding_left=1, padding_right=1).render(f"│ {unique} {noise} │")

    def _search_text(self) -> str:
        if self.search_mode:
            return f"🔍 Search: {self.search_query}█"
        if self.search_query:
            return f"🔍 Search: {self.search_query}"
        return "🔍 [/] to search"

    def render(self, width: int) -> str:
        """Render the header bar for a terminal of the given width."""
        styles = self.styles
        status = Style(
            foreground=styles.primary_blue, bold=True, padding_left=2, padding_right=2
        ).render(self._status_text())

        pending = ""
        if self.pending_count > 0:
            pending = Style(
                foreground=styles.accent_yellow, bold=True, padding_left=1, padding_right=1
            ).render(f"⚡ {self.pending_count} new (r)")

        section_width = width // 4
        job_filter = Style(
            foreground=styles.primary_blue,
            bold=True,
            padding_left=2,
            padding_right=2,
            max_width=section_width,
        ).render(f"⚙️ Job: {self.selected_filter}")

        search = Style(
            foreground=styles.primary_blue if self.search_mode else styles.text_secondary,
            padding_left=2,
            padding_right=2,
            max_width=section_width,
        ).render(self._search_text())

        left = _join_horizontal(status, pending, self._tiers(), job_filter, search)
        spacer_width = width - 2 - visual_width(left)
        spacer = Style(width=spacer_width).render("") if spacer_width > 0 else ""
        content = _join_horizontal(left, spacer)

        return Style(
            border="bottom",
            border_foreground=styles.border_color,
            width=max(width - 2, 0),
        ).render(content)