"""Caller-side state around the runner: busy flag and last report."""

from __future__ import annotations

from pathlib import Path

import structlog

from pubsentinel.engines.health_classifier.models import Report
from pubsentinel.engines.health_classifier.runner import HealthReportRunner

log = structlog.get_logger("pubsentinel.engine")


class HealthReportService:
    """Keeps at most one report cycle in flight for a project directory.

    A refresh requested while another is running is ignored, not queued and
    not cancelling the running one.
    """

    def __init__(self, runner: HealthReportRunner, project_dir: Path) -> None:
        self._runner = runner
        self._project_dir = project_dir
        self._busy = False
        self._report: Report | None = None

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def report(self) -> Report | None:
        """Last completed report, or None if never built or invalidated."""
        return self._report

    async def refresh(self) -> Report | None:
        """Run a new cycle; returns None if one is already running."""
        if self._busy:
            log.info("health.refresh_skipped", project_dir=str(self._project_dir))
            return None
        self._busy = True
        try:
            self._report = await self._runner.run(self._project_dir)
            return self._report
        finally:
            self._busy = False

    def invalidate(self) -> None:
        self._report = None

    async def manifest_changed(self, visible: bool) -> Report | None:
        """React to a manifest change notification.

        Rebuilds immediately when the consumer is showing the report;
        otherwise drops the cached report so the next view triggers a build.
        """
        if visible:
            return await self.refresh()
        self.invalidate()
        return None

    async def current(self) -> Report | None:
        """Cached report, building one first if there is none."""
        if self._report is None:
            return await self.refresh()
        return self._report
