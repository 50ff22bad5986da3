"""Session-level applicant pipeline: view, transitions, analytics and export."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import structlog

from .core import (
    AnalyticsSummary,
    ApplicantStoreClient,
    FilterConfig,
    SortKey,
    SortState,
    StatusTransitionManager,
    filter_applicants,
    render_csv,
    summarize,
    write_csv,
)
from .errors import PipelineError
from .notifications import NotificationCenter
from .schemas import AnalyticsConfig, Applicant, ApplicantDraft, ApplicantStatus, ExportConfig


class ApplicantPipeline:
    """One recruiter session over their own applicants.

    Every failed operation produces an error notification naming the
    operation and reason, and the original error is re-raised to the caller.
    """

    def __init__(
        self,
        *,
        client: ApplicantStoreClient,
        owner_id: str,
        export_config: ExportConfig | None = None,
        analytics_config: AnalyticsConfig | None = None,
        notifications: NotificationCenter | None = None,
    ) -> None:
        self._client = client
        self._manager = StatusTransitionManager(client, owner_id)
        self._export = export_config or ExportConfig()
        self._analytics = analytics_config or AnalyticsConfig()
        self.notifications = notifications or NotificationCenter()
        self.filters = FilterConfig()
        self.sort_state = SortState()
        self._logger = structlog.get_logger(__name__).bind(owner_id=owner_id)

    @property
    def owner_id(self) -> str:
        return self._manager.owner_id

    @property
    def manager(self) -> StatusTransitionManager:
        return self._manager

    def applicants(self) -> list[Applicant]:
        return self._manager.applicants()

    async def load(self) -> list[Applicant]:
        try:
            applicants = await self._manager.load()
        except PipelineError as exc:
            self._report("load", "Failed to load applicants", exc)
            raise
        self._logger.info("pipeline.loaded", count=len(applicants))
        return applicants

    def set_filters(self, **options: Any) -> FilterConfig:
        self.filters = FilterConfig.model_validate({**self.filters.model_dump(), **options})
        return self.filters

    def toggle_sort(self, key: SortKey | str) -> SortState:
        self.sort_state = self.sort_state.toggle(key)
        return self.sort_state

    def view(
        self,
        filters: FilterConfig | None = None,
        sort_state: SortState | None = None,
    ) -> list[Applicant]:
        """Filtered then sorted working set."""
        filtered = filter_applicants(self._manager.applicants(), filters or self.filters)
        return (sort_state or self.sort_state).apply(filtered)

    async def add(self, draft: ApplicantDraft | Mapping[str, Any]) -> Applicant:
        try:
            applicant = await self._manager.add(draft)
        except PipelineError as exc:
            self._report("add", "Failed to add applicant", exc)
            raise
        self.notifications.success(
            "add", f"{applicant.full_name} has been added successfully."
        )
        return applicant

    async def set_status(self, applicant_id: str, status: ApplicantStatus | str) -> Applicant:
        try:
            applicant = await self._manager.set_status(applicant_id, status)
        except PipelineError as exc:
            self._report("set_status", "Failed to update status", exc)
            raise
        self.notifications.success("set_status", f"Status updated to {applicant.status.value}")
        return applicant

    async def set_interviewed(self, applicant_id: str, flag: bool) -> Applicant:
        try:
            applicant = await self._manager.set_interviewed(applicant_id, flag)
        except PipelineError as exc:
            self._report("set_interviewed", "Failed to update interview status", exc)
            raise
        label = "interviewed" if applicant.is_interviewed else "not interviewed"
        self.notifications.success(
            "set_interviewed", f"{applicant.full_name} marked as {label}"
        )
        return applicant

    async def delete(self, applicant_id: str) -> None:
        try:
            await self._manager.delete(applicant_id)
        except PipelineError as exc:
            self._report("delete", "Failed to delete applicant", exc)
            raise
        self.notifications.success("delete", "Applicant deleted")

    def analytics(self) -> AnalyticsSummary:
        """Metrics over the full, unfiltered working set."""
        return summarize(
            self._manager.applicants(),
            self._analytics.trend_months,
            timezone=self._export.timezone,
            locale=self._export.locale,
        )

    def render_export(self) -> str:
        try:
            return render_csv(
                self.view(),
                timezone=self._export.timezone,
                locale=self._export.locale,
                date_format=self._export.date_format,
            )
        except PipelineError as exc:
            self._report("export", "No Data", exc)
            raise

    def export(self, directory: str | Path | None = None) -> Path:
        rows = self.view()
        try:
            path = write_csv(
                rows,
                directory if directory is not None else self._export.directory,
                timezone=self._export.timezone,
                locale=self._export.locale,
                date_format=self._export.date_format,
            )
        except PipelineError as exc:
            self._report("export", "No Data", exc)
            raise
        self.notifications.success("export", f"Exported {len(rows)} applicants to CSV")
        return path

    async def aclose(self) -> None:
        await self._client.aclose()

    def _report(self, operation: str, title: str, exc: PipelineError) -> None:
        self.notifications.error(operation, f"{title}: {exc.reason}")
