"""Typer CLI entrypoint for the applicant pipeline."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar

import typer

from .config import load_config_file
from .container import PipelineContainer, create_container
from .core import FilterConfig, SortDirection, SortKey, SortState, score_tier
from .errors import PipelineError
from .logging import configure_logging
from .pipeline import ApplicantPipeline
from .schemas import ApplicantStatus

app = typer.Typer(help="Applicant tracking pipeline CLI.")

T = TypeVar("T")


@dataclass
class CliState:
    owner_id: str
    container: PipelineContainer


@app.callback()
def main_callback(
    ctx: typer.Context,
    owner: str = typer.Option(..., envvar="APPLICANT_OWNER_ID", help="Owner (account) id."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    store_file: Optional[Path] = typer.Option(None, dir_okay=False, help="JSON Lines file backing the local store."),
    endpoint: Optional[str] = typer.Option(None, help="REST store table endpoint base URL."),
    api_key: Optional[str] = typer.Option(None, envvar="APPLICANT_STORE_API_KEY", help="REST store API key."),
    log_level: Optional[str] = typer.Option(None, help="Log level for structured logging."),
) -> None:
    """Shared options for every command."""
    try:
        app_config = load_config_file(config)
    except PipelineError as exc:
        raise typer.BadParameter(exc.reason, param_name="config") from exc

    store_overrides: dict[str, Any] = {
        "path": str(store_file) if store_file else None,
        "endpoint": endpoint,
        "api_key": api_key,
    }
    if endpoint:
        store_overrides["backend"] = "rest"
    app_config = app_config.with_overrides({"store": store_overrides})
    if log_level:
        app_config = app_config.model_copy(update={"log_level": log_level})

    configure_logging(app_config.log_level)
    ctx.obj = CliState(owner_id=owner, container=create_container(settings=app_config))


def _run(ctx: typer.Context, action: Callable[[ApplicantPipeline], Awaitable[T]]) -> T:
    state: CliState = ctx.obj

    async def runner() -> T:
        pipeline = state.container.pipeline(owner_id=state.owner_id)
        try:
            await pipeline.load()
            return await action(pipeline)
        finally:
            for notification in pipeline.notifications.drain():
                typer.echo(notification.message, err=notification.level == "error")
            await pipeline.aclose()

    try:
        return asyncio.run(runner())
    except PipelineError as exc:
        raise typer.Exit(code=1) from exc


def _filters(search: str, status: str, score: str) -> FilterConfig:
    try:
        return FilterConfig(search_term=search, status=status, score_range=score)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command("list")
def list_applicants(
    ctx: typer.Context,
    search: str = typer.Option("", help="Case-insensitive name or email search."),
    status: str = typer.Option("all", help="Status filter or 'all'."),
    score: str = typer.Option("all", help="Overall score range (e.g. 8-10, high) or 'all'."),
    sort: SortKey = typer.Option(SortKey.CREATED_AT, help="Sort key."),
    desc: bool = typer.Option(True, "--desc/--asc", help="Sort direction."),
) -> None:
    """List applicants in the filtered and sorted view."""
    filters = _filters(search, status, score)
    sort_state = SortState(key=sort, direction=SortDirection.DESC if desc else SortDirection.ASC)

    async def action(pipeline: ApplicantPipeline) -> None:
        rows = pipeline.view(filters, sort_state)
        for applicant in rows:
            score_label = (
                f"{applicant.overall_score}/10 ({score_tier(applicant.overall_score)})"
                if applicant.overall_score
                else "No Score"
            )
            typer.echo(
                "\t".join(
                    [
                        applicant.id,
                        applicant.full_name,
                        applicant.email,
                        applicant.status.value,
                        score_label,
                        "Interviewed" if applicant.is_interviewed else "Not interviewed",
                    ]
                )
            )
        typer.echo(f"{len(rows)} of {len(pipeline.applicants())} applicants")

    _run(ctx, action)


@app.command()
def add(
    ctx: typer.Context,
    first_name: str = typer.Option(..., help="First name."),
    last_name: str = typer.Option(..., help="Last name."),
    email: str = typer.Option(..., help="Email address."),
    cv_score: int = typer.Option(5, min=1, max=10, help="CV score (1-10)."),
    overall_score: Optional[int] = typer.Option(None, min=1, max=10, help="Overall score (1-10)."),
    summary: Optional[str] = typer.Option(None, help="Email content summary."),
    candidate_summary: Optional[str] = typer.Option(None, help="Candidate summary."),
    quick_read: Optional[str] = typer.Option(None, help="Quick read notes."),
    cv_link: Optional[str] = typer.Option(None, help="Link to the CV document."),
) -> None:
    """Add a new applicant."""
    draft = {
        "first_name": first_name,
        "last_name": last_name,
        "email": email,
        "cv_scoring": cv_score,
        "overall_score": overall_score,
        "email_content_summary": summary,
        "candidate_summary": candidate_summary,
        "quick_read": quick_read,
        "cv_link": cv_link,
    }

    async def action(pipeline: ApplicantPipeline) -> None:
        applicant = await pipeline.add(draft)
        typer.echo(applicant.id)

    _run(ctx, action)


@app.command("set-status")
def set_status(
    ctx: typer.Context,
    applicant_id: str = typer.Argument(..., help="Applicant id."),
    status: ApplicantStatus = typer.Argument(..., help="New status."),
) -> None:
    """Move an applicant to any status."""

    async def action(pipeline: ApplicantPipeline) -> None:
        await pipeline.set_status(applicant_id, status)

    _run(ctx, action)


@app.command("set-interviewed")
def set_interviewed(
    ctx: typer.Context,
    applicant_id: str = typer.Argument(..., help="Applicant id."),
    interviewed: bool = typer.Option(True, "--interviewed/--not-interviewed", help="Interview flag."),
) -> None:
    """Set or clear the interview flag."""

    async def action(pipeline: ApplicantPipeline) -> None:
        await pipeline.set_interviewed(applicant_id, interviewed)

    _run(ctx, action)


@app.command()
def delete(
    ctx: typer.Context,
    applicant_id: str = typer.Argument(..., help="Applicant id."),
) -> None:
    """Delete an applicant permanently."""

    async def action(pipeline: ApplicantPipeline) -> None:
        await pipeline.delete(applicant_id)

    _run(ctx, action)


@app.command()
def analytics(ctx: typer.Context) -> None:
    """Print dashboard metrics as JSON."""

    async def action(pipeline: ApplicantPipeline) -> None:
        summary = pipeline.analytics()
        payload = {
            "total": summary.total,
            "status_counts": {status.value: count for status, count in summary.status_counts.items()},
            "distribution": [
                {"status": share.status.value, "count": share.count, "percentage": share.percentage}
                for share in summary.distribution
            ],
            "interviewed": summary.interviewed_count,
            "interview_rate": summary.interview_rate,
            "average_score": summary.average_score,
            "monthly_trend": [
                {
                    "month": bucket.label,
                    "year": bucket.year,
                    "applications": bucket.applications,
                    "interviewed": bucket.interviewed,
                }
                for bucket in summary.monthly_trend
            ],
        }
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))

    _run(ctx, action)


@app.command()
def export(
    ctx: typer.Context,
    output_dir: Optional[Path] = typer.Option(None, file_okay=False, help="Directory for the CSV file."),
    search: str = typer.Option("", help="Case-insensitive name or email search."),
    status: str = typer.Option("all", help="Status filter or 'all'."),
    score: str = typer.Option("all", help="Overall score range (e.g. 8-10, high) or 'all'."),
    sort: SortKey = typer.Option(SortKey.CREATED_AT, help="Sort key."),
    desc: bool = typer.Option(True, "--desc/--asc", help="Sort direction."),
) -> None:
    """Export the filtered and sorted view to CSV."""
    filters = _filters(search, status, score)

    async def action(pipeline: ApplicantPipeline) -> None:
        pipeline.filters = filters
        pipeline.sort_state = SortState(
            key=sort, direction=SortDirection.DESC if desc else SortDirection.ASC
        )
        path = pipeline.export(output_dir)
        typer.echo(str(path))

    _run(ctx, action)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
