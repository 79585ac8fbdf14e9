from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer

from justapply.api.runner import run_server
from justapply.browser.scraper import fetch_page_html, scrape_job_details
from justapply.config import get_settings
from justapply.core.profile import (
    format_application_history,
    is_setup_complete,
    list_applications,
    reload_application,
    save_setup,
)
from justapply.core.relay import RelayClient
from justapply.core.workflow import SubmissionWorkflow
from justapply.db.init import ensure_data_directories, init_database
from justapply.logging_config import configure_logging
from justapply.storage import StorageBackend, open_storage
from justapply.types import JobDetails, JobForm

app = typer.Typer(help="JustApply CLI")

_INITIALIZED = False


def ensure_initialized() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    ensure_data_directories()
    _INITIALIZED = True


def _storage() -> StorageBackend:
    configure_logging()
    ensure_initialized()
    return open_storage(get_settings())


def _scrape(url: str | None, html_file: Path | None) -> JobDetails:
    if html_file is not None:
        return scrape_job_details(html_file.read_text(encoding="utf-8", errors="replace"))
    if url:
        return scrape_job_details(fetch_page_html(url, timeout_sec=get_settings().page_fetch_timeout_sec))
    return JobDetails()


@app.command("init")
def init_cmd() -> None:
    """Create data directories and the key-value schema."""
    configure_logging()
    result = init_database()
    typer.echo(json.dumps({"ok": True, **result}, indent=2))


@app.command("setup")
def setup_cmd(
    email: str = typer.Option("", "--email"),
    resume: Path | None = typer.Option(None, "--resume", exists=True, readable=True, dir_okay=False),
) -> None:
    """Save the email and resume used for every submission."""
    storage = _storage()
    message = asyncio.run(save_setup(storage, email=email, resume_path=resume))
    typer.echo(message)
    if message != "Setup saved successfully!":
        raise typer.Exit(code=1)


@app.command("scrape")
def scrape_cmd(
    url: str | None = typer.Option(None, "--url"),
    html_file: Path | None = typer.Option(None, "--html-file", exists=True, readable=True, dir_okay=False),
) -> None:
    """Print the job fields found on a posting page."""
    configure_logging()
    if not url and html_file is None:
        raise typer.BadParameter("pass --url or --html-file")
    details = _scrape(url, html_file)
    typer.echo(json.dumps(details.to_store(), indent=2))


@app.command("apply")
def apply_cmd(
    url: str = typer.Option("", "--url"),
    html_file: Path | None = typer.Option(None, "--html-file", exists=True, readable=True, dir_okay=False),
    company: str | None = typer.Option(None, "--company"),
    job_role: str | None = typer.Option(None, "--job-role"),
    description: str | None = typer.Option(None, "--description"),
    description_file: Path | None = typer.Option(
        None, "--description-file", exists=True, readable=True, dir_okay=False
    ),
) -> None:
    """Submit the annotated resume for a job and save the generated PDF."""
    storage = _storage()
    settings = get_settings()

    form = JobForm.from_details(_scrape(url or None, html_file))
    if company is not None:
        form.company = company
    if job_role is not None:
        form.job_role = job_role
    if description_file is not None:
        form.description = description_file.read_text(encoding="utf-8")
    elif description is not None:
        form.description = description

    async def _submit():
        async with RelayClient(settings) as relay:
            workflow = SubmissionWorkflow(storage, relay, settings=settings, on_status=typer.echo)
            return await workflow.submit(form, page_url=url)

    result = asyncio.run(_submit())
    if result.output_path is not None:
        typer.echo(f"Saved {result.output_path}")
    if result.applications:
        typer.echo("\n".join(format_application_history(result.applications)))
    if result.status != "completed":
        raise typer.Exit(code=1)


@app.command("history")
def history_cmd() -> None:
    """List previous applications, oldest first."""
    storage = _storage()

    async def _load():
        if not await is_setup_complete(storage):
            return None
        return await list_applications(storage)

    applications = asyncio.run(_load())
    if applications is None:
        typer.echo("Please complete the initial setup first")
        raise typer.Exit(code=1)
    typer.echo("\n".join(format_application_history(applications)))


@app.command("reload")
def reload_cmd(index: int = typer.Option(..., "--index")) -> None:
    """Print the job fields of a previous application."""
    storage = _storage()
    try:
        form = asyncio.run(reload_application(storage, index))
    except IndexError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(json.dumps(form.model_dump(), indent=2))


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
) -> None:
    """Run the relay server."""
    configure_logging()
    code = run_server(get_settings(), host=host, port=port)
    if code:
        raise typer.Exit(code=code)
