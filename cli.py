import asyncio
import logging
from dataclasses import replace
from pathlib import Path

import click

from constants import EXAM_TYPES, PDF_FORMATS, Lifecycle
from services.backend_client import BackendClient
from services.backend_errors import BackendServiceError
from services.config import ClientConfig, setup_logging
from tracking.gate import GateState, SetupGate
from tracking.status import JobStatus
from validators import ExtractionForm, ExtractionValidationError
from views.projection import progress_percentage

logger = logging.getLogger("mcq_cli")


def _echo_setup(status: JobStatus):
    step = f"[{status.step}] " if status.step else ""
    click.echo(f"setup {status.lifecycle}: {step}{status.message}")


def _echo_extraction(status: JobStatus):
    line = f"extraction {status.lifecycle}: {status.message}"
    if status.total_links > 0:
        line += (
            f" ({status.processed_links}/{status.total_links} links, "
            f"{progress_percentage(status)}%, {status.mcqs_found} MCQs)"
        )
    click.echo(line)


def _make_gate(ctx) -> SetupGate:
    config = ctx.obj["config"]
    return SetupGate(BackendClient(config), interval=config.poll_interval)


async def _run_setup(gate: SetupGate, retry: bool) -> JobStatus:
    gate.setup.add_update_listener(_echo_setup)
    try:
        await gate.initialize()
        if gate.is_unlocked and not retry:
            click.echo("✅ Setup already complete")
            return gate.setup.status

        if gate.state != GateState.SETTING_UP or retry:
            if retry:
                await gate.retry_setup()
            else:
                await gate.start_setup()
        if gate.setup.notice:
            click.echo(gate.setup.notice)
        return await gate.setup.wait()
    finally:
        gate.close()
        await gate.client.close()


@click.group()
@click.option("--backend-url", envvar="MCQ_BACKEND_URL", help="Backend base URL")
@click.option("--poll-interval", type=float, help="Status polling interval in seconds")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, backend_url, poll_interval, verbose):
    """MCQ Extractor client: run backend setup and topic extraction jobs."""
    config = ClientConfig.from_env()
    overrides = {}
    if backend_url:
        overrides["backend_url"] = backend_url.rstrip("/")
    if poll_interval is not None:
        overrides["poll_interval"] = poll_interval
    if overrides:
        config = replace(config, **overrides)

    setup_logging("DEBUG" if verbose else config.log_level)
    ctx.obj = {"config": config}


@cli.command()
@click.pass_context
def status(ctx):
    """Show the backend setup state (one-shot, no polling)."""

    async def _status():
        client = BackendClient(ctx.obj["config"])
        try:
            return await client.get_setup_state()
        finally:
            await client.close()

    try:
        state = asyncio.run(_status())
    except BackendServiceError as e:
        raise click.ClickException(f"Could not query setup state: {e.user_message}")

    click.echo(f"setup complete:    {bool(state.get('is_setup_complete'))}")
    click.echo(f"setup in progress: {bool(state.get('setup_in_progress'))}")
    if state.get("setup_error"):
        click.echo(f"setup error:       {state['setup_error']}")


@cli.command()
@click.pass_context
def setup(ctx):
    """Run backend setup (or follow the one already running) until it finishes."""
    try:
        final = asyncio.run(_run_setup(_make_gate(ctx), retry=False))
    except BackendServiceError as e:
        raise click.ClickException(f"Setup failed to start: {e.user_message}")
    if final.lifecycle == Lifecycle.ERROR:
        raise click.ClickException(final.error_message or final.message or "Setup failed")


@cli.command("retry-setup")
@click.pass_context
def retry_setup(ctx):
    """Force-reset backend setup state and run setup again."""
    try:
        final = asyncio.run(_run_setup(_make_gate(ctx), retry=True))
    except BackendServiceError as e:
        raise click.ClickException(f"Setup retry failed: {e.user_message}")
    if final.lifecycle == Lifecycle.ERROR:
        raise click.ClickException(final.error_message or final.message or "Setup failed")


@cli.command()
@click.argument("topic")
@click.option(
    "--exam-type",
    type=click.Choice(list(EXAM_TYPES)),
    default="SSC",
    show_default=True,
)
@click.option(
    "--pdf-format",
    type=click.Choice(list(PDF_FORMATS)),
    default="text",
    show_default=True,
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Download the generated PDF to this path",
)
@click.pass_context
def extract(ctx, topic, exam_type, pdf_format, output):
    """Extract MCQs mentioning TOPIC and build a PDF."""
    form = ExtractionForm(topic=topic, exam_type=exam_type, pdf_format=pdf_format)

    async def _extract():
        gate = _make_gate(ctx)
        gate.extraction.add_update_listener(_echo_extraction)
        try:
            await gate.initialize()
            if not gate.is_unlocked:
                raise click.ClickException(
                    "Backend setup is not complete. Run `setup` first."
                )
            await gate.submit_extraction(form)
            final = await gate.extraction.wait()
            if final.lifecycle == Lifecycle.COMPLETED and output and final.artifact_ref:
                logger.info(f"Downloading {final.artifact_ref} to {output}")
                await gate.client.download_artifact(final.artifact_ref, output)
            return final
        finally:
            gate.close()
            await gate.client.close()

    try:
        final = asyncio.run(_extract())
    except ExtractionValidationError as e:
        raise click.BadParameter("; ".join(e.errors), param_hint="TOPIC")
    except BackendServiceError as e:
        raise click.ClickException(e.user_message)

    if final.lifecycle == Lifecycle.ERROR:
        raise click.ClickException(final.message or final.error_message or "Extraction failed")

    click.echo(
        f"✅ Found {final.mcqs_found} {exam_type} MCQs related to \"{form.topic}\""
    )
    if output:
        click.echo(f"PDF saved to {output}")
    elif final.artifact_ref:
        client = BackendClient(ctx.obj["config"])
        click.echo(f"Download: {client.artifact_url(final.artifact_ref)}")


if __name__ == "__main__":
    cli()
