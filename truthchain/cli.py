"""Command line entry-point for content verification."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import click

from .models import ContentType
from .utils.config import ConfigManager
from .utils.helpers import calculate_stats, file_to_data_uri, format_date
from .utils.logging import setup_logging
from .verification.pipeline import ContentVerificationPipeline, build_pipeline

logger = logging.getLogger("truthchain.cli")


def _pipeline(ctx: click.Context) -> ContentVerificationPipeline:
    obj = ctx.obj
    if obj.get("pipeline") is None:
        config = ConfigManager(obj.get("config_path")).build_config()
        obj["pipeline"] = build_pipeline(config, offline=obj.get("offline", False))
    return obj["pipeline"]


def _emit(data, output=None) -> None:
    text = json.dumps(data, indent=2)
    if output is None:
        click.echo(text)
    else:
        output.write(text + "\n")


async def _submit(pipeline: ContentVerificationPipeline,
                  content: str,
                  content_type: ContentType,
                  record: bool):
    try:
        return await pipeline.submit(content, content_type, record_on_chain=record)
    finally:
        await pipeline.close()


@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="YAML configuration file")
@click.option("--offline", is_flag=True, help="Skip the remote AI service and use local analysis only")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[Path], offline: bool, verbose: bool) -> None:
    """Verify text, URLs and images, and record verdicts on chain."""

    setup_logging(level="WARNING", verbose=verbose)
    ctx.ensure_object(dict)
    ctx.obj.setdefault("config_path", config_path)
    ctx.obj.setdefault("offline", offline)


@main.command()
@click.argument("content_type", type=click.Choice([t.value for t in ContentType]))
@click.argument("content", required=False)
@click.option("--input", "-i", "input_file", type=click.File("r"), default=None,
              help="Read text content from a file ('-' for stdin)")
@click.option("--record", is_flag=True, help="Record the verdict on chain")
@click.option("--output", "-o", type=click.File("w"), default="-", help="Output destination (defaults to stdout)")
@click.pass_context
def verify(ctx: click.Context, content_type: str, content: Optional[str], input_file, record: bool, output) -> None:
    """Verify CONTENT. For images CONTENT is a path to the image file."""

    content_type = ContentType(content_type)
    if content is None and input_file is not None:
        content = input_file.read()
    if not content or not content.strip():
        raise click.ClickException("No content supplied")

    if content_type == ContentType.IMAGE:
        try:
            content = file_to_data_uri(content)
        except (OSError, ValueError) as e:
            raise click.ClickException(f"Cannot read image: {e}")

    pipeline = _pipeline(ctx)
    try:
        outcome = asyncio.run(_submit(pipeline, content, content_type, record))
    except ValueError as e:
        raise click.ClickException(str(e))

    _emit(outcome.model_dump(mode="json"), output)


@main.command()
@click.argument("content")
@click.option("--image", is_flag=True, help="Treat CONTENT as an image file path")
@click.pass_context
def lookup(ctx: click.Context, content: str, image: bool) -> None:
    """Show the on-chain record for CONTENT."""

    if image:
        try:
            content = file_to_data_uri(content)
        except (OSError, ValueError) as e:
            raise click.ClickException(f"Cannot read image: {e}")

    record = _pipeline(ctx).lookup(content)
    if record is None:
        raise click.ClickException("No on-chain record found")

    data = record.model_dump()
    data["recorded_at"] = format_date(record.timestamp * 1000)
    _emit(data)


@main.command()
@click.option("--clear", is_flag=True, help="Delete the stored history")
@click.pass_context
def history(ctx: click.Context, clear: bool) -> None:
    """List recent verifications."""

    store = _pipeline(ctx).history
    if store is None:
        raise click.ClickException("History is disabled")

    if clear:
        store.clear_history()
        click.echo("History cleared")
        return

    _emit([entry.model_dump(mode="json") for entry in store.get_history()])


@main.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Summarize the stored history."""

    store = _pipeline(ctx).history
    entries = store.get_history() if store is not None else []
    _emit(calculate_stats(entries).model_dump())


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8080, show_default=True, type=int)
@click.option("--debug", is_flag=True, help="Run Flask in debug mode")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int, debug: bool) -> None:
    """Run the web interface."""
    from .web.app import create_app

    app = create_app(_pipeline(ctx))
    logger.info(f"Starting web interface on http://{host}:{port}")
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":  # pragma: no cover
    main()
