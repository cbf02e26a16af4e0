"""Main Typer application for WhatsApp Archiver."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.markup import escape
from rich.table import Table

from whatsapp_archiver.cli.errorhandler import handle_cli_errors
from whatsapp_archiver.config.settings import CONFIG_FILENAME, ArchiverConfig, load_config, parse_offset, save_config
from whatsapp_archiver.constants import MessageFormatType
from whatsapp_archiver.formatting.document import MarkdownDocumentFormatter
from whatsapp_archiver.formatting.messages import create_formatter, is_document_formatter
from whatsapp_archiver.google_docs.client import GoogleDocsClient
from whatsapp_archiver.logging_setup import configure_logging, console
from whatsapp_archiver.orchestration.commands import ParseChatCommand, UploadToGoogleDocsCommand
from whatsapp_archiver.orchestration.handlers import ParseChatHandler, UploadToGoogleDocsHandler
from whatsapp_archiver.state.json_store import JsonFileStateRepository

if TYPE_CHECKING:
    from whatsapp_archiver.models import Transcript

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="whatsapp-archiver",
    help="Parse WhatsApp chat exports and archive them to Google Docs",
    add_completion=False,
)


class OutputFormat(str, Enum):
    """Formats accepted by ``--format``."""

    DEFAULT = "default"
    COMPACT = "compact"
    VERBOSE = "verbose"
    GOOGLE_DOCS = "google_docs"
    MARKDOWN_DOCUMENT = "markdown_document"
    MARKDOWN = "markdown"


@dataclass(slots=True)
class CliState:
    debug: bool = False


def _state(ctx: typer.Context) -> CliState:
    return ctx.obj if isinstance(ctx.obj, CliState) else CliState()


@app.callback()
def main_callback(
    ctx: typer.Context,
    *,
    debug: Annotated[bool, typer.Option("--debug", help="Show full tracebacks on errors")] = False,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level (overrides WHATSAPP_ARCHIVER_LOG_LEVEL)"),
    ] = None,
) -> None:
    """Parse WhatsApp chat exports and archive them to Google Docs."""
    configure_logging("DEBUG" if debug and log_level is None else log_level)
    ctx.obj = CliState(debug=debug)


def _resolve_offset(offset: str | None, config: ArchiverConfig) -> timedelta:
    return parse_offset(offset) if offset is not None else config.parser.offset


def _summary_table(transcript: Transcript) -> Table:
    metadata = transcript.metadata
    table = Table(title=f"📄 {metadata.source_name}", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Total lines", str(metadata.total_lines))
    table.add_row("Parsed messages", str(metadata.parsed_message_count))
    table.add_row("Failed lines", str(metadata.failed_line_count))
    table.add_row("Messages shown", str(transcript.message_count))
    table.add_row("Senders", ", ".join(transcript.distinct_senders()) or "-")
    return table


def render_transcript(transcript: Transcript, output_format: OutputFormat) -> str:
    """Render ``transcript`` as text in ``output_format``."""
    if output_format is OutputFormat.MARKDOWN:
        return MarkdownDocumentFormatter().format_document(transcript)
    kind = MessageFormatType(output_format.value)
    formatter = create_formatter(kind)
    if is_document_formatter(kind):
        return formatter.format_document(transcript).to_plain_text()
    separator = "\n\n" if kind is MessageFormatType.VERBOSE else "\n"
    return separator.join(formatter.format_message(message) for message in transcript.messages)


@app.command()
def parse(
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(help="Exported WhatsApp chat (.txt)")],
    *,
    sender: Annotated[str | None, typer.Option("--sender", "-s", help="Only keep messages from this sender")] = None,
    output_format: Annotated[
        OutputFormat | None, typer.Option("--format", "-f", help="Output format", case_sensitive=False)
    ] = None,
    offset: Annotated[str | None, typer.Option("--offset", help="UTC offset of the export, e.g. +02:00")] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write formatted messages to this file")] = None,
    config_file: Annotated[Path | None, typer.Option("--config", help="Path to .whatsapp-archiver.toml")] = None,
) -> None:
    """Parse a chat export and print (or save) its messages."""
    with handle_cli_errors(debug=_state(ctx).debug):
        config = load_config(config_file)
        command = ParseChatCommand(
            file_path=str(file),
            sender_filter=sender,
            timezone_offset=_resolve_offset(offset, config),
        )
        transcript = ParseChatHandler().handle(command)
        chosen = output_format or OutputFormat(config.output.format.value)
        rendered = render_transcript(transcript, chosen)

        console.print(_summary_table(transcript))
        if output is not None:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(rendered, encoding="utf-8")
            console.print(f"[green]✓ Wrote {transcript.message_count} messages to {escape(str(output))}[/green]")
        elif rendered:
            console.print(rendered, markup=False, highlight=False)


@app.command()
def upload(
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(help="Exported WhatsApp chat (.txt)")],
    *,
    sender: Annotated[str, typer.Option("--sender", "-s", help="Upload messages from this sender")],
    document_id: Annotated[str, typer.Option("--document-id", "-d", help="Target Google Doc ID")],
    output_format: Annotated[
        MessageFormatType | None, typer.Option("--format", "-f", help="Upload format", case_sensitive=False)
    ] = None,
    offset: Annotated[str | None, typer.Option("--offset", help="UTC offset of the export, e.g. +02:00")] = None,
    config_file: Annotated[Path | None, typer.Option("--config", help="Path to .whatsapp-archiver.toml")] = None,
) -> None:
    """Append new messages from one sender to a Google Doc."""
    with handle_cli_errors(debug=_state(ctx).debug):
        config = load_config(config_file)
        command = UploadToGoogleDocsCommand(
            file_path=str(file),
            sender=sender,
            document_id=document_id,
            formatter_type=output_format or config.output.format,
            timezone_offset=_resolve_offset(offset, config),
        )
        docs = GoogleDocsClient.from_service_account_file(config.google_docs.credentials_file)
        state = JsonFileStateRepository(config.state.directory)
        uploaded = UploadToGoogleDocsHandler(docs, state).handle(command)

        if uploaded:
            console.print(
                f"[green]✓ Uploaded {uploaded} messages from {escape(sender)} to {escape(document_id)}[/green]"
            )
        else:
            console.print(f"[yellow]No new messages from {escape(sender)} to upload.[/yellow]")


@app.command("init-config")
def init_config(
    ctx: typer.Context,
    directory: Annotated[Path, typer.Argument(help="Where to write .whatsapp-archiver.toml")] = Path(),
    *,
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing config file")] = False,
) -> None:
    """Write a default configuration file."""
    with handle_cli_errors(debug=_state(ctx).debug):
        target = directory / CONFIG_FILENAME
        if target.exists() and not force:
            console.print(f"[yellow]{escape(str(target))} already exists; use --force to overwrite.[/yellow]")
            raise typer.Exit(1)
        path = save_config(ArchiverConfig(), directory)
        console.print(f"[green]✓ Wrote default configuration to {escape(str(path))}[/green]")


def main() -> None:
    """Entry point for the ``whatsapp-archiver`` script."""
    app()
