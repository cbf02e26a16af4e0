"""CLI error handling utilities."""

from collections.abc import Generator
from contextlib import contextmanager

import typer
from pydantic import ValidationError

from whatsapp_archiver.config.exceptions import ConfigError
from whatsapp_archiver.google_docs.exceptions import CredentialsNotFoundError, GoogleDocsError
from whatsapp_archiver.input_adapters.whatsapp.exceptions import WhatsAppError
from whatsapp_archiver.logging_setup import console
from whatsapp_archiver.state.exceptions import StateError


@contextmanager
def handle_cli_errors(*, debug: bool = False) -> Generator[None, None, None]:
    """Context manager to handle CLI errors gracefully.

    Args:
        debug: If True, re-raise with the full traceback instead of a short message.

    """
    try:
        yield
    except (KeyboardInterrupt, SystemExit, typer.Exit):
        raise
    except CredentialsNotFoundError as e:
        if debug:
            raise
        console.print(f"[bold red]🔑 Credentials Missing:[/bold red] {e}")
        console.print(
            "Set [bold]google_docs.credentials_path[/bold] in .whatsapp-archiver.toml or "
            "[bold]WHATSAPP_ARCHIVER_GOOGLE_DOCS__CREDENTIALS_PATH[/bold]."
        )
        raise typer.Exit(1) from e
    except GoogleDocsError as e:
        if debug:
            raise
        console.print(f"[bold red]📄 Google Docs Error:[/bold red] {e}")
        raise typer.Exit(1) from e
    except WhatsAppError as e:
        if debug:
            raise
        console.print(f"[bold red]💬 Chat Export Error:[/bold red] {e}")
        raise typer.Exit(1) from e
    except StateError as e:
        if debug:
            raise
        console.print(f"[bold red]💾 Checkpoint Error:[/bold red] {e}")
        raise typer.Exit(1) from e
    except ConfigError as e:
        if debug:
            raise
        console.print(f"[bold red]⚙️ Configuration Error:[/bold red] {e}")
        raise typer.Exit(1) from e
    except (ValidationError, ValueError) as e:
        if debug:
            raise
        console.print(f"[bold red]🚫 Invalid Input:[/bold red] {e}")
        raise typer.Exit(1) from e
    except Exception as e:
        if debug:
            console.print_exception(show_locals=False)
            raise typer.Exit(1) from e

        console.print(f"[bold red]💥 An unexpected error occurred:[/bold red] {e}")
        console.print("[dim]Run with [bold]--debug[/bold] for more details.[/dim]")
        raise typer.Exit(1) from e
