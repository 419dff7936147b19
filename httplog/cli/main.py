"""Typer CLI entry point for the httplog example server.

- httplog serve --port 8080 --format text
- httplog version
"""

from typing import Optional

from dotenv import load_dotenv

# Load .env file before anything else
load_dotenv()

import typer
from rich.console import Console
from rich.table import Table

from httplog import __version__
from httplog.config import Options, get_options

cli = typer.Typer(
    name="httplog",
    help="""Structured HTTP request logging demo.

QUICK START:
  httplog serve
  httplog serve --format text --concise
  curl -H 'Authorization: secret' localhost:8080/attr
""",
    add_completion=False,
)

console = Console()


@cli.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8080, "--port", "-p", help="Bind port"),
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="json or text (default from HTTPLOG_FORMAT)"),
    concise: Optional[bool] = typer.Option(None, "--concise/--verbose", help="Reduced request/response attributes"),
    leak: Optional[bool] = typer.Option(None, "--leak/--no-leak", help="Log sensitive header values"),
    service: Optional[str] = typer.Option(None, "--service", "-s", help="Service name bound to every record"),
):
    """Run the example app with request logging."""
    from httplog.server import run

    overrides = {
        "format": fmt,
        "concise": concise,
        "leak_sensitive_values": leak,
        "service_name": service,
    }
    base = get_options().model_dump()
    base.update({k: v for k, v in overrides.items() if v is not None})
    options = Options(**base)

    console.print(f"[bold cyan]httplog[/bold cyan] listening on http://{host}:{port}")
    run(options, host=host, port=port)


@cli.command()
def version():
    """Show version and configuration info."""
    options = get_options()

    console.print(f"[bold cyan]httplog[/bold cyan] v{__version__}")
    console.print()

    table = Table(title="Configuration", show_header=False)
    table.add_row("Service", options.service_name or "-")
    table.add_row("Level", options.level)
    table.add_row("Format", options.format)
    table.add_row("Concise", str(options.concise))
    table.add_row("Sensitive headers", ", ".join(sorted(options.sensitive_headers)))
    table.add_row("Leak sensitive values", str(options.leak_sensitive_values))
    console.print(table)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
