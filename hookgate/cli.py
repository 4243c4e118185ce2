"""Command line interface for HookGate."""

import json
import sys
from datetime import datetime, timezone
from typing import Optional

import httpx
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from hookgate.config import settings

app = typer.Typer(
    name="hookgate",
    help="HookGate - webhook intake gateway with queued delivery",
    add_completion=False,
)

console = Console()


def _default_url() -> str:
    host = "localhost" if settings.host in ("0.0.0.0", "") else settings.host
    return f"http://{host}:{settings.port}"


@app.command("version")
def version():
    """Show version information."""
    version_info = f"""
HookGate v{settings.app_version}
Webhook intake gateway with queued, retried delivery

Environment: {settings.environment}
Python: {sys.version}
"""
    console.print(
        Panel(
            version_info.strip(),
            title="Version Information",
            border_style="green",
        )
    )


@app.command("server")
def start_server(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Server host"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Server port"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug mode"),
):
    """Start the HookGate server."""
    from hookgate.server import main as server_main

    # Override settings if provided
    if host:
        settings.host = host
    if port:
        settings.port = port
    if reload:
        settings.reload = reload
    if debug:
        settings.debug = debug

    server_main()


@app.command("token")
def token(
    hours: Optional[int] = typer.Option(None, "--hours", help="Token lifetime in hours"),
):
    """Print a signature token for the configured secret."""
    from datetime import timedelta

    from hookgate.auth.security import SignatureVerifier

    verifier = SignatureVerifier.from_settings(settings)
    expires = timedelta(hours=hours) if hours else None
    typer.echo(verifier.create_test_token(expires_delta=expires))


@app.command("send")
def send(
    event: str = typer.Argument(..., help="Event type, e.g. user.created"),
    data: str = typer.Option("{}", "--data", "-d", help="JSON event payload"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Gateway base URL"),
):
    """Send a signed test webhook to a running gateway."""
    from hookgate.auth.security import SignatureVerifier

    try:
        payload = json.loads(data)
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON payload: {e}[/red]")
        raise typer.Exit(code=1)

    signature = SignatureVerifier.from_settings(settings).create_test_token()
    response = httpx.post(
        f"{url or _default_url()}/webhook",
        json={"event": event, "data": payload},
        headers={settings.signature_header: signature},
    )

    style = "green" if response.is_success else "red"
    console.print(f"[{style}]{response.status_code}[/{style}] {response.text}")
    if not response.is_success:
        raise typer.Exit(code=1)


@app.command("status")
def status(
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Gateway base URL"),
):
    """Show queue status of a running gateway."""
    try:
        response = httpx.get(f"{url or _default_url()}/queue-status")
        response.raise_for_status()
    except httpx.HTTPError as e:
        console.print(f"[red]Could not reach gateway: {e}[/red]")
        raise typer.Exit(code=1)

    report = response.json()

    summary = Table(title="HookGate Queue")
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", style="green")
    summary.add_row("Queue length", str(report["queueLength"]))
    summary.add_row("Processed (in history)", str(report["processedCount"]))
    summary.add_row("Max retries", str(report["maxRetries"]))
    console.print(summary)

    if report["items"]:
        pending = Table(title="Pending")
        pending.add_column("Event", style="cyan")
        pending.add_column("Retries", style="yellow")
        for item in report["items"]:
            pending.add_row(item["event"], str(item["retries"]))
        console.print(pending)

    recent = Table(title="Recent Events")
    recent.add_column("Event", style="cyan")
    recent.add_column("Status")
    recent.add_column("Time", style="dim")
    for entry in report["recentEvents"]:
        style = "green" if entry["status"] == "success" else "red"
        when = datetime.fromtimestamp(entry["timestamp"] / 1000, timezone.utc)
        recent.add_row(entry["event"], f"[{style}]{entry['status']}[/{style}]", when.isoformat())
    console.print(recent)


@app.command("config")
def show_config():
    """Show current configuration."""
    config_table = Table(title="HookGate Configuration")

    config_table.add_column("Setting", style="cyan")
    config_table.add_column("Value", style="green")

    config_items = [
        ("App Name", settings.app_name),
        ("Version", settings.app_version),
        ("Environment", settings.environment),
        ("Debug", str(settings.debug)),
        ("Host", settings.host),
        ("Port", str(settings.port)),
        ("Signature Header", settings.signature_header),
        ("Max Retries", str(settings.max_retries)),
        ("History Size", str(settings.history_size)),
        ("Queue Max Length", str(settings.queue_max_length or "unbounded")),
        ("Processing Mode", settings.processing_mode),
        ("Delivery Target", settings.delivery_target_url or "log only"),
        ("Delivery Timeout", f"{settings.delivery_timeout}s"),
        ("Metrics Enabled", str(settings.metrics_enabled)),
    ]

    for setting, value in config_items:
        config_table.add_row(setting, value)

    console.print(config_table)


def main():
    """Main CLI entry point."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(0)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
