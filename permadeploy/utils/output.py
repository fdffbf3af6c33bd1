# permadeploy/utils/output.py
"""Logging setup and result display"""

import logging
from pathlib import Path
from typing import Dict, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

from ..constants import (
    LOG_FORMAT,
    EMOJI_SUCCESS,
    EMOJI_ERROR,
    EMOJI_SKIP,
    EMOJI_LINK,
)
from ..models.result import DeploymentResult, DeploymentInfo
from .file_utils import format_size

console = Console()


def setup_logging(verbose: bool = False, debug: bool = False,
                  log_console: Optional[Console] = None) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
        log_console: Console to log to (default: shared console)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=log_console or console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
            )
        ],
        force=True,
    )

    # Adjust third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiofiles").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def format_deploy_result(result: DeploymentResult,
                         out: Optional[Console] = None) -> None:
    """Format and display deployment result"""
    out = out or console
    app_name = Path(result.app_dir).name
    prefix = "[dim](dry run)[/dim] " if result.dry_run else ""

    if result.is_success:
        lines = [
            f"{prefix}[green]{EMOJI_SUCCESS}[/green] Deployed {app_name}",
            "",
            f"[bold]Commit:[/bold] {result.reference}",
            f"[bold]Manifest:[/bold] {result.manifest_address}",
            f"[bold]Name:[/bold] {EMOJI_LINK} {result.name}",
        ]
        if result.stats:
            lines.append(
                f"[bold]Uploaded:[/bold] {result.stats.uploaded_files} file(s), "
                f"{format_size(result.stats.uploaded_bytes)}"
            )
            lines.append(f"[bold]Deleted:[/bold] {result.stats.deleted_files}")
            lines.append(f"[bold]Duration:[/bold] {result.stats.duration:.2f}s")
        if result.verified_after_timeout:
            lines.append("[yellow]Name registration confirmed after timeout[/yellow]")

        if result.changed_paths:
            lines.append("")
            lines.append("[bold]Changed:[/bold]")
            for path in result.changed_paths:
                lines.append(f"  • {path}")

        panel = Panel(
            "\n".join(lines),
            title="Deploy Result",
            border_style="green"
        )

    elif result.is_skipped:
        panel = Panel(
            f"{prefix}[yellow]{EMOJI_SKIP}[/yellow] {app_name} skipped: {result.reason}"
            f"\n[bold]Commit:[/bold] {result.reference}",
            title="Deploy Skipped",
            border_style="yellow"
        )

    else:
        phase = result.failed_phase.value if result.failed_phase else "unknown"
        code = f" [{result.error_code}]" if result.error_code else ""
        panel = Panel(
            f"{prefix}[red]{EMOJI_ERROR} Deploy failed during {phase}{code}:[/red] {result.reason}",
            title="Deploy Error",
            border_style="red"
        )

    out.print(panel)


def format_deploy_summary(results: Dict[str, DeploymentResult],
                          out: Optional[Console] = None) -> None:
    """Display a table of per-application results"""
    out = out or console

    table = Table(title="Deployments", box=box.ROUNDED)
    table.add_column("Application", style="cyan")
    table.add_column("Status")
    table.add_column("Manifest / Reason")

    for app_name, result in sorted(results.items()):
        if result.is_success:
            status = f"[green]{EMOJI_SUCCESS} deployed[/green]"
            detail = result.manifest_address or ""
        elif result.is_skipped:
            status = f"[yellow]{EMOJI_SKIP} skipped[/yellow]"
            detail = result.reason or ""
        else:
            status = f"[red]{EMOJI_ERROR} failed[/red]"
            detail = result.reason or ""
        table.add_row(app_name, status, detail)

    out.print(table)


def format_deployment_info(info: DeploymentInfo,
                           out: Optional[Console] = None) -> None:
    """Display the deployment state of one application"""
    out = out or console

    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Entry point", info.entry_point or "-")
    table.add_row("Files", str(info.file_count))
    table.add_row("Deployments", str(info.deployment_count))
    table.add_row("Last deployed", info.last_deployed_at or "never")
    table.add_row("Last commit", info.last_deployed_reference or "-")
    table.add_row("Current commit", info.current_reference or "-")
    table.add_row("Up to date", "yes" if info.is_current else "no")

    out.print(Panel(table, title=info.app_dir, border_style="blue"))
