# src/kubelocate/cli/formatter.py
import json
from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from kubelocate.core.models import Locator, Resolution

console = Console()
# Log records go to stderr so stdout carries only results
log_console = Console(stderr=True)


def locator_to_dict(locator: Locator) -> Dict[str, Any]:
    return {
        "scheme": locator.scheme,
        "api_version": locator.api_version,
        "kind": locator.kind,
        "namespace": locator.namespace,
        "name": locator.name,
        "query_params": dict(locator.query_params),
    }


def resolution_to_dict(locator: Locator, resolution: Optional[Resolution]) -> Dict[str, Any]:
    if resolution is None:
        return {"locator": str(locator), "resolved": False, "url": None}
    return {
        "locator": str(locator),
        "resolved": True,
        "url": resolution.url,
        "scheme": resolution.endpoint.scheme,
        "host": resolution.endpoint.host,
        "port": resolution.endpoint.port,
        "strategy": resolution.strategy,
        "source": resolution.source,
        "target_port": resolution.target_port,
    }


class LocateFormatter:
    """
    Renders parsed locators and resolution outcomes for the terminal.
    """

    def __init__(self, out: Optional[Console] = None):
        self.console = out or console

    def print_json(self, payload: Dict[str, Any]):
        self.console.print_json(json.dumps(payload))

    def show_locator(self, locator: Locator):
        table = Table(title="Parsed Locator", show_header=True, header_style="bold magenta")
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("scheme", locator.scheme)
        table.add_row("apiVersion", locator.api_version)
        table.add_row("kind", locator.kind)
        table.add_row("namespace", locator.namespace)
        table.add_row("name", locator.name)
        for key, value in locator.query_params.items():
            table.add_row(f"?{key}", value)
        self.console.print(table)

    def show_resolution(self, locator: Locator, resolution: Optional[Resolution], explain: bool = False):
        if resolution is None:
            self.console.print(f"[bold yellow]⚠️  Unresolved:[/bold yellow] [white]{locator}[/white]")
            return

        if not explain:
            # Bare URL so the output can be captured by scripts
            self.console.print(resolution.url, highlight=False)
            return

        target = resolution.target_port if resolution.target_port is not None else "-"
        self.console.print(Panel(
            f"[bold green]{resolution.url}[/bold green]\n\n"
            f"Strategy:    [cyan]{resolution.strategy}[/cyan]\n"
            f"Source:      [white]{resolution.source}[/white]\n"
            f"Target port: [white]{target}[/white]",
            title=f"[bold white]{locator}[/bold white]",
            border_style="green",
            expand=False,
        ))

    def show_error(self, title: str, message: str):
        self.console.print(f"[bold red]{title}:[/bold red] {escape(message)}")
