"""
Reporting and output formatting for extraction results.

Console output uses Rich; JSON output is a plain document for automation.
"""

import json
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .models import FileDependencies, ScanResult


class DependencyReporter:
    """Formats and displays extraction results."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def print_scan_results(self, scan_result: ScanResult) -> None:
        """
        Print scan results in a user-friendly format.

        Args:
            scan_result: The scan results to display
        """
        for file_result in scan_result.files:
            self._print_file(file_result)

        if scan_result.errors:
            self._print_errors(scan_result.errors)

        self._print_footer(scan_result)

    def _print_file(self, file_result: FileDependencies) -> None:
        if not file_result.dependencies:
            self.console.print(
                f"📄 {file_result.source_file}: no AMD dependencies found", style="dim"
            )
            return

        table = Table(
            title=f"📄 {file_result.source_file}",
            box=box.ROUNDED,
            title_style="bold cyan",
        )
        table.add_column("#", justify="right", style="dim")
        table.add_column("Dependency", style="green")

        for index, dependency in enumerate(file_result.dependencies, 1):
            table.add_row(str(index), dependency)

        self.console.print(table)

    def _print_errors(self, errors: List[str]) -> None:
        error_text = "\n".join(f"• {error}" for error in errors)
        self.console.print(
            Panel(
                error_text,
                title="[bold red]❌ Errors[/bold red]",
                border_style="red",
            )
        )

    def _print_footer(self, scan_result: ScanResult) -> None:
        self.console.print(
            f"Scanned {len(scan_result.files)} file(s), "
            f"{len(scan_result.unique_dependencies)} unique dependencies "
            f"in {scan_result.scan_duration_ms}ms",
            style="dim",
        )


def build_json_results(scan_result: ScanResult) -> Dict[str, Any]:
    """Build the JSON document for a scan."""
    results: Dict[str, Any] = {
        "scan_duration_ms": scan_result.scan_duration_ms,
        "total_dependencies": scan_result.total_dependencies,
        "unique_dependencies": scan_result.unique_dependencies,
        "files": [
            {
                "source_file": file_result.source_file,
                "dependencies": list(file_result.dependencies),
            }
            for file_result in scan_result.files
        ],
    }
    if scan_result.errors:
        results["errors"] = scan_result.errors
    return results


def output_json_results(
    scan_result: ScanResult,
    output_file: Optional[str] = None,
    console: Optional[Console] = None,
) -> None:
    """Export results as JSON to a file or stdout."""
    json_output = json.dumps(build_json_results(scan_result), indent=2, ensure_ascii=False)

    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(json_output)
        (console or Console(stderr=True)).print(
            f"✅ Results saved to {output_file}", style="green"
        )
    else:
        print(json_output)
