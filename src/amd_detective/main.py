import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.panel import Panel

from . import __version__
from .config import (
    DetectiveConfig,
    apply_config_data,
    create_sample_config,
    get_config,
    load_config,
    load_config_file,
    reset_config,
    validate_config_values,
)
from .models import ExtractOptions
from .reporting import DependencyReporter, output_json_results
from .scanner import scan_files
from .structured_logging import configure_logging

console = Console()
err_console = Console(stderr=True)


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version information")
@click.option(
    "--config-file",
    type=click.Path(exists=True, dir_okay=False),
    help="Load settings from this file instead of the standard locations",
)
@click.pass_context
def cli(ctx, version, config_file):
    """
    🔍 AMD Detective: dependency extraction for AMD modules

    Lists the modules that define() and require() calls in a JavaScript
    file depend on.
    """
    if version:
        console.print(f"AMD Detective version {__version__}", style="bold blue")
        ctx.exit()

    if config_file:
        reset_config()
        load_config(Path(config_file))

    settings = get_config()
    configure_logging(settings.logging.log_level, settings.logging.enable_json)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@cli.command()
@click.argument(
    "file_paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, readable=True, dir_okay=False),
)
@click.option(
    "--skip-lazy-loaded/--include-lazy-loaded",
    default=None,
    help="Omit dependencies loaded by require() calls nested in factories "
    "(REM modules are always included)",
)
@click.option(
    "--output-format",
    type=click.Choice(["console", "json"], case_sensitive=False),
    default=None,
    help="Output format for results (default from config or console)",
)
@click.option(
    "--output-file",
    "-o",
    type=click.Path(),
    help="Save results to file (JSON format only)",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-critical output")
def extract(
    file_paths: Tuple[str, ...],
    skip_lazy_loaded: Optional[bool],
    output_format: Optional[str],
    output_file: Optional[str],
    quiet: bool,
) -> None:
    """
    Extract the AMD dependencies of one or more JavaScript files.

    Examples:

      amd-detective extract app/main.js

      amd-detective extract lib/*.js --skip-lazy-loaded

      amd-detective extract app/main.js --output-format json -o deps.json
    """
    settings = get_config()

    final_skip = (
        skip_lazy_loaded
        if skip_lazy_loaded is not None
        else settings.extract.skip_lazy_loaded
    )
    final_format = (output_format or settings.output.output_format).lower()
    final_quiet = quiet or settings.output.quiet

    if output_file and final_format != "json":
        raise click.ClickException("Output file can only be used with JSON format")

    if not final_quiet and final_format == "console":
        console.print(
            Panel(
                f"🔍 [bold blue]AMD Detective[/bold blue] v{__version__}",
                border_style="blue",
            )
        )

    scan_result = scan_files(
        file_paths, ExtractOptions(skip_lazy_loaded=final_skip)
    )

    if final_format == "json":
        output_json_results(scan_result, output_file, err_console)
    elif final_quiet:
        for file_result in scan_result.files:
            for dependency in file_result.dependencies:
                click.echo(dependency)
        for error in scan_result.errors:
            err_console.print(f"❌ {error}", style="red")
    else:
        DependencyReporter(console).print_scan_results(scan_result)

    if scan_result.has_errors:
        sys.exit(1)


@cli.command()
def info():
    """Show the recognised AMD forms and configuration sources."""
    info_text = """
[bold blue]📋 Recognised AMD Forms:[/bold blue]

• [green]named[/green]    define("name", ["a", "b"], function (a, b) {})
• [green]deps[/green]     define(["a", "b"], function (a, b) {})
• [green]driver[/green]   require(["a", "b"], function (a, b) {})
• [green]factory[/green]  define(function (require) { var a = require("a"); })
• [green]rem[/green]      define(function (require, exports, module) {})
• [green]nodeps[/green]   define({ key: "value" })

[bold blue]⏳ Lazy-loaded Dependencies:[/bold blue]

require() calls nested inside a factory are reported unless
[cyan]--skip-lazy-loaded[/cyan] is given. Factory-only and REM modules
always report them, since that is how they declare dependencies.

[bold blue]🌍 Environment Variables:[/bold blue]

• [cyan]AMD_DETECTIVE_SKIP_LAZY_LOADED[/cyan] - Skip lazy-loaded dependencies
• [cyan]AMD_DETECTIVE_MAX_FILE_SIZE_MB[/cyan] - Largest file that will be read
• [cyan]AMD_DETECTIVE_OUTPUT_FORMAT[/cyan] - console or json
• [cyan]AMD_DETECTIVE_LOG_LEVEL[/cyan] - DEBUG, INFO, WARNING, ERROR

[bold blue]📄 Configuration Files:[/bold blue]

• [green].amd-detective.json[/green] / [green].yaml[/green] / [green].toml[/green] - Project-level config
• [green]~/.config/amd-detective/config.json[/green] - User-level config
"""
    console.print(
        Panel(
            info_text,
            title="[bold]AMD Detective Information[/bold]",
            border_style="blue",
        )
    )


@cli.group()
def config():
    """Configuration management commands."""
    pass


@config.command("init")
@click.option(
    "--path",
    type=click.Path(),
    default=".amd-detective.json",
    help="Path where to create the config file",
    show_default=True,
)
@click.option("--force", is_flag=True, help="Overwrite existing config file")
def config_init(path: str, force: bool):
    """Create a sample configuration file."""
    config_path = Path(path)

    if config_path.exists() and not force:
        console.print(f"⚠️  Config file already exists at {config_path}", style="yellow")
        console.print("Use --force to overwrite", style="dim")
        return

    try:
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_sample_config())
    except OSError as e:
        raise click.ClickException(f"Failed to create config file: {e}")

    console.print(f"✅ Created configuration file at {config_path}", style="green")


@config.command("show")
def config_show():
    """Show current configuration settings."""
    current_config = get_config()

    console.print(Panel("[bold blue]🔧 Configuration[/bold blue]", border_style="blue"))

    console.print("\n[bold cyan]🔍 Extraction Settings:[/bold cyan]")
    console.print(f"  Skip Lazy Loaded: {current_config.extract.skip_lazy_loaded}")

    console.print("\n[bold cyan]🔒 Security Settings:[/bold cyan]")
    console.print(f"  Max File Size: {current_config.security.max_file_size_mb} MB")
    console.print(
        f"  Allowed Extensions: {', '.join(current_config.security.allowed_file_extensions)}"
    )

    console.print("\n[bold cyan]📤 Output Settings:[/bold cyan]")
    console.print(f"  Output Format: {current_config.output.output_format}")
    console.print(f"  Quiet: {current_config.output.quiet}")

    console.print("\n[bold cyan]📝 Logging Settings:[/bold cyan]")
    console.print(f"  Log Level: {current_config.logging.log_level}")
    console.print(f"  JSON Logs: {current_config.logging.enable_json}")


@config.command("validate")
@click.argument("config_file", type=click.Path(exists=True))
def config_validate(config_file: str):
    """Validate a configuration file."""
    config_data = load_config_file(Path(config_file))

    if not isinstance(config_data, dict):
        raise click.ClickException(f"Could not load config from {config_file}")

    candidate = DetectiveConfig()
    apply_config_data(candidate, config_data)
    errors = validate_config_values(candidate)

    if errors:
        console.print("❌ Configuration validation failed:", style="red")
        for error in errors:
            console.print(f"  • {error}", style="red")
        sys.exit(1)

    console.print(f"✅ Configuration file {config_file} is valid", style="green")


if __name__ == "__main__":
    cli()
