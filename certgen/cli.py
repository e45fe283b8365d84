"""CLI entry point for certgen"""

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from certgen import __version__
from certgen.exceptions import CertgenError
from certgen.option.loader import DEFAULT_ENV_PREFIX, load_source
from certgen.option.schema import DEBUG
from certgen.option.source import LayeredSource

app = typer.Typer(
    name="certgen",
    help="certgen - Resolve TLS certificate configuration for Cilium, Hubble and Clustermesh",
    add_completion=False
)
console = Console()


class OutputFormat(str, Enum):
    TABLE = "table"
    YAML = "yaml"


def configure_logging(debug: bool = False):
    """Route log records through Rich on stderr"""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def handle_certgen_error(error: CertgenError, exit_code: int = 1):
    """Handle certgen errors with Rich formatting

    Args:
        error: certgen exception to handle
        exit_code: Exit code to use
    """
    if error.help_text:
        panel_content = f"{escape(error.message)}\n\n[bold cyan]Help:[/bold cyan]\n{escape(error.help_text)}"
    else:
        panel_content = escape(error.message)

    panel = Panel(
        panel_content,
        title="[bold red]Error[/bold red]",
        border_style="red",
        expand=False
    )

    console.print(panel)
    raise typer.Exit(exit_code)


def handle_unexpected_error(error: Exception, exit_code: int = 1):
    """Handle unexpected errors with Rich formatting

    Args:
        error: Exception to handle
        exit_code: Exit code to use
    """
    error_text = Text()
    error_text.append("✗ Unexpected Error: ", style="bold red")
    error_text.append(str(error))

    console.print(error_text)
    console.print("\n[yellow]This is an unexpected error. Please report this issue.[/yellow]")
    console.print(f"[dim]Error type: {type(error).__name__}[/dim]")

    raise typer.Exit(exit_code)


def _load(
    config_file: Optional[Path],
    config_dir: Optional[Path],
    overrides: Optional[List[str]],
    no_defaults: bool,
    env_prefix: str,
) -> LayeredSource:
    """Build the merged source and honour a configured debug key"""
    source = load_source(
        overrides=overrides,
        config_file=config_file,
        config_dir=config_dir,
        env_prefix=env_prefix,
        include_defaults=not no_defaults,
    )
    if source.get_bool(DEBUG):
        configure_logging(debug=True)
    return source


ConfigFileOption = typer.Option(None, "--config", "-c", help="YAML file of key: value pairs")
ConfigDirOption = typer.Option(None, "--config-dir", help="Directory with one file per key")
OverrideOption = typer.Option(None, "--set", "-s", help="Override a key (key=value), repeatable")
NoDefaultsOption = typer.Option(False, "--no-defaults", help="Do not apply built-in default values")
EnvPrefixOption = typer.Option(DEFAULT_ENV_PREFIX, "--env-prefix", help="Prefix of environment variables")


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Resolve certificate configuration from flags, environment and files"""
    configure_logging(debug)


@app.command()
def resolve(
    config_file: Optional[Path] = ConfigFileOption,
    config_dir: Optional[Path] = ConfigDirOption,
    overrides: Optional[List[str]] = OverrideOption,
    no_defaults: bool = NoDefaultsOption,
    env_prefix: str = EnvPrefixOption,
    output: OutputFormat = typer.Option(OutputFormat.TABLE, "--output", "-o", help="Output format"),
):
    """Print the resolved certificate configuration"""
    from certgen.commands.resolve import ResolveCommand

    try:
        source = _load(config_file, config_dir, overrides, no_defaults, env_prefix)
        ResolveCommand(console, source, output=output.value).execute()

    except CertgenError as e:
        handle_certgen_error(e)
    except Exception as e:
        handle_unexpected_error(e)


@app.command()
def validate(
    config_file: Optional[Path] = ConfigFileOption,
    config_dir: Optional[Path] = ConfigDirOption,
    overrides: Optional[List[str]] = OverrideOption,
    no_defaults: bool = NoDefaultsOption,
    env_prefix: str = EnvPrefixOption,
):
    """Check that every slot marked for generation has the inputs it needs"""
    from certgen.commands.validate import ValidateCommand

    try:
        source = _load(config_file, config_dir, overrides, no_defaults, env_prefix)
        ValidateCommand(console, source).execute()

    except CertgenError as e:
        handle_certgen_error(e)
    except Exception as e:
        handle_unexpected_error(e)


@app.command()
def keys(
    env_prefix: str = EnvPrefixOption,
):
    """List every recognized configuration key"""
    from certgen.commands.keys import KeysCommand

    KeysCommand(console, env_prefix=env_prefix).execute()


@app.command()
def version():
    """Show certgen version"""
    console.print(f"certgen {__version__}")


if __name__ == "__main__":
    app()
