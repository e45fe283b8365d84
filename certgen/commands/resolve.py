"""Resolve command implementation"""

import logging

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from certgen.option.config import resolve, to_source
from certgen.option.schema import CertGenConfig
from certgen.option.source import KeyValueSource, LayeredSource, format_duration

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("table", "yaml")


class ResolveCommand:
    """Resolve command for printing the effective certificate configuration"""

    def __init__(self, console: Console, source: KeyValueSource, output: str = "table"):
        """Initialize resolve command

        Args:
            console: Rich console for output
            source: Merged key/value snapshot to resolve
            output: Output format, 'table' or 'yaml'
        """
        if output not in OUTPUT_FORMATS:
            raise ValueError(f"Unsupported output format '{output}' (expected one of {OUTPUT_FORMATS})")
        self.console = console
        self.source = source
        self.output = output

    def execute(self) -> CertGenConfig:
        """Resolve configuration and print it"""
        config = resolve(self.source)

        if isinstance(self.source, LayeredSource):
            logger.debug(f"Resolved from {self.source.describe()}")

        if self.output == "yaml":
            self.console.print(
                yaml.safe_dump(to_source(config), sort_keys=False, default_flow_style=False),
                markup=False,
                emoji=False,
                highlight=False,
                soft_wrap=True,
                end="",
            )
        else:
            self._print_table(config)

        return config

    def _print_table(self, config: CertGenConfig):
        self.console.print(f"[bold]Default namespace:[/bold] {escape(config.cilium_namespace) or '[dim](empty)[/dim]'}")
        self.console.print(
            f"[bold]Kubeconfig:[/bold] {escape(config.k8s.kubeconfig_path) or '[dim]in-cluster[/dim]'}  "
            f"[bold]Request timeout:[/bold] {format_duration(config.k8s.request_timeout)}"
        )
        if config.ca_cert_file or config.ca_key_file:
            self.console.print(
                f"[bold]CA files:[/bold] cert={escape(config.ca_cert_file) or '-'} key={escape(config.ca_key_file) or '-'}"
            )

        table = Table(title="Certificate Slots")
        table.add_column("Slot", style="cyan")
        table.add_column("Generate")
        table.add_column("Common Name")
        table.add_column("SANs")
        table.add_column("Validity")
        table.add_column("Secret")

        for spec, slot in config.iter_slots():
            generate = "[green]yes[/green]" if slot.generate else "[dim]no[/dim]"
            if spec.reuse_secret and slot.reuse_secret:
                generate += " (reuse)"
            table.add_row(
                spec.description,
                generate,
                escape(slot.common_name),
                escape(", ".join(slot.sans)) if spec.sans else "-",
                format_duration(slot.validity_duration),
                escape(f"{slot.secret_namespace}/{slot.secret_name}"),
            )

        self.console.print(table)
