"""Validate command implementation

Preflight checks for the inputs certificate generation needs. These run
on demand against a resolved configuration; resolution itself accepts
anything.
"""

import logging
from datetime import timedelta
from typing import List, Optional

from rich.console import Console

from certgen.exceptions import SlotValidationError
from certgen.option.config import resolve
from certgen.option.schema import CA_CERT_FILE, CA_KEY_FILE, CertGenConfig, SlotField, SlotId
from certgen.option.source import KeyValueSource, LayeredSource

logger = logging.getLogger(__name__)


def find_problems(config: CertGenConfig) -> List[str]:
    """List every slot field that would make certificate generation fail

    Only slots with generate=true are checked.
    """
    problems = []

    for spec, slot in config.iter_slots():
        if not slot.generate:
            continue

        if not slot.common_name:
            problems.append(f"{spec.description}: {spec.key(SlotField.COMMON_NAME)} is empty")
        if slot.validity_duration <= timedelta(0):
            problems.append(
                f"{spec.description}: {spec.key(SlotField.VALIDITY_DURATION)} must be positive"
            )
        if not slot.secret_name:
            problems.append(f"{spec.description}: {spec.key(SlotField.SECRET_NAME)} is empty")
        if not slot.secret_namespace:
            problems.append(f"{spec.description}: secret namespace is empty (set cilium-namespace)")

    leaves_generated = any(
        slot.generate for spec, slot in config.iter_slots() if spec.slot_id != SlotId.CA
    )
    ca_provided = config.ca.generate or config.ca.secret_name or (
        config.ca_cert_file and config.ca_key_file
    )
    if leaves_generated and not ca_provided:
        problems.append(
            f"Cilium CA: leaf certificates need a CA; enable ca-generate, set ca-secret-name, "
            f"or set both {CA_CERT_FILE} and {CA_KEY_FILE}"
        )

    return problems


class ValidateCommand:
    """Validate command for checking generation inputs before running certgen"""

    def __init__(self, console: Console, source: KeyValueSource):
        """Initialize validate command

        Args:
            console: Rich console for output
            source: Merged key/value snapshot to resolve
        """
        self.console = console
        self.source = source

    def execute(self) -> CertGenConfig:
        """Resolve and check configuration

        Returns:
            The resolved configuration when it passes

        Raises:
            SlotValidationError: If any generated slot lacks required inputs
        """
        config = resolve(self.source)
        problems = find_problems(config)

        if problems:
            raise SlotValidationError(problems, source_hint=self._source_hint())

        generated = [spec.description for spec, slot in config.iter_slots() if slot.generate]
        logger.debug(f"Preflight passed for {len(generated)} generated slot(s)")

        self.console.print("[green]✓[/green] Configuration is valid")
        if generated:
            self.console.print(f"  Will generate: {', '.join(generated)}")
        else:
            self.console.print("  [dim]No certificates are marked for generation[/dim]")

        return config

    def _source_hint(self) -> Optional[str]:
        if isinstance(self.source, LayeredSource):
            return self.source.describe()
        return None
