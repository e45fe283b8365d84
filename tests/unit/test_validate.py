"""Unit tests for generation preflight checks"""

from io import StringIO

import pytest
from rich.console import Console

from certgen.commands.validate import ValidateCommand, find_problems
from certgen.exceptions import SlotValidationError
from certgen.option.config import resolve
from certgen.option.defaults import default_values
from certgen.option.source import LayeredSource, MappingSource


def _config(**overrides):
    data = default_values()
    data.update(overrides)
    return resolve(MappingSource(data))


@pytest.fixture
def console():
    return Console(file=StringIO(), width=120)


class TestFindProblems:
    """Test per-slot generation checks"""

    def test_defaults_without_generation_pass(self):
        assert find_problems(_config()) == []

    def test_generated_defaults_pass(self):
        config = _config(**{
            "ca-generate": True,
            "hubble-server-cert-generate": True,
            "clustermesh-apiserver-server-cert-generate": True,
        })

        assert find_problems(config) == []

    def test_slots_not_generated_are_not_checked(self):
        config = resolve(MappingSource({"ca-generate": False}))
        assert find_problems(config) == []

    def test_reports_every_missing_input(self):
        config = resolve(MappingSource({"ca-generate": True}))

        problems = find_problems(config)

        assert problems == [
            "Cilium CA: ca-common-name is empty",
            "Cilium CA: ca-validity-duration must be positive",
            "Cilium CA: ca-secret-name is empty",
            "Cilium CA: secret namespace is empty (set cilium-namespace)",
        ]

    def test_negative_validity(self):
        config = _config(**{
            "hubble-relay-client-cert-generate": True,
            "hubble-relay-client-cert-validity-duration": "-1h",
            "ca-generate": True,
        })

        assert find_problems(config) == [
            "Hubble Relay client: hubble-relay-client-cert-validity-duration must be positive",
        ]

    def test_leaf_without_any_ca(self):
        config = _config(**{
            "hubble-server-cert-generate": True,
            "ca-secret-name": "",
        })

        problems = find_problems(config)

        assert len(problems) == 1
        assert problems[0].startswith("Cilium CA: leaf certificates need a CA")

    def test_leaf_with_ca_files(self):
        config = _config(**{
            "hubble-server-cert-generate": True,
            "ca-secret-name": "",
            "ca-cert-file": "/certs/ca.crt",
            "ca-key-file": "/certs/ca.key",
        })

        assert find_problems(config) == []


class TestValidateCommand:
    """Test the validate command wrapper"""

    def test_success_output(self, console):
        source = MappingSource({**default_values(), "hubble-server-cert-generate": True})

        config = ValidateCommand(console, source).execute()

        output = console.file.getvalue()
        assert config.slot("hubble-server").generate is True
        assert "Configuration is valid" in output
        assert "Hubble server" in output

    def test_nothing_generated(self, console):
        ValidateCommand(console, MappingSource(default_values())).execute()

        assert "No certificates are marked for generation" in console.file.getvalue()

    def test_failure_carries_source_hint(self, console):
        source = LayeredSource([MappingSource({"ca-generate": True}, name="overrides")])

        with pytest.raises(SlotValidationError) as exc_info:
            ValidateCommand(console, source).execute()

        assert len(exc_info.value.problems) == 4
        assert "overrides" in exc_info.value.help_text
