"""certgen Exception Classes

Base exception hierarchy for the certgen configuration tool.
All custom exceptions include help_text for actionable user guidance.

Resolution itself never raises: these errors belong to the boundaries
around it (loading raw input, and preflight checks before generation).
"""

from pathlib import Path
from typing import List, Optional, Union


class CertgenError(Exception):
    """Base exception for all certgen errors

    All certgen exceptions should inherit from this class to enable
    consistent error handling and user-friendly error messages.

    Attributes:
        message: Human-readable error description
        help_text: Optional actionable guidance for resolving the error
    """

    def __init__(self, message: str, help_text: str = None):
        """Initialize certgen error with message and optional help text

        Args:
            message: Error description
            help_text: Optional remediation guidance
        """
        self.message = message
        self.help_text = help_text
        super().__init__(message)

    def __str__(self) -> str:
        """Format error message with help text if available"""
        if self.help_text:
            return f"{self.message}\n\nHelp: {self.help_text}"
        return self.message


class ConfigSourceError(CertgenError):
    """Raised when a configuration file or directory cannot be loaded

    This error occurs while building the key/value snapshot, before any
    value is resolved: a missing path, unparsable YAML, or a document that
    is not a flat mapping of keys.
    """

    def __init__(self, path: Union[str, Path], reason: str):
        """Initialize config source error

        Args:
            path: File or directory that failed to load
            reason: Description of the failure
        """
        message = f"Cannot load configuration from '{path}': {reason}"

        help_text = (
            "Config files must be YAML mappings of flat keys, e.g.\n\n"
            "  ca-generate: true\n"
            "  cilium-namespace: kube-system\n\n"
            "Run 'certgen keys' to list every recognized key"
        )

        super().__init__(message, help_text)
        self.path = str(path)
        self.reason = reason


class InvalidOverrideError(CertgenError):
    """Raised when a --set override is not in key=value form"""

    def __init__(self, raw: str):
        """Initialize invalid override error

        Args:
            raw: The offending command-line value
        """
        message = f"Invalid override '{raw}': expected key=value"
        help_text = "Pass overrides as --set ca-generate=true (repeat --set for multiple keys)"

        super().__init__(message, help_text)
        self.raw = raw


class SlotValidationError(CertgenError):
    """Raised when certificate slots lack the inputs needed for generation

    Collects every problem found so the user can fix them in one pass.
    """

    def __init__(self, problems: List[str], source_hint: Optional[str] = None):
        """Initialize slot validation error

        Args:
            problems: One line per invalid slot field
            source_hint: Optional description of where values were loaded from
        """
        count = len(problems)
        noun = "problem" if count == 1 else "problems"
        message = f"Certificate configuration has {count} {noun}:\n"
        message += "\n".join(f"  - {problem}" for problem in problems)

        help_text = "Set the missing keys with --set, a config file, or CERTGEN_* environment variables"

        if source_hint:
            help_text += f"\n\nValues were loaded from: {source_hint}"

        super().__init__(message, help_text)
        self.problems = problems
