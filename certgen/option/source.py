"""Key/value sources with typed, non-failing accessors

A source is an already-merged snapshot of raw configuration values.
The typed accessors coerce whatever is stored under a key and fall back
to the type's zero value when the key is absent or cannot be coerced,
so resolution never fails on malformed input.
"""

import logging
import re
from abc import ABC, abstractmethod
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"1", "t", "true"}
_FALSE_STRINGS = {"0", "f", "false"}

# Microseconds per Go duration unit
_UNIT_MICROSECONDS = {
    "ns": Decimal("0.001"),
    "us": Decimal(1),
    "µs": Decimal(1),
    "μs": Decimal(1),
    "ms": Decimal(1000),
    "s": Decimal(1_000_000),
    "m": Decimal(60_000_000),
    "h": Decimal(3_600_000_000),
}
_DURATION_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_DURATION_FULL = re.compile(r"(?:(?:\d+\.?\d*|\.\d+)(?:ns|us|µs|μs|ms|s|m|h))+")
_NUMBER = re.compile(r"\d+\.?\d*|\.\d+")
_LIST_SEPARATORS = re.compile(r"[,\s]+")


def normalize_key(key: str) -> str:
    """Canonical form of a key: lower-case, dash-delimited"""
    return str(key).strip().lower().replace("_", "-")


def parse_duration(text: str) -> timedelta:
    """Parse a Go-style duration string such as '1h30m' or '-1.5s'

    Unit-less numbers are read as seconds, so "30" is 30s. Go's
    time.ParseDuration rejects them and viper's cast reads them as
    nanoseconds; a value written for those tools needs an explicit unit.

    Raises:
        ValueError: If the string is not a valid duration
    """
    value = text.strip()
    sign = 1
    if value[:1] in ("-", "+"):
        sign = -1 if value[0] == "-" else 1
        value = value[1:]

    if not value:
        raise ValueError(f"invalid duration {text!r}")

    if _NUMBER.fullmatch(value):
        logger.debug(f"Reading unit-less duration {text!r} as seconds")
        total = Decimal(value) * _UNIT_MICROSECONDS["s"]
    elif _DURATION_FULL.fullmatch(value):
        total = sum(
            (Decimal(number) * _UNIT_MICROSECONDS[unit]
             for number, unit in _DURATION_COMPONENT.findall(value)),
            Decimal(0),
        )
    else:
        raise ValueError(f"invalid duration {text!r}")

    return timedelta(microseconds=sign * int(total.to_integral_value()))


def _format_fraction(whole: int, fraction: int, width: int) -> str:
    if not fraction:
        return str(whole)
    return f"{whole}.{fraction:0{width}d}".rstrip("0")


def format_duration(value: timedelta) -> str:
    """Format a timedelta the way Go prints a time.Duration ('72h0m0s', '1.5s', '250ms')"""
    total = value // timedelta(microseconds=1)
    if total == 0:
        return "0s"

    sign = "-" if total < 0 else ""
    total = abs(total)

    if total < 1000:
        return f"{sign}{total}us"
    if total < 1_000_000:
        return f"{sign}{_format_fraction(total // 1000, total % 1000, 3)}ms"

    hours, rest = divmod(total, 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    seconds = _format_fraction(rest // 1_000_000, rest % 1_000_000, 6) + "s"

    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return f"{sign}{seconds}"


def to_bool(value: Any) -> bool:
    """Coerce a raw value to bool

    Raises:
        ValueError: If a string is not a recognized boolean
        TypeError: If the value type cannot be coerced
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f"invalid boolean {value!r}")
    raise TypeError(f"cannot convert {type(value).__name__} to bool")


def to_string(value: Any) -> str:
    """Coerce a raw value to str

    Raises:
        TypeError: If the value type cannot be coerced
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, timedelta):
        return format_duration(value)
    raise TypeError(f"cannot convert {type(value).__name__} to string")


def to_duration(value: Any) -> timedelta:
    """Coerce a raw value to timedelta (numbers are seconds, not nanoseconds)

    Raises:
        ValueError: If a string is not a valid duration
        TypeError: If the value type cannot be coerced
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise TypeError("cannot convert bool to duration")
    if isinstance(value, (int, float)):
        logger.debug(f"Reading numeric duration {value!r} as seconds")
        return timedelta(seconds=value)
    if isinstance(value, str):
        return parse_duration(value)
    raise TypeError(f"cannot convert {type(value).__name__} to duration")


def to_string_list(value: Any) -> List[str]:
    """Coerce a raw value to a list of strings

    Strings are split on commas and whitespace.

    Raises:
        TypeError: If the value or one of its items cannot be coerced
    """
    if isinstance(value, str):
        return [item for item in _LIST_SEPARATORS.split(value) if item]
    if isinstance(value, (list, tuple)):
        return [to_string(item) for item in value]
    raise TypeError(f"cannot convert {type(value).__name__} to string list")


class KeyValueSource(ABC):
    """Abstract snapshot of raw configuration values

    Subclasses only implement lookup(); the typed accessors are shared.
    """

    @abstractmethod
    def lookup(self, key: str) -> Any:
        """Return the raw value stored under key, or None if absent"""

    def _coerce(self, key: str, converter, zero):
        value = self.lookup(key)
        if value is None:
            return zero
        try:
            return converter(value)
        except (TypeError, ValueError, InvalidOperation, OverflowError) as e:
            logger.debug(f"Using zero value for '{key}': {e}")
            return zero

    def get_bool(self, key: str) -> bool:
        return self._coerce(key, to_bool, False)

    def get_string(self, key: str) -> str:
        return self._coerce(key, to_string, "")

    def get_duration(self, key: str) -> timedelta:
        return self._coerce(key, to_duration, timedelta(0))

    def get_string_list(self, key: str) -> List[str]:
        return self._coerce(key, to_string_list, [])


class MappingSource(KeyValueSource):
    """Source backed by one flat mapping of keys to raw values"""

    def __init__(self, data: Optional[Mapping[str, Any]] = None, name: str = "mapping"):
        self.name = name
        self._data: Dict[str, Any] = {
            normalize_key(key): value for key, value in (data or {}).items()
        }

    def lookup(self, key: str) -> Any:
        return self._data.get(normalize_key(key))

    def keys(self) -> List[str]:
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"MappingSource(name={self.name!r}, keys={len(self._data)})"


class LayeredSource(KeyValueSource):
    """Ordered stack of mapping sources; the first layer holding a value wins"""

    def __init__(self, layers: Iterable[MappingSource]):
        self.layers: List[MappingSource] = list(layers)

    def lookup(self, key: str) -> Any:
        for layer in self.layers:
            value = layer.lookup(key)
            if value is not None:
                return value
        return None

    def origin(self, key: str) -> Optional[str]:
        """Name of the layer supplying key, or None if no layer has it"""
        for layer in self.layers:
            if layer.lookup(key) is not None:
                return layer.name
        return None

    def describe(self) -> str:
        """Human-readable precedence chain, e.g. 'overrides > env > defaults'"""
        return " > ".join(layer.name for layer in self.layers) or "(empty)"
