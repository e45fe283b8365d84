"""Loading of raw configuration layers into a LayeredSource

Precedence, highest first: explicit overrides, environment variables,
YAML config file, config directory, built-in defaults. The resulting
snapshot is complete before resolve() runs.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import yaml

from certgen.exceptions import ConfigSourceError, InvalidOverrideError
from certgen.option.defaults import default_values
from certgen.option.schema import known_keys
from certgen.option.source import LayeredSource, MappingSource, normalize_key

logger = logging.getLogger(__name__)

DEFAULT_ENV_PREFIX = "CERTGEN"

PathLike = Union[str, Path]


def env_var_name(key: str, prefix: str = DEFAULT_ENV_PREFIX) -> str:
    """Environment variable consulted for key, e.g. CERTGEN_CA_GENERATE"""
    name = normalize_key(key).replace("-", "_").upper()
    if prefix:
        return f"{prefix.upper()}_{name}"
    return name


def _warn_unknown_keys(data: Mapping[str, Any], origin: str) -> None:
    recognized = known_keys()
    for key in data:
        if normalize_key(key) not in recognized:
            logger.warning(f"Ignoring unknown key '{key}' from {origin}")


def parse_overrides(entries: Optional[Iterable[str]]) -> Dict[str, str]:
    """Parse key=value override strings (later entries win)

    Raises:
        InvalidOverrideError: If an entry has no '=' or an empty key
    """
    overrides: Dict[str, str] = {}
    for raw in entries or []:
        key, sep, value = raw.partition("=")
        if not sep or not key.strip():
            raise InvalidOverrideError(raw)
        overrides[normalize_key(key)] = value
    return overrides


def load_env(env: Optional[Mapping[str, str]] = None, prefix: str = DEFAULT_ENV_PREFIX) -> Dict[str, str]:
    """Collect values for known keys from environment variables

    Empty variables are treated as unset.
    """
    environ = os.environ if env is None else env
    values: Dict[str, str] = {}
    for key in known_keys():
        value = environ.get(env_var_name(key, prefix))
        if value:
            values[key] = value
    return values


def load_config_file(path: PathLike) -> Dict[str, Any]:
    """Load a YAML file holding a flat mapping of keys

    Raises:
        ConfigSourceError: If the file is missing, unreadable, not UTF-8,
            unparsable, or not a mapping
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ConfigSourceError(file_path, "file not found")

    try:
        with open(file_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except UnicodeDecodeError as e:
        raise ConfigSourceError(file_path, f"not valid UTF-8 ({e.reason} at byte {e.start})") from e
    except OSError as e:
        raise ConfigSourceError(file_path, f"cannot read file ({e.strerror or e})") from e
    except yaml.YAMLError as e:
        raise ConfigSourceError(file_path, f"invalid YAML ({e})") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigSourceError(file_path, f"expected a mapping, got {type(data).__name__}")

    data = {str(key): value for key, value in data.items()}
    _warn_unknown_keys(data, str(file_path))
    return data


def load_config_dir(path: PathLike) -> Dict[str, str]:
    """Load a directory holding one file per key (as mounted from a ConfigMap)

    Hidden entries and subdirectories are skipped; values are stripped.

    Raises:
        ConfigSourceError: If path is not a directory or a file in it cannot be read
    """
    dir_path = Path(path)
    if not dir_path.is_dir():
        raise ConfigSourceError(dir_path, "not a directory")

    values: Dict[str, str] = {}
    for entry in sorted(dir_path.iterdir()):
        if entry.name.startswith(".") or not entry.is_file():
            continue
        try:
            values[entry.name] = entry.read_text(encoding="utf-8").strip()
        except UnicodeDecodeError as e:
            raise ConfigSourceError(entry, f"not valid UTF-8 ({e.reason} at byte {e.start})") from e
        except OSError as e:
            raise ConfigSourceError(entry, f"cannot read file ({e.strerror or e})") from e

    _warn_unknown_keys(values, str(dir_path))
    return values


def load_source(
    overrides: Optional[Iterable[str]] = None,
    config_file: Optional[PathLike] = None,
    config_dir: Optional[PathLike] = None,
    env: Optional[Mapping[str, str]] = None,
    env_prefix: str = DEFAULT_ENV_PREFIX,
    include_defaults: bool = True,
) -> LayeredSource:
    """Assemble every configured layer into one snapshot

    Args:
        overrides: key=value strings, highest precedence
        config_file: Optional YAML file
        config_dir: Optional directory of one-file-per-key values
        env: Environment mapping (defaults to os.environ)
        env_prefix: Prefix for environment variable names
        include_defaults: Whether to add the built-in defaults layer

    Returns:
        LayeredSource ordered by precedence

    Raises:
        InvalidOverrideError: If an override is malformed
        ConfigSourceError: If the config file or directory cannot be loaded
    """
    layers: List[MappingSource] = []

    parsed_overrides = parse_overrides(overrides)
    if parsed_overrides:
        _warn_unknown_keys(parsed_overrides, "overrides")
        layers.append(MappingSource(parsed_overrides, name="overrides"))

    env_values = load_env(env, env_prefix)
    if env_values:
        layers.append(MappingSource(env_values, name="env"))

    if config_file is not None:
        layers.append(MappingSource(load_config_file(config_file), name=f"file:{config_file}"))

    if config_dir is not None:
        layers.append(MappingSource(load_config_dir(config_dir), name=f"dir:{config_dir}"))

    if include_defaults:
        layers.append(MappingSource(default_values(), name="defaults"))

    source = LayeredSource(layers)
    logger.debug(f"Configuration layers: {source.describe()}")
    return source
