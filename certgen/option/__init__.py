"""Configuration schema, key/value sources and resolution"""

from certgen.option.config import get_string_with_fallback, resolve, to_source
from certgen.option.schema import (
    SLOT_SPECS,
    CertGenConfig,
    CertificateSlot,
    K8sConnection,
    KeyType,
    SlotField,
    SlotId,
    SlotSpec,
    known_keys,
)
from certgen.option.source import KeyValueSource, LayeredSource, MappingSource

__all__ = [
    "SLOT_SPECS",
    "CertGenConfig",
    "CertificateSlot",
    "K8sConnection",
    "KeyType",
    "KeyValueSource",
    "LayeredSource",
    "MappingSource",
    "SlotField",
    "SlotId",
    "SlotSpec",
    "get_string_with_fallback",
    "known_keys",
    "resolve",
    "to_source",
]
