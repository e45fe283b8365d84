"""Certificate configuration schema

Declares the closed set of recognized configuration keys, their types,
and the pydantic models they populate. Every slot shares one
CertificateSlot shape; what differs per slot is declared in its SlotSpec.
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class KeyType(str, Enum):
    """Primitive type of a configuration key"""
    BOOL = "bool"
    STRING = "string"
    DURATION = "duration"
    STRING_LIST = "string-list"


class SlotId(str, Enum):
    """Certificate slots managed by certgen"""
    CA = "ca"
    HUBBLE_SERVER = "hubble-server"
    HUBBLE_RELAY_SERVER = "hubble-relay-server"
    HUBBLE_RELAY_CLIENT = "hubble-relay-client"
    HUBBLE_METRICS_SERVER = "hubble-metrics-server"
    CLUSTERMESH_APISERVER_SERVER = "clustermesh-apiserver-server"
    CLUSTERMESH_APISERVER_ADMIN = "clustermesh-apiserver-admin"
    CLUSTERMESH_APISERVER_CLIENT = "clustermesh-apiserver-client"
    CLUSTERMESH_APISERVER_REMOTE = "clustermesh-apiserver-remote"


class SlotField(str, Enum):
    """Per-slot fields; values are the key suffixes"""
    GENERATE = "generate"
    REUSE_SECRET = "reuse-secret"
    COMMON_NAME = "common-name"
    VALIDITY_DURATION = "validity-duration"
    SECRET_NAME = "secret-name"
    SECRET_NAMESPACE = "secret-namespace"
    SANS = "sans"


FIELD_TYPES: Dict[SlotField, KeyType] = {
    SlotField.GENERATE: KeyType.BOOL,
    SlotField.REUSE_SECRET: KeyType.BOOL,
    SlotField.COMMON_NAME: KeyType.STRING,
    SlotField.VALIDITY_DURATION: KeyType.DURATION,
    SlotField.SECRET_NAME: KeyType.STRING,
    SlotField.SECRET_NAMESPACE: KeyType.STRING,
    SlotField.SANS: KeyType.STRING_LIST,
}

# Fields every slot carries regardless of capabilities
COMMON_FIELDS: Tuple[SlotField, ...] = (
    SlotField.GENERATE,
    SlotField.COMMON_NAME,
    SlotField.VALIDITY_DURATION,
    SlotField.SECRET_NAME,
)


# Global keys
DEBUG = "debug"
CILIUM_NAMESPACE = "cilium-namespace"
K8S_KUBECONFIG_PATH = "k8s-kubeconfig-path"
K8S_REQUEST_TIMEOUT = "k8s-request-timeout"
CA_CERT_FILE = "ca-cert-file"
CA_KEY_FILE = "ca-key-file"

GLOBAL_KEYS: Dict[str, KeyType] = {
    DEBUG: KeyType.BOOL,
    CILIUM_NAMESPACE: KeyType.STRING,
    K8S_KUBECONFIG_PATH: KeyType.STRING,
    K8S_REQUEST_TIMEOUT: KeyType.DURATION,
    CA_CERT_FILE: KeyType.STRING,
    CA_KEY_FILE: KeyType.STRING,
}


@dataclass(frozen=True)
class SlotSpec:
    """Static declaration of one certificate slot

    The capability flags decide which optional keys exist for the slot.
    A slot without namespace_override has no secret-namespace key and
    always stores its Secret in the default namespace.
    """
    slot_id: SlotId
    prefix: str                          # e.g., "hubble-server-cert"
    description: str
    reuse_secret: bool = False           # CA only
    sans: bool = False                   # Clustermesh apiserver server only
    namespace_override: bool = False

    def key(self, slot_field: SlotField) -> str:
        """Canonical key name for a field of this slot"""
        return f"{self.prefix}-{slot_field.value}"

    def fields(self) -> List[SlotField]:
        """Fields this slot declares, in resolution order"""
        declared = list(COMMON_FIELDS)
        if self.reuse_secret:
            declared.insert(1, SlotField.REUSE_SECRET)
        if self.sans:
            declared.append(SlotField.SANS)
        if self.namespace_override:
            declared.append(SlotField.SECRET_NAMESPACE)
        return declared

    def keys(self) -> Dict[str, KeyType]:
        """Canonical keys of this slot mapped to their types"""
        return {self.key(f): FIELD_TYPES[f] for f in self.fields()}


SLOT_SPECS: Dict[SlotId, SlotSpec] = {
    spec.slot_id: spec
    for spec in (
        SlotSpec(SlotId.CA, "ca", "Cilium CA",
                 reuse_secret=True, namespace_override=True),
        SlotSpec(SlotId.HUBBLE_SERVER, "hubble-server-cert", "Hubble server",
                 namespace_override=True),
        SlotSpec(SlotId.HUBBLE_RELAY_SERVER, "hubble-relay-server-cert", "Hubble Relay server",
                 namespace_override=True),
        SlotSpec(SlotId.HUBBLE_RELAY_CLIENT, "hubble-relay-client-cert", "Hubble Relay client",
                 namespace_override=True),
        SlotSpec(SlotId.HUBBLE_METRICS_SERVER, "hubble-metrics-server-cert", "Hubble metrics server",
                 namespace_override=True),
        SlotSpec(SlotId.CLUSTERMESH_APISERVER_SERVER, "clustermesh-apiserver-server-cert",
                 "Clustermesh API server", sans=True),
        SlotSpec(SlotId.CLUSTERMESH_APISERVER_ADMIN, "clustermesh-apiserver-admin-cert",
                 "Clustermesh API admin"),
        SlotSpec(SlotId.CLUSTERMESH_APISERVER_CLIENT, "clustermesh-apiserver-client-cert",
                 "Clustermesh API client"),
        SlotSpec(SlotId.CLUSTERMESH_APISERVER_REMOTE, "clustermesh-apiserver-remote-cert",
                 "Clustermesh API remote"),
    )
}


def known_keys() -> Dict[str, KeyType]:
    """Every recognized key mapped to its type (globals first, then slots)"""
    keys = dict(GLOBAL_KEYS)
    for spec in SLOT_SPECS.values():
        keys.update(spec.keys())
    return keys


def key_owner(key: str) -> str:
    """Name of the slot owning a key, or 'global'"""
    for spec in SLOT_SPECS.values():
        if key in spec.keys():
            return spec.slot_id.value
    return "global"


class CertificateSlot(BaseModel):
    """Resolved settings of one certificate slot"""

    model_config = ConfigDict(frozen=True)

    generate: bool = False
    reuse_secret: bool = False
    common_name: str = ""
    sans: Tuple[str, ...] = ()
    validity_duration: timedelta = timedelta(0)
    secret_name: str = ""
    secret_namespace: str = ""


class K8sConnection(BaseModel):
    """Parameters for reaching the cluster API (passed through, not interpreted)"""

    model_config = ConfigDict(frozen=True)

    kubeconfig_path: str = ""
    request_timeout: timedelta = timedelta(0)


class CertGenConfig(BaseModel):
    """Resolved certgen configuration

    Built once per invocation by resolve() and handed to the certificate
    generation and Secret storage collaborators.
    """

    model_config = ConfigDict(frozen=True)

    debug: bool = False
    cilium_namespace: str = ""
    k8s: K8sConnection = Field(default_factory=K8sConnection)
    ca_cert_file: str = ""
    ca_key_file: str = ""
    slots: Mapping[SlotId, CertificateSlot] = Field(default_factory=dict, validate_default=True)

    @field_validator("slots")
    @classmethod
    def freeze_slots(cls, value: Mapping[SlotId, CertificateSlot]) -> Mapping[SlotId, CertificateSlot]:
        return MappingProxyType(dict(value))

    @property
    def ca(self) -> CertificateSlot:
        return self.slot(SlotId.CA)

    def slot(self, slot_id: SlotId) -> CertificateSlot:
        """Get a slot by id

        Raises:
            KeyError: If the slot was not resolved
        """
        return self.slots[SlotId(slot_id)]

    def iter_slots(self) -> Iterator[Tuple[SlotSpec, CertificateSlot]]:
        """Yield (spec, slot) pairs in declaration order"""
        for slot_id, spec in SLOT_SPECS.items():
            if slot_id in self.slots:
                yield spec, self.slots[slot_id]
