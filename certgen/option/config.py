"""Resolution of a key/value snapshot into a CertGenConfig"""

from typing import Any, Dict

from certgen.option.schema import (
    CA_CERT_FILE,
    CA_KEY_FILE,
    CILIUM_NAMESPACE,
    DEBUG,
    K8S_KUBECONFIG_PATH,
    K8S_REQUEST_TIMEOUT,
    SLOT_SPECS,
    CertGenConfig,
    CertificateSlot,
    K8sConnection,
    SlotField,
    SlotSpec,
)
from certgen.option.source import KeyValueSource, format_duration


def get_string_with_fallback(source: KeyValueSource, key: str, fallback_key: str) -> str:
    """Return the string at key if it is non-empty, else the string at fallback_key

    The check is on emptiness, not presence: a key explicitly set to ""
    still yields the fallback value, even when that is empty too.
    """
    value = source.get_string(key)
    if value != "":
        return value
    return source.get_string(fallback_key)


def _resolve_slot(source: KeyValueSource, spec: SlotSpec, default_namespace: str) -> CertificateSlot:
    values: Dict[str, Any] = {
        "generate": source.get_bool(spec.key(SlotField.GENERATE)),
        "common_name": source.get_string(spec.key(SlotField.COMMON_NAME)),
        "validity_duration": source.get_duration(spec.key(SlotField.VALIDITY_DURATION)),
        "secret_name": source.get_string(spec.key(SlotField.SECRET_NAME)),
    }
    if spec.reuse_secret:
        values["reuse_secret"] = source.get_bool(spec.key(SlotField.REUSE_SECRET))
    if spec.sans:
        values["sans"] = tuple(source.get_string_list(spec.key(SlotField.SANS)))

    if spec.namespace_override:
        values["secret_namespace"] = get_string_with_fallback(
            source, spec.key(SlotField.SECRET_NAMESPACE), CILIUM_NAMESPACE
        )
    else:
        values["secret_namespace"] = default_namespace

    return CertificateSlot(**values)


def resolve(source: KeyValueSource) -> CertGenConfig:
    """Populate a CertGenConfig from source

    Every declared key is read with the accessor of its type. Absent or
    malformed values resolve to zero values, so this never raises.

    Args:
        source: Already-merged key/value snapshot

    Returns:
        Fully populated, immutable configuration
    """
    default_namespace = source.get_string(CILIUM_NAMESPACE)

    return CertGenConfig(
        debug=source.get_bool(DEBUG),
        cilium_namespace=default_namespace,
        k8s=K8sConnection(
            kubeconfig_path=source.get_string(K8S_KUBECONFIG_PATH),
            request_timeout=source.get_duration(K8S_REQUEST_TIMEOUT),
        ),
        ca_cert_file=source.get_string(CA_CERT_FILE),
        ca_key_file=source.get_string(CA_KEY_FILE),
        slots={
            slot_id: _resolve_slot(source, spec, default_namespace)
            for slot_id, spec in SLOT_SPECS.items()
        },
    )


def to_source(config: CertGenConfig) -> Dict[str, Any]:
    """Flatten a resolved configuration back into canonical keys

    Durations are written as Go-style strings and only keys the schema
    declares are emitted, so resolving the result reproduces config.
    """
    data: Dict[str, Any] = {
        DEBUG: config.debug,
        CILIUM_NAMESPACE: config.cilium_namespace,
        K8S_KUBECONFIG_PATH: config.k8s.kubeconfig_path,
        K8S_REQUEST_TIMEOUT: format_duration(config.k8s.request_timeout),
        CA_CERT_FILE: config.ca_cert_file,
        CA_KEY_FILE: config.ca_key_file,
    }

    for spec, slot in config.iter_slots():
        field_values = {
            SlotField.GENERATE: slot.generate,
            SlotField.REUSE_SECRET: slot.reuse_secret,
            SlotField.COMMON_NAME: slot.common_name,
            SlotField.VALIDITY_DURATION: format_duration(slot.validity_duration),
            SlotField.SECRET_NAME: slot.secret_name,
            SlotField.SECRET_NAMESPACE: slot.secret_namespace,
            SlotField.SANS: list(slot.sans),
        }
        for slot_field in spec.fields():
            data[spec.key(slot_field)] = field_values[slot_field]

    return data
