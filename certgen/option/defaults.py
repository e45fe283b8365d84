"""Built-in default values registered for certgen keys

Used as the lowest-precedence layer by the loader. resolve() never
injects these on its own.
"""

from typing import Any, Dict

from certgen.option.schema import (
    CILIUM_NAMESPACE,
    K8S_REQUEST_TIMEOUT,
    SLOT_SPECS,
    SlotField,
    SlotId,
)

DEFAULT_NAMESPACE = "kube-system"
DEFAULT_VALIDITY = "26280h"  # 3 years
DEFAULT_REQUEST_TIMEOUT = "60s"

# slot -> (common name, secret name)
_SLOT_IDENTITIES = {
    SlotId.CA: ("Cilium CA", "cilium-ca"),
    SlotId.HUBBLE_SERVER: ("*.default.hubble-grpc.cilium.io", "hubble-server-certs"),
    SlotId.HUBBLE_RELAY_SERVER: ("*.hubble-relay.cilium.io", "hubble-relay-server-certs"),
    SlotId.HUBBLE_RELAY_CLIENT: ("*.hubble-relay.cilium.io", "hubble-relay-client-certs"),
    SlotId.HUBBLE_METRICS_SERVER: ("*.hubble-metrics.cilium.io", "hubble-metrics-server-certs"),
    SlotId.CLUSTERMESH_APISERVER_SERVER: ("clustermesh-apiserver.cilium.io", "clustermesh-apiserver-server-cert"),
    SlotId.CLUSTERMESH_APISERVER_ADMIN: ("root", "clustermesh-apiserver-admin-cert"),
    SlotId.CLUSTERMESH_APISERVER_CLIENT: ("externalworkload", "clustermesh-apiserver-client-cert"),
    SlotId.CLUSTERMESH_APISERVER_REMOTE: ("remote", "clustermesh-apiserver-remote-cert"),
}


def default_values() -> Dict[str, Any]:
    """Default raw value for every key that has one

    Slot namespaces are left unset so they follow cilium-namespace.
    """
    values: Dict[str, Any] = {
        CILIUM_NAMESPACE: DEFAULT_NAMESPACE,
        K8S_REQUEST_TIMEOUT: DEFAULT_REQUEST_TIMEOUT,
    }

    for slot_id, spec in SLOT_SPECS.items():
        common_name, secret_name = _SLOT_IDENTITIES[slot_id]
        values[spec.key(SlotField.GENERATE)] = False
        values[spec.key(SlotField.COMMON_NAME)] = common_name
        values[spec.key(SlotField.VALIDITY_DURATION)] = DEFAULT_VALIDITY
        values[spec.key(SlotField.SECRET_NAME)] = secret_name
        if spec.reuse_secret:
            values[spec.key(SlotField.REUSE_SECRET)] = False

    return values
