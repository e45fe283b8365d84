"""Unit tests for the certificate configuration schema"""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from certgen.option.schema import (
    GLOBAL_KEYS,
    SLOT_SPECS,
    CertGenConfig,
    CertificateSlot,
    KeyType,
    SlotField,
    SlotId,
    key_owner,
    known_keys,
)


class TestSlotSpecs:
    """Test per-slot declarations"""

    def test_every_slot_declared(self):
        """All nine slots are declared in order, CA first"""
        assert list(SLOT_SPECS) == list(SlotId)
        assert next(iter(SLOT_SPECS)) == SlotId.CA

    def test_ca_keys(self):
        """CA slot uses the bare 'ca' prefix and can reuse its Secret"""
        assert SLOT_SPECS[SlotId.CA].keys() == {
            "ca-generate": KeyType.BOOL,
            "ca-reuse-secret": KeyType.BOOL,
            "ca-common-name": KeyType.STRING,
            "ca-validity-duration": KeyType.DURATION,
            "ca-secret-name": KeyType.STRING,
            "ca-secret-namespace": KeyType.STRING,
        }

    def test_hubble_server_keys(self):
        spec = SLOT_SPECS[SlotId.HUBBLE_SERVER]

        assert spec.key(SlotField.COMMON_NAME) == "hubble-server-cert-common-name"
        assert "hubble-server-cert-secret-namespace" in spec.keys()
        assert "hubble-server-cert-reuse-secret" not in spec.keys()

    def test_only_clustermesh_server_has_sans(self):
        """Exactly one slot carries a list-typed field"""
        with_sans = [spec.slot_id for spec in SLOT_SPECS.values() if spec.sans]

        assert with_sans == [SlotId.CLUSTERMESH_APISERVER_SERVER]
        assert SLOT_SPECS[SlotId.CLUSTERMESH_APISERVER_SERVER].keys()[
            "clustermesh-apiserver-server-cert-sans"
        ] == KeyType.STRING_LIST

    def test_clustermesh_slots_have_no_namespace_key(self):
        for slot_id in (
            SlotId.CLUSTERMESH_APISERVER_SERVER,
            SlotId.CLUSTERMESH_APISERVER_ADMIN,
            SlotId.CLUSTERMESH_APISERVER_CLIENT,
            SlotId.CLUSTERMESH_APISERVER_REMOTE,
        ):
            spec = SLOT_SPECS[slot_id]
            assert not spec.namespace_override
            assert SlotField.SECRET_NAMESPACE not in spec.fields()


class TestKnownKeys:
    """Test the total key table"""

    def test_key_count(self):
        """6 global + 6 CA + 4x5 Hubble + 5 + 3x4 Clustermesh"""
        assert len(known_keys()) == 49

    def test_includes_globals(self):
        keys = known_keys()
        for key, key_type in GLOBAL_KEYS.items():
            assert keys[key] == key_type
        assert keys["k8s-request-timeout"] == KeyType.DURATION

    def test_key_owner(self):
        assert key_owner("ca-generate") == "ca"
        assert key_owner("hubble-relay-client-cert-secret-name") == "hubble-relay-client"
        assert key_owner("cilium-namespace") == "global"


class TestModels:
    """Test pydantic models"""

    def test_certificate_slot_zero_values(self):
        slot = CertificateSlot()

        assert slot.generate is False
        assert slot.common_name == ""
        assert slot.sans == ()
        assert slot.validity_duration == timedelta(0)

    def test_models_are_frozen(self):
        slot = CertificateSlot(common_name="Cilium CA")

        with pytest.raises(ValidationError):
            slot.common_name = "other"

    def test_config_slot_accessors(self):
        ca = CertificateSlot(generate=True)
        config = CertGenConfig(slots={SlotId.CA: ca})

        assert config.ca == ca
        assert config.slot("ca") == ca
        with pytest.raises(KeyError):
            config.slot(SlotId.HUBBLE_SERVER)

    def test_slot_sans_cannot_be_mutated(self):
        slot = CertificateSlot(sans=["a.example.com"])

        assert slot.sans == ("a.example.com",)
        with pytest.raises(AttributeError):
            slot.sans.append("b.example.com")

    def test_config_slots_are_read_only(self):
        ca = CertificateSlot(generate=True)
        config = CertGenConfig(slots={SlotId.CA: ca})

        with pytest.raises(TypeError):
            config.slots[SlotId.HUBBLE_SERVER] = CertificateSlot()
        with pytest.raises(AttributeError):
            config.slots.clear()
        assert dict(config.slots) == {SlotId.CA: ca}

    def test_config_slots_do_not_track_input_dict(self):
        slots = {SlotId.CA: CertificateSlot(generate=True)}
        config = CertGenConfig(slots=slots)

        slots[SlotId.HUBBLE_SERVER] = CertificateSlot()

        assert SlotId.HUBBLE_SERVER not in config.slots

    def test_default_slots_are_read_only(self):
        config = CertGenConfig()

        assert len(config.slots) == 0
        with pytest.raises(TypeError):
            config.slots[SlotId.CA] = CertificateSlot()
