"""
Tests for the resource registry and the client adapter lookup.
"""
import pytest

from commerce_records.adapters import AdapterRegistry, RecordAdapter, default_registry
from commerce_records.core.exceptions import AdapterNotFoundError
from commerce_records.domain.models import Attribute, PriceList, Record


class Voucher(Record):
    code = Attribute(str)


class VoucherAdapter(RecordAdapter):
    pass


class TestAdapterRegistry:

    def test_registers_every_tag(self):
        registry = AdapterRegistry()

        definition = registry.register(PriceList)

        assert definition.tags == ["PriceList", "price_list", "price_lists"]
        for tag in definition.tags:
            assert registry.get(tag) is definition

    def test_duplicate_registration_rejected(self):
        registry = AdapterRegistry()
        registry.register(PriceList)

        with pytest.raises(ValueError, match="already registered"):
            registry.register(PriceList)

    def test_rejects_non_record_classes(self):
        with pytest.raises(ValueError):
            AdapterRegistry().register(dict)

    def test_default_registry_lists_shipped_resources(self):
        names = default_registry().list()

        assert "PriceList" in names
        assert "FulfillmentReturnLineItem" in names
        assert default_registry().get("addresses").model_name == "Address"

    def test_clear(self):
        registry = default_registry()
        registry.clear()

        assert registry.list() == []


class TestClientLookup:

    def test_adapter_is_built_once_per_resource(self, client):
        adapter = client.adapter_for("PriceList")

        assert client.adapter_for("price_lists") is adapter
        assert client.PriceList is adapter
        assert adapter.plural_path == "price_lists"
        assert adapter.json_root == "price_list"

    def test_unknown_resource(self, client):
        with pytest.raises(AdapterNotFoundError):
            client.adapter_for("Widget")
        with pytest.raises(AttributeError):
            client.Widget
        assert client.sideload_adapter("widgets") is None

    def test_custom_resource_and_adapter(self, client, api):
        client.registry.register(Voucher, adapter_class=VoucherAdapter)
        api.add("GET", "/vouchers/1", json_body={"voucher": {"id": 1, "code": "SAVE10"}})

        adapter = client.Voucher

        assert isinstance(adapter, VoucherAdapter)
        assert adapter.find(1).code == "SAVE10"

    def test_adapters_have_independent_identity_maps(self, client, api):
        api.add("GET", "/price_lists/1", json_body={"price_list": {"id": 1}})
        client.PriceList.find(1)

        assert not client.Payment.has_record_for_id(1)
