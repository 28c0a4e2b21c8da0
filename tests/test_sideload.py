"""
Tests for sideloaded records embedded in listing and single-record responses.
"""
from commerce_records.adapters.sideload import SideloadParser


class TestSideloading:

    def test_embedded_collections_fill_sibling_identity_maps(self, client, api):
        api.add("GET", "/payments", json_body={
            "payments": [{"id": 1, "payment_method_id": 7, "invoice_id": 3}],
            "payment_methods": [{"id": 7, "name": "Card"}],
            "invoices": [{"id": 3, "invoice_number": "INV-3"}],
            "meta": {"total": 1},
        })

        payments = client.Payment.where()

        assert client.PaymentMethod.has_record_for_id(7)
        assert client.Invoice.has_record_for_id(3)
        assert payments[0].payment_method is client.PaymentMethod.find(7)
        assert payments[0].invoice.invoice_number == "INV-3"
        assert len(api.requests) == 1

    def test_unknown_keys_are_ignored(self, client, api):
        api.add("GET", "/payments", json_body={
            "payments": [{"id": 1}],
            "gift_cards": [{"id": 5}],
        })

        payments = client.Payment.where()

        assert [p.id for p in payments] == [1]

    def test_primary_collection_is_not_sideloaded_twice(self, client):
        parser = SideloadParser(client, ("payments", "payment"))

        loaded = parser.parse({"payments": [{"id": 1}], "meta": {}, "companies": [{"id": 2, "name": "Acme"}]})

        assert list(loaded) == ["companies"]
        assert client.Company.find(2).name == "Acme"
        assert client.Payment.peek_all() == []

    def test_single_record_response_sideloads(self, client, api):
        api.add("GET", "/invoices/3", json_body={
            "invoice": {"id": 3, "order_id": 11},
            "orders": [{"id": 11, "order_number": "SO-11"}],
        })

        invoice = client.Invoice.find(3)

        assert invoice.order.order_number == "SO-11"
        assert len(api.requests) == 1

    def test_sideloaded_record_keeps_identity(self, client, api):
        api.add("GET", "/payment_methods/7", json_body={"payment_method": {"id": 7, "name": "Card"}})
        api.add("GET", "/payments", json_body={
            "payments": [{"id": 1, "payment_method_id": 7}],
            "payment_methods": [{"id": 7, "name": "Credit Card"}],
        })
        method = client.PaymentMethod.find(7)

        client.Payment.where()

        assert client.PaymentMethod.find(7) is method
        assert method.name == "Credit Card"

    def test_non_mapping_body(self, client):
        parser = SideloadParser(client, ("payments",))

        assert parser.parse(None) == {}
        assert parser.parse([{"id": 1}]) == {}

    def test_companies_listing_and_sideload(self, client, api):
        api.add("GET", "/companies", json_body={"companies": [{"id": 2, "name": "Acme"}]})
        api.add("GET", "/addresses", json_body={
            "addresses": [{"id": 4, "city": "Auckland", "company_id": 2}],
            "companies": [{"id": 2, "name": "Acme Ltd"}],
        })

        companies = client.Company.where()
        addresses = client.Address.where()

        assert [c.id for c in companies] == [2]
        assert addresses[0].company is companies[0]
        assert companies[0].name == "Acme Ltd"
