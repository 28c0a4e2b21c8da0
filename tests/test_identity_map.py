"""
Tests for the per-adapter identity map.
"""
import pytest

from commerce_records.core.exceptions import RecordNotInIdentityMap
from commerce_records.domain.models import PriceList
from commerce_records.infrastructure.cache import IdentityMap


@pytest.fixture
def identity_map():
    return IdentityMap("PriceList")


def test_register_and_find(identity_map):
    record = PriceList(id=1)

    identity_map.register(record)

    assert identity_map.has(1)
    assert 1 in identity_map
    assert identity_map.find(1) is record


def test_find_miss_raises(identity_map):
    with pytest.raises(RecordNotInIdentityMap, match="PriceList with id=2"):
        identity_map.find(2)


def test_register_overwrites_entry(identity_map):
    identity_map.register(PriceList(id=1, name="a"))
    replacement = PriceList(id=1, name="b")

    identity_map.register(replacement)

    assert identity_map.find(1) is replacement
    assert len(identity_map) == 1


def test_transient_records_are_not_registered(identity_map):
    assert identity_map.register(PriceList(name="draft")) is None
    assert len(identity_map) == 0


def test_unregister_is_noop_when_absent(identity_map):
    record = PriceList(id=1)
    assert identity_map.unregister(record) is None

    identity_map.register(record)
    assert identity_map.unregister(record) is record
    assert not identity_map.has(1)


def test_all_preserves_insertion_order(identity_map):
    for record_id in (3, 1, 2):
        identity_map.register(PriceList(id=record_id))

    assert [r.id for r in identity_map.all()] == [3, 1, 2]
    assert identity_map.clear() == 3
    assert identity_map.all() == []
