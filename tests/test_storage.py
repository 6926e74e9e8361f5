from decimal import Decimal

import pytest

from shopledger.common.exceptions import NotFound, StorageError, VersionConflict
from shopledger.models.customer import CustomerCategory
from shopledger.storage import EntityKind

from .factories import add_customer, add_transaction


def test_create_assigns_id_version_and_timestamps(store):
    customer = add_customer(store)

    assert customer.id.startswith("CUS-")
    assert customer.version == 1
    assert customer.category == CustomerCategory.WHOLESALE
    assert customer.created_at is not None


def test_create_rejects_duplicate_id(store):
    customer = add_customer(store)

    with pytest.raises(StorageError):
        store.create(EntityKind.CUSTOMER, {
            "id": customer.id,
            "name": "Duplicate",
            "contact": "9876543210",
            "category": CustomerCategory.WALK_IN,
            "pending_amount": Decimal("0"),
        })

    assert [c.name for c in store.get_all(EntityKind.CUSTOMER)] == ["Hotel Annapurna"]


def test_update_bumps_version(store):
    customer = add_customer(store)

    updated = store.update(EntityKind.CUSTOMER, customer.id, {"pending_amount": Decimal("10.00")},
                           expected_version=customer.version)

    assert updated.version == customer.version + 1
    assert updated.pending_amount == Decimal("10.00")
    assert updated.name == customer.name


def test_stale_write_is_rejected(store):
    customer = add_customer(store)
    store.update(EntityKind.CUSTOMER, customer.id, {"pending_amount": Decimal("10.00")},
                 expected_version=customer.version)

    with pytest.raises(VersionConflict):
        store.update(EntityKind.CUSTOMER, customer.id, {"pending_amount": Decimal("99.00")},
                     expected_version=customer.version)
    assert store.get_by_id(EntityKind.CUSTOMER, customer.id).pending_amount == Decimal("10.00")


def test_update_missing_entity(store):
    with pytest.raises(NotFound):
        store.update(EntityKind.ORDER, "ORD-MISSING0", {"paid_amount": Decimal("1.00")})


def test_require(store):
    with pytest.raises(NotFound) as exc:
        store.require(EntityKind.SUPPLIER, "SUP-MISSING0")
    assert exc.value.field == "supplier_id"


def test_atomic_rolls_back_every_write(store):
    customer = add_customer(store)

    with pytest.raises(RuntimeError):
        with store.atomic():
            store.update(EntityKind.CUSTOMER, customer.id, {"name": "Renamed"})
            add_customer(store, name="Ghost")
            with store.atomic():
                add_transaction(store, customer.id, "payment", "10.00", entity_type="customer")
            raise RuntimeError("boom")

    assert [c.name for c in store.get_all(EntityKind.CUSTOMER)] == ["Hotel Annapurna"]
    assert store.get_all(EntityKind.TRANSACTION) == []


def test_atomic_commits_on_success(store):
    with store.atomic():
        customer = add_customer(store)
        add_transaction(store, customer.id, "payment", "10.00", entity_type="customer")

    assert store.get_by_id(EntityKind.CUSTOMER, customer.id) is not None
    assert len(store.get_transactions_by_entity(customer.id)) == 1


def test_delete(store):
    customer = add_customer(store)

    assert store.delete(EntityKind.CUSTOMER, customer.id) is True
    assert store.delete(EntityKind.CUSTOMER, customer.id) is False
    assert store.get_by_id(EntityKind.CUSTOMER, customer.id) is None


def test_memory_reads_are_copies(memory_store):
    customer = add_customer(memory_store)
    customer.name = "Mutated"

    assert memory_store.get_by_id(EntityKind.CUSTOMER, customer.id).name == "Hotel Annapurna"
