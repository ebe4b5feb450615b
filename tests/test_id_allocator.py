from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.core.exceptions import StoreError
from app.crud import user as user_crud
from app.database import transaction
from app.models.backpack_id_next_number import BackpackIdNextNumber
from app.models.item import Item
from app.models.user import User
from app.schemas.item import ItemCreate
from app.services.id_allocator import BackpackIdAllocator
from app.services.item import item_service


def _counter(db, prefix):
    return db.execute(
        select(BackpackIdNextNumber).where(BackpackIdNextNumber.backpack_id == prefix)
    ).scalar_one_or_none()


def _allocate_committed(session_factory, allocator, prefix):
    with session_factory() as session:
        with transaction(session):
            return allocator.allocate(session, prefix)


def test_first_allocation_is_one_then_increments(db):
    allocator = BackpackIdAllocator()

    with transaction(db):
        first = allocator.allocate(db, "ABC")
    with transaction(db):
        second = allocator.allocate(db, "ABC")

    assert (first, second) == (1, 2)
    assert _counter(db, "ABC").number == 2


def test_prefixes_have_independent_counters(db):
    allocator = BackpackIdAllocator()

    with transaction(db):
        values = [allocator.allocate(db, p) for p in ("ABC", "XYZ", "ABC", "ABC", "XYZ")]

    assert values == [1, 1, 2, 3, 2]


def test_format_pads_to_four_digits_and_grows_past_them():
    assert BackpackIdAllocator.format_backpack_id("ABC", 7) == "ABC0007"
    assert BackpackIdAllocator.format_backpack_id("ABC", 9999) == "ABC9999"
    assert BackpackIdAllocator.format_backpack_id("ABC", 10000) == "ABC10000"


def test_counter_continues_past_9999(db):
    allocator = BackpackIdAllocator()
    db.add(BackpackIdNextNumber(backpack_id="ABC", number=9999))
    db.commit()

    with transaction(db):
        backpack_id = allocator.next_backpack_id(db, "ABC")

    assert backpack_id == "ABC10000"


def test_rolled_back_allocation_leaves_no_trace(db):
    allocator = BackpackIdAllocator()

    with pytest.raises(RuntimeError):
        with transaction(db):
            allocator.allocate(db, "ABC")
            raise RuntimeError("consumer failed")

    assert _counter(db, "ABC") is None
    with transaction(db):
        assert allocator.allocate(db, "ABC") == 1


def test_concurrent_allocations_are_distinct_and_contiguous(session_factory):
    allocator = BackpackIdAllocator()
    workers = 20

    with ThreadPoolExecutor(max_workers=8) as pool:
        values = list(pool.map(lambda _: _allocate_committed(session_factory, allocator, "CON"), range(workers)))

    assert sorted(values) == list(range(1, workers + 1))


def test_concurrent_allocations_for_two_prefixes_do_not_interfere(session_factory):
    allocator = BackpackIdAllocator()
    per_prefix = 10
    prefixes = ["ABC", "XYZ"] * per_prefix

    with ThreadPoolExecutor(max_workers=8) as pool:
        values = list(pool.map(lambda p: (p, _allocate_committed(session_factory, allocator, p)), prefixes))

    abc = sorted(v for p, v in values if p == "ABC")
    xyz = sorted(v for p, v in values if p == "XYZ")
    assert abc == xyz == list(range(1, per_prefix + 1))


def test_generated_prefix_shape():
    prefix = BackpackIdAllocator(prefix_length=5).generate_prefix()

    assert len(prefix) == 5
    assert prefix.isalpha() and prefix.isupper()


@pytest.mark.parametrize("length", [0, 11])
def test_prefix_length_bounds(length):
    with pytest.raises(ValueError):
        BackpackIdAllocator(prefix_length=length)


def test_create_item_assigns_sequential_backpack_ids(db):
    user_crud.create(db, email="alice@example.com", password="secret123", prefix="ALI")

    first = item_service.create_item(db, ItemCreate(name="Tent"), "alice@example.com")
    second = item_service.create_item(db, ItemCreate(name="Stove"), "alice@example.com")

    assert (first.backpack_id, second.backpack_id) == ("ALI0001", "ALI0002")


def test_create_item_assigns_missing_prefix_once(db):
    user_crud.create(db, email="alice@example.com", password="secret123", prefix=None)

    first = item_service.create_item(db, ItemCreate(name="Tent"), "alice@example.com")
    second = item_service.create_item(db, ItemCreate(name="Stove"), "alice@example.com")

    prefix = db.get(User, "alice@example.com").prefix
    assert len(prefix) == 3
    assert first.backpack_id == f"{prefix}0001"
    assert second.backpack_id == f"{prefix}0002"


def test_failed_item_insert_rolls_back_prefix_and_counter(db, monkeypatch):
    user_crud.create(db, email="alice@example.com", password="secret123", prefix=None)

    def _fail(*args, **kwargs):
        raise OperationalError("INSERT INTO items", {}, Exception("disk full"))

    monkeypatch.setattr(item_service.crud, "create_with_backpack_id", _fail)

    with pytest.raises(StoreError):
        item_service.create_item(db, ItemCreate(name="Tent"), "alice@example.com")

    db.expire_all()
    assert db.get(User, "alice@example.com").prefix is None
    assert db.execute(select(BackpackIdNextNumber)).first() is None
    assert db.execute(select(Item)).first() is None


def test_concurrent_item_creation_for_one_user(db, session_factory):
    user_crud.create(db, email="alice@example.com", password="secret123", prefix="ALI")
    db.close()
    workers = 10

    def _create(index):
        with session_factory() as session:
            return item_service.create_item(
                session, ItemCreate(name=f"item-{index}"), "alice@example.com"
            ).backpack_id

    with ThreadPoolExecutor(max_workers=5) as pool:
        backpack_ids = list(pool.map(_create, range(workers)))

    assert sorted(backpack_ids) == [f"ALI{n:04d}" for n in range(1, workers + 1)]
