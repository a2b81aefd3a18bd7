from typing import List

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from order_service.application.schemas import OrderCreate, OrderUpdate, OrderRead, ItemCreate
from order_service.application.service import OrderService
from order_service.domain.errors import OrderNotFoundError
from order_service.domain.models import Item, Order


def _order(name="Alice", *items):
    return OrderCreate(
        customer_name=name,
        ordered_at="2024-01-01",
        items=[ItemCreate(name=n, description=f"{n} desc", quantity=q) for n, q in items],
    )


def test_create_assigns_ids_and_tags_items(session):
    order_id = OrderService(session).create(_order("Alice", ("A", 1), ("B", 2)))
    items = session.query(Item).filter(Item.order_id == order_id).all()
    assert sorted(i.name for i in items) == ["A", "B"]
    assert session.query(Order).count() == 1


def test_get_loads_items_in_insertion_order(session):
    service = OrderService(session)
    order_id = service.create(_order("Alice", ("A", 1), ("B", 2), ("C", 3)))
    order = service.get(order_id)
    assert [i.name for i in order.items] == ["A", "B", "C"]
    assert all(i.order_id == order_id for i in order.items)


def test_list_keeps_store_order(session):
    service = OrderService(session)
    first = service.create(_order("First"))
    second = service.create(_order("Second", ("X", 1)))
    assert [o.id for o in service.list()] == [first, second]


def test_get_missing_raises_not_found(session):
    with pytest.raises(OrderNotFoundError) as excinfo:
        OrderService(session).get(1)
    assert excinfo.value.order_id == 1
    assert excinfo.value.http_status == 404


def test_update_gives_items_fresh_ids(session):
    service = OrderService(session)
    order_id = service.create(_order("Alice", ("A", 1), ("B", 2)))
    old_ids = {i.id for i in service.get(order_id).items}

    service.update(order_id, OrderUpdate(customer_name="Alicia", ordered_at="2024-06-01",
                                         items=[ItemCreate(name="Z", quantity=9)]))

    order = service.get(order_id)
    assert order.customer_name == "Alicia"
    assert [(i.name, i.description, i.quantity) for i in order.items] == [("Z", "", 9)]
    assert order.items[0].id not in old_ids


def test_update_missing_rolls_back_and_raises(session):
    with pytest.raises(OrderNotFoundError):
        OrderService(session).update(5, OrderUpdate(customer_name="x", ordered_at="y"))
    assert session.query(Item).count() == 0


def test_delete_then_get_raises(session):
    service = OrderService(session)
    order_id = service.create(_order("Alice", ("A", 1)))
    service.delete(order_id)
    with pytest.raises(OrderNotFoundError):
        service.get(order_id)
    assert session.query(Item).filter(Item.order_id == order_id).count() == 0


def test_create_rolls_back_on_failure(session, fail_on):
    with fail_on("INSERT INTO items"):
        with pytest.raises(OperationalError):
            OrderService(session).create(_order("Alice", ("A", 1)))
    assert session.query(Order).count() == 0
    assert session.query(Item).count() == 0


def test_delete_rolls_back_when_item_delete_fails(session, fail_on):
    service = OrderService(session)
    order_id = service.create(_order("Alice", ("A", 1)))
    with fail_on("DELETE FROM items"):
        with pytest.raises(OperationalError):
            service.delete(order_id)
    assert service.get(order_id).items[0].name == "A"


def test_foreign_key_rejects_orphan_item(session):
    session.add(Item(name="orphan", description="", quantity=1, order_id=999))
    with pytest.raises(IntegrityError):
        session.flush()
    session.rollback()


def test_foreign_key_rejects_deleting_referenced_order(session):
    order_id = OrderService(session).create(_order("Alice", ("A", 1)))
    with pytest.raises(IntegrityError):
        session.query(Order).filter(Order.id == order_id).delete(synchronize_session=False)
    session.rollback()


def test_service_annotations_resolve():
    # The ``list`` method must not shadow the builtin used in later annotations
    assert OrderService._insert_items.__annotations__["items"] == List[ItemCreate]
    assert OrderService.list.__annotations__["return"] == List[OrderRead]


def test_deleted_order_id_is_not_reused(session):
    service = OrderService(session)
    first = service.create(_order("Alice", ("A", 1)))
    service.delete(first)
    second = service.create(_order("Bob", ("B", 1)))
    assert second > first


def test_update_twice_never_reuses_item_ids(session):
    service = OrderService(session)
    order_id = service.create(_order("Alice", ("A", 1), ("B", 2)))
    seen = {i.id for i in service.get(order_id).items}
    for _ in range(2):
        service.update(order_id, OrderUpdate(customer_name="Alice", ordered_at="2024-01-01",
                                             items=[ItemCreate(name="C", quantity=1)]))
        ids = {i.id for i in service.get(order_id).items}
        assert not ids & seen
        seen |= ids
