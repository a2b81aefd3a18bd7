from typing import List
from sqlalchemy.orm import Session
from order_service.core.logging_config import get_logger
from order_service.domain.errors import OrderNotFoundError
from order_service.domain.models import Order, Item
from order_service.infrastructure.db import transaction
from .schemas import OrderCreate, OrderUpdate, OrderRead, ItemCreate, ItemRead

logger = get_logger(__name__)

class OrderService:
    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[OrderRead]:
        orders = self.db.query(Order).all()
        return [self._with_items(order) for order in orders]

    def get(self, order_id: int) -> OrderRead:
        order = self.db.query(Order).filter(Order.id == order_id).first()
        if order is None:
            raise OrderNotFoundError(order_id)
        return self._with_items(order)

    def create(self, data: OrderCreate) -> int:
        """Insert the order and its items in one transaction, returning the new id."""
        logger.info(
            "Received order",
            extra={'extra_fields': {'customer_name': data.customer_name, 'items': len(data.items)}}
        )
        with transaction(self.db):
            order = Order(customer_name=data.customer_name, ordered_at=data.ordered_at)
            self.db.add(order)
            self.db.flush()  # assign id
            logger.info(f"New order ID: {order.id}")
            self._insert_items(order.id, data.items)
        return order.id

    def update(self, order_id: int, data: OrderUpdate) -> None:
        """Replace the scalar fields and the whole item set of an order.

        Old item rows are deleted and the new ones get fresh ids. Raises
        OrderNotFoundError (after rolling back) when no order has this id.
        """
        with transaction(self.db):
            updated = self.db.query(Order).filter(Order.id == order_id).update(
                {Order.customer_name: data.customer_name, Order.ordered_at: data.ordered_at},
                synchronize_session=False,
            )
            if not updated:
                raise OrderNotFoundError(order_id)
            self.db.query(Item).filter(Item.order_id == order_id).delete(synchronize_session=False)
            self._insert_items(order_id, data.items)
        logger.info(f"Order {order_id} updated with {len(data.items)} item(s)")

    def delete(self, order_id: int) -> None:
        with transaction(self.db):
            # Items first, the foreign key rejects deleting a referenced order
            self.db.query(Item).filter(Item.order_id == order_id).delete(synchronize_session=False)
            deleted = self.db.query(Order).filter(Order.id == order_id).delete(synchronize_session=False)
            if not deleted:
                raise OrderNotFoundError(order_id)
        logger.info(f"Order {order_id} deleted")

    def _insert_items(self, order_id: int, items: List[ItemCreate]) -> None:
        for item in items:
            self.db.add(Item(
                name=item.name,
                description=item.description,
                quantity=item.quantity,
                order_id=order_id,
            ))
        self.db.flush()

    def _with_items(self, order: Order) -> OrderRead:
        items = self.db.query(Item).filter(Item.order_id == order.id).order_by(Item.id).all()
        return OrderRead(
            id=order.id,
            customer_name=order.customer_name,
            ordered_at=order.ordered_at,
            updated_at=order.updated_at,
            items=[ItemRead.model_validate(item) for item in items],
        )
