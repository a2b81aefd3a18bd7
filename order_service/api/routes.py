from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from order_service.infrastructure.db import get_db
from order_service.application.service import OrderService
from order_service.application.schemas import (
    OrderCreate, OrderUpdate, OrderRead, OrderCreated, MessageResponse,
)

router = APIRouter(prefix="/orders", tags=["orders"])

@router.post("", response_model=OrderCreated, status_code=201)
def create_order(payload: OrderCreate, db: Session = Depends(get_db)):
    order_id = OrderService(db).create(payload)
    return {"message": "Order created successfully", "id": order_id}

@router.get("", response_model=list[OrderRead], response_model_exclude_none=True)
def list_orders(db: Session = Depends(get_db)):
    """List all orders with their items."""
    return OrderService(db).list()

@router.get("/{order_id}", response_model=OrderRead, response_model_exclude_none=True)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return OrderService(db).get(order_id)

@router.put("/{order_id}", response_model=MessageResponse)
def update_order(order_id: int, payload: OrderUpdate, db: Session = Depends(get_db)):
    OrderService(db).update(order_id, payload)
    return {"message": "Order updated successfully"}

@router.delete("/{order_id}", response_model=MessageResponse)
def delete_order(order_id: int, db: Session = Depends(get_db)):
    OrderService(db).delete(order_id)
    return {"message": "Order deleted successfully"}
