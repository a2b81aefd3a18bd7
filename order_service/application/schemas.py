from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class ItemCreate(BaseModel):
    name: str
    description: str = ""
    quantity: int

class OrderCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_name: str = Field(alias="customerName")
    ordered_at: str = Field(alias="orderedAt")
    items: list[ItemCreate] = []

class OrderUpdate(OrderCreate):
    """Full replacement payload: scalar fields and the whole item set."""

class ItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    description: str
    quantity: int
    order_id: int = Field(alias="orderId")
    # Never populated, kept for the transport shape
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

class OrderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    customer_name: str = Field(alias="customerName")
    ordered_at: str = Field(alias="orderedAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")
    items: list[ItemRead] = []

class MessageResponse(BaseModel):
    message: str

class OrderCreated(MessageResponse):
    id: int
