from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, Text, ForeignKey
from typing import Optional

class Base(DeclarativeBase):
    pass

class Order(Base):
    __tablename__ = "orders"
    # Deleted ids are never handed out again
    __table_args__ = {"sqlite_autoincrement": True}
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    customer_name: Mapped[str] = mapped_column(String(255))
    # Client-supplied timestamps are kept verbatim, never parsed
    ordered_at: Mapped[str] = mapped_column(String(64))
    updated_at: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

class Item(Base):
    __tablename__ = "items"
    __table_args__ = {"sqlite_autoincrement": True}
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, default="")
    quantity: Mapped[int]
    # No ON DELETE CASCADE: items must be removed before their order
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"), index=True)
    created_at: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    updated_at: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
