"""SQLAlchemy ORM models."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from bytescart.infrastructure.implementations.sql.database import new_id, utcnow


class Base(DeclarativeBase):
    pass


class StoreModel(Base):
    __tablename__ = "stores"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    owner_id: Mapped[str] = mapped_column(String(64), index=True)
    store_name: Mapped[str] = mapped_column(String(255))
    subdomain_slug: Mapped[str] = mapped_column(String(64), unique=True)
    theme_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    about_text: Mapped[str | None] = mapped_column(Text, nullable=True)

    domain: Mapped[str | None] = mapped_column(String(253), nullable=True, index=True)
    domain_status: Mapped[str] = mapped_column(String(16), default="Pending")
    certificate_generated_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )

    stripe_connect_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    stripe_connect_status: Mapped[str] = mapped_column(
        String(16), default="NotConnected"
    )
    stripe_connected_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    products = relationship(
        "ProductModel", back_populates="store", cascade="all, delete-orphan"
    )
    shipping_locations = relationship(
        "ShippingLocationModel", back_populates="store", cascade="all, delete-orphan"
    )


class ShippingLocationModel(Base):
    __tablename__ = "shipping_locations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    store_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("stores.id"), index=True
    )
    country: Mapped[str] = mapped_column(String(128))
    cities: Mapped[list[str]] = mapped_column(JSON, default=list)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)

    store = relationship("StoreModel", back_populates="shipping_locations")


class ProductModel(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    store_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("stores.id"), index=True
    )
    name: Mapped[str] = mapped_column(String(255))
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    store = relationship("StoreModel", back_populates="products")


class OrderModel(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    store_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("stores.id"), index=True
    )
    customer_email: Mapped[str] = mapped_column(String(255))
    customer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    total: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    currency: Mapped[str] = mapped_column(String(8), default="usd")
    status: Mapped[str] = mapped_column(String(32), default="Pending")
    payment_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    stripe_payment_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True
    )
    stripe_session_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True, unique=True
    )
    shipping_info: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("orders.id"), index=True
    )
    product_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    product_name: Mapped[str] = mapped_column(String(255))
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2))

    order = relationship("OrderModel", back_populates="items")


class AuditLogModel(Base):
    __tablename__ = "audit_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    action: Mapped[str] = mapped_column(String(64), index=True)
    actor_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    store_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    resource_type: Mapped[str] = mapped_column(String(64))
    resource_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    # "metadata" is reserved on declarative classes
    details: Mapped[dict[str, Any]] = mapped_column("metadata", JSON, default=dict)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
