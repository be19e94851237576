"""SQLAlchemy order repository."""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bytescart.infrastructure.implementations.sql.database import SessionProvider, utcnow
from bytescart.infrastructure.implementations.sql.models import (
    OrderItemModel,
    OrderModel,
)
from bytescart.infrastructure.repositories.order_repository import (
    ORDER_PENDING,
    NewOrderItem,
    Order,
    OrderItem,
    OrderRepository,
    OrderStats,
)


def to_order(row: OrderModel) -> Order:
    return Order(
        id=row.id,
        store_id=row.store_id,
        customer_email=row.customer_email,
        customer_name=row.customer_name,
        total=Decimal(row.total),
        currency=row.currency,
        status=row.status,
        payment_status=row.payment_status,
        stripe_payment_id=row.stripe_payment_id,
        stripe_session_id=row.stripe_session_id,
        shipping_info=row.shipping_info,
        created_at=row.created_at,
        items=[
            OrderItem(
                id=item.id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=Decimal(item.unit_price),
                product_id=item.product_id,
            )
            for item in row.items
        ],
    )


def _by_session(session: Session, session_id: str) -> OrderModel | None:
    return session.execute(
        select(OrderModel).where(OrderModel.stripe_session_id == session_id).limit(1)
    ).scalar_one_or_none()


class SqlOrderRepository(OrderRepository):
    def __init__(self, provider: SessionProvider):
        self._provider = provider

    async def list_for_store(
        self,
        store_id: str,
        since: datetime | None = None,
        limit: int = 50,
    ) -> list[Order]:
        query = select(OrderModel).where(OrderModel.store_id == store_id)
        if since is not None:
            query = query.where(OrderModel.created_at >= since)
        query = query.order_by(OrderModel.created_at.desc()).limit(limit)

        return await self._provider.run(
            lambda session: [to_order(row) for row in session.execute(query).scalars()]
        )

    async def stats_for_store(self, store_id: str, now: datetime) -> OrderStats:
        def work(session: Session) -> OrderStats:
            totals = session.execute(
                select(OrderModel.total).where(OrderModel.store_id == store_id)
            ).scalars()
            revenue = sum((Decimal(total) for total in totals), Decimal("0"))

            def count_since(since: datetime | None) -> int:
                query = select(func.count(OrderModel.id)).where(
                    OrderModel.store_id == store_id
                )
                if since is not None:
                    query = query.where(OrderModel.created_at >= since)
                return session.execute(query).scalar_one()

            return OrderStats(
                total_orders=count_since(None),
                total_revenue=revenue,
                last_7_days_orders=count_since(now - timedelta(days=7)),
                last_30_days_orders=count_since(now - timedelta(days=30)),
            )

        return await self._provider.run(work)

    async def create(
        self,
        store_id: str,
        customer_email: str,
        total: Decimal,
        items: list[NewOrderItem],
        currency: str = "usd",
        status: str = ORDER_PENDING,
        customer_name: str | None = None,
        created_at: datetime | None = None,
        payment_status: str | None = None,
        stripe_payment_id: str | None = None,
        stripe_session_id: str | None = None,
        shipping_info: dict[str, Any] | None = None,
    ) -> Order:
        def work(session: Session) -> Order:
            if stripe_session_id:
                existing = _by_session(session, stripe_session_id)
                if existing is not None:
                    return to_order(existing)

            row = OrderModel(
                store_id=store_id,
                customer_email=customer_email,
                customer_name=customer_name,
                total=total,
                currency=currency,
                status=status,
                payment_status=payment_status,
                stripe_payment_id=stripe_payment_id,
                stripe_session_id=stripe_session_id,
                shipping_info=shipping_info,
                created_at=created_at or utcnow(),
                items=[
                    OrderItemModel(
                        product_id=item.product_id,
                        product_name=item.product_name,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                    )
                    for item in items
                ],
            )
            session.add(row)
            try:
                session.commit()
            except IntegrityError:
                # Webhook and verify-session raced on the same checkout session
                session.rollback()
                if not stripe_session_id:
                    raise
                existing = _by_session(session, stripe_session_id)
                if existing is None:
                    raise
                return to_order(existing)
            return to_order(row)

        order = await self._provider.run(work)
        logger.info(f"Recorded order {order.id} for store {store_id}")
        return order

    async def get_by_session_id(self, session_id: str) -> Order | None:
        def work(session: Session) -> Order | None:
            row = _by_session(session, session_id)
            return to_order(row) if row else None

        return await self._provider.run(work)

    async def update_status(
        self,
        order_id: str,
        status: str,
        payment_status: str | None = None,
        stripe_payment_id: str | None = None,
    ) -> Order:
        def work(session: Session) -> Order:
            row = session.get(OrderModel, order_id)
            if row is None:
                raise LookupError(f"Order not found: {order_id}")
            row.status = status
            if payment_status is not None:
                row.payment_status = payment_status
            if stripe_payment_id is not None:
                row.stripe_payment_id = stripe_payment_id
            session.commit()
            return to_order(row)

        return await self._provider.run(work)

    async def update_status_by_payment_id(
        self, payment_id: str, status: str, payment_status: str | None = None
    ) -> list[Order]:
        def work(session: Session) -> list[Order]:
            rows = list(
                session.execute(
                    select(OrderModel).where(OrderModel.stripe_payment_id == payment_id)
                ).scalars()
            )
            for row in rows:
                row.status = status
                if payment_status is not None:
                    row.payment_status = payment_status
            session.commit()
            return [to_order(row) for row in rows]

        return await self._provider.run(work)
