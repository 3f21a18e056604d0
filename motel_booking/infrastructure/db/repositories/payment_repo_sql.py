from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from motel_booking.application.interfaces.payment_repo import PaymentRepo
from motel_booking.domain.entities.payment import Payment, PaymentStatus
from motel_booking.domain.errors import NotFoundError, StaleStateError
from motel_booking.domain.value_objects.money import Money
from motel_booking.infrastructure.db.tables import payments


def _values(payment: Payment) -> dict[str, Any]:
    return {
        "reservation_id": str(payment.reservation_id),
        "amount": payment.amount.amount,
        "currency": payment.amount.currency,
        "status": payment.status.value,
        "payment_method": payment.payment_method,
        "transaction_id": payment.transaction_id,
        "failure_reason": payment.failure_reason,
        "processed_at": payment.processed_at,
        "refund_reconciliation_required": payment.refund_reconciliation_required,
        "created_at": payment.created_at,
        "updated_at": payment.updated_at,
    }


def _row_to_payment(row) -> Payment:
    return Payment(
        id=UUID(row.id),
        reservation_id=UUID(row.reservation_id),
        amount=Money(row.amount, row.currency),
        status=PaymentStatus(row.status),
        payment_method=row.payment_method,
        transaction_id=row.transaction_id,
        failure_reason=row.failure_reason,
        processed_at=row.processed_at,
        refund_reconciliation_required=bool(row.refund_reconciliation_required),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class PaymentRepoSQL(PaymentRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, payment: Payment) -> Payment:
        await self._session.execute(insert(payments).values(id=str(payment.id), **_values(payment)))
        return payment

    async def update(self, payment: Payment, expected_status: PaymentStatus | None = None) -> Payment:
        stmt = update(payments).where(payments.c.id == str(payment.id))
        if expected_status is not None:
            stmt = stmt.where(payments.c.status == expected_status.value)
        result = await self._session.execute(stmt.values(**_values(payment)))
        if result.rowcount == 0:
            stored = await self.get_by_id(payment.id)
            if stored is None:
                raise NotFoundError("Payment", payment.id)
            raise StaleStateError("Payment", payment.id, expected_status.value, stored.status.value)
        return payment

    async def get_by_id(self, payment_id: UUID) -> Payment | None:
        return await self._first(payments.c.id == str(payment_id))

    async def get_for_update(self, payment_id: UUID) -> Payment | None:
        result = await self._session.execute(
            select(payments).where(payments.c.id == str(payment_id)).with_for_update()
        )
        row = result.first()
        return _row_to_payment(row) if row else None

    async def get_by_transaction_id(self, transaction_id: str) -> Payment | None:
        return await self._first(payments.c.transaction_id == transaction_id)

    async def list_by_reservation(self, reservation_id: UUID) -> Sequence[Payment]:
        stmt = (
            select(payments)
            .where(payments.c.reservation_id == str(reservation_id))
            .order_by(payments.c.created_at)
        )
        result = await self._session.execute(stmt)
        return [_row_to_payment(row) for row in result]

    async def list_by_reservations(self, reservation_ids: Sequence[UUID]) -> Sequence[Payment]:
        if not reservation_ids:
            return []
        return await self._list(payments.c.reservation_id.in_([str(rid) for rid in reservation_ids]))

    async def list_by_status(self, status: PaymentStatus) -> Sequence[Payment]:
        return await self._list(payments.c.status == status.value)

    async def list_created_between(self, start: datetime, end: datetime) -> Sequence[Payment]:
        return await self._list((payments.c.created_at >= start) & (payments.c.created_at < end))

    async def _list(self, condition) -> list[Payment]:
        result = await self._session.execute(
            select(payments).where(condition).order_by(payments.c.created_at)
        )
        return [_row_to_payment(row) for row in result]

    async def _first(self, condition) -> Payment | None:
        result = await self._session.execute(select(payments).where(condition))
        row = result.first()
        return _row_to_payment(row) if row else None
