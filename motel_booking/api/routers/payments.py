from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from motel_booking.api.dependencies import get_use_cases
from motel_booking.api.schemas.payments import (
    CreatePaymentRequest,
    PaymentResponse,
    PayReservationRequest,
    ProcessPaymentRequest,
)
from motel_booking.domain.entities.payment import PaymentStatus

router = APIRouter()

UseCases = Annotated[dict, Depends(get_use_cases)]


@router.post("/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(payload: CreatePaymentRequest, use_cases: UseCases) -> PaymentResponse:
    payment = await use_cases["create_payment"].execute(
        reservation_id=payload.reservation_id, payment_method=payload.payment_method
    )
    return PaymentResponse.from_entity(payment)


@router.post(
    "/reservations/{reservation_id}/pay",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def pay_reservation(
    reservation_id: UUID, payload: PayReservationRequest, use_cases: UseCases
) -> PaymentResponse:
    payment = await use_cases["pay_reservation"].execute(
        reservation_id=reservation_id,
        payment_method=payload.payment_method,
        payer=payload.payer.to_gateway() if payload.payer else None,
    )
    return PaymentResponse.from_entity(payment)


@router.post("/payments/{payment_id}/process", response_model=PaymentResponse)
async def process_payment(
    payment_id: UUID,
    use_cases: UseCases,
    payload: ProcessPaymentRequest | None = Body(default=None),
) -> PaymentResponse:
    payer = payload.payer.to_gateway() if payload and payload.payer else None
    payment = await use_cases["process_payment"].execute(payment_id, payer=payer)
    return PaymentResponse.from_entity(payment)


@router.post("/payments/{payment_id}/refund", response_model=PaymentResponse)
async def refund_payment(payment_id: UUID, use_cases: UseCases) -> PaymentResponse:
    payment = await use_cases["refund_payment"].execute(payment_id)
    return PaymentResponse.from_entity(payment)


# Fixed paths are registered before /payments/{payment_id}.


@router.get("/payments/user/{user_id}", response_model=list[PaymentResponse])
async def list_user_payments(user_id: UUID, use_cases: UseCases) -> list[PaymentResponse]:
    payments = await use_cases["payment_queries"].by_user(user_id)
    return [PaymentResponse.from_entity(p) for p in payments]


@router.get("/payments/date-range", response_model=list[PaymentResponse])
async def list_payments_by_date_range(
    use_cases: UseCases,
    start_date: datetime = Query(...),
    end_date: datetime = Query(...),
) -> list[PaymentResponse]:
    payments = await use_cases["payment_queries"].created_between(start_date, end_date)
    return [PaymentResponse.from_entity(p) for p in payments]


@router.get("/payments/{payment_id}", response_model=PaymentResponse)
async def get_payment(payment_id: UUID, use_cases: UseCases) -> PaymentResponse:
    return PaymentResponse.from_entity(await use_cases["payment_queries"].get(payment_id))


@router.get("/payments", response_model=list[PaymentResponse])
async def list_payments(
    use_cases: UseCases,
    reservation_id: UUID | None = Query(default=None),
    payment_status: PaymentStatus | None = Query(default=None, alias="status"),
) -> list[PaymentResponse]:
    queries = use_cases["payment_queries"]
    if reservation_id is not None:
        payments = await queries.by_reservation(reservation_id)
        if payment_status is not None:
            payments = [p for p in payments if p.status == payment_status]
    elif payment_status is not None:
        payments = await queries.by_status(payment_status)
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filter by reservation_id or status",
        )
    return [PaymentResponse.from_entity(p) for p in payments]
