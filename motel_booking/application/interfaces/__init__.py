"""Ports of the application layer."""

from motel_booking.application.interfaces.clock import Clock, FakeClock, SystemClock
from motel_booking.application.interfaces.event_publisher import EventPublisher
from motel_booking.application.interfaces.motel_repo import MotelRepo
from motel_booking.application.interfaces.payment_gateway import (
    GatewayChargeRequest,
    GatewayPayer,
    GatewayPayment,
    GatewayRefund,
    PaymentGateway,
    PaymentGatewayError,
)
from motel_booking.application.interfaces.payment_repo import PaymentRepo
from motel_booking.application.interfaces.reservation_repo import ReservationRepo
from motel_booking.application.interfaces.transaction_manager import TransactionManager

__all__ = [
    # Repositories
    "MotelRepo",
    "ReservationRepo",
    "PaymentRepo",
    # Gateways
    "PaymentGateway",
    "PaymentGatewayError",
    "GatewayChargeRequest",
    "GatewayPayer",
    "GatewayPayment",
    "GatewayRefund",
    # Infrastructure
    "EventPublisher",
    "TransactionManager",
    # Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
]
