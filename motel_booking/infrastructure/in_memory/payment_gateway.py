from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from decimal import Decimal
from uuid import uuid4

from motel_booking.application.interfaces.payment_gateway import (
    GatewayChargeRequest,
    GatewayPayment,
    GatewayRefund,
    PaymentGateway,
    PaymentGatewayError,
)


@dataclass
class _LostReply:
    status: str
    error: Exception


class StubPaymentGateway(PaymentGateway):
    """
    Scriptable gateway for in-memory mode and tests.

    Charges are approved unless an outcome was queued with ``script``. An
    outcome is either a gateway status string or an exception to raise.
    ``on_charge`` and ``on_refund`` are awaited after the gateway has recorded
    the operation and before replying, which is where a webhook can race the
    synchronous caller.
    """

    def __init__(self, default_status: str = "approved") -> None:
        self.default_status = default_status
        self.charges: list[GatewayChargeRequest] = []
        self.payments: dict[str, GatewayPayment] = {}
        self.refund_calls: list[str] = []
        self.refund_outcome: str | Exception = "approved"
        self.on_charge: Callable[[GatewayPayment], Awaitable[None]] | None = None
        self.on_refund: Callable[[str], Awaitable[None]] | None = None
        self._outcomes: deque[str | Exception | _LostReply] = deque()
        self._ids: deque[str] = deque()

    def script(self, *outcomes: str | Exception) -> None:
        self._outcomes.extend(outcomes)

    def script_lost_reply(self, status: str, error: Exception) -> None:
        """The next charge lands with ``status`` but the caller sees ``error``."""
        self._outcomes.append(_LostReply(status, error))

    def assign_ids(self, *external_ids: str) -> None:
        """Gateway ids handed to the next charges, in order."""
        self._ids.extend(external_ids)

    def set_status(self, external_id: str, status: str, status_detail: str | None = None) -> None:
        payment = self.payments[external_id]
        payment.status = status
        payment.status_detail = status_detail

    async def create_charge(self, request: GatewayChargeRequest) -> GatewayPayment:
        self.charges.append(request)
        outcome = self._outcomes.popleft() if self._outcomes else self.default_status
        if isinstance(outcome, Exception):
            raise outcome
        lost_reply = None
        if isinstance(outcome, _LostReply):
            outcome, lost_reply = outcome.status, outcome.error
        payment = GatewayPayment(
            id=self._ids.popleft() if self._ids else str(uuid4().int)[:12],
            status=outcome,
            status_detail="accredited" if outcome == "approved" else f"cc_{outcome}",
            external_reference=request.external_reference,
            amount=request.amount,
            currency=request.currency,
        )
        self.payments[payment.id] = payment
        if self.on_charge is not None:
            await self.on_charge(GatewayPayment(**vars(payment)))
        if lost_reply is not None:
            raise lost_reply
        return GatewayPayment(**vars(payment))

    async def get_payment(self, external_id: str) -> GatewayPayment:
        payment = self.payments.get(external_id)
        if payment is None:
            raise PaymentGatewayError(f"Payment {external_id} not found at gateway")
        return GatewayPayment(**vars(payment))

    async def refund(self, external_id: str, amount: Decimal | None = None) -> GatewayRefund:
        self.refund_calls.append(external_id)
        if isinstance(self.refund_outcome, Exception):
            raise self.refund_outcome
        if self.refund_outcome == "approved" and external_id in self.payments:
            self.payments[external_id].status = "refunded"
        if self.on_refund is not None:
            await self.on_refund(external_id)
        return GatewayRefund(
            id=f"rf_{uuid4().hex[:10]}",
            payment_id=external_id,
            status=self.refund_outcome,
            amount=amount,
        )
