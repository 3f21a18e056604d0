import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError

from motel_booking.api.dependencies import get_use_cases
from motel_booking.api.schemas.payments import MercadoPagoNotification

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/webhooks/mercadopago", status_code=status.HTTP_200_OK)
async def mercadopago_webhook(
    request: Request,
    use_cases: Annotated[dict, Depends(get_use_cases)],
) -> dict:
    """
    Always acknowledges with 200 so the gateway stops retrying; malformed or
    unknown notifications are logged and dropped.
    """
    raw_body = await request.body()
    try:
        body = json.loads(raw_body or b"{}")
        notification = MercadoPagoNotification.model_validate(body)
    except (ValueError, ValidationError):
        logger.warning("Malformed webhook body discarded", extra={"size": len(raw_body)})
        return {"status": "discarded"}

    # Legacy IPN delivers the reference in the query string.
    notification_type = notification.notification_type or request.query_params.get("type") or (
        request.query_params.get("topic")
    )
    payment_id = notification.payment_id or request.query_params.get("data.id") or (
        request.query_params.get("id")
    )

    outcome = await use_cases["handle_webhook"].execute(notification_type, payment_id)
    return {"status": outcome}
