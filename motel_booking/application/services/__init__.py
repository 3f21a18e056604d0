from motel_booking.application.services.payment_lifecycle import PaymentLifecycle

__all__ = ["PaymentLifecycle"]
