"""Value Object Money - a monetary amount with its currency."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from motel_booking.domain.errors import CurrencyMismatchError, InvalidInputError

CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """
    Immutable monetary amount.

    Attributes:
        amount: Non-negative decimal amount.
        currency: ISO 4217 code, normalized to upper case (e.g. USD, ARS).
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            try:
                object.__setattr__(self, "amount", Decimal(str(self.amount)))
            except InvalidOperation as exc:
                raise InvalidInputError("amount", f"not a number: {self.amount!r}") from exc

        if not isinstance(self.currency, str) or not self.currency.strip():
            raise InvalidInputError("currency", "cannot be empty")
        currency = self.currency.strip().upper()
        if len(currency) != 3 or not currency.isalpha():
            raise InvalidInputError("currency", f"must be a 3-letter code: {self.currency}")
        object.__setattr__(self, "currency", currency)

        if not self.amount.is_finite():
            raise InvalidInputError("amount", f"must be finite: {self.amount}")
        if self.amount < 0:
            raise InvalidInputError("amount", f"cannot be negative: {self.amount}")

    def add(self, other: "Money") -> "Money":
        self._ensure_same_currency(other, "add")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._ensure_same_currency(other, "subtract")
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def multiply(self, factor: Decimal) -> "Money":
        """Scale the amount, rounded to cents (half-up)."""
        result = (self.amount * Decimal(factor)).quantize(CENT, rounding=ROUND_HALF_UP)
        return Money(amount=result, currency=self.currency)

    __add__ = add
    __sub__ = subtract

    def _ensure_same_currency(self, other: "Money", operation: str) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Cannot {operation} Money and {type(other)}")
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency, operation)

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"
