"""Money value object with currency"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: str = "usd"

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency:
            raise ValueError("Currency required")

    def to_cents(self) -> int:
        return int((self.amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @classmethod
    def from_cents(cls, cents: int, currency: str = "usd") -> "Money":
        return cls(amount=(Decimal(cents) / 100).quantize(Decimal("0.01")), currency=currency)

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency.upper()}"
