"""Entity ID value objects"""

from dataclasses import dataclass

# Primary keys are 32-bit INTEGER columns
MAX_ID = 2 ** 31 - 1


@dataclass(frozen=True)
class UserId:
    value: int

    def __post_init__(self):
        if not isinstance(self.value, int) or not 0 < self.value <= MAX_ID:
            raise ValueError("User ID must be a positive 32-bit integer")

    @classmethod
    def from_str(cls, raw: str) -> 'UserId':
        """Create UserId from string representation"""
        if not isinstance(raw, str) or not (raw.isascii() and raw.isdigit()):
            raise ValueError(f"Not a numeric id: {raw!r}")
        return cls(int(raw))


@dataclass(frozen=True)
class OrderId:
    value: int

    def __post_init__(self):
        if not isinstance(self.value, int) or not 0 < self.value <= MAX_ID:
            raise ValueError("Order ID must be a positive 32-bit integer")

    @classmethod
    def from_str(cls, raw: str) -> 'OrderId':
        """Create OrderId from string representation"""
        if not isinstance(raw, str) or not (raw.isascii() and raw.isdigit()):
            raise ValueError(f"Not a numeric id: {raw!r}")
        return cls(int(raw))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class CatalogModelId:
    value: int

    def __post_init__(self):
        if not isinstance(self.value, int) or not 0 < self.value <= MAX_ID:
            raise ValueError("Model ID must be a positive 32-bit integer")
