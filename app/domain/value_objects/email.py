"""Email value object"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Email:
    value: str

    def __post_init__(self):
        if "@" not in self.value or self.value.strip() != self.value:
            raise ValueError(f"Invalid email address: {self.value!r}")
        # Ownership checks compare addresses case-insensitively
        object.__setattr__(self, "value", self.value.lower())

    def __str__(self) -> str:
        return self.value
