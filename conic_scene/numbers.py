from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class SymbolicNumber:
    """Numeric value together with the expression text it was typed as."""

    text: str
    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))

    def __float__(self) -> float:
        return float(self.value)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"SymbolicNumber(text={self.text!r}, value={self.value!r})"

    def display(self, digits: int = 4) -> str:
        """Return the value rounded for an input field, without trailing zeros."""

        if not math.isfinite(self.value):
            return str(self.value)
        rounded = round(self.value, digits)
        if rounded == 0:
            rounded = 0.0
        return f"{rounded:.{digits}f}".rstrip("0").rstrip(".")
