"""Per-hole double / double-back multiplier."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional


class MultiplierStack:
    """Track the double declarations made on a single hole.

    The first double by either side makes the hole worth ×2.  Only the other
    side may answer with a double-back (×4), and only once.  Clearing removes
    every declaration and the hole is back to ×1.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self.double_called_by: Optional[str] = None
        self.double_back_called = False

    @classmethod
    def from_declarations(
        cls, declarations: Iterable[Mapping] | None, enabled: bool = True
    ) -> "MultiplierStack":
        stack = cls(enabled=enabled)
        for declaration in declarations or []:
            if declaration.get("clear"):
                stack.clear()
            else:
                stack.declare(declaration.get("side"))
        return stack

    def declare(self, side: str) -> int:
        if not self.enabled:
            raise ValueError("doubles are disabled for this game")
        if not side:
            raise ValueError("double declaration requires a side")
        if self.double_called_by is None:
            self.double_called_by = side
        elif side == self.double_called_by:
            raise ValueError(f"side {side!r} has already doubled this hole")
        elif self.double_back_called:
            raise ValueError("double-back already declared on this hole")
        else:
            self.double_back_called = True
        return self.multiplier

    def clear(self) -> None:
        self.double_called_by = None
        self.double_back_called = False

    @property
    def multiplier(self) -> int:
        if self.double_called_by is None:
            return 1
        return 4 if self.double_back_called else 2

    def scale(self, points: Mapping[str, float]) -> Dict[str, float]:
        m = self.multiplier
        return {key: value * m for key, value in points.items()}

    def to_dict(self) -> Dict:
        return {
            "multiplier": self.multiplier,
            "doubleCalledBy": self.double_called_by,
            "doubleBackCalled": self.double_back_called,
        }
