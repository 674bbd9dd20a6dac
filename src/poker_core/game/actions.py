"""Action types and action representation for poker."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class ActionType(enum.IntEnum):
    FOLD = 0
    CALL = 1
    RAISE = 2

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True, order=True)
class Action:
    """A single betting decision.

    A check is a CALL that commits no extra chips. ``amount`` is only
    meaningful for RAISE: the raise-to total under no-limit, the fixed raise
    size under limit.
    """

    type: ActionType
    amount: int = 0

    def __str__(self) -> str:
        if self.type == ActionType.RAISE:
            return f"{self.type.label} {self.amount}"
        return self.type.label

    @property
    def is_raise(self) -> bool:
        return self.type == ActionType.RAISE

    @classmethod
    def fold(cls) -> Action:
        return cls(ActionType.FOLD)

    @classmethod
    def call(cls) -> Action:
        return cls(ActionType.CALL)

    @classmethod
    def raise_to(cls, amount: int) -> Action:
        return cls(ActionType.RAISE, amount)

    @classmethod
    def from_str(cls, s: str) -> Action:
        """Parse 'fold', 'call' or 'raise <n>'."""
        parts = s.strip().lower().split()
        if parts == ["fold"]:
            return cls.fold()
        if parts == ["call"]:
            return cls.call()
        if len(parts) == 2 and parts[0] == "raise" and parts[1].isdigit():
            return cls.raise_to(int(parts[1]))
        raise ValueError(f"Invalid action string: {s!r}")
