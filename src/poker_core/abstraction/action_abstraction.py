"""Action abstraction — a configurable menu of abstract raises.

Each abstract raise names a sizing rule and, per round, whether it may be
used. Turning it into a concrete action goes through
``GameState.is_valid_action`` so a solver never sees an illegal raise.

Config format (JSON)::

    {"possible_raises": [
        {"raise_type": "AllIn", "round_config": ["Always", "Always"]},
        {"raise_type": {"PotRatio": 2.0}, "round_config": [{"Before": 2}, "NotAllowed"]},
        {"raise_type": {"Fixed": 4}, "round_config": ["Always", "Always"]}
    ]}
"""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from poker_core.game.actions import Action
from poker_core.game.errors import ConfigError
from poker_core.game.rules import GameInfo
from poker_core.game.state import GameState


class RaiseKind(enum.Enum):
    ALL_IN = "AllIn"
    POT_RATIO = "PotRatio"
    # usually only an option for limit games
    FIXED = "Fixed"


@dataclass(frozen=True)
class AbstractRaiseType:
    kind: RaiseKind
    value: float = 0

    @classmethod
    def all_in(cls) -> AbstractRaiseType:
        return cls(RaiseKind.ALL_IN)

    @classmethod
    def pot_ratio(cls, ratio: float) -> AbstractRaiseType:
        return cls(RaiseKind.POT_RATIO, ratio)

    @classmethod
    def fixed(cls, amount: int) -> AbstractRaiseType:
        return cls(RaiseKind.FIXED, amount)

    def to_json(self) -> Any:
        if self.kind == RaiseKind.ALL_IN:
            return self.kind.value
        return {self.kind.value: self.value}

    @classmethod
    def from_json(cls, data: Any) -> AbstractRaiseType:
        if data == RaiseKind.ALL_IN.value:
            return cls.all_in()
        if isinstance(data, dict) and len(data) == 1:
            (tag, value), = data.items()
            if tag == RaiseKind.POT_RATIO.value and isinstance(value, (int, float)):
                return cls.pot_ratio(float(value))
            if tag == RaiseKind.FIXED.value and isinstance(value, int):
                return cls.fixed(value)
        raise ConfigError(f"invalid raise_type: {data!r}")


class RoundRule(enum.Enum):
    NOT_ALLOWED = "NotAllowed"
    ALWAYS = "Always"
    # only allowed while fewer than ``limit`` raises were made this round
    BEFORE = "Before"


@dataclass(frozen=True)
class RaiseRoundConfig:
    rule: RoundRule
    limit: int = 0

    @classmethod
    def not_allowed(cls) -> RaiseRoundConfig:
        return cls(RoundRule.NOT_ALLOWED)

    @classmethod
    def always(cls) -> RaiseRoundConfig:
        return cls(RoundRule.ALWAYS)

    @classmethod
    def before(cls, limit: int) -> RaiseRoundConfig:
        return cls(RoundRule.BEFORE, limit)

    def allows(self, num_raises: int) -> bool:
        if self.rule == RoundRule.ALWAYS:
            return True
        if self.rule == RoundRule.BEFORE:
            return self.limit > num_raises
        return False

    def to_json(self) -> Any:
        if self.rule == RoundRule.BEFORE:
            return {self.rule.value: self.limit}
        return self.rule.value

    @classmethod
    def from_json(cls, data: Any) -> RaiseRoundConfig:
        if data == RoundRule.ALWAYS.value:
            return cls.always()
        if data == RoundRule.NOT_ALLOWED.value:
            return cls.not_allowed()
        if isinstance(data, dict) and isinstance(data.get(RoundRule.BEFORE.value), int) and len(data) == 1:
            return cls.before(data[RoundRule.BEFORE.value])
        raise ConfigError(f"invalid round_config entry: {data!r}")


@dataclass(frozen=True)
class AbstractRaise:
    raise_type: AbstractRaiseType
    round_config: tuple[RaiseRoundConfig, ...]

    def allowed(self, state: GameState) -> bool:
        return self.round_config[state.current_round()].allows(state.num_raises())


def abstract_raise_to_real(info: GameInfo, state: GameState, abstract_raise: AbstractRaise) -> Action | None:
    """Concrete raise for ``abstract_raise`` in ``state``, or None if illegal."""
    if state.is_finished() or not abstract_raise.allowed(state):
        return None

    raise_type = abstract_raise.raise_type
    if raise_type.kind == RaiseKind.ALL_IN:
        action = Action.raise_to(state.player_stack(state.current_player()))
    elif raise_type.kind == RaiseKind.FIXED:
        if info.is_no_limit:
            action = Action.raise_to(state.max_spent + int(raise_type.value))
        else:
            action = Action.raise_to(int(raise_type.value))
    else:
        # ratio of the current bet level
        action = Action.raise_to(int(state.max_spent * raise_type.value))

    if state.is_valid_action(info, action):
        return action
    return None


class ActionAbstraction:
    """Generates the abstract action set a solver explores at a state."""

    def __init__(self, possible_raises: list[AbstractRaise]) -> None:
        self.possible_raises = list(possible_raises)

    def legal_abstract_actions(self, info: GameInfo, state: GameState) -> list[Action]:
        actions: list[Action] = []
        for basic in (Action.fold(), Action.call()):
            if state.is_valid_action(info, basic):
                actions.append(basic)

        for abstract_raise in self.possible_raises:
            action = abstract_raise_to_real(info, state, abstract_raise)
            if action is not None and action not in actions:
                actions.append(action)
        return actions

    def validate(self, info: GameInfo) -> None:
        for i, abstract_raise in enumerate(self.possible_raises):
            if len(abstract_raise.round_config) != info.num_rounds:
                raise ConfigError(
                    f"raise {i} has {len(abstract_raise.round_config)} round configs, "
                    f"expected num_rounds={info.num_rounds}"
                )

    def to_dict(self) -> dict[str, Any]:
        return {
            "possible_raises": [
                {
                    "raise_type": r.raise_type.to_json(),
                    "round_config": [c.to_json() for c in r.round_config],
                }
                for r in self.possible_raises
            ]
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActionAbstraction:
        try:
            entries = data["possible_raises"]
            raises = [
                AbstractRaise(
                    raise_type=AbstractRaiseType.from_json(entry["raise_type"]),
                    round_config=tuple(RaiseRoundConfig.from_json(c) for c in entry["round_config"]),
                )
                for entry in entries
            ]
        except (KeyError, TypeError) as exc:
            raise ConfigError(f"malformed action abstraction: {exc}") from exc
        return cls(raises)

    @classmethod
    def from_config(cls, path: str | Path) -> ActionAbstraction:
        path = Path(path)
        try:
            data = json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"failed to read action abstraction config {path}: {exc}") from exc
        return cls.from_dict(data)
