from __future__ import annotations

import json
from functools import cmp_to_key
from typing import Iterable, Protocol, Sequence

from loguru import logger

from swimmeet.categories import sort_key
from swimmeet.config import STYLE_ORDER
from swimmeet.errors import InvalidDirectionError
from swimmeet.models import Race, RaceKey

GENDER_ORDER = ("Male", "Female")


class ProgramOrderStore(Protocol):
    def load_order(self, event_id: int) -> list[RaceKey] | None:
        ...

    def save_order(self, event_id: int, keys: Sequence[RaceKey]) -> None:
        ...

    def clear_order(self, event_id: int) -> None:
        ...


class InMemoryProgramOrderStore:
    def __init__(self) -> None:
        self._orders: dict[int, list[RaceKey]] = {}

    def load_order(self, event_id: int) -> list[RaceKey] | None:
        keys = self._orders.get(event_id)
        return list(keys) if keys is not None else None

    def save_order(self, event_id: int, keys: Sequence[RaceKey]) -> None:
        self._orders[event_id] = [RaceKey(*k) for k in keys]

    def clear_order(self, event_id: int) -> None:
        self._orders.pop(event_id, None)


def serialize_race_key(key: RaceKey) -> str:
    return json.dumps([key.style, key.distance, key.gender, key.category], ensure_ascii=False)


def deserialize_race_key(text: str) -> RaceKey | None:
    try:
        style, distance, gender, category = json.loads(text)
    except (TypeError, ValueError):
        return None
    if not isinstance(distance, int):
        return None
    return RaceKey(str(style), distance, str(gender), str(category))


def _style_rank(style: str, style_order: Sequence[str]) -> int:
    try:
        return style_order.index(style)
    except ValueError:
        return len(style_order)


def _gender_rank(gender: str) -> tuple[int, str]:
    if gender in GENDER_ORDER:
        return GENDER_ORDER.index(gender), ""
    return len(GENDER_ORDER), gender


def default_sort_key(key: RaceKey, style_order: Sequence[str] = STYLE_ORDER) -> tuple:
    # Trailing label fields only separate keys whose ranks collide, e.g. two unlisted styles.
    return (
        sort_key(key.category),
        _style_rank(key.style, style_order),
        key.style,
        key.distance,
        _gender_rank(key.gender),
        key.category,
    )


def default_compare(a: RaceKey, b: RaceKey, style_order: Sequence[str] = STYLE_ORDER) -> int:
    left = default_sort_key(a, style_order)
    right = default_sort_key(b, style_order)
    return (left > right) - (left < right)


def number_races(keys: Iterable[RaceKey]) -> list[Race]:
    return [Race(key=key, acara_number=idx) for idx, key in enumerate(keys, start=1)]


def order(
    race_keys: Iterable[RaceKey],
    custom_order: Sequence[RaceKey] | None = None,
    style_order: Sequence[str] = STYLE_ORDER,
) -> list[Race]:
    """Number races in program order.

    Keys from ``custom_order`` that are still run keep their relative order
    and come first; everything else follows in default order.
    """
    remaining = set(race_keys)
    compare = cmp_to_key(lambda a, b: default_compare(a, b, style_order))
    if custom_order is None:
        return number_races(sorted(remaining, key=compare))

    ordered: list[RaceKey] = []
    stale = 0
    for raw in custom_order:
        key = RaceKey(*raw)
        if key in remaining:
            ordered.append(key)
            remaining.discard(key)
        else:
            stale += 1
    if stale or remaining:
        logger.info(f"custom program order: {stale} stale keys dropped, {len(remaining)} new races appended")
    ordered.extend(sorted(remaining, key=compare))
    return number_races(ordered)


def move(races: Sequence[Race], key: RaceKey, direction: str) -> list[Race]:
    if direction not in ("up", "down"):
        raise InvalidDirectionError(direction)
    keys = [race.key for race in races]
    try:
        idx = keys.index(key)
    except ValueError:
        return number_races(keys)
    target = idx - 1 if direction == "up" else idx + 1
    if 0 <= target < len(keys):
        keys[idx], keys[target] = keys[target], keys[idx]
    return number_races(keys)
