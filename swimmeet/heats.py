from __future__ import annotations

import random
from typing import Callable, Iterable

from loguru import logger

from swimmeet.models import Entry, Heat, HeatLane
from swimmeet.time_utils import parse_time_to_ms

LANE_ORDERS: dict[int, tuple[int, ...]] = {
    8: (4, 5, 3, 6, 2, 7, 1, 8),
    6: (3, 4, 2, 5, 1, 6),
    4: (2, 3, 1, 4),
}

TieBreak = Callable[[Entry], object]


def lane_preference_order(lanes_count: int) -> tuple[int, ...]:
    """Lanes in the order the fastest swimmer onward should get them."""
    if lanes_count in LANE_ORDERS:
        return LANE_ORDERS[lanes_count]
    center = lanes_count // 2 + 1
    order = []
    for k in range(lanes_count):
        step = (k + 1) // 2
        order.append(center + step if k % 2 == 0 else center - step)
    return tuple(order)


def first_heat_size(total: int, lanes_count: int) -> int:
    if total <= 0 or lanes_count <= 0:
        return 0
    return total % lanes_count or lanes_count


def _slowest_first(entries: list[Entry], tie_break: TieBreak | None, rng: random.Random | None) -> list[Entry]:
    if tie_break is not None:
        return sorted(entries, key=lambda e: (-parse_time_to_ms(e.seed_time), tie_break(e)))
    # Equal seeds keep the shuffled order, so dead heats are drawn by lot.
    shuffled = entries[:]
    (rng or random).shuffle(shuffled)
    return sorted(shuffled, key=lambda e: -parse_time_to_ms(e.seed_time))


def _make_heat(heat_number: int, slowest_first: list[Entry], lanes_count: int) -> Heat:
    lanes = {n: HeatLane(lane=n) for n in range(1, lanes_count + 1)}
    # Seeded slowest first; lanes are handed out fastest first.
    for lane_number, entry in zip(lane_preference_order(lanes_count), reversed(slowest_first)):
        lanes[lane_number].entry = entry
    return Heat(heat_number=heat_number, lanes=[lanes[n] for n in sorted(lanes)])


def build_heats(
    entries: Iterable[Entry],
    lanes_per_heat: int,
    tie_break: TieBreak | None = None,
    rng: random.Random | None = None,
) -> list[Heat]:
    """Seed a race into heats, slowest heat first.

    ``tie_break`` orders entrants with identical seed times: the lower key is
    seeded as the slower one, for both the heat split and the lane draw.
    Without one the order among them is random (``rng`` if given).
    """
    active = list(entries)
    if not active:
        return []
    if lanes_per_heat <= 0:
        logger.debug(f"build_heats: lanes_per_heat={lanes_per_heat}, nothing seeded")
        return []

    seeded = _slowest_first(active, tie_break, rng)
    size = first_heat_size(len(seeded), lanes_per_heat)
    heats = [_make_heat(1, seeded[:size], lanes_per_heat)]
    for start in range(size, len(seeded), lanes_per_heat):
        heats.append(_make_heat(len(heats) + 1, seeded[start : start + lanes_per_heat], lanes_per_heat))
    return heats


def tie_break_by_name(names: dict[int, str]) -> TieBreak:
    return lambda entry: (names.get(entry.swimmer_id, ""), entry.id)


def tie_break_by_id(entry: Entry) -> object:
    return entry.id
