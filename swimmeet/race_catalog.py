from __future__ import annotations

from typing import Iterable, Mapping

from loguru import logger

from swimmeet.categories import classify, is_unknown_category
from swimmeet.models import CategorySystem, Entry, EventConfig, RaceKey, Swimmer
from swimmeet.time_utils import is_valid_time

GRADE_SYSTEMS = (CategorySystem.GRADE, CategorySystem.SCHOOL_LEVEL)


def index_swimmers(swimmers: Iterable[Swimmer] | Mapping[int, Swimmer]) -> dict[int, Swimmer]:
    if isinstance(swimmers, Mapping):
        return dict(swimmers)
    return {s.id: s for s in swimmers}


def _has_category_basis(swimmer: Swimmer, event: EventConfig) -> bool:
    if CategorySystem(event.category_system) in GRADE_SYSTEMS:
        return bool(swimmer.date_of_birth) or bool((swimmer.grade_level or "").strip())
    return bool(swimmer.date_of_birth)


def race_key_for(entry: Entry, swimmer: Swimmer | None, event: EventConfig) -> RaceKey | None:
    """Race an entry belongs to, or None when the swimmer cannot be placed."""
    if swimmer is None or not swimmer.gender:
        return None
    if not _has_category_basis(swimmer, event):
        return None
    category = classify(swimmer, event)
    if is_unknown_category(category):
        return None
    return RaceKey(entry.style, entry.distance, swimmer.gender, category)


def discover(
    entries: Iterable[Entry],
    swimmers: Iterable[Swimmer] | Mapping[int, Swimmer],
    event: EventConfig,
) -> set[RaceKey]:
    by_id = index_swimmers(swimmers)
    races: set[RaceKey] = set()
    skipped = 0
    for entry in entries:
        if not is_valid_time(entry.seed_time):
            skipped += 1
            continue
        key = race_key_for(entry, by_id.get(entry.swimmer_id), event)
        if key is None:
            skipped += 1
            continue
        races.add(key)
    if skipped:
        logger.debug(f"event={event.id}: {skipped} entries not placed in any race")
    return races


def entries_for_race(
    race: RaceKey,
    entries: Iterable[Entry],
    swimmers: Iterable[Swimmer] | Mapping[int, Swimmer],
    event: EventConfig,
    seeded_only: bool = True,
) -> list[Entry]:
    by_id = index_swimmers(swimmers)
    matched: list[Entry] = []
    for entry in entries:
        if entry.style != race.style or entry.distance != race.distance:
            continue
        if seeded_only and not is_valid_time(entry.seed_time):
            continue
        if race_key_for(entry, by_id.get(entry.swimmer_id), event) == race:
            matched.append(entry)
    return matched
