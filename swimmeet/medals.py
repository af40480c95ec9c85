from __future__ import annotations

from collections import defaultdict
from typing import Callable, Iterable

from swimmeet.categories import sort_key
from swimmeet.models import BRONZE, GOLD, SILVER, BestSwimmerGroup, MedalTally, RaceResult, RankedEntry
from swimmeet.program import GENDER_ORDER


def _count(tally: MedalTally, medal: str | None) -> None:
    if medal == GOLD:
        tally.gold += 1
    elif medal == SILVER:
        tally.silver += 1
    elif medal == BRONZE:
        tally.bronze += 1


def _accumulate(
    race_results: Iterable[RaceResult],
    key_of: Callable[[RankedEntry], int | str | None],
    name_of: Callable[[RankedEntry], str],
) -> dict[int | str, MedalTally]:
    tallies: dict[int | str, MedalTally] = {}
    for race_result in race_results:
        for ranked in race_result.results:
            if ranked.medal is None:
                continue
            key = key_of(ranked)
            if key is None:
                continue
            if key not in tallies:
                tallies[key] = MedalTally(key=key, name=name_of(ranked), club=ranked.club)
            _count(tallies[key], ranked.medal)
    return tallies


def leaderboard(tallies: Iterable[MedalTally]) -> list[MedalTally]:
    """Sort by gold, silver, bronze and assign shared competition ranks."""
    board = [t for t in tallies if t.total > 0]
    board.sort(key=lambda t: (-t.gold, -t.silver, -t.bronze, t.name.casefold()))
    last_score = None
    rank = 0
    for position, tally in enumerate(board, start=1):
        if tally.score != last_score:
            rank = position
            last_score = tally.score
        tally.rank = rank
    return board


def tabulate_swimmers(race_results: Iterable[RaceResult]) -> list[MedalTally]:
    tallies = _accumulate(
        race_results,
        key_of=lambda ranked: ranked.entry.swimmer_id,
        name_of=lambda ranked: ranked.swimmer_name,
    )
    return leaderboard(tallies.values())


def tabulate_clubs(race_results: Iterable[RaceResult]) -> list[MedalTally]:
    tallies = _accumulate(
        race_results,
        key_of=lambda ranked: ranked.club or None,
        name_of=lambda ranked: ranked.club or "",
    )
    return leaderboard(tallies.values())


def _group_order(group: BestSwimmerGroup) -> tuple:
    gender_rank = GENDER_ORDER.index(group.gender) if group.gender in GENDER_ORDER else len(GENDER_ORDER)
    return sort_key(group.category), group.category, gender_rank, group.gender


def best_swimmers(race_results: Iterable[RaceResult]) -> list[BestSwimmerGroup]:
    """Top medal holders per category and gender; tied leaders are all kept."""
    by_group: dict[tuple[str, str], list[RaceResult]] = defaultdict(list)
    for race_result in race_results:
        key = race_result.race.key
        by_group[(key.category, key.gender)].append(race_result)

    groups: list[BestSwimmerGroup] = []
    for (category, gender), results in by_group.items():
        board = tabulate_swimmers(results)
        if not board:
            continue
        leaders = [t for t in board if t.rank == 1]
        groups.append(BestSwimmerGroup(category=category, gender=gender, swimmers=leaders))
    groups.sort(key=_group_order)
    return groups
