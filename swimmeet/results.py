"""Ranking of final times within one race.

Ranks use competition ranking: tied times share a rank and the next time
ranks one past the number of entrants ahead of it (1, 2, 2, 4).  Medals are
derived from ranks here so every report applies the same tie rule:

* gold goes to every rank-1 entrant;
* silver goes to rank-2 entrants only when gold was not shared;
* bronze goes to rank-3 entrants only while fewer than three medals are out.
"""
from __future__ import annotations

from typing import Iterable, Mapping

from swimmeet.config import NON_RANKING_REMARKS
from swimmeet.models import BRONZE, GOLD, SILVER, Entry, RankedEntry, Swimmer
from swimmeet.race_catalog import index_swimmers
from swimmeet.time_utils import parse_time_to_ms


def normalize_remark(remark: str | None) -> str:
    return (remark or "").strip().upper()


def is_rankable(entry: Entry, excluded_remarks: Iterable[str] = NON_RANKING_REMARKS) -> bool:
    if normalize_remark(entry.remark) in {normalize_remark(r) for r in excluded_remarks}:
        return False
    return parse_time_to_ms(entry.final_time) > 0


def assign_medals(ranked: list[RankedEntry]) -> None:
    gold = [r for r in ranked if r.rank == 1]
    silver = [r for r in ranked if r.rank == 2] if len(gold) == 1 else []
    bronze = [r for r in ranked if r.rank == 3] if len(gold) + len(silver) < 3 else []
    for medal, winners in ((GOLD, gold), (SILVER, silver), (BRONZE, bronze)):
        for winner in winners:
            winner.medal = medal


def rank_entries(
    entries: Iterable[Entry],
    swimmers: Iterable[Swimmer] | Mapping[int, Swimmer] = (),
    excluded_remarks: Iterable[str] = NON_RANKING_REMARKS,
) -> list[RankedEntry]:
    by_id = index_swimmers(swimmers)
    excluded = frozenset(normalize_remark(r) for r in excluded_remarks)

    def _wrap(entry: Entry) -> RankedEntry:
        swimmer = by_id.get(entry.swimmer_id)
        return RankedEntry(
            entry=entry,
            swimmer_name=swimmer.name if swimmer else "",
            club=swimmer.club if swimmer else None,
        )

    rankable: list[RankedEntry] = []
    unranked: list[RankedEntry] = []
    for entry in entries:
        (rankable if is_rankable(entry, excluded) else unranked).append(_wrap(entry))

    rankable.sort(key=lambda r: parse_time_to_ms(r.entry.final_time))
    last_ms = None
    rank = 0
    for position, ranked in enumerate(rankable, start=1):
        time_ms = parse_time_to_ms(ranked.entry.final_time)
        if time_ms != last_ms:
            rank = position
            last_ms = time_ms
        ranked.rank = rank
    assign_medals(rankable)

    unranked.sort(key=lambda r: r.swimmer_name.casefold())
    return rankable + unranked
