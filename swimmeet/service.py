from __future__ import annotations

import random
from pathlib import Path
from typing import Iterable

from loguru import logger

from swimmeet.config import EngineConfig
from swimmeet.errors import UnknownEventError
from swimmeet.heats import TieBreak, build_heats, tie_break_by_id, tie_break_by_name
from swimmeet.medals import best_swimmers, tabulate_clubs, tabulate_swimmers
from swimmeet.models import (
    BestSwimmerGroup,
    ClubStart,
    Entry,
    EventConfig,
    MedalTally,
    ProgramSlot,
    Race,
    RaceKey,
    RaceResult,
    Swimmer,
)
from swimmeet.program import InMemoryProgramOrderStore, ProgramOrderStore, move, order
from swimmeet.race_catalog import discover, entries_for_race, race_key_for
from swimmeet.results import rank_entries


class MeetService:
    """Derives programs, heats and results for the events it has been given.

    Swimmers, events and entries are owned by the caller and passed in already
    validated; only the custom program order goes through ``store``.
    """

    def __init__(
        self,
        store: ProgramOrderStore | None = None,
        config: EngineConfig | None = None,
        rng: random.Random | None = None,
    ):
        self.store = store if store is not None else InMemoryProgramOrderStore()
        self.config = config or EngineConfig()
        self.rng = rng
        self.events: dict[int, EventConfig] = {}
        self.swimmers: dict[int, Swimmer] = {}
        self.entries: list[Entry] = []

    def load(
        self,
        events: Iterable[EventConfig] = (),
        swimmers: Iterable[Swimmer] = (),
        entries: Iterable[Entry] = (),
    ) -> None:
        self.events.update({e.id: e for e in events})
        self.swimmers.update({s.id: s for s in swimmers})
        self.entries.extend(entries)

    def import_roster(self, excel_path: Path, event_id: int) -> None:
        from swimmeet.excel_importer import import_roster

        roster = import_roster(excel_path, event_id=event_id)
        self.load(swimmers=roster.swimmers, entries=roster.entries)

    def _event(self, event_id: int) -> EventConfig:
        try:
            return self.events[event_id]
        except KeyError:
            raise UnknownEventError(event_id) from None

    def _event_entries(self, event_id: int) -> list[Entry]:
        return [e for e in self.entries if e.event_id == event_id]

    def _lanes(self, event: EventConfig) -> int:
        if event.lanes_per_heat is None:
            return self.config.default_lanes_per_heat
        return event.lanes_per_heat

    def _tie_break(self) -> TieBreak | None:
        if self.config.tie_break == "name":
            return tie_break_by_name({s.id: s.name for s in self.swimmers.values()})
        if self.config.tie_break == "id":
            return tie_break_by_id
        return None

    def races(self, event_id: int) -> list[Race]:
        event = self._event(event_id)
        keys = discover(self._event_entries(event_id), self.swimmers, event)
        return order(keys, self.store.load_order(event_id), style_order=self.config.style_order)

    def move_race(self, event_id: int, key: RaceKey, direction: str) -> list[Race]:
        moved = move(self.races(event_id), key, direction)
        self.store.save_order(event_id, [race.key for race in moved])
        logger.info(f"event={event_id}: moved {tuple(key)} {direction}")
        return moved

    def reset_program_order(self, event_id: int) -> list[Race]:
        self._event(event_id)
        self.store.clear_order(event_id)
        return self.races(event_id)

    def build_program(self, event_id: int) -> list[ProgramSlot]:
        event = self._event(event_id)
        entries = self._event_entries(event_id)
        lanes = self._lanes(event)
        tie_break = self._tie_break()
        program: list[ProgramSlot] = []
        for race in self.races(event_id):
            entrants = entries_for_race(race.key, entries, self.swimmers, event)
            heats = build_heats(entrants, lanes, tie_break=tie_break, rng=self.rng)
            if heats:
                program.append(ProgramSlot(race=race, heats=heats))
        return program

    def results_book(self, event_id: int) -> list[RaceResult]:
        event = self._event(event_id)
        entries = self._event_entries(event_id)

        grouped: dict[RaceKey, list[Entry]] = {}
        for entry in entries:
            key = race_key_for(entry, self.swimmers.get(entry.swimmer_id), event)
            if key is not None:
                grouped.setdefault(key, []).append(entry)

        book: list[RaceResult] = []
        # Races in the program keep their acara numbers; unseeded races follow.
        program_keys = [race.key for race in self.races(event_id)]
        for race in order(grouped, program_keys, style_order=self.config.style_order):
            ranked = rank_entries(grouped[race.key], self.swimmers, self.config.excluded_remarks)
            book.append(RaceResult(race=race, results=ranked))
        return book

    def best_swimmers(self, event_id: int) -> list[BestSwimmerGroup]:
        return best_swimmers(self.results_book(event_id))

    def swimmer_leaderboard(self, event_id: int) -> list[MedalTally]:
        return tabulate_swimmers(self.results_book(event_id))

    def best_clubs(self, event_id: int) -> list[MedalTally]:
        return tabulate_clubs(self.results_book(event_id))

    def club_starting_list(self, event_id: int, club: str | None = None) -> list[ClubStart]:
        starts: list[ClubStart] = []
        for slot in self.build_program(event_id):
            for heat in slot.heats:
                for lane in heat.occupied:
                    swimmer = self.swimmers.get(lane.entry.swimmer_id)
                    if swimmer is None:
                        continue
                    if club is not None and swimmer.club != club:
                        continue
                    starts.append(
                        ClubStart(
                            race=slot.race,
                            heat_number=heat.heat_number,
                            lane=lane.lane,
                            entry=lane.entry,
                            swimmer=swimmer,
                        )
                    )
        return starts
