from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import NamedTuple, Optional


class CategorySystem(str, Enum):
    AGE_GROUP = "KU"
    LETTER = "LETTER"
    GRADE = "GRADE"
    SCHOOL_LEVEL = "SCHOOL_LEVEL"


GOLD = "gold"
SILVER = "silver"
BRONZE = "bronze"


@dataclass(slots=True)
class Swimmer:
    id: int
    name: str
    date_of_birth: Optional[date]
    gender: Optional[str]
    club: Optional[str] = None
    grade_level: Optional[str] = None


@dataclass(slots=True)
class LetterRange:
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(slots=True)
class EventConfig:
    id: int
    event_date: Optional[date]
    category_system: CategorySystem = CategorySystem.AGE_GROUP
    letter_ranges: dict[str, LetterRange] = field(default_factory=dict)
    lanes_per_heat: Optional[int] = None
    name: str = ""


@dataclass(slots=True)
class Entry:
    id: int
    swimmer_id: int
    event_id: int
    style: str
    distance: int
    seed_time: Optional[str] = None
    final_time: Optional[str] = None
    remark: Optional[str] = None


class RaceKey(NamedTuple):
    style: str
    distance: int
    gender: str
    category: str


@dataclass(slots=True)
class Race:
    key: RaceKey
    acara_number: int


@dataclass(slots=True)
class HeatLane:
    lane: int
    entry: Optional[Entry] = None


@dataclass(slots=True)
class Heat:
    heat_number: int
    lanes: list[HeatLane]

    @property
    def occupied(self) -> list[HeatLane]:
        return [lane for lane in self.lanes if lane.entry is not None]


@dataclass(slots=True)
class RankedEntry:
    entry: Entry
    swimmer_name: str
    club: Optional[str]
    rank: Optional[int] = None
    medal: Optional[str] = None


@dataclass(slots=True)
class RaceResult:
    race: Race
    results: list[RankedEntry]


@dataclass(slots=True)
class MedalTally:
    key: int | str
    name: str
    club: Optional[str] = None
    gold: int = 0
    silver: int = 0
    bronze: int = 0
    rank: Optional[int] = None

    @property
    def total(self) -> int:
        return self.gold + self.silver + self.bronze

    @property
    def score(self) -> tuple[int, int, int]:
        return self.gold, self.silver, self.bronze


@dataclass(slots=True)
class BestSwimmerGroup:
    category: str
    gender: str
    swimmers: list[MedalTally]


@dataclass(slots=True)
class ProgramSlot:
    race: Race
    heats: list[Heat]


@dataclass(slots=True)
class ClubStart:
    race: Race
    heat_number: int
    lane: int
    entry: Entry
    swimmer: Swimmer
