from __future__ import annotations

from typing import Annotated, Iterable, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

DEFAULT_LANES_PER_HEAT = 8

STYLE_ORDER = (
    "Backstroke",
    "Breaststroke",
    "Butterfly",
    "Freestyle",
    "IM",
    "Kick Breaststroke",
    "Kick Butterfly",
    "Kick Freestyle",
    "Freestyle Relay",
    "Medley Relay",
)

NON_RANKING_REMARKS = frozenset({"DQ", "DNS", "DNF", "SP"})


class EngineConfig(BaseSettings):
    """Engine defaults, overridable through ``SWIMMEET_*`` environment variables.

    ``SWIMMEET_EXCLUDED_REMARKS`` is a comma separated list (``DQ,DNS``).
    """

    default_lanes_per_heat: int = DEFAULT_LANES_PER_HEAT
    excluded_remarks: Annotated[frozenset[str], NoDecode] = NON_RANKING_REMARKS
    style_order: tuple[str, ...] = STYLE_ORDER
    tie_break: Literal["random", "name", "id"] = "random"

    class Config:
        env_prefix = "SWIMMEET_"
        case_sensitive = False

    @field_validator("excluded_remarks", mode="before")
    @classmethod
    def split_remarks(cls, v: str | Iterable[str]) -> frozenset[str]:
        if isinstance(v, str):
            v = v.split(",")
        return frozenset(r.strip().upper() for r in v if r.strip())

    @field_validator("tie_break", mode="before")
    @classmethod
    def normalize_tie_break(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v
