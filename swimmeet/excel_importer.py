from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from zipfile import BadZipFile

from loguru import logger

from swimmeet.errors import RosterImportError
from swimmeet.models import Entry, Swimmer
from swimmeet.time_utils import is_valid_time

SWIMMER_ALIASES = {
    "id": {"id", "swimmer id", "no"},
    "name": {"name", "nama", "nama atlet", "swimmer"},
    "dob": {"dob", "date of birth", "tanggal lahir", "tgl lahir"},
    "gender": {"gender", "jenis kelamin", "sex"},
    "club": {"club", "klub", "team"},
    "grade": {"grade", "grade level", "kelas", "tingkat"},
}

ENTRY_ALIASES = {
    "id": {"id", "result id", "entry id"},
    "swimmer_id": {"swimmer id", "id atlet", "swimmer"},
    "event_id": {"event id", "id event"},
    "style": {"style", "gaya"},
    "distance": {"distance", "jarak"},
    "seed": {"seed time", "seed", "waktu unggulan", "entry time"},
    "final": {"final time", "time", "waktu", "hasil"},
    "remark": {"remark", "remarks", "keterangan"},
}

GENDER_ALIASES = {
    "m": "Male", "male": "Male", "l": "Male", "putra": "Male", "laki-laki": "Male",
    "f": "Female", "female": "Female", "p": "Female", "putri": "Female", "perempuan": "Female",
}


@dataclass(slots=True)
class Roster:
    swimmers: list[Swimmer] = field(default_factory=list)
    entries: list[Entry] = field(default_factory=list)


def _normalize(value: object) -> str:
    return str(value or "").strip().lower()


def _find_columns(header_row: list[object], aliases: dict[str, set[str]]) -> dict[str, int]:
    mapping: dict[str, int] = {}
    for idx, raw in enumerate(header_row):
        h = _normalize(raw)
        for key, names in aliases.items():
            if h in names and key not in mapping:
                mapping[key] = idx
                break
    return mapping


def _cell(row: tuple, cols: dict[str, int], key: str) -> object:
    idx = cols.get(key)
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def _text(value: object) -> str | None:
    text = str(value).strip() if value is not None else ""
    return text or None


def _int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    text = _text(value)
    return int(text) if text and text.isdigit() else None


def _date(value: object) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = _text(value)
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def _gender(value: object) -> str | None:
    text = _normalize(value)
    return GENDER_ALIASES.get(text, _text(value))


def _validate_input_file(file_path: Path) -> None:
    if not file_path.exists():
        raise RosterImportError(f"Roster file does not exist: {file_path}")
    suffix = file_path.suffix.lower()
    if suffix == ".xls":
        raise RosterImportError("Legacy .xls files are not supported. Save the roster as .xlsx and try again.")
    if suffix not in {".xlsx", ".xlsm"}:
        raise RosterImportError("Only .xlsx and .xlsm roster files are supported.")
    if file_path.stat().st_size == 0:
        raise RosterImportError("Roster file is empty (0 bytes).")


def _read_swimmers(rows: list[tuple], cols: dict[str, int]) -> list[Swimmer]:
    swimmers: list[Swimmer] = []
    for row in rows:
        swimmer_id = _int(_cell(row, cols, "id"))
        name = _text(_cell(row, cols, "name"))
        if swimmer_id is None or not name:
            continue
        swimmers.append(
            Swimmer(
                id=swimmer_id,
                name=name,
                date_of_birth=_date(_cell(row, cols, "dob")),
                gender=_gender(_cell(row, cols, "gender")),
                club=_text(_cell(row, cols, "club")),
                grade_level=_text(_cell(row, cols, "grade")),
            )
        )
    return swimmers


def _read_entries(rows: list[tuple], cols: dict[str, int], event_id: int | None) -> list[Entry]:
    entries: list[Entry] = []
    for number, row in enumerate(rows, start=1):
        swimmer_id = _int(_cell(row, cols, "swimmer_id"))
        style = _text(_cell(row, cols, "style"))
        distance = _int(_cell(row, cols, "distance"))
        if swimmer_id is None or not style or distance is None:
            continue
        seed = _text(_cell(row, cols, "seed"))
        if seed and not is_valid_time(seed):
            logger.debug(f"entry row {number}: seed time {seed!r} is not MM:SS.ss")
        entries.append(
            Entry(
                id=_int(_cell(row, cols, "id")) or number,
                swimmer_id=swimmer_id,
                event_id=_int(_cell(row, cols, "event_id")) or event_id or 0,
                style=style,
                distance=distance,
                seed_time=seed,
                final_time=_text(_cell(row, cols, "final")),
                remark=_text(_cell(row, cols, "remark")),
            )
        )
    return entries


def import_roster(path: Path, event_id: int | None = None) -> Roster:
    """Read swimmers and entries from an Excel workbook.

    A sheet whose header has name and date-of-birth columns is read as
    swimmers; one with swimmer id, style and distance columns as entries.
    """
    _validate_input_file(path)

    try:
        from openpyxl import load_workbook
        from openpyxl.utils.exceptions import InvalidFileException
    except ModuleNotFoundError as exc:
        raise RosterImportError("openpyxl is not installed. Install the package dependencies.") from exc

    try:
        wb = load_workbook(path, data_only=True, read_only=True)
    except (BadZipFile, InvalidFileException) as exc:
        raise RosterImportError("Could not open the workbook. Check that it is a valid .xlsx/.xlsm file.") from exc

    roster = Roster()
    try:
        for ws in wb.worksheets:
            rows = list(ws.iter_rows(values_only=True))
            if not rows:
                continue
            header = list(rows[0])
            entry_cols = _find_columns(header, ENTRY_ALIASES)
            if {"swimmer_id", "style", "distance"} <= entry_cols.keys():
                roster.entries.extend(_read_entries(rows[1:], entry_cols, event_id))
                continue
            swimmer_cols = _find_columns(header, SWIMMER_ALIASES)
            if {"id", "name"} <= swimmer_cols.keys():
                roster.swimmers.extend(_read_swimmers(rows[1:], swimmer_cols))
    finally:
        wb.close()

    logger.info(f"imported {len(roster.swimmers)} swimmers and {len(roster.entries)} entries from {path.name}")
    return roster
