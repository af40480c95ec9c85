"""Age/grade category classification for swimmers.

Every category system resolves to a plain string label. Swimmers that cannot
be placed get one of the sentinel labels below; callers drop them with
:func:`is_unknown_category` instead of catching exceptions.
"""
from __future__ import annotations

import re
from datetime import date, datetime

from swimmeet.models import CategorySystem, EventConfig, Swimmer

UNKNOWN_AGE = "Unknown Age"
GRADE_NOT_SPECIFIED = "Grade Not Specified"
UNGROUPED = "Ungrouped"
UNKNOWN_LETTER_PREFIX = "Unknown Letter"

LETTERS = ("A", "B", "C", "D", "E", "F", "G", "H", "I")

# (label, lowest age, highest age) inclusive; None means open-ended.
AGE_GROUPS = (
    ("KU V", None, 9),
    ("KU IV", 10, 11),
    ("KU III", 12, 13),
    ("KU II", 14, 15),
    ("KU I", 16, 18),
    ("KU Senior", 19, None),
)

# (label, school prefix, lowest grade, highest grade) with grades counted from SD 1.
SCHOOL_LEVELS = (
    ("SD Kelas 1-2", "SD", 1, 2),
    ("SD Kelas 3-4", "SD", 3, 4),
    ("SD Kelas 5-6", "SD", 5, 6),
    ("SMP Kelas 7-9", "SMP", 7, 9),
    ("SMA Kelas 10-12", "SMA", 10, 12),
)

GRADE_PROGRESSION = (
    "Belum Sekolah / PAUD",
    "TK A",
    "TK B",
    "SD Kelas 1",
    "SD Kelas 2",
    "SD Kelas 3",
    "SD Kelas 4",
    "SD Kelas 5",
    "SD Kelas 6",
    "SMP Kelas VII",
    "SMP Kelas VIII",
    "SMP Kelas IX",
    "SMA Kelas X",
    "SMA Kelas XI",
    "SMA Kelas XII",
    "Lulus / Mahasiswa / Umum",
)

_SORT_KEYS: dict[str, int] = {}
_SORT_KEYS.update({label: idx for idx, (label, _lo, _hi) in enumerate(AGE_GROUPS, start=1)})
_SORT_KEYS.update({letter: idx for idx, letter in enumerate(LETTERS, start=10)})
_SORT_KEYS.update({label: idx for idx, label in enumerate(GRADE_PROGRESSION, start=20)})
# Buckets sort with the first grade they contain.
_SORT_KEYS.update({label: _SORT_KEYS[GRADE_PROGRESSION[lo + 2]] for label, _p, lo, _hi in SCHOOL_LEVELS})
_SORT_KEYS[UNGROUPED] = 97
_SORT_KEYS[GRADE_NOT_SPECIFIED] = 98

UNRECOGNIZED_SORT_KEY = 99

SCHOOL_GRADE_RE = re.compile(r"^(SD|SMP|SMA)\s*(?:KELAS)?\s*([0-9]+|[IVX]+)$", re.IGNORECASE)
ROMAN = {"I": 1, "V": 5, "X": 10}


def _to_date(value: date | str | None) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None


def calculate_age(date_of_birth: date | str | None, on: date | str | None) -> int:
    """Whole years between ``date_of_birth`` and ``on``; -1 for missing or invalid dates."""
    dob = _to_date(date_of_birth)
    day = _to_date(on)
    if dob is None or day is None:
        return -1
    age = day.year - dob.year
    if (day.month, day.day) < (dob.month, dob.day):
        age -= 1
    return age


def unknown_letter(age: int) -> str:
    return f"{UNKNOWN_LETTER_PREFIX} ({age}y)"


def is_unknown_category(label: str) -> bool:
    return label in (UNKNOWN_AGE, GRADE_NOT_SPECIFIED, UNGROUPED) or label.startswith(UNKNOWN_LETTER_PREFIX)


def _roman_to_int(text: str) -> int:
    total = 0
    prev = 0
    for char in reversed(text):
        value = ROMAN[char]
        total = total - value if value < prev else total + value
        prev = max(prev, value)
    return total


def _absolute_grade(grade_level: str) -> tuple[str, int] | None:
    match = SCHOOL_GRADE_RE.match(" ".join(grade_level.split()))
    if not match:
        return None
    school = match.group(1).upper()
    raw = match.group(2).upper()
    number = int(raw) if raw.isdigit() else _roman_to_int(raw)
    # SMP 1-3 and SMA 1-3 count classes within the school.
    if school == "SMP" and 1 <= number <= 3:
        number += 6
    elif school == "SMA" and 1 <= number <= 3:
        number += 9
    return school, number


def _classify_grade(swimmer: Swimmer) -> str:
    grade = (swimmer.grade_level or "").strip()
    return grade or GRADE_NOT_SPECIFIED


def _classify_school_level(swimmer: Swimmer) -> str:
    grade = (swimmer.grade_level or "").strip()
    if not grade:
        return GRADE_NOT_SPECIFIED
    parsed = _absolute_grade(grade)
    if parsed is None:
        return UNGROUPED
    school, number = parsed
    for label, prefix, lo, hi in SCHOOL_LEVELS:
        if school == prefix and lo <= number <= hi:
            return label
    return UNGROUPED


def _classify_age_group(age: int) -> str:
    for label, lo, hi in AGE_GROUPS:
        if (lo is None or age >= lo) and (hi is None or age <= hi):
            return label
    return UNKNOWN_AGE


def _classify_letter(swimmer: Swimmer, event: EventConfig, age: int) -> str:
    dob = _to_date(swimmer.date_of_birth)
    for letter in LETTERS:
        bounds = event.letter_ranges.get(letter)
        if bounds is None:
            continue
        start = _to_date(bounds.start_date)
        end = _to_date(bounds.end_date)
        if start is None or end is None:
            continue
        if start <= dob <= end:
            return letter
    return unknown_letter(age)


def classify(swimmer: Swimmer, event: EventConfig) -> str:
    system = CategorySystem(event.category_system)
    if system is CategorySystem.GRADE:
        return _classify_grade(swimmer)
    if system is CategorySystem.SCHOOL_LEVEL:
        return _classify_school_level(swimmer)

    age = calculate_age(swimmer.date_of_birth, event.event_date)
    if age < 0:
        return UNKNOWN_AGE
    if system is CategorySystem.LETTER:
        return _classify_letter(swimmer, event, age)
    return _classify_age_group(age)


def sort_key(label: str) -> int:
    return _SORT_KEYS.get(label, UNRECOGNIZED_SORT_KEY)
