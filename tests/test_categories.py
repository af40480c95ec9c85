from datetime import date, datetime

from swimmeet.categories import (
    GRADE_NOT_SPECIFIED,
    UNGROUPED,
    UNKNOWN_AGE,
    calculate_age,
    classify,
    is_unknown_category,
    sort_key,
)
from swimmeet.models import CategorySystem, EventConfig, LetterRange, Swimmer


def make_swimmer(dob: date | None = date(2012, 6, 15), grade: str | None = None) -> Swimmer:
    return Swimmer(id=1, name="S1", date_of_birth=dob, gender="Male", club="Hiu", grade_level=grade)


def make_event(system: CategorySystem, **kwargs) -> EventConfig:
    return EventConfig(id=1, event_date=date(2024, 6, 14), category_system=system, **kwargs)


def test_age_is_decremented_before_birthday():
    assert calculate_age(date(2012, 6, 15), date(2024, 6, 14)) == 11
    assert calculate_age(date(2012, 6, 15), date(2024, 6, 15)) == 12
    assert calculate_age("2012-06-15", "2024-07-01") == 12


def test_age_of_invalid_dates_is_negative():
    assert calculate_age(None, date(2024, 1, 1)) == -1
    assert calculate_age("not a date", "2024-01-01") == -1


def test_age_group_buckets():
    event = make_event(CategorySystem.AGE_GROUP)
    cases = {
        date(2015, 1, 1): "KU V",
        date(2014, 1, 1): "KU IV",
        date(2012, 6, 15): "KU IV",
        date(2011, 1, 1): "KU III",
        date(2009, 1, 1): "KU II",
        date(2006, 1, 1): "KU I",
        date(2000, 1, 1): "KU Senior",
    }
    for dob, label in cases.items():
        assert classify(make_swimmer(dob), event) == label


def test_age_group_unknown_without_date():
    event = make_event(CategorySystem.AGE_GROUP)
    assert classify(make_swimmer(None), event) == UNKNOWN_AGE
    assert classify(make_swimmer(date(2025, 1, 1)), event) == UNKNOWN_AGE


def test_letter_first_matching_range_wins():
    event = make_event(
        CategorySystem.LETTER,
        letter_ranges={
            "B": LetterRange(date(2012, 1, 1), date(2012, 12, 31)),
            "A": LetterRange(date(2012, 6, 15), date(2013, 12, 31)),
        },
    )
    assert classify(make_swimmer(date(2012, 6, 15)), event) == "A"
    assert classify(make_swimmer(date(2012, 12, 31)), event) == "A"
    assert classify(make_swimmer(date(2012, 1, 1)), event) == "B"


def test_letter_accepts_datetime_birth_dates():
    event = make_event(CategorySystem.LETTER, letter_ranges={"A": LetterRange(date(2012, 1, 1), date(2012, 12, 31))})
    assert classify(make_swimmer(datetime(2012, 6, 15, 8, 30)), event) == "A"
    assert calculate_age(datetime(2012, 6, 15, 23, 59), datetime(2024, 6, 15)) == 12


def test_letter_without_match_reports_age():
    event = make_event(CategorySystem.LETTER, letter_ranges={"A": LetterRange(date(2015, 1, 1), None)})
    label = classify(make_swimmer(date(2012, 6, 15)), event)
    assert label == "Unknown Letter (11y)"
    assert is_unknown_category(label)


def test_grade_is_returned_verbatim():
    event = make_event(CategorySystem.GRADE)
    assert classify(make_swimmer(grade="SD Kelas 3"), event) == "SD Kelas 3"
    assert classify(make_swimmer(grade="  "), event) == GRADE_NOT_SPECIFIED


def test_school_level_ignores_age():
    event = make_event(CategorySystem.SCHOOL_LEVEL)
    assert classify(make_swimmer(date(2000, 1, 1), grade="SD Kelas 3"), event) == "SD Kelas 3-4"
    assert classify(make_swimmer(grade="SD Kelas 2"), event) == "SD Kelas 1-2"
    assert classify(make_swimmer(grade="SD Kelas 6"), event) == "SD Kelas 5-6"
    assert classify(make_swimmer(grade="SMP Kelas VIII"), event) == "SMP Kelas 7-9"
    assert classify(make_swimmer(grade="SMP 1"), event) == "SMP Kelas 7-9"
    assert classify(make_swimmer(grade="SMA Kelas XII"), event) == "SMA Kelas 10-12"


def test_school_level_sentinels():
    event = make_event(CategorySystem.SCHOOL_LEVEL)
    assert classify(make_swimmer(grade="TK A"), event) == UNGROUPED
    assert classify(make_swimmer(grade="SD Kelas 9"), event) == UNGROUPED
    assert classify(make_swimmer(grade=None), event) == GRADE_NOT_SPECIFIED


def test_classify_is_deterministic():
    event = make_event(CategorySystem.AGE_GROUP)
    swimmer = make_swimmer()
    assert {classify(swimmer, event) for _ in range(5)} == {"KU IV"}


def test_sort_key_orders_all_systems():
    labels = ["KU V", "KU Senior", "A", "I", "TK A", "SD Kelas 3-4", "SMA Kelas XII", GRADE_NOT_SPECIFIED]
    keys = [sort_key(label) for label in labels]
    assert keys == sorted(keys)
    assert sort_key("SD Kelas 3-4") == sort_key("SD Kelas 3")
    assert sort_key("something else") == 99
    assert sort_key(UNGROUPED) < sort_key(GRADE_NOT_SPECIFIED) < sort_key("something else")
