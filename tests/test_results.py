from swimmeet.models import Entry, Swimmer
from swimmeet.results import rank_entries


def make_entry(id_: int, final: str | None, remark: str | None = None) -> Entry:
    return Entry(id=id_, swimmer_id=id_, event_id=1, style="Freestyle", distance=100, final_time=final, remark=remark)


def make_swimmers(*names: str) -> dict[int, Swimmer]:
    return {
        idx: Swimmer(id=idx, name=name, date_of_birth=None, gender="Male", club=f"Club {name}")
        for idx, name in enumerate(names, start=1)
    }


def summary(ranked) -> list[tuple[str, int | None, str | None]]:
    return [(r.swimmer_name, r.rank, r.medal) for r in ranked]


def test_dead_heat_for_gold():
    swimmers = make_swimmers("A", "B", "C", "D")
    entries = [
        make_entry(4, "01:00.00"),
        make_entry(3, "00:59.00"),
        make_entry(1, "00:58.00"),
        make_entry(2, "00:58.00"),
    ]

    ranked = rank_entries(entries, swimmers)

    assert [r.rank for r in ranked] == [1, 1, 3, 4]
    assert {r.swimmer_name for r in ranked if r.medal == "gold"} == {"A", "B"}
    assert [r for r in ranked if r.medal == "silver"] == []
    assert summary(ranked)[2:] == [("C", 3, "bronze"), ("D", 4, None)]
    assert ranked[0].club in {"Club A", "Club B"}


def test_competition_ranking_skips_after_ties():
    swimmers = make_swimmers("A", "B", "C", "D", "E")
    entries = [
        make_entry(1, "00:30.00"),
        make_entry(2, "00:31.00"),
        make_entry(3, "00:31.00"),
        make_entry(4, "00:32.00"),
        make_entry(5, "00:32.00"),
    ]
    ranked = rank_entries(entries, swimmers)
    assert summary(ranked) == [
        ("A", 1, "gold"),
        ("B", 2, "silver"),
        ("C", 2, "silver"),
        ("D", 4, None),
        ("E", 4, None),
    ]


def test_bronze_when_silver_is_single():
    swimmers = make_swimmers("A", "B", "C", "D")
    entries = [
        make_entry(1, "00:30.00"),
        make_entry(2, "00:31.00"),
        make_entry(3, "00:32.00"),
        make_entry(4, "00:32.00"),
    ]
    ranked = rank_entries(entries, swimmers)
    assert [r.medal for r in ranked] == ["gold", "silver", "bronze", "bronze"]


def test_three_way_gold_tie_leaves_no_bronze():
    swimmers = make_swimmers("A", "B", "C", "D")
    entries = [make_entry(i, "00:30.00") for i in (1, 2, 3)] + [make_entry(4, "00:31.00")]
    ranked = rank_entries(entries, swimmers)
    assert [r.medal for r in ranked] == ["gold", "gold", "gold", None]
    assert ranked[3].rank == 4


def test_non_rankable_entries_follow_by_name():
    swimmers = make_swimmers("Zaki", "Ayu", "Bima", "Dewi", "Eka")
    entries = [
        make_entry(1, "00:30.00", remark="dq"),
        make_entry(2, None, remark="DNS"),
        make_entry(3, "00:33.00"),
        make_entry(4, "0:31.5"),
        make_entry(5, "00:32.00", remark="SP"),
    ]

    ranked = rank_entries(entries, swimmers)

    assert summary(ranked) == [
        ("Bima", 1, "gold"),
        ("Ayu", None, None),
        ("Dewi", None, None),
        ("Eka", None, None),
        ("Zaki", None, None),
    ]


def test_excluded_remarks_are_configurable():
    swimmers = make_swimmers("A", "B")
    entries = [make_entry(1, "00:30.00", remark="SP"), make_entry(2, "00:31.00")]

    ranked = rank_entries(entries, swimmers, excluded_remarks={"DQ", "DNS", "DNF"})

    assert summary(ranked) == [("A", 1, "gold"), ("B", 2, "silver")]


def test_empty_input():
    assert rank_entries([], {}) == []
