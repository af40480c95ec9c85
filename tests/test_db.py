from pathlib import Path

from swimmeet.db import ProgramOrderRepository
from swimmeet.models import RaceKey

FREE = RaceKey("Freestyle", 50, "Male", "KU IV")
BACK = RaceKey("Backstroke", 50, "Female", "SD Kelas 3-4")


def test_order_round_trip_and_overwrite(tmp_path: Path):
    repo = ProgramOrderRepository(tmp_path / "meet" / "meet.db")
    try:
        assert repo.load_order(7) is None
        repo.save_order(7, [FREE, BACK])
        assert repo.load_order(7) == [FREE, BACK]
        repo.save_order(7, [BACK])
        assert repo.load_order(7) == [BACK]
        assert repo.load_order(8) is None
    finally:
        repo.close()


def test_order_survives_reopen(tmp_path: Path):
    db_path = tmp_path / "meet.db"
    repo = ProgramOrderRepository(db_path)
    repo.save_order(1, [BACK, FREE])
    repo.close()

    reopened = ProgramOrderRepository(db_path)
    try:
        assert reopened.load_order(1) == [BACK, FREE]
    finally:
        reopened.close()


def test_clear_and_audit_log(tmp_path: Path):
    repo = ProgramOrderRepository(tmp_path / "meet.db")
    try:
        repo.save_order(3, [FREE])
        repo.clear_order(3)
        assert repo.load_order(3) is None
        assert repo.list_log() == [
            ("save_program_order", "event=3; races=1"),
            ("clear_program_order", "event=3"),
        ]
    finally:
        repo.close()


def test_corrupt_order_is_ignored(tmp_path: Path):
    repo = ProgramOrderRepository(tmp_path / "meet.db")
    try:
        repo.conn.execute("INSERT INTO program_orders(event_id, race_keys) VALUES (?, ?)", (5, "not json"))
        repo.conn.commit()
        assert repo.load_order(5) is None
    finally:
        repo.close()
