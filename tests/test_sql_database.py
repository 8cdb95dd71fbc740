from datetime import date

from sqlalchemy import create_engine, inspect, text

from emulation.store import SqlStore


def test_creates_data_directory(tmp_path):
    path = tmp_path / "data" / "emulation.db"
    store = SqlStore(f"sqlite:///{path}")
    store.initialize()
    try:
        assert path.exists()
        sid = store.students.create("An", "S001")
    finally:
        store.close()

    # reopening the same file keeps the data and does not reseed
    reopened = SqlStore(f"sqlite:///{path}")
    reopened.initialize()
    try:
        assert reopened.students.get_by_id(sid).name == "An"
        assert len(reopened.buttons.get_all()) == 8
    finally:
        reopened.close()


def test_adds_late_columns_to_old_files(tmp_path):
    path = tmp_path / "old.db"
    engine = create_engine(f"sqlite:///{path}")
    with engine.begin() as conn:
        conn.execute(text(
            "CREATE TABLE weeks (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL, "
            "is_active BOOLEAN NOT NULL DEFAULT 0, created_at DATETIME)"
        ))
        conn.execute(text(
            "CREATE TABLE score_records (id INTEGER PRIMARY KEY AUTOINCREMENT, "
            "student_id INTEGER NOT NULL, button_id INTEGER, week_id INTEGER, "
            "points FLOAT NOT NULL, note VARCHAR, created_at DATETIME)"
        ))
    engine.dispose()

    store = SqlStore(f"sqlite:///{path}")
    store.initialize()
    try:
        columns = {c["name"] for c in inspect(store.db.engine).get_columns("score_records")}
        assert "violation_date" in columns
        assert "week_number" in {c["name"] for c in inspect(store.db.engine).get_columns("weeks")}

        sid = store.students.create("An", "S001")
        wid = store.weeks.create("Week 3")
        store.scores.create(sid, None, wid, -5, violation_date=date(2025, 3, 1))
        (record,) = store.scores.get_by_week(wid)
        assert record.violation_date == date(2025, 3, 1)
        assert store.weeks.get_by_number(3).id == wid
    finally:
        store.close()
