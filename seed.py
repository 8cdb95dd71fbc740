from __future__ import annotations

import argparse

from emulation.config import settings
from emulation.exceptions import DuplicateKey
from emulation.store import build_store

DEMO_STUDENTS = [
    ("Nguyễn Văn An", "S001"),
    ("Trần Thị Bình", "S002"),
    ("Lê Hoàng Cường", "S003"),
]


def main():
    parser = argparse.ArgumentParser(description="Initialize the store and optionally add demo data.")
    parser.add_argument("--demo", action="store_true", help="add a week, three students and a few score records")
    args = parser.parse_args()

    store = build_store(settings)
    try:
        store.initialize()
        if args.demo:
            week_id = store.weeks.create("Tuần 1")
            store.weeks.set_active(week_id)
            for name, code in DEMO_STUDENTS:
                try:
                    store.students.create(name, code)
                except DuplicateKey:
                    continue  # already seeded
            buttons = {b.name: b for b in store.buttons.get_all()}
            for code, button_name in [("S001", "Phát biểu tốt"), ("S002", "Đi muộn"), ("S003", "Điểm 10")]:
                student = store.students.get_by_code(code)
                button = buttons.get(button_name)
                if student and button:
                    store.scores.create(student.id, button.id, week_id, button.points)
        print(f"Store ready ({settings.STORE_BACKEND}). Admin login: {settings.ADMIN_USERNAME} / {settings.ADMIN_PASSWORD}")
    finally:
        store.close()


if __name__ == "__main__":
    main()
