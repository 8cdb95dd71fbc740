from __future__ import annotations

import io
import logging
from typing import Iterable, List, Optional

import pandas as pd

from emulation.exceptions import NotFound, ValidationError
from emulation.schemas.admin import Id
from emulation.schemas.score import ImportScoreRow
from emulation.schemas.student import StudentForm
from emulation.store import Store

log = logging.getLogger(__name__)

STUDENT_TEMPLATE_CSV = (
    "name,student_code\n"
    "Nguyễn Văn An,S001\n"
    "Trần Thị Bình,S002\n"
)


def import_scores(store: Store, records: Iterable[ImportScoreRow], week_id: Optional[Id] = None) -> int:
    """
    Add one score record per row, resolving the student by code.

    Rows for unknown codes are skipped. Each row goes through the normal
    ledger path, so a failure halfway leaves the earlier rows applied.
    """
    imported = 0
    for row in records:
        student = store.students.get_by_code(row.student_code)
        if student is None:
            log.warning("Skipping score for unknown student code %r", row.student_code)
            continue
        try:
            store.scores.create(student.id, None, week_id, row.points, row.note or "Import")
        except NotFound:
            # deleted since the lookup
            log.warning("Skipping score for student %r, no longer exists", row.student_code)
            continue
        imported += 1
    log.info("Imported %d of the submitted score rows", imported)
    return imported


def read_student_file(filename: str, contents: bytes) -> List[StudentForm]:
    """Parse an uploaded .csv/.xlsx roster into student rows; blank rows are dropped."""
    fname = (filename or "").lower()
    try:
        if fname.endswith(".csv"):
            df = pd.read_csv(io.BytesIO(contents), dtype=str)
        elif fname.endswith((".xlsx", ".xls")):
            df = pd.read_excel(io.BytesIO(contents), dtype=str)
        else:
            raise ValidationError("Unsupported file type. Please upload .csv or .xlsx", field="file")
    except ValidationError:
        raise
    except Exception as e:
        raise ValidationError(f"Could not read file: {e}", field="file") from e

    df.columns = [str(c).strip().lower() for c in df.columns]
    if "code" in df.columns and "student_code" not in df.columns:
        df = df.rename(columns={"code": "student_code"})
    missing = {"name", "student_code"} - set(df.columns)
    if missing:
        raise ValidationError(f"Missing required columns: {', '.join(sorted(missing))}", field="file")

    df = df.fillna("")
    rows = []
    for _, row in df.iterrows():
        name = str(row["name"]).strip()
        code = str(row["student_code"]).strip()
        if name and code:
            rows.append(StudentForm(name=name, student_code=code))
    return rows
