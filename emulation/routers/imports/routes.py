from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response

from emulation.dependencies import get_store, require_admin
from emulation.schemas.score import ImportScoresForm, ImportStudentsForm
from emulation.services.importing import STUDENT_TEMPLATE_CSV, import_scores, read_student_file
from emulation.store import Store

router = APIRouter(prefix="/api/import", tags=["import"], dependencies=[Depends(require_admin)])


@router.post("/students")
def import_students(form: ImportStudentsForm, store: Store = Depends(get_store)):
    imported = store.students.import_many(form.students)
    return {"success": True, "imported": imported}


@router.post("/students/file")
async def import_students_file(file: UploadFile = File(...), store: Store = Depends(get_store)):
    rows = read_student_file(file.filename, await file.read())
    imported = store.students.import_many(rows)
    return {"success": True, "imported": imported, "total": len(rows)}


@router.get("/students/template.csv")
def students_template():
    return Response(
        STUDENT_TEMPLATE_CSV,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=students_template.csv"},
    )


@router.post("/scores")
def import_score_rows(form: ImportScoresForm, store: Store = Depends(get_store)):
    imported = import_scores(store, form.records, form.week_id)
    return {"success": True, "imported": imported}
