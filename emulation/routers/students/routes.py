from typing import List

from fastapi import APIRouter, Depends

from emulation.dependencies import get_store, require_admin
from emulation.schemas.student import PointsForm, StudentForm, StudentOut
from emulation.store import Store

router = APIRouter(prefix="/api", tags=["students"], dependencies=[Depends(require_admin)])


@router.get("/students", response_model=List[StudentOut])
def list_students(store: Store = Depends(get_store)):
    return store.students.get_all()


@router.post("/students")
def create_student(form: StudentForm, store: Store = Depends(get_store)):
    student_id = store.students.create(form.name, form.student_code)
    return {"success": True, "id": student_id}


@router.put("/students/{student_id}")
def update_student(student_id: str, form: StudentForm, store: Store = Depends(get_store)):
    store.students.update(student_id, form.name, form.student_code)
    return {"success": True}


@router.put("/students/{student_id}/points")
def override_points(student_id: str, form: PointsForm, store: Store = Depends(get_store)):
    store.students.update_points(student_id, form.points)
    return {"success": True}


@router.delete("/students/{student_id}")
def delete_student(student_id: str, store: Store = Depends(get_store)):
    store.students.delete(student_id)
    return {"success": True}


@router.post("/reset-points")
def reset_points(store: Store = Depends(get_store)):
    reset = store.students.reset_all_points()
    return {"success": True, "reset": reset}
