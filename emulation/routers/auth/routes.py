from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from emulation.dependencies import get_store, require_admin
from emulation.schemas.admin import AdminLoginForm, ChangePasswordForm, StudentLoginForm
from emulation.store import Store

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/admin/login")
def admin_login(request: Request, form: AdminLoginForm, store: Store = Depends(get_store)):
    admin = store.admins.login(form.username, form.password)
    if admin is None:
        return JSONResponse({"error": "Sai tài khoản hoặc mật khẩu"}, status_code=401)
    request.session.pop("student", None)
    request.session["admin"] = admin.model_dump(mode="json")
    return {"success": True, "admin": admin}


@router.post("/student/login")
def student_login(request: Request, form: StudentLoginForm, store: Store = Depends(get_store)):
    student = store.students.get_by_code(form.student_code.strip())
    if student is None:
        return JSONResponse({"error": "Mã số học sinh không tồn tại"}, status_code=401)
    request.session.pop("admin", None)
    request.session["student"] = {"id": student.id}
    return {"success": True, "student": student}


@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return {"success": True}


@router.get("/check")
def check(request: Request):
    return {"admin": bool(request.session.get("admin")), "student": bool(request.session.get("student"))}


@router.get("/session")
def current_session(request: Request, store: Store = Depends(get_store)):
    admin = request.session.get("admin")
    if admin:
        return {"type": "admin", "user": admin}

    student_session = request.session.get("student")
    if student_session:
        student = store.students.get_by_id(student_session["id"])
        if student is not None:
            return {"type": "student", "user": student}
        # deleted while logged in
        request.session.pop("student", None)
    return {"type": None, "user": None}


@router.post("/change-password")
def change_password(
    form: ChangePasswordForm,
    admin: Dict[str, Any] = Depends(require_admin),
    store: Store = Depends(get_store),
):
    store.admins.change_password(admin["id"], form.new_password)
    return {"success": True}
