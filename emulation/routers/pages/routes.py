from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from emulation.templating import render_template

router = APIRouter(tags=["pages"])


@router.get("/", response_class=HTMLResponse, name="pages.index")
def index(request: Request):
    return render_template(request, "index.html")


@router.get("/admin", response_class=HTMLResponse, name="pages.admin")
def admin_page(request: Request):
    # the page itself is public; every API call it makes is admin-gated
    return render_template(request, "admin.html")


@router.get("/user", response_class=HTMLResponse, name="pages.user")
def user_page(request: Request):
    return render_template(request, "user.html")


@router.get("/overview", response_class=HTMLResponse, name="pages.overview")
def overview_page(request: Request):
    return render_template(request, "overview.html")
