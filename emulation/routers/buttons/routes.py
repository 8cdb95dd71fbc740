from typing import List

from fastapi import APIRouter, Depends

from emulation.dependencies import get_store, require_admin
from emulation.schemas.button import ButtonForm, ButtonOut
from emulation.store import Store

router = APIRouter(prefix="/api/buttons", tags=["buttons"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[ButtonOut])
def list_buttons(store: Store = Depends(get_store)):
    return store.buttons.get_all()


@router.get("/type/{button_type}", response_model=List[ButtonOut])
def buttons_by_type(button_type: str, store: Store = Depends(get_store)):
    return store.buttons.get_by_type(button_type)


@router.post("")
def create_button(form: ButtonForm, store: Store = Depends(get_store)):
    button_id = store.buttons.create(form.name, form.points, form.type)
    return {"success": True, "id": button_id}


@router.delete("/{button_id}")
def delete_button(button_id: str, store: Store = Depends(get_store)):
    store.buttons.delete(button_id)
    return {"success": True}
