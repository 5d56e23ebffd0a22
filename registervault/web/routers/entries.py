from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.datastructures import FormData

from registervault.config import settings
from registervault.errors import NotFoundError, ValidationError, VaultError
from registervault.models.user import User
from registervault.models.vocab import (
    Attitude,
    Dialect,
    FormalityLevel,
    PartOfSpeech,
    SpecializedRegister,
    VocabularyEntry,
)
from registervault.service.entry_editor import EntryEditor
from registervault.web.dependencies import category_service, make_editor, read_model, require_user

router = APIRouter()
templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))


def _enum(enum_cls, raw: str, field: str):
    try:
        return enum_cls(raw)
    except ValueError as e:
        raise ValidationError(f"Invalid {field}: {raw!r}") from e


def _int(raw: str, field: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise ValidationError(f"Invalid {field}: {raw!r}") from e


def _apply_form(editor: EntryEditor, form: FormData) -> None:
    """Load the posted editor state into a freshly opened editor.

    The page round-trips the whole editor state on every post: scalar fields,
    checked registers and categories, and the current alternatives as parallel
    `alt_*` lists.
    """
    state = editor.state
    state.word = str(form.get("word", ""))
    state.definition = str(form.get("definition", ""))
    state.part_of_speech = _enum(PartOfSpeech, str(form.get("part_of_speech", PartOfSpeech.NOUN.value)), "part of speech")
    state.context = str(form.get("context", ""))
    state.cultural_note = str(form.get("cultural_note", ""))
    state.formality_level = _enum(FormalityLevel, str(form.get("formality_level", FormalityLevel.NEUTRAL.value)), "formality level")
    state.attitude = _enum(Attitude, str(form.get("attitude", Attitude.NEUTRAL.value)), "attitude")
    dialect = str(form.get("dialect", ""))
    state.dialect = _enum(Dialect, dialect, "dialect") if dialect else None

    state.specialized_registers = []
    for raw in dict.fromkeys(form.getlist("specialized_registers")):
        editor.toggle_register(_enum(SpecializedRegister, str(raw), "register"))

    state.category_ids = []
    for raw in form.getlist("category_ids"):
        editor.add_category(_int(str(raw), "category"))

    state.alternatives = []
    for word, definition, register in zip(form.getlist("alt_word"), form.getlist("alt_definition"), form.getlist("alt_register")):
        editor.add_alternative(str(word), str(definition), _enum(FormalityLevel, str(register), "alternative register"))

    editor.quick_create.name = str(form.get("new_category_name", ""))
    editor.quick_create.description = str(form.get("new_category_description", ""))
    editor.quick_create.color = str(form.get("new_category_color", "")) or settings.DEFAULT_CATEGORY_COLOR


def _render(request: Request, user: User, editor: EntryEditor, error: str | None = None, status_code: int = 200):
    return templates.TemplateResponse(
        request,
        "entry_form.html",
        {
            "user": user,
            "editor": editor,
            "state": editor.state,
            "categories": category_service.list_categories(user.id),
            "parts_of_speech": list(PartOfSpeech),
            "formality_levels": list(FormalityLevel),
            "registers": list(SpecializedRegister),
            "attitudes": list(Attitude),
            "dialects": list(Dialect),
            "error": error,
        },
        status_code=status_code,
    )


def _owned_entry(user: User, entry_id: int) -> VocabularyEntry:
    entry = read_model.get_entry(user.id, entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Entry {entry_id} not found")
    return entry


async def _handle_post(request: Request, user: User, entry: Optional[VocabularyEntry]):
    form = await request.form()
    editor = make_editor(user.id)
    editor.open(entry)
    action = str(form.get("action", "save"))
    try:
        _apply_form(editor, form)
        if action == "add_alternative":
            editor.add_alternative(
                str(form.get("new_alt_word", "")),
                str(form.get("new_alt_definition", "")),
                _enum(FormalityLevel, str(form.get("new_alt_register", FormalityLevel.NEUTRAL.value)), "alternative register"),
            )
            return _render(request, user, editor)
        if action.startswith("remove_alternative:"):
            editor.remove_alternative(_int(action.split(":", 1)[1], "alternative index"))
            return _render(request, user, editor)
        if action == "quick_category":
            editor.open_quick_create()
            editor.submit_quick_create()
            return _render(request, user, editor)
        editor.submit()
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    except VaultError as e:
        return _render(request, user, editor, error=e.message, status_code=400)
    return RedirectResponse(url="/vocab", status_code=303)


@router.get("/entries/new", response_class=HTMLResponse)
def new_entry(request: Request):
    user, redirect = require_user(request)
    if redirect:
        return redirect
    editor = make_editor(user.id)
    editor.open()
    return _render(request, user, editor)


@router.get("/entries/{entry_id}/edit", response_class=HTMLResponse)
def edit_entry(request: Request, entry_id: int):
    user, redirect = require_user(request)
    if redirect:
        return redirect
    editor = make_editor(user.id)
    editor.open(_owned_entry(user, entry_id))
    return _render(request, user, editor)


@router.post("/entries")
async def create_entry(request: Request):
    user, redirect = require_user(request)
    if redirect:
        return redirect
    return await _handle_post(request, user, None)


@router.post("/entries/{entry_id}")
async def update_entry(request: Request, entry_id: int):
    user, redirect = require_user(request)
    if redirect:
        return redirect
    return await _handle_post(request, user, _owned_entry(user, entry_id))


@router.post("/entries/{entry_id}/delete")
def delete_entry(request: Request, entry_id: int):
    user, redirect = require_user(request)
    if redirect:
        return redirect
    try:
        make_editor(user.id).delete_entry(entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    return RedirectResponse(url="/vocab", status_code=303)
