from __future__ import annotations
from typing import List
from urllib.parse import urlencode

from fastapi import APIRouter, Request, Query
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from registervault.config import settings
from registervault.models.vocab import FormalityLevel, SpecializedRegister
from registervault.service.category_service import search_categories
from registervault.service.filtering import FilterState, filter_entries
from registervault.service.read_model import summarize
from registervault.web.dependencies import category_service, read_model, require_user

router = APIRouter()
templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))


def _query_string(state: FilterState, category_q: str = "") -> str:
    params: list[tuple[str, str]] = []
    if state.search_term:
        params.append(("q", state.search_term))
    params += [("formality", f.value) for f in FormalityLevel if f in state.formality]
    params += [("register", r.value) for r in SpecializedRegister if r in state.registers]
    params += [("category", str(c)) for c in sorted(state.categories)]
    if category_q:
        params.append(("category_q", category_q))
    return urlencode(params)


def _toggle_url(state: FilterState, kind: str, value, category_q: str = "") -> str:
    if kind == "formality":
        state = state.toggle_formality(value)
    elif kind == "register":
        state = state.toggle_register(value)
    elif kind == "category":
        state = state.toggle_category(value)
    else:
        raise ValueError(f"Unknown facet: {kind}")
    qs = _query_string(state, category_q)
    return f"/vocab?{qs}" if qs else "/vocab"


@router.get("/vocab", response_class=HTMLResponse)
def vocab_home(
    request: Request,
    q: str = "",
    formality: List[FormalityLevel] = Query([]),
    register: List[SpecializedRegister] = Query([]),
    category: List[int] = Query([]),
    category_q: str = "",
):
    """Vocabulary list with search and facet filters taken from the query string."""
    user, redirect = require_user(request)
    if redirect:
        return redirect

    state = FilterState(
        search_term=q,
        formality=frozenset(formality),
        registers=frozenset(register),
        categories=frozenset(category),
    )
    entries = read_model.list_entries(user.id)
    filtered = filter_entries(entries, state)
    categories = category_service.list_categories(user.id)

    return templates.TemplateResponse(
        request,
        "vocab.html",
        {
            "user": user,
            "entries": entries,
            "filtered": filtered,
            "stats": summarize(entries, filtered),
            "filters": state,
            "categories": search_categories(categories, category_q),
            "category_q": category_q,
            "formality_levels": list(FormalityLevel),
            "registers": list(SpecializedRegister),
            "toggle_url": lambda kind, value: _toggle_url(state, kind, value, category_q),
        },
    )
