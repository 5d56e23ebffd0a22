from __future__ import annotations
from fastapi import APIRouter, Request, Form
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from registervault.config import settings
from registervault.errors import NotFoundError, VaultError
from registervault.models.user import User
from registervault.service.category_service import search_categories
from registervault.web.dependencies import category_service, require_user

router = APIRouter()
templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))


def _render(request: Request, user: User, q: str = "", error: str | None = None, status_code: int = 200):
    categories = search_categories(category_service.list_categories(user.id), q)
    return templates.TemplateResponse(
        request,
        "categories.html",
        {
            "user": user,
            "categories": categories,
            "q": q,
            "default_color": settings.DEFAULT_CATEGORY_COLOR,
            "error": error,
        },
        status_code=status_code,
    )


@router.get("/categories", response_class=HTMLResponse)
def list_categories(request: Request, q: str = ""):
    user, redirect = require_user(request)
    if redirect:
        return redirect
    return _render(request, user, q)


@router.post("/categories")
def create_category(request: Request, name: str = Form(""), description: str = Form(""), color: str = Form("")):
    user, redirect = require_user(request)
    if redirect:
        return redirect
    try:
        category_service.create_category(user.id, name, description, color)
    except VaultError as e:
        return _render(request, user, error=e.message, status_code=400)
    return RedirectResponse(url="/categories", status_code=303)


@router.post("/categories/{category_id}")
def update_category(request: Request, category_id: int, name: str = Form(""), description: str = Form(""), color: str = Form("")):
    user, redirect = require_user(request)
    if redirect:
        return redirect
    try:
        category_service.update_category(user.id, category_id, name, description, color)
    except NotFoundError as e:
        return _render(request, user, error=e.message, status_code=404)
    except VaultError as e:
        return _render(request, user, error=e.message, status_code=400)
    return RedirectResponse(url="/categories", status_code=303)


@router.post("/categories/{category_id}/delete")
def delete_category(request: Request, category_id: int):
    user, redirect = require_user(request)
    if redirect:
        return redirect
    try:
        category_service.delete_category(user.id, category_id)
    except NotFoundError as e:
        return _render(request, user, error=e.message, status_code=404)
    except VaultError as e:
        return _render(request, user, error=e.message, status_code=400)
    return RedirectResponse(url="/categories", status_code=303)
