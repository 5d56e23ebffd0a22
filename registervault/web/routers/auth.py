from __future__ import annotations
from fastapi import APIRouter, Request, Form
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from registervault.config import settings
from registervault.data.user_repo import UserRepo
from registervault.data.session_repo import SessionRepo
from registervault.errors import VaultError
from registervault.service.auth_service import AuthService, AuthResult

router = APIRouter()
templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))
auth_service = AuthService(UserRepo(), SessionRepo())

def _signed_in(result: AuthResult) -> RedirectResponse:
    resp = RedirectResponse(url="/vocab", status_code=303)
    resp.set_cookie(settings.SESSION_COOKIE_NAME, result.session_token, httponly=True, samesite="lax")
    return resp

@router.get("/register", response_class=HTMLResponse)
def register_form(request: Request):
    return templates.TemplateResponse(request, "register.html", {"user": None, "error": None})

@router.post("/register")
def register(request: Request, username: str = Form(...), password: str = Form(...)):
    try:
        result = auth_service.register(username, password)
    except VaultError as e:
        return templates.TemplateResponse(request, "register.html", {"user": None, "error": e.message}, status_code=400)
    return _signed_in(result)

@router.get("/login", response_class=HTMLResponse)
def login_form(request: Request):
    return templates.TemplateResponse(request, "login.html", {"user": None, "error": None})

@router.post("/login")
def login(request: Request, username: str = Form(...), password: str = Form(...)):
    try:
        result = auth_service.login(username, password)
    except VaultError as e:
        return templates.TemplateResponse(request, "login.html", {"user": None, "error": e.message}, status_code=400)
    return _signed_in(result)

@router.post("/logout")
def logout(request: Request):
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        auth_service.logout(token)
    resp = RedirectResponse(url="/", status_code=303)
    resp.delete_cookie(settings.SESSION_COOKIE_NAME)
    return resp
