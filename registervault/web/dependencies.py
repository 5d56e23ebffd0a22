from __future__ import annotations
from typing import Optional
from fastapi import Request
from fastapi.responses import RedirectResponse
from registervault.config import settings
from registervault.data.category_repo import CategoryRepo
from registervault.data.entry_repo import EntryRepo
from registervault.data.session_repo import SessionRepo
from registervault.data.user_repo import UserRepo
from registervault.models.user import User
from registervault.service.category_service import CategoryService
from registervault.service.entry_editor import EntryEditor
from registervault.service.read_model import VocabularyReadModel

session_repo = SessionRepo()
user_repo = UserRepo()
entry_repo = EntryRepo()

# Shared by every router so a write anywhere invalidates what /vocab reads.
read_model = VocabularyReadModel(entry_repo)
category_service = CategoryService(CategoryRepo(), read_model)

def get_current_user(request: Request) -> Optional[User]:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    user_id = session_repo.get_user_id_by_token(token)
    if user_id is None:
        return None
    return user_repo.get_user_by_id(user_id)

def require_user(request: Request):
    user = get_current_user(request)
    if not user:
        return None, RedirectResponse(url="/login", status_code=303)
    return user, None

def make_editor(user_id: Optional[int]) -> EntryEditor:
    return EntryEditor(entry_repo, category_service, read_model, user_id)
