from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from registervault.config import configure_logging, settings
from registervault.db.database import init_db
from registervault.web.routers import home, auth, vocab, entries, categories

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings.ENVIRONMENT)
    init_db()
    yield

app = FastAPI(title="RegisterVault", lifespan=lifespan)

app.include_router(home.router)
app.include_router(auth.router)

app.include_router(vocab.router)
app.include_router(entries.router)
app.include_router(categories.router)
