"""Shared FastAPI dependencies."""

from typing import Annotated, Iterator

from fastapi import Header, HTTPException
from sqlalchemy.orm import Session

from common.config import PulseConfig, get_config
from pulse_store.connection import get_session


def get_db_session() -> Iterator[Session]:
    """One store session per request."""
    with get_session() as session:
        yield session


def get_pulse_config() -> PulseConfig:
    return get_config()


def get_user_id(user_id: Annotated[str | None, Header(alias="X-User-Id")] = None) -> str:
    """Caller identity, set by the auth layer in front of this service."""
    if not user_id or not user_id.strip():
        raise HTTPException(status_code=401, detail="Missing user identity")
    return user_id.strip()
