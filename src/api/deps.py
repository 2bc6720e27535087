import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from src.adapters.asset_store import LocalAssetStore
from src.adapters.clock import SystemClock
from src.adapters.fs.filestore import FileSystemStore
from src.adapters.sqlite.repos import SQLiteAuthorRepo, SQLitePostRepo
from src.api.auth_utils import decode_access_token
from src.rules.loader import load_rules
from src.rules.models import Rules
from src.services.publishing import PublishingService


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("BLOCKPRESS_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "blockpress.db")
        self.assets_dir = self.data_dir / "assets"
        self.asset_base_url = os.environ.get("BLOCKPRESS_ASSET_BASE_URL", "/assets")
        self.rules_path = Path(
            os.environ.get("BLOCKPRESS_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )
        self.migrations_dir = self.base_dir / "migrations"


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules_cached(str(settings.rules_path))


@lru_cache
def _load_rules_cached(path: str) -> Rules:
    return load_rules(Path(path))


# --- Repos & adapters ---
def get_post_repo(settings: Settings = Depends(get_settings)) -> SQLitePostRepo:
    return SQLitePostRepo(settings.db_path)


def get_author_repo(settings: Settings = Depends(get_settings)) -> SQLiteAuthorRepo:
    return SQLiteAuthorRepo(settings.db_path)


def get_file_store(settings: Settings = Depends(get_settings)) -> FileSystemStore:
    return FileSystemStore(base_path=settings.assets_dir)


def get_asset_store(
    settings: Settings = Depends(get_settings),
    file_store: FileSystemStore = Depends(get_file_store),
) -> LocalAssetStore:
    return LocalAssetStore(file_store, base_url=settings.asset_base_url)


# Time adapter for deterministic time operations
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Services ---
def get_publishing_service(
    post_repo: SQLitePostRepo = Depends(get_post_repo),
    author_repo: SQLiteAuthorRepo = Depends(get_author_repo),
    asset_store: LocalAssetStore = Depends(get_asset_store),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> PublishingService:
    return PublishingService(
        post_repo=post_repo,
        author_repo=author_repo,
        asset_store=asset_store,
        clock=clock,
        rules=rules,
    )


# --- Identity ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def get_current_principal_id(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> UUID | None:
    """Principal id from the session token, or None when absent/invalid."""
    # 1. Cookie first (the web client stores the token there)
    cookie_token = request.cookies.get("token")
    if cookie_token:
        token = cookie_token.removeprefix("Bearer ").strip()

    if not token:
        return None

    # 2. Decode
    payload = decode_access_token(token)
    if not payload:
        return None

    subject = payload.get("sub")
    if subject is None or not isinstance(subject, str):
        return None

    try:
        return UUID(subject)
    except ValueError:
        return None


async def require_principal_id(
    principal_id: UUID | None = Depends(get_current_principal_id),
) -> UUID:
    if principal_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal_id
