from functools import lru_cache
from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from src.adapters.auth.crypto import TokenSigner
from src.adapters.auth.local_auth import LocalAuthService
from src.adapters.changes import InMemoryChangeChannel
from src.adapters.clock import SystemClock
from src.adapters.dev_email import DevEmailAdapter
from src.adapters.local_storage import LocalObjectStorage
from src.adapters.sqlite.table_store import SQLiteTableStore
from src.app_shell.config import Settings
from src.components.admin import AdminController
from src.components.bootstrap import SessionContext
from src.components.live_sync import LiveSyncController
from src.components.portfolio_view import ViewBuilder, ViewSources
from src.components.repository import Repository
from src.components.uploads import UploadRelay
from src.core.ports.auth import AuthUnavailableError
from src.domain import schema
from src.domain.entities import Session
from src.domain.errors import StoreError
from src.rules.loader import load_rules
from src.rules.models import Rules

# Every dependency below is a process-wide singleton. reset_dependencies()
# clears them so tests can point the app at a fresh data directory.


# --- Settings ---
@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules() -> Rules:
    settings = get_settings()
    if not settings.rules_path.exists():
        return Rules()
    return load_rules(settings.rules_path)


# --- Adapters ---
@lru_cache
def get_clock() -> SystemClock:
    return SystemClock()


@lru_cache
def get_change_channel() -> InMemoryChangeChannel:
    return InMemoryChangeChannel()


@lru_cache
def get_table_store() -> SQLiteTableStore:
    return SQLiteTableStore(get_settings().db_path, publisher=get_change_channel())


@lru_cache
def get_email_adapter() -> DevEmailAdapter:
    return DevEmailAdapter()


@lru_cache
def get_auth_service() -> LocalAuthService:
    settings = get_settings()
    rules = get_rules()
    return LocalAuthService(
        settings.db_path,
        signer=TokenSigner(settings.secret_key),
        time=get_clock(),
        email=get_email_adapter(),
        session_ttl_minutes=rules.sessions.ttl_minutes,
        reset_ttl_minutes=rules.owner.reset_token_ttl_minutes,
    )


@lru_cache
def get_object_storage() -> LocalObjectStorage:
    settings = get_settings()
    return LocalObjectStorage(settings.storage_dir, settings.public_base_url)


# --- Repositories ---
@lru_cache
def get_repositories() -> dict[str, Repository[Any]]:
    rules = get_rules()
    store = get_table_store()
    clock = get_clock()

    schemas = dict(schema.SCHEMAS)
    if rules.skills.enforce_categories:
        schemas[schema.SKILL.table] = schema.SKILL.with_choices(
            "category", tuple(rules.skills.categories)
        )
    return {table: Repository(s, store, clock) for table, s in schemas.items()}


def get_repository(table: str) -> Repository[Any]:
    return get_repositories()[table]


# --- Components ---
@lru_cache
def get_view_builder() -> ViewBuilder:
    repos = get_repositories()
    sources = ViewSources(
        profiles=repos[schema.PROFILE.table],
        projects=repos[schema.PROJECT.table],
        skills=repos[schema.SKILL.table],
        work_experiences=repos[schema.WORK_EXPERIENCE.table],
        education=repos[schema.EDUCATION.table],
        certificates=repos[schema.CERTIFICATE.table],
        references=repos[schema.REFERENCE.table],
    )
    return ViewBuilder(sources, time=get_clock(), defaults=get_rules().stats_defaults)


@lru_cache
def get_live_sync() -> LiveSyncController:
    rules = get_rules().live_sync
    return LiveSyncController(
        get_view_builder(),
        get_change_channel(),
        tables=rules.watched_tables,
        debounce_seconds=rules.debounce_seconds,
    )


@lru_cache
def get_admin_controller() -> AdminController:
    return AdminController(get_repositories().values())


@lru_cache
def get_upload_relay() -> UploadRelay:
    return UploadRelay(get_object_storage(), get_clock(), get_rules().uploads)


@lru_cache
def get_session_context() -> SessionContext:
    return SessionContext(get_auth_service())


def reset_dependencies() -> None:
    for factory in (
        get_settings,
        get_rules,
        get_clock,
        get_change_channel,
        get_table_store,
        get_email_adapter,
        get_auth_service,
        get_object_storage,
        get_repositories,
        get_view_builder,
        get_live_sync,
        get_admin_controller,
        get_upload_relay,
        get_session_context,
    ):
        factory.cache_clear()


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_current_session(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    auth: LocalAuthService = Depends(get_auth_service),
    context: SessionContext = Depends(get_session_context),
) -> Session | None:
    """The owner session for this request, or None when unauthenticated.

    Rejection is left to the components, which raise AuthorizationError.
    """
    # Cookie first (HttpOnly), then the Authorization header
    cookie_token = request.cookies.get("access_token")
    if cookie_token and cookie_token.startswith("Bearer "):
        token = cookie_token.split(" ", 1)[1]

    if not token:
        return None
    try:
        session = auth.verify_token(token)
    except AuthUnavailableError as e:
        raise StoreError(e.args[0]) from e
    if session is None or not context.admits(session):
        return None
    return session


CurrentSession = Annotated[Session | None, Depends(get_current_session)]
