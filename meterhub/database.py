"""
SQLAlchemy engine and session setup.

Usage in FastAPI route handlers:
    from meterhub.database import get_db
    def my_route(db: Session = Depends(get_db)): ...

Usage in RQ worker jobs and scripts (synchronous):
    from meterhub.database import SessionLocal
    with SessionLocal() as db:
        ...
"""

from collections.abc import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from meterhub.settings import settings

# ── Engine ─────────────────────────────────────────────────────────────────
# pool_pre_ping=True: validates connections before use — important for
# long-lived worker processes that may outlive a Postgres connection.
if settings.is_sqlite:
    # SQLite (tests, local experiments): connections are shared with the
    # TestClient thread, and pool sizing does not apply.
    _engine_kwargs: dict = {"connect_args": {"check_same_thread": False}}
else:
    _engine_kwargs = {"pool_size": 5, "max_overflow": 10}

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    echo=settings.is_development,  # log SQL in dev only
    **_engine_kwargs,
)

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    class_=Session,
)


# ── FastAPI dependency ──────────────────────────────────────────────────────
def get_db() -> Generator[Session, None, None]:
    """Yield a database session, ensuring it is closed after the request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ── Schema helpers ──────────────────────────────────────────────────────────
def reset_schema() -> None:
    """Drop and recreate all tables. Backs DELETE /setupDB."""
    from meterhub.models.base import Base
    import meterhub.models  # noqa: F401 — registers all models

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


# ── Health check helper ─────────────────────────────────────────────────────
def check_db_connection() -> bool:
    """Return True if the database is reachable. Used by /health endpoint."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
