from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session
from app.config import settings

_is_sqlite = "sqlite" in settings.DATABASE_URL

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using
    echo=settings.DEBUG,  # Log SQL queries in debug mode
    # SQLite-specific settings
    connect_args={"check_same_thread": False} if _is_sqlite else {},
    **(
        {}
        if _is_sqlite
        else {"pool_size": settings.DB_POOL_SIZE, "max_overflow": settings.DB_MAX_OVERFLOW}
    ),
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """
    FastAPI dependency for database sessions.

    Yields a database session and ensures it's closed after use.

    Usage:
        @app.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.query(Item).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _set_current_tenant(connection, tenant_id: int) -> None:
    connection.execute(
        text("SELECT set_config('app.current_tenant', :tenant_id, true)"),
        {"tenant_id": str(tenant_id)},
    )


@event.listens_for(Session, "after_begin")
def _scope_new_transaction(session, transaction, connection):
    # set_config(..., true) is transaction-local; re-apply after every commit
    tenant_id = session.info.get("tenant_id")
    if tenant_id is not None and connection.dialect.name == "postgresql":
        _set_current_tenant(connection, tenant_id)


def apply_tenant_scope(db: Session, tenant_id: int) -> None:
    """
    Set the tenant used by PostgreSQL row-level security policies.

    The tenant is remembered on the session and applied to every transaction
    it begins. Other dialects rely on the application-level filter only.
    """
    db.info["tenant_id"] = tenant_id
    if db.in_transaction() and db.get_bind().dialect.name == "postgresql":
        _set_current_tenant(db.connection(), tenant_id)
