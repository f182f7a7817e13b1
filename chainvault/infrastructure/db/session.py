"""
Storage collaborator: SQLAlchemy engine, per-request sessions, readiness check

Все сервисы (users, wallets, goals, cache) получают Session через get_db;
сами они соединений не открывают.
"""
import psycopg
from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session

from chainvault.config import get_settings


class Base(DeclarativeBase):
    """Общая metadata для таблиц ChainVault (её же читает Alembic)"""
    pass


# Подключение к БД откладывается до первого запроса, а не до импорта
_engine = None
_SessionLocal = None


def get_engine():
    """
    Engine на DATABASE_URL (создаётся один раз)

    pool_pre_ping: после рестарта PostgreSQL пул переподключается сам.
    """
    global _engine
    if _engine is None:
        _engine = create_engine(get_settings().get_sqlalchemy_url(), pool_pre_ping=True)
    return _engine


def get_session_factory():
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=get_engine(), autoflush=False, autocommit=False)
    return _SessionLocal


def get_db() -> Session:
    """
    FastAPI dependency: одна Session на запрос, закрывается после ответа

    Usage:
        @router.post("/", status_code=201)
        def create_wallet(req: CreateWalletRequest, db: Session = Depends(get_db)):
            return ok(CreateWalletUseCase(db).execute(...))
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def check_db_connection() -> None:
    """
    Проверка для /ready: SELECT 1 напрямую через psycopg, мимо пула SQLAlchemy

    Raises:
        psycopg.OperationalError: PostgreSQL недоступен
    """
    dsn = get_settings().DATABASE_URL.replace("postgresql+psycopg://", "postgresql://", 1)
    with psycopg.connect(dsn, connect_timeout=3) as conn:
        conn.execute("SELECT 1")
