"""
SQLAlchemy ORM models (users, wallets, goals, cache namespaces)
"""
from datetime import date as date_type, datetime
from sqlalchemy import String, Text, TIMESTAMP, Date, Float, Boolean, UniqueConstraint, Index, func
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import JSONB

from chainvault.infrastructure.db.session import Base
from chainvault.utils.ids import new_id


class User(Base):
    """
    User model - минимальная учётная запись

    Для кошельков и целей важно только одно: существует ли user_id.
    """
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    tier: Mapped[str] = mapped_column(String(32), nullable=False, server_default="free")
    # Произвольные настройки UI (theme, skill level, ...)
    preferences: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )


class WalletModel(Base):
    """
    Кошелёк пользователя: адрес в конкретной сети

    address и chain хранятся в нижнем регистре, поэтому уникальность
    (user_id, address, chain) проверяется без учёта регистра.
    """
    __tablename__ = "wallets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    address: Mapped[str] = mapped_column(String(128), nullable=False)
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    chain: Mapped[str] = mapped_column(String(32), nullable=False)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "address", "chain", name="uq_wallet_user_address_chain"),
        Index("ix_wallets_user_chain", "user_id", "chain"),
    )


class GoalModel(Base):
    """
    Цель накопления в конкретной монете

    progress - рекомендательное значение, которое присылает клиент.
    progress_percentage не хранится: считается из current/target при чтении.
    """
    __tablename__ = "goals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    status: Mapped[str] = mapped_column(String(32), nullable=False, server_default="active")
    progress: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")

    coin: Mapped[str] = mapped_column(String(64), nullable=False)
    coin_symbol: Mapped[str] = mapped_column(String(16), nullable=False)
    current_amount: Mapped[float] = mapped_column(Float, nullable=False)
    target_amount: Mapped[float] = mapped_column(Float, nullable=False)
    target_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)

    # Привязка к кошельку (опционально)
    wallet_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    wallet_address: Mapped[str | None] = mapped_column(String(128), nullable=True)
    wallet_chain: Mapped[str | None] = mapped_column(String(32), nullable=True)

    goal_type: Mapped[str] = mapped_column(String(16), nullable=False)  # regular, parent, subgoal
    parent_goal_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    is_aggregate: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")
    milestones: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    notes: Mapped[str] = mapped_column(Text, nullable=False, server_default="")

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)


# ============================================================================
# Cache namespaces (данные из блокчейн-нод)
# ============================================================================


class WalletDataCache(Base):
    """
    Кэш данных кошелька: (wallet_id, data_type) -> JSON
    """
    __tablename__ = "wallet_data_cache"

    id: Mapped[int] = mapped_column(primary_key=True)
    wallet_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    data_type: Mapped[str] = mapped_column(String(64), nullable=False)
    data: Mapped[dict] = mapped_column(JSONB, nullable=False)
    last_fetched: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("wallet_id", "data_type", name="uq_wallet_data_cache_key"),
    )


class MetadataCache(Base):
    """
    Кэш метаданных токенов: coin_type -> JSON
    """
    __tablename__ = "metadata_cache"

    id: Mapped[int] = mapped_column(primary_key=True)
    coin_type: Mapped[str] = mapped_column(String(512), unique=True, nullable=False)
    metadata_json: Mapped[dict] = mapped_column("metadata", JSONB, nullable=False)
    last_fetched: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
