"""
Cache gateway for data fetched from blockchain nodes

Два независимых namespace'а:
- wallet data: (wallet_id, data_type) -> JSON
- token metadata: coin_type -> JSON

Кэш рекомендательный: если БД недоступна, чтение возвращает None (промах),
а запись молча пропускается. Запрос из-за кэша не падает никогда.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chainvault.infrastructure.db.models import MetadataCache, WalletDataCache
from chainvault.utils.ids import is_valid_id

logger = logging.getLogger(__name__)


def _empty_stats() -> dict:
    return {
        "total_entries": 0,
        "total_size": 0,
        "hit_rate": 0,
        "miss_rate": 0,
        "last_cleared": datetime.now(timezone.utc).isoformat(),
        "chains": {},
    }


class CacheService:
    """
    Read/write-through кэш поверх таблиц wallet_data_cache и metadata_cache

    Fetch-on-miss здесь не делается: при промахе вызывающий сам идёт в ноду
    и затем кладёт результат через set_*.
    """

    def __init__(self, db: Session):
        self.db = db

    def _degrade(self, operation: str, exc: Exception) -> None:
        logger.warning("Cache %s failed, treating as miss/no-op: %s", operation, exc)
        try:
            self.db.rollback()
        except SQLAlchemyError:
            logger.warning("Cache rollback after failed %s also failed", operation)

    # === Wallet data ===

    def get_wallet_data(self, wallet_id: str, data_type: str) -> Any | None:
        if not is_valid_id(wallet_id):
            logger.debug("Cache lookup with malformed wallet_id=%r", wallet_id)
            return None
        try:
            entry = self.db.query(WalletDataCache).filter(
                WalletDataCache.wallet_id == wallet_id,
                WalletDataCache.data_type == data_type,
            ).first()
        except SQLAlchemyError as exc:
            self._degrade("get_wallet_data", exc)
            return None

        if entry is None:
            logger.debug("Cache miss for wallet data: wallet_id=%s data_type=%s", wallet_id, data_type)
            return None
        logger.debug("Cache hit for wallet data: wallet_id=%s data_type=%s", wallet_id, data_type)
        return entry.data

    def set_wallet_data(self, wallet_id: str, data_type: str, data: Any) -> None:
        if not is_valid_id(wallet_id):
            logger.debug("Cache write with malformed wallet_id=%r dropped", wallet_id)
            return
        try:
            entry = self.db.query(WalletDataCache).filter(
                WalletDataCache.wallet_id == wallet_id,
                WalletDataCache.data_type == data_type,
            ).first()
            now = datetime.now(timezone.utc)
            if entry is None:
                self.db.add(WalletDataCache(
                    wallet_id=wallet_id,
                    data_type=data_type,
                    data=data,
                    last_fetched=now,
                ))
            else:
                entry.data = data
                entry.last_fetched = now
            self.db.commit()
        except SQLAlchemyError as exc:
            self._degrade("set_wallet_data", exc)

    def invalidate_wallet_data(self, wallet_id: str, data_type: str | None = None) -> None:
        """Удалить записи кошелька; без data_type - все типы данных"""
        if not is_valid_id(wallet_id):
            return
        try:
            query = self.db.query(WalletDataCache).filter(WalletDataCache.wallet_id == wallet_id)
            if data_type:
                query = query.filter(WalletDataCache.data_type == data_type)
            deleted = query.delete(synchronize_session=False)
            self.db.commit()
            logger.info(
                "Wallet data cache invalidated: wallet_id=%s data_type=%s deleted=%d",
                wallet_id, data_type, deleted,
            )
        except SQLAlchemyError as exc:
            self._degrade("invalidate_wallet_data", exc)

    # === Token metadata ===

    def get_metadata(self, coin_type: str) -> Any | None:
        try:
            entry = self.db.query(MetadataCache).filter(MetadataCache.coin_type == coin_type).first()
        except SQLAlchemyError as exc:
            self._degrade("get_metadata", exc)
            return None

        if entry is None:
            logger.debug("Cache miss for metadata: coin_type=%s", coin_type)
            return None
        logger.debug("Cache hit for metadata: coin_type=%s", coin_type)
        return entry.metadata_json

    def _upsert_metadata(self, coin_type: str, metadata: Any) -> None:
        entry = self.db.query(MetadataCache).filter(MetadataCache.coin_type == coin_type).first()
        now = datetime.now(timezone.utc)
        if entry is None:
            self.db.add(MetadataCache(coin_type=coin_type, metadata_json=metadata, last_fetched=now))
        else:
            entry.metadata_json = metadata
            entry.last_fetched = now
        self.db.commit()

    def set_metadata(self, coin_type: str, metadata: Any) -> None:
        try:
            self._upsert_metadata(coin_type, metadata)
        except SQLAlchemyError as exc:
            self._degrade("set_metadata", exc)

    def set_batch_metadata(self, metadata_map: Mapping[str, Any]) -> int:
        """
        Записать метаданные пачкой

        Каждая запись коммитится отдельно: упавшая запись пропускается,
        остальные сохраняются.

        Returns:
            Количество успешно записанных coin_type
        """
        written = 0
        for coin_type, metadata in metadata_map.items():
            try:
                self._upsert_metadata(coin_type, metadata)
                written += 1
            except SQLAlchemyError as exc:
                self._degrade(f"set_batch_metadata[{coin_type}]", exc)
        return written

    # === Stats ===

    def get_cache_stats(self) -> dict:
        """
        Статистика кэша

        Реально считается только total_entries. total_size, hit_rate,
        miss_rate и chains - заглушки (всегда 0 / {}), last_cleared - текущее время.
        """
        stats = _empty_stats()
        try:
            wallet_data_count = self.db.query(WalletDataCache).count()
            metadata_count = self.db.query(MetadataCache).count()
        except SQLAlchemyError as exc:
            self._degrade("get_cache_stats", exc)
            return stats

        stats["total_entries"] = wallet_data_count + metadata_count
        return stats
