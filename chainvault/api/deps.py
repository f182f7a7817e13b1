"""
FastAPI dependencies (DB session, cache gateway)
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from chainvault.infrastructure.db.session import get_db as _get_db
from chainvault.application.cache import CacheService


# Re-export get_db для удобства
get_db = _get_db


def get_cache_service(db: Session = Depends(get_db)) -> CacheService:
    """
    Cache gateway на сессию запроса

    Usage:
        @router.get("/stats")
        def stats(cache: CacheService = Depends(get_cache_service)):
            ...
    """
    return CacheService(db)
