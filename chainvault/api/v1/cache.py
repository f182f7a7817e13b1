"""
Cache API endpoints (wallet data, token metadata, stats)
"""
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from chainvault.api.deps import get_cache_service
from chainvault.api.responses import fail, ok
from chainvault.application.cache import CacheService
from chainvault.application.wallets import ensure_wallet_id


router = APIRouter(prefix="/api/v1/cache", tags=["cache"])


class SetWalletDataRequest(BaseModel):
    wallet_id: str | None = None
    data_type: str | None = None
    data: Any = None


class SetMetadataRequest(BaseModel):
    coin_type: str | None = None
    metadata: Any = None


class SetBatchMetadataRequest(BaseModel):
    metadata_map: dict[str, Any] | None = None


# === Wallet data ===

@router.get("/wallet-data")
def get_wallet_data(
    wallet_id: str | None = None,
    data_type: str | None = None,
    cache: CacheService = Depends(get_cache_service),
):
    if not wallet_id or not data_type:
        return fail("wallet_id and data_type are required")
    ensure_wallet_id(wallet_id)

    data = cache.get_wallet_data(wallet_id, data_type)
    return ok(data, from_cache=data is not None)


@router.post("/wallet-data")
def set_wallet_data(req: SetWalletDataRequest, cache: CacheService = Depends(get_cache_service)):
    if not req.wallet_id or not req.data_type or req.data is None:
        return fail("wallet_id, data_type, and data are required")
    ensure_wallet_id(req.wallet_id)

    cache.set_wallet_data(req.wallet_id, req.data_type, req.data)
    return ok(message="Wallet data cached successfully")


@router.delete("/wallet-data")
def invalidate_wallet_data(
    wallet_id: str | None = None,
    data_type: str | None = None,
    cache: CacheService = Depends(get_cache_service),
):
    if not wallet_id:
        return fail("wallet_id is required")
    ensure_wallet_id(wallet_id)

    cache.invalidate_wallet_data(wallet_id, data_type)
    return ok(message="Wallet data cache invalidated successfully")


# === Token metadata ===

@router.get("/metadata")
def get_metadata(coin_type: str | None = None, cache: CacheService = Depends(get_cache_service)):
    if not coin_type:
        return fail("coin_type is required")

    metadata = cache.get_metadata(coin_type)
    return ok(metadata, from_cache=metadata is not None)


@router.post("/metadata")
def set_metadata(req: SetMetadataRequest, cache: CacheService = Depends(get_cache_service)):
    if not req.coin_type or req.metadata is None:
        return fail("coin_type and metadata are required")

    cache.set_metadata(req.coin_type, req.metadata)
    return ok(message="Metadata cached successfully")


@router.put("/metadata")
def set_batch_metadata(req: SetBatchMetadataRequest, cache: CacheService = Depends(get_cache_service)):
    if req.metadata_map is None:
        return fail("metadata_map is required")

    written = cache.set_batch_metadata(req.metadata_map)
    return ok({"written": written}, message="Batch metadata cached successfully")


# === Stats ===

@router.get("/stats")
def cache_stats(cache: CacheService = Depends(get_cache_service)):
    return ok(cache.get_cache_stats())
