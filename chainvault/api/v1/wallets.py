"""
Wallet API endpoints
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from chainvault.api.deps import get_db
from chainvault.api.responses import fail, ok, service_health
from chainvault.application.errors import NotFoundError
from chainvault.application.wallets import (
    CreateWalletUseCase,
    DeleteWalletUseCase,
    UpdateWalletUseCase,
    find_wallet_by_address,
    get_wallet_by_id,
    list_all_wallets,
    list_user_wallets,
    list_wallets_by_chain,
)


router = APIRouter(prefix="/api/v1/wallets", tags=["wallets"])


# === Request models ===

class CreateWalletRequest(BaseModel):
    user_id: str
    label: str | None = None
    address: str | None = None
    chain: str | None = None


class UpdateWalletRequest(BaseModel):
    label: str | None = None
    address: str | None = None
    chain: str | None = None


# === Endpoints ===

@router.get("/health")
def wallets_health():
    return service_health("wallets-service")


@router.post("/", status_code=201)
def create_wallet(req: CreateWalletRequest, db: Session = Depends(get_db)):
    """Добавить кошелёк пользователю"""
    wallet = CreateWalletUseCase(db).execute(
        user_id=req.user_id,
        label=req.label,
        address=req.address,
        chain=req.chain,
    )
    return ok(wallet, message="Wallet created successfully")


@router.get("/")
def all_wallets(db: Session = Depends(get_db)):
    """Все кошельки (admin/development)"""
    wallets = list_all_wallets(db)
    return ok(wallets, count=len(wallets))


@router.get("/user/{user_id}")
def user_wallets(user_id: str, db: Session = Depends(get_db)):
    wallets = list_user_wallets(db, user_id)
    return ok(wallets, count=len(wallets))


@router.get("/user/{user_id}/chain/{chain}")
def user_wallets_by_chain(user_id: str, chain: str, db: Session = Depends(get_db)):
    wallets = list_wallets_by_chain(db, user_id, chain)
    return ok(wallets, count=len(wallets))


@router.get("/user/{user_id}/address/{address}/chain/{chain}")
def user_wallet_by_address(user_id: str, address: str, chain: str, db: Session = Depends(get_db)):
    wallet = find_wallet_by_address(db, user_id, address, chain)
    if wallet is None:
        raise NotFoundError("Wallet not found")
    return ok(wallet)


@router.get("/{wallet_id}")
def get_wallet(wallet_id: str, db: Session = Depends(get_db)):
    wallet = get_wallet_by_id(db, wallet_id)
    if wallet is None:
        raise NotFoundError("Wallet not found")
    return ok(wallet)


@router.put("/{wallet_id}")
def update_wallet(wallet_id: str, req: UpdateWalletRequest, db: Session = Depends(get_db)):
    """Частичное обновление: хотя бы одно из label/address/chain"""
    changes = req.model_dump(exclude_unset=True)
    if not changes:
        return fail("At least one field (label, address, chain) is required for update")

    wallet = UpdateWalletUseCase(db).execute(wallet_id, **changes)
    return ok(wallet, message="Wallet updated successfully")


@router.delete("/{wallet_id}")
def delete_wallet(wallet_id: str, db: Session = Depends(get_db)):
    result = DeleteWalletUseCase(db).execute(wallet_id)
    return ok(result, message="Wallet deleted successfully")
