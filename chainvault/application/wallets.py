"""
Wallet use cases - business logic for wallet records

Процесс создания:
1. Валидация полей (все ошибки сразу)
2. Пользователь существует
3. Нет кошелька с тем же (user, address, chain)
4. Запись с нормализованными address/chain
"""
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chainvault.application.errors import (
    BusinessRuleError,
    InvalidIdError,
    NotFoundError,
    ReferenceNotFoundError,
    ValidationFailed,
)
from chainvault.application.users import ensure_user_id, user_exists
from chainvault.domain.validation import Invalid
from chainvault.domain.wallet import (
    DUPLICATE_WALLET_MESSAGE,
    normalize_address,
    normalize_chain,
    validate_new_wallet,
    validate_wallet_patch,
)
from chainvault.infrastructure.db.models import WalletModel
from chainvault.utils.ids import is_valid_id

logger = logging.getLogger(__name__)


class WalletValidationError(ValidationFailed):
    """Ошибка валидации кошелька"""
    pass


class DuplicateWalletError(BusinessRuleError):
    def __init__(self, message: str = DUPLICATE_WALLET_MESSAGE):
        super().__init__(message)


def ensure_wallet_id(wallet_id: Any) -> str:
    if not is_valid_id(wallet_id):
        raise InvalidIdError("Invalid wallet ID format")
    return wallet_id


def wallet_to_dict(wallet: WalletModel) -> dict:
    return {
        "id": wallet.id,
        "user_id": wallet.user_id,
        "address": wallet.address,
        "label": wallet.label,
        "chain": wallet.chain,
        "created_at": wallet.created_at.isoformat(),
        "updated_at": wallet.updated_at.isoformat(),
    }


def _find_duplicate(
    db: Session,
    user_id: str,
    address: str,
    chain: str,
    exclude_id: str | None = None,
) -> WalletModel | None:
    query = db.query(WalletModel).filter(
        WalletModel.user_id == user_id,
        WalletModel.address == address,
        WalletModel.chain == chain,
    )
    if exclude_id is not None:
        query = query.filter(WalletModel.id != exclude_id)
    return query.first()


# === Queries ===

def get_wallet_by_id(db: Session, wallet_id: str) -> dict | None:
    ensure_wallet_id(wallet_id)
    wallet = db.query(WalletModel).filter(WalletModel.id == wallet_id).first()
    return wallet_to_dict(wallet) if wallet else None


def list_user_wallets(db: Session, user_id: str) -> list[dict]:
    ensure_user_id(user_id)
    wallets = (
        db.query(WalletModel)
        .filter(WalletModel.user_id == user_id)
        .order_by(WalletModel.created_at.asc())
        .all()
    )
    return [wallet_to_dict(w) for w in wallets]


def list_all_wallets(db: Session) -> list[dict]:
    return [wallet_to_dict(w) for w in db.query(WalletModel).order_by(WalletModel.created_at.asc()).all()]


def find_wallet_by_address(db: Session, user_id: str, address: str, chain: str) -> dict | None:
    """Найти кошелёк пользователя по адресу и сети (без учёта регистра)"""
    ensure_user_id(user_id)
    wallet = _find_duplicate(db, user_id, normalize_address(address), normalize_chain(chain))
    return wallet_to_dict(wallet) if wallet else None


def list_wallets_by_chain(db: Session, user_id: str, chain: str) -> list[dict]:
    ensure_user_id(user_id)
    wallets = (
        db.query(WalletModel)
        .filter(
            WalletModel.user_id == user_id,
            WalletModel.chain == normalize_chain(chain),
        )
        .order_by(WalletModel.created_at.asc())
        .all()
    )
    return [wallet_to_dict(w) for w in wallets]


# === Use cases ===

class CreateWalletUseCase:
    """Use case: Добавить кошелёк пользователю"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: str, label: str, address: str, chain: str) -> dict:
        """
        Создать кошелёк

        Args:
            user_id: ID владельца
            label: Название кошелька (обрезается, регистр сохраняется)
            address: Адрес в формате сети
            chain: Сеть (ethereum, bitcoin, solana, sui, aptos, polygon, ...)

        Returns:
            Созданный кошелёк (dict)

        Raises:
            WalletValidationError: ошибки полей (одной строкой)
            ReferenceNotFoundError: пользователь не найден
            DuplicateWalletError: такой (address, chain) уже есть у пользователя
        """
        result = validate_new_wallet({"label": label, "address": address, "chain": chain})
        if isinstance(result, Invalid):
            raise WalletValidationError(result)
        fields = result.value

        ensure_user_id(user_id)
        if not user_exists(self.db, user_id):
            raise ReferenceNotFoundError("User not found")

        if _find_duplicate(self.db, user_id, fields["address"], fields["chain"]):
            raise DuplicateWalletError()

        now = datetime.now(timezone.utc)
        wallet = WalletModel(
            user_id=user_id,
            address=fields["address"],
            label=fields["label"],
            chain=fields["chain"],
            created_at=now,
            updated_at=now,
        )
        self.db.add(wallet)
        try:
            self.db.commit()
        except IntegrityError:
            # Параллельный запрос успел раньше: уникальный индекс сработал
            self.db.rollback()
            raise DuplicateWalletError()

        logger.info(
            "Wallet created: id=%s user_id=%s chain=%s address=%s",
            wallet.id, user_id, wallet.chain, wallet.address,
        )
        return wallet_to_dict(wallet)


class UpdateWalletUseCase:
    """Use case: Частично обновить кошелёк (label / address / chain)"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, wallet_id: str, **changes) -> dict:
        ensure_wallet_id(wallet_id)
        wallet = self.db.query(WalletModel).filter(WalletModel.id == wallet_id).first()
        if not wallet:
            raise NotFoundError("Wallet not found")

        result = validate_wallet_patch(wallet.address, wallet.chain, changes)
        if isinstance(result, Invalid):
            raise WalletValidationError(result)
        fields = result.value

        if "address" in fields or "chain" in fields:
            new_address = fields.get("address", wallet.address)
            new_chain = fields.get("chain", wallet.chain)
            if _find_duplicate(self.db, wallet.user_id, new_address, new_chain, exclude_id=wallet.id):
                raise DuplicateWalletError()

        for key, value in fields.items():
            setattr(wallet, key, value)
        wallet.updated_at = datetime.now(timezone.utc)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateWalletError()

        logger.info("Wallet updated: id=%s fields=%s", wallet_id, sorted(fields))
        return wallet_to_dict(wallet)


class DeleteWalletUseCase:
    """Use case: Удалить кошелёк"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, wallet_id: str) -> dict:
        ensure_wallet_id(wallet_id)
        wallet = self.db.query(WalletModel).filter(WalletModel.id == wallet_id).first()
        if not wallet:
            raise NotFoundError("Wallet not found")

        label, chain, address = wallet.label, wallet.chain, wallet.address
        self.db.delete(wallet)
        self.db.commit()

        logger.info("Wallet deleted: id=%s label=%s chain=%s address=%s", wallet_id, label, chain, address)
        return {"id": wallet_id, "message": "Wallet deleted successfully"}
