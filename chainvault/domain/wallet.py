"""
Wallet domain rules - validation and normalization of wallet payloads
"""
from typing import Any, Mapping

from chainvault.domain.chain import is_supported_chain, supported_chains, validate_address
from chainvault.domain.validation import ErrorCollector, Ok, ValidationResult, is_blank, required

WALLET_PATCH_FIELDS = ("label", "address", "chain")

DUPLICATE_WALLET_MESSAGE = "Wallet with this address and chain already exists for this user"


def _clean(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def normalize_address(address: str) -> str:
    return address.strip().lower()


def normalize_chain(chain: str) -> str:
    return chain.strip().lower()


def unsupported_chain_message() -> str:
    return f"Unsupported chain. Supported chains: {', '.join(supported_chains())}"


def validate_new_wallet(payload: Mapping[str, Any]) -> ValidationResult:
    """
    Проверить payload создания кошелька

    Собирает все ошибки полей сразу (без short-circuit).
    Проверки существования пользователя и дубликатов делает сервис.

    Returns:
        Ok(value={"label", "address", "chain"}) с нормализованными полями
        или Invalid со списком ошибок
    """
    label = payload.get("label")
    address = payload.get("address")
    chain = payload.get("chain")

    errors = ErrorCollector()
    errors.add("label", required(label, "Wallet label"))
    errors.add("address", required(address, "Wallet address"))
    errors.add("chain", required(chain, "Blockchain chain"))

    has_address = isinstance(address, str) and not is_blank(address)
    has_chain = isinstance(chain, str) and not is_blank(chain)

    if has_chain and not is_supported_chain(chain):
        errors.add("chain", unsupported_chain_message())

    if has_address and has_chain:
        errors.add("address", validate_address(address, chain))

    if errors:
        return errors.result()

    return Ok({
        "label": label.strip(),
        "address": normalize_address(address),
        "chain": normalize_chain(chain),
    })


def validate_wallet_patch(
    current_address: str,
    current_chain: str,
    patch: Mapping[str, Any],
) -> ValidationResult:
    """
    Проверить частичное обновление кошелька

    Адрес всегда проверяется против итоговой пары (address, chain):
    - меняется только address -> против текущей сети
    - меняется только chain -> текущий адрес против новой сети
    - меняются оба -> новая пара целиком

    Args:
        current_address: Адрес кошелька до обновления
        current_chain: Сеть кошелька до обновления
        patch: Только те поля, что прислал клиент (label/address/chain)

    Returns:
        Ok(value=changes) с нормализованными изменениями или Invalid
    """
    errors = ErrorCollector()
    changes: dict[str, str] = {}

    if "label" in patch:
        label = _clean(patch["label"])
        if not label:
            errors.add("label", "Wallet label cannot be empty")
        else:
            changes["label"] = label

    final_address = current_address
    if "address" in patch:
        address = _clean(patch["address"])
        if not address:
            errors.add("address", "Wallet address cannot be empty")
        else:
            final_address = address
            changes["address"] = normalize_address(address)

    final_chain = current_chain
    if "chain" in patch:
        chain = _clean(patch["chain"]).lower()
        if not chain:
            errors.add("chain", "Blockchain chain cannot be empty")
        elif not is_supported_chain(chain):
            errors.add("chain", unsupported_chain_message())
        else:
            final_chain = chain
            changes["chain"] = chain

    if errors:
        return errors.result()

    if "address" in changes or "chain" in changes:
        reason = validate_address(final_address, final_chain)
        errors.add("address" if "address" in changes else "chain", reason)

    return errors.result(changes)
