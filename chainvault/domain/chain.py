"""
Chain registry and address validator

Каждая поддерживаемая сеть привязана ровно к одному правилу формы адреса.
Проверка чисто локальная: без обращений к нодам.
"""
import re
from dataclasses import dataclass
from enum import Enum


class Chain(str, Enum):
    ETHEREUM = "ethereum"
    BITCOIN = "bitcoin"
    SOLANA = "solana"
    SUI = "sui"
    APTOS = "aptos"
    POLYGON = "polygon"
    ARBITRUM = "arbitrum"
    OPTIMISM = "optimism"
    BASE = "base"


@dataclass(frozen=True)
class AddressRule:
    name: str
    patterns: tuple[re.Pattern, ...]
    reason: str

    def matches(self, address: str) -> bool:
        return any(p.fullmatch(address) for p in self.patterns)


EVM_RULE = AddressRule(
    name="evm",
    patterns=(re.compile(r"0x[a-fA-F0-9]{40}"),),
    reason="Invalid Ethereum address format (should be 0x followed by 40 hex characters)",
)

BITCOIN_RULE = AddressRule(
    name="bitcoin",
    patterns=(
        # legacy P2PKH / P2SH (base58)
        re.compile(r"[13][a-km-zA-HJ-NP-Z1-9]{25,34}"),
        # bech32 (segwit); bech32 не смешивает регистры, принимаем оба
        re.compile(r"bc1[a-z0-9]{39,59}", re.IGNORECASE),
    ),
    reason="Invalid Bitcoin address format",
)

SOLANA_RULE = AddressRule(
    name="solana",
    patterns=(re.compile(r"[1-9A-HJ-NP-Za-km-z]{32,44}"),),
    reason="Invalid Solana address format",
)

SUI_RULE = AddressRule(
    name="sui",
    patterns=(re.compile(r"0x[a-fA-F0-9]{64}"),),
    reason="Invalid SUI address format (should be 0x followed by 64 hex characters)",
)

APTOS_RULE = AddressRule(
    name="aptos",
    patterns=(re.compile(r"0x[a-fA-F0-9]{64}"),),
    reason="Invalid Aptos address format (should be 0x followed by 64 hex characters)",
)

ADDRESS_RULES: dict[Chain, AddressRule] = {
    Chain.ETHEREUM: EVM_RULE,
    Chain.POLYGON: EVM_RULE,
    Chain.ARBITRUM: EVM_RULE,
    Chain.OPTIMISM: EVM_RULE,
    Chain.BASE: EVM_RULE,
    Chain.BITCOIN: BITCOIN_RULE,
    Chain.SOLANA: SOLANA_RULE,
    Chain.SUI: SUI_RULE,
    Chain.APTOS: APTOS_RULE,
}

# Короткие имена сетей (тикеры). Для кошельков не принимаются,
# только для проверки адреса.
CHAIN_ALIASES: dict[str, Chain] = {
    "eth": Chain.ETHEREUM,
    "matic": Chain.POLYGON,
    "btc": Chain.BITCOIN,
    "sol": Chain.SOLANA,
}

UNSUPPORTED_CHAIN_REASON = "Unsupported blockchain chain"


def supported_chains() -> list[str]:
    """Канонические имена сетей в порядке объявления"""
    return [c.value for c in Chain]


def is_supported_chain(name: str | None) -> bool:
    """
    Поддерживается ли сеть для кошелька (только канонические имена)

    Example:
        >>> is_supported_chain("Polygon")
        True
        >>> is_supported_chain("matic")
        False
    """
    if not isinstance(name, str):
        return False
    return name.strip().lower() in supported_chains()


def resolve_chain(name: str | None) -> Chain | None:
    """
    Найти сеть по имени или алиасу, без учёта регистра

    Returns:
        Chain или None если сеть не поддерживается
    """
    if not isinstance(name, str):
        return None
    key = name.strip().lower()
    if key in CHAIN_ALIASES:
        return CHAIN_ALIASES[key]
    try:
        return Chain(key)
    except ValueError:
        return None


def validate_address(address: str | None, chain: str | None) -> str | None:
    """
    Проверить адрес на соответствие формату сети

    Args:
        address: Адрес как его прислал клиент (обрезаются только пробелы)
        chain: Имя сети или алиас, регистр не важен

    Returns:
        None если адрес валиден, иначе текст причины

    Example:
        >>> validate_address("0x" + "a" * 40, "ETH")
        >>> validate_address("0x123", "polygon")
        'Invalid Ethereum address format (should be 0x followed by 40 hex characters)'
        >>> validate_address("0x" + "a" * 40, "dogecoin")
        'Unsupported blockchain chain'
    """
    if not isinstance(address, str) or not address.strip():
        return "Address is required"
    if not isinstance(chain, str) or not chain.strip():
        return "Chain is required"

    resolved = resolve_chain(chain)
    if resolved is None:
        return UNSUPPORTED_CHAIN_REASON

    rule = ADDRESS_RULES[resolved]
    if not rule.matches(address.strip()):
        return rule.reason
    return None
