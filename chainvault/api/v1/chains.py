"""
Chain registry API: список сетей и проверка адреса
"""
from fastapi import APIRouter
from pydantic import BaseModel

from chainvault.api.responses import ok
from chainvault.domain.chain import ADDRESS_RULES, CHAIN_ALIASES, Chain, resolve_chain, validate_address


router = APIRouter(prefix="/api/v1/chains", tags=["chains"])


class ValidateAddressRequest(BaseModel):
    address: str | None = None
    chain: str | None = None


@router.get("/")
def list_chains():
    """Поддерживаемые сети, их алиасы и правило формата адреса"""
    chains = [
        {
            "chain": chain.value,
            "address_rule": ADDRESS_RULES[chain].name,
            "aliases": sorted(alias for alias, target in CHAIN_ALIASES.items() if target is chain),
        }
        for chain in Chain
    ]
    return ok(chains, count=len(chains))


@router.post("/validate-address")
def check_address(req: ValidateAddressRequest):
    """Проверить адрес без сохранения (для форм на клиенте)"""
    reason = validate_address(req.address, req.chain)
    resolved = resolve_chain(req.chain)
    return ok({
        "valid": reason is None,
        "reason": reason,
        "chain": resolved.value if resolved else None,
    })
