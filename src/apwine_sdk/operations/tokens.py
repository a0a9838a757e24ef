"""ERC20 approvals, allowances and AMM token lookups."""

import asyncio
import logging
from typing import Optional, Union

from ..contracts.capability import Capability, ensure_signer
from ..contracts.handles import ContractHandle, get_token_contract
from ..core.config import Network, get_network_chain_id
from ..core.types import TokenAmount, TokenKind, TransactionOptions, TransactionResult

logger = logging.getLogger(__name__)

_AMM_TOKEN_GETTERS = {
    TokenKind.PT: 'getPTAddress',
    TokenKind.FYT: 'getFYTAddress',
    TokenKind.UNDERLYING: 'getUnderlyingOfIBTAddress',
}


async def approve(
    signer: Optional[Capability],
    spender: str,
    token_address: str,
    amount: int
) -> TransactionResult:
    """Approve ``spender`` for ``amount`` of a token.

    The approval is always submitted, whatever the current allowance.
    """
    signer = ensure_signer(signer, 'approve')
    token = get_token_contract(signer, token_address)

    logger.info(f"Approving {spender} for {amount} of {token.address}")
    transaction = await token.transact('approve', spender, amount)
    return TransactionResult(transaction=transaction)


async def update_allowance(
    signer: Optional[Capability],
    spender: str,
    token_address: str,
    amount: int
) -> TransactionResult:
    """Increase the allowance of ``spender`` by ``amount``, or decrease it when negative."""
    signer = ensure_signer(signer, 'update_allowance')
    token = get_token_contract(signer, token_address)

    if amount < 0:
        transaction = await token.transact('decreaseAllowance', spender, -amount)
    else:
        transaction = await token.transact('increaseAllowance', spender, amount)

    return TransactionResult(transaction=transaction)


async def fetch_allowance(
    capability: Capability,
    network: Union[Network, str],
    owner: str,
    spender: str,
    token_address: str
) -> TokenAmount:
    """Amount of ``owner``'s tokens ``spender`` may spend."""
    token = get_token_contract(capability, token_address)
    allowance, decimals = await asyncio.gather(
        token.call('allowance', owner, spender),
        token.call('decimals')
    )

    return TokenAmount(
        token=token.address,
        chain_id=get_network_chain_id(network),
        decimals=decimals,
        raw=allowance
    )


async def is_approval_necessary(
    capability: Capability,
    account: str,
    spender: str,
    token_address: str,
    amount: int
) -> bool:
    """True when the current allowance does not cover ``amount``."""
    token = get_token_contract(capability, token_address)
    allowance = await token.call('allowance', account, spender)
    return allowance < amount


async def approve_if_requested(
    signer: Capability,
    spender: str,
    token_address: str,
    amount: int,
    options: TransactionOptions
) -> Optional[TransactionResult]:
    """Run the auto-approval step of a transaction-issuing operation.

    Does nothing unless ``options.auto_approve`` is set. The approval is
    waited on so the following transaction can be estimated against the new
    allowance.
    """
    if not options.auto_approve:
        return None

    if options.check_allowance:
        owner = await signer.get_address()
        if not await is_approval_necessary(signer, owner, spender, token_address, amount):
            logger.debug(f"Allowance of {spender} on {token_address} already covers {amount}")
            return None

    result = await approve(signer, spender, token_address, amount)
    await result.transaction.wait()
    return result


async def fetch_token_address(amm: ContractHandle, kind: TokenKind) -> str:
    """Address of the token of ``kind`` traded by ``amm``."""
    return await amm.call(_AMM_TOKEN_GETTERS[TokenKind(kind)])


async def fetch_pt(capability: Capability, amm: ContractHandle) -> ContractHandle:
    """PT token contract of an AMM."""
    pt_address = await amm.call('getPTAddress')
    return get_token_contract(capability, pt_address)
