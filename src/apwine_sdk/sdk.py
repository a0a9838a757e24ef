"""Main APWineSDK session object."""

import asyncio
import logging
from typing import Awaitable, List, Optional, Union

from .contracts.capability import Capability, ensure_signer
from .contracts.handles import ContractHandle, ContractHandles, get_controller_contract, get_future_vault_contract
from .core.config import Network, parse_network
from .core.exceptions import (
    InitializationError,
    MissingSignerError,
    NotYetInitializedError,
    ValidationError,
)
from .core.types import (
    AddLiquidityParams,
    FutureAggregate,
    LPTokenPool,
    PairId,
    ReadyState,
    RemoveLiquidityParams,
    SwapParams,
    TokenAmount,
    TokenKind,
    TransactionOptions,
    TransactionResult,
    checksum_address,
)
from .operations import futures, lp, swaps, tokens
from .pathfinding.resolver import TokenPath, find_token_path

logger = logging.getLogger(__name__)


class APWineSDK:
    """
    High-level interface for the APWine protocol.

    The SDK instance is the single point of truth for the capability (signer
    or read-only provider) and network in use. It holds the fixed-address
    contract handles of the network, plus the controller once asynchronous
    initialization has resolved it.

    Example:
        ```python
        async def main():
            async with RPCConnection(APWineConfig.mainnet(RPC_URL)) as connection:
                sdk = APWineSDK(
                    network=Network.MAINNET,
                    provider=await connection.read_only(),
                    signer=await connection.signer(PRIVATE_KEY)
                )
                await sdk.ready

                [amm, *_] = await sdk.fetch_all_amms()
                result = await sdk.swap_in(
                    SwapParams(amm=amm, source=TokenKind.PT, target=TokenKind.UNDERLYING, amount=10 ** 18),
                    TransactionOptions(auto_approve=True)
                )
                await result.transaction.wait()
        ```
    """

    def __init__(
        self,
        network: Union[Network, str],
        provider: Capability,
        signer: Optional[Capability] = None,
        default_slippage: float = 0.5,
        auto_initialize: bool = True,
        deadline_seconds: int = 1200
    ):
        """
        Create an SDK instance.

        Args:
            network: Network the SDK operates on
            provider: Read-only capability, used for fetching
            signer: Optional signing capability, required for transactions
            default_slippage: Slippage tolerance percentage used by swaps and liquidity operations
            auto_initialize: Start asynchronous initialization right away when an
                event loop is running; otherwise it starts when ``ready`` is first awaited
            deadline_seconds: Swap deadline from now when the swap parameters carry none
        """
        self.network = parse_network(network)
        self.provider = provider
        self.signer = signer
        self.default_slippage = self._validate_slippage(default_slippage)
        self.default_user: Optional[str] = None
        self._default_user_explicit = False
        self.auto_initialize = auto_initialize
        self.deadline_seconds = deadline_seconds

        self._handles = ContractHandles.bind(signer or provider, self.network)
        self._init_task: Optional[asyncio.Future] = None
        self._generation = 0
        self._state = ReadyState.PENDING
        self._initialization_error: Optional[BaseException] = None

        logger.info(f"Initialized APWineSDK on {self.network.value} using {self._handles.capability!r}")

        if auto_initialize:
            self._schedule_initialization()

    # Initialization

    def _schedule_initialization(self) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, initialization starts when sdk.ready is awaited")
            return
        self._start_initialization()

    def _start_initialization(self) -> asyncio.Future:
        task = asyncio.ensure_future(self._initialize(self._generation))
        task.add_done_callback(self._on_initialization_done)
        self._init_task = task
        return task

    async def _initialize(self, generation: int) -> None:
        handles = self._handles
        signer = self.signer
        logger.info(f"Initializing APWineSDK on {handles.network.value}")

        try:
            controller, default_user = await asyncio.gather(
                get_controller_contract(handles.capability, handles.network, handles.registry),
                signer.get_address() if signer else _none()
            )
        except Exception as e:
            if generation == self._generation:
                self._state = ReadyState.FAILED
                self._initialization_error = e
                logger.error(f"APWineSDK initialization failed: {e}")
            raise

        if generation != self._generation:
            logger.debug("Discarding initialization result for a previous network")
            return

        self._handles = self._handles.with_controller(controller)
        if default_user is not None and not self._default_user_explicit and self.signer is signer:
            self.default_user = default_user
        self._state = ReadyState.READY
        logger.info(f"APWineSDK ready, controller at {controller.address}")

    def _on_initialization_done(self, task: asyncio.Future) -> None:
        if task.cancelled():
            if task is self._init_task:
                self._state = ReadyState.FAILED
                self._initialization_error = InitializationError("Initialization was cancelled")
            return
        # Marks the exception as retrieved; awaiters of ``ready`` still receive it.
        task.exception()

    async def initialize(self) -> None:
        """Resolve the asynchronous properties: controller and default user.

        Starts initialization if it has not started yet and waits for it.
        Calling it again awaits the same run.

        Raises:
            RemoteCallError: A fetch failed; the SDK stays in the FAILED state
        """
        if self._init_task is None:
            self._start_initialization()
        await self._init_task

    @property
    def ready(self) -> Awaitable[None]:
        """Await this to use asynchronous properties, like the controller."""
        if self._init_task is None:
            self._start_initialization()
        return self._init_task

    @property
    def state(self) -> ReadyState:
        return self._state

    @property
    def initialization_error(self) -> Optional[BaseException]:
        return self._initialization_error

    # Contract handles

    @property
    def active_capability(self) -> Capability:
        """The capability every bound contract handle currently uses."""
        return self._handles.capability

    @property
    def registry(self) -> ContractHandle:
        return self._handles.registry

    @property
    def amm_registry(self) -> ContractHandle:
        return self._handles.amm_registry

    @property
    def router(self) -> ContractHandle:
        return self._handles.router

    @property
    def controller(self) -> Optional[ContractHandle]:
        """The controller; None until initialization resolves it."""
        return self._handles.controller

    @property
    def handles(self) -> ContractHandles:
        return self._handles

    def future_vault(self, address: str) -> ContractHandle:
        """FutureVault contract at ``address`` bound to the active capability."""
        return get_future_vault_contract(self.active_capability, address)

    def _require_controller(self) -> ContractHandle:
        if self._handles.controller is None:
            if self._state == ReadyState.FAILED:
                raise InitializationError(
                    f"APWineSDK initialization failed: {self._initialization_error}",
                    details={'error': repr(self._initialization_error)}
                )
            raise NotYetInitializedError("The Controller instance hasn't been loaded yet. Wait for sdk.ready")
        return self._handles.controller

    def _rebind(self, capability: Capability) -> None:
        self._handles = self._handles.rebind(capability)
        logger.info(f"Contract handles rebound to {capability!r}")

    # Capability and settings

    def use_signer(self) -> None:
        """Switch every contract handle to the signer.

        Raises:
            MissingSignerError: No signer was supplied
            NotYetInitializedError: The controller is not resolved yet
        """
        if self.signer is None:
            raise MissingSignerError(
                "Signer is not provided, please use `update_signer` to add a signer instance.",
                operation='use_signer'
            )
        self._require_controller()
        self._rebind(self.signer)

    def use_provider(self) -> None:
        """Switch every contract handle to the read-only provider.

        Raises:
            NotYetInitializedError: The controller is not resolved yet
        """
        self._require_controller()
        self._rebind(self.provider)

    def update_signer(self, signer: Capability, use_with_contracts: bool = True) -> None:
        """Replace the signer; with ``use_with_contracts`` also switch the handles to it.

        A default user taken from the previous signer is dropped and resolved
        again from the new one. One set with ``update_default_user`` is kept.

        Raises:
            NotYetInitializedError: ``use_with_contracts`` was requested before the
                controller is resolved; the signer is left unchanged
        """
        if use_with_contracts:
            self._require_controller()
        self.signer = signer
        if not self._default_user_explicit:
            self.default_user = None
        if use_with_contracts:
            self._rebind(signer)

    def update_provider(self, provider: Capability, use_with_contracts: bool = False) -> None:
        """Replace the provider; with ``use_with_contracts`` also switch the handles to it."""
        self.provider = provider
        if use_with_contracts:
            self.use_provider()

    def update_network(self, network: Union[Network, str]) -> None:
        """Move the SDK to another network.

        The fixed-address handles are rebound to the new network, the
        controller is dropped and readiness goes back to PENDING. A new
        initialization run starts right away when ``auto_initialize`` was
        requested and an event loop is running, otherwise on the next
        ``ready`` await.
        """
        network = parse_network(network)
        self._generation += 1
        self.network = network
        self._handles = ContractHandles.bind(self._handles.capability, network)
        self._init_task = None
        self._state = ReadyState.PENDING
        self._initialization_error = None

        logger.info(f"Network switched to {network.value}, re-initialization required")

        if self.auto_initialize:
            self._schedule_initialization()

    def update_default_user(self, address: str) -> None:
        """Set the account used when an operation is not given one."""
        try:
            self.default_user = checksum_address(address)
        except ValueError as e:
            raise ValidationError(f"Invalid address: {address}", field='address', value=address) from e
        self._default_user_explicit = True

    def update_slippage_tolerance(self, slippage: float) -> None:
        """Set the default slippage tolerance percentage."""
        self.default_slippage = self._validate_slippage(slippage)

    @staticmethod
    def _validate_slippage(slippage: float) -> float:
        if not 0 <= slippage < 100:
            raise ValidationError(
                "Slippage tolerance must be a percentage in [0, 100)",
                field='slippage_tolerance',
                value=slippage
            )
        return slippage

    async def _resolve_account(self, account: Optional[str]) -> str:
        if account is not None:
            return account
        if self.default_user is None and self.signer is not None:
            signer = self.signer
            address = await signer.get_address()
            if self.default_user is None and self.signer is signer:
                self.default_user = address
        if self.default_user is None:
            raise ValidationError("No account given and no default user set", field='account')
        return self.default_user

    # Reads

    async def fetch_amm(self, future: ContractHandle) -> ContractHandle:
        """AMM of a future vault."""
        return await futures.fetch_amm(self.active_capability, self.network, future)

    async def fetch_all_amms(self) -> List[ContractHandle]:
        """AMMs of every registered future vault."""
        return await futures.fetch_all_amms(self.active_capability, self.network)

    async def fetch_all_future_vaults(self) -> List[ContractHandle]:
        """Every registered future vault."""
        return await futures.fetch_all_future_vaults(self.active_capability, self.network)

    async def fetch_future_aggregate_from_index(self, index: int) -> FutureAggregate:
        """Aggregate of the future vault registered at ``index``."""
        await self.ready
        return await futures.fetch_future_aggregate_from_index(
            self.active_capability, self.network, index, self.controller
        )

    async def fetch_future_aggregate_from_address(self, address: str) -> FutureAggregate:
        """Aggregate of the future vault at ``address``."""
        await self.ready
        return await futures.fetch_future_aggregate_from_address(
            self.active_capability, self.network, address, self.controller
        )

    async def fetch_all_future_aggregates(self) -> List[FutureAggregate]:
        """Aggregates of every registered future vault."""
        await self.ready
        return await futures.fetch_all_future_aggregates(self.active_capability, self.network, self.controller)

    async def fetch_pt(self, amm: ContractHandle) -> ContractHandle:
        """PT token of an AMM."""
        return await tokens.fetch_pt(self.active_capability, amm)

    async def fetch_all_fyts(self) -> List[ContractHandle]:
        """Current-period FYT token of every registered future vault."""
        return await futures.fetch_fyt_tokens(self.active_capability, self.network)

    async def fetch_lp_token_pool(
        self,
        amm: ContractHandle,
        pair_id: PairId,
        period_index: Optional[int] = None
    ) -> LPTokenPool:
        """Aggregate of an LP token pool; the current period by default."""
        return await lp.fetch_lp_token_pool(self.active_capability, amm, pair_id, period_index)

    async def fetch_all_lp_token_pools(self, amm: ContractHandle) -> List[LPTokenPool]:
        """Aggregates of every LP token pool of an AMM."""
        return await lp.fetch_all_lp_token_pools(self.active_capability, amm)

    async def is_lp_approved_for_all(self, amm: ContractHandle, account: Optional[str] = None) -> bool:
        """LP token approval status of ``account`` (default user by default)."""
        account = await self._resolve_account(account)
        return await lp.is_lp_approved_for_all(self.active_capability, amm, account)

    async def allowance(self, spender: str, token_address: str, account: Optional[str] = None) -> TokenAmount:
        """Amount of ``account``'s tokens ``spender`` may spend."""
        account = await self._resolve_account(account)
        return await tokens.fetch_allowance(self.active_capability, self.network, account, spender, token_address)

    async def is_approval_necessary(
        self,
        token_address: str,
        amount: int,
        spender: str,
        account: Optional[str] = None
    ) -> bool:
        """True when ``account``'s allowance for ``spender`` does not cover ``amount``."""
        account = await self._resolve_account(account)
        return await tokens.is_approval_necessary(self.active_capability, account, spender, token_address, amount)

    async def fetch_spot_price(self, future: ContractHandle, source: TokenKind, target: TokenKind) -> int:
        """Spot price of ``source`` in ``target`` (18-decimal fixed point)."""
        return await swaps.fetch_spot_price(self.active_capability, self.network, future, source, target)

    def find_token_path(self, source: TokenKind, target: TokenKind) -> TokenPath:
        """Swap route from ``source`` to ``target``."""
        return find_token_path(source, target)

    # Transactions

    async def approve(self, spender: str, token_address: str, amount: int) -> TransactionResult:
        """Approve ``spender`` for ``amount`` of a token. Requires a signer."""
        return await tokens.approve(self.signer, spender, token_address, amount)

    async def update_allowance(
        self,
        spender: str,
        token_address: str,
        amount: int,
        options: Optional[TransactionOptions] = None
    ) -> TransactionResult:
        """Increase (or decrease, when negative) an allowance. Requires a signer."""
        signer = ensure_signer(self.signer, 'update_allowance')
        options = options or TransactionOptions()
        if options.auto_approve and amount > 0:
            await tokens.approve_if_requested(signer, spender, token_address, amount, options)
        return await tokens.update_allowance(signer, spender, token_address, amount)

    async def deposit(
        self,
        future: ContractHandle,
        amount: int,
        options: Optional[TransactionOptions] = None
    ) -> TransactionResult:
        """Deposit into a future vault. Requires a signer."""
        signer = ensure_signer(self.signer, 'deposit')
        await self.ready
        return await futures.deposit(signer, self.network, future, amount, self._require_controller(), options)

    async def withdraw(self, future: ContractHandle, amount: int) -> TransactionResult:
        """Withdraw from a future vault. Requires a signer."""
        signer = ensure_signer(self.signer, 'withdraw')
        await self.ready
        return await futures.withdraw(signer, self.network, future, amount, self._require_controller())

    async def approve_lp_for_all(self, amm: ContractHandle, approval: bool = True) -> TransactionResult:
        """Set LP token approval of an AMM. Requires a signer."""
        return await lp.approve_lp_for_all(self.signer, amm, approval)

    async def add_liquidity(
        self,
        params: AddLiquidityParams,
        options: Optional[TransactionOptions] = None
    ) -> TransactionResult:
        """Add liquidity to an AMM pair. Requires a signer."""
        return await lp.add_liquidity(self.signer, params, self.default_slippage, options)

    async def remove_liquidity(
        self,
        params: RemoveLiquidityParams,
        options: Optional[TransactionOptions] = None
    ) -> TransactionResult:
        """Remove liquidity from an AMM pair. Requires a signer."""
        return await lp.remove_liquidity(self.signer, params, self.default_slippage, options)

    async def swap_in(self, params: SwapParams, options: Optional[TransactionOptions] = None) -> TransactionResult:
        """Swap an exact amount of source tokens. Requires a signer."""
        return await swaps.swap(
            swaps.SwapDirection.IN, self.signer, self.network, params,
            self.default_slippage, options, self.deadline_seconds
        )

    async def swap_out(self, params: SwapParams, options: Optional[TransactionOptions] = None) -> TransactionResult:
        """Swap for an exact amount of target tokens. Requires a signer."""
        return await swaps.swap(
            swaps.SwapDirection.OUT, self.signer, self.network, params,
            self.default_slippage, options, self.deadline_seconds
        )

    def __repr__(self) -> str:
        return (
            f"APWineSDK(network='{self.network.value}', state='{self._state.value}', "
            f"capability={self.active_capability!r})"
        )


async def _none() -> None:
    return None
