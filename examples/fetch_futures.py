#!/usr/bin/env python3
"""
Example: Reading APWine Futures and Quoting Swaps

This example demonstrates the read-only side of the SDK:
- RPC connection and network check
- Future vault aggregates
- LP token pools of an AMM
- Swap routes and spot prices between PT, FYT and the underlying

Requirements:
- APWINE_RPC_URL pointing at a mainnet or polygon node
- APWINE_NETWORK (optional, defaults to mainnet)
"""

import asyncio
import logging
from pathlib import Path
import sys

# Add the src directory to the path so we can import the SDK modules
project_dir = Path(__file__).parent.parent
src_dir = project_dir / "src"
sys.path.insert(0, str(src_dir))

from apwine_sdk import APWineConfig, APWineSDK, PairId, RPCConnection, TokenKind
from apwine_sdk.core.exceptions import APWineSDKError, ConfigurationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def example_future_aggregates(sdk: APWineSDK):
    """Print every registered future vault."""
    print("\n=== Future Vaults ===")

    aggregates = await sdk.fetch_all_future_aggregates()
    for aggregate in aggregates:
        print(f"{aggregate.platform} vault {aggregate.address}")
        print(f"  AMM: {aggregate.amm.address}")
        print(f"  Period: {aggregate.period}s, next period #{aggregate.next_period_index} "
              f"at {aggregate.next_period_timestamp}")
        print(f"  Deposits paused: {aggregate.deposits_paused}, withdrawals paused: {aggregate.withdrawals_paused}")

    return aggregates


async def example_lp_pools(sdk: APWineSDK, amm):
    """Print the current LP token pools of an AMM."""
    print("\n=== LP Token Pools ===")

    for pair_id in PairId:
        pool = await sdk.fetch_lp_token_pool(amm, pair_id)
        print(f"{pair_id.name} (period {pool.period_index}, token id {pool.id})")
        print(f"  Balances: {pool.pair.balances}, total supply: {pool.total_supply}")


async def example_spot_prices(sdk: APWineSDK, future):
    """Print routes and spot prices for every token kind pair."""
    print("\n=== Swap Routes ===")

    for source in TokenKind:
        for target in TokenKind:
            if source == target:
                continue
            path = sdk.find_token_path(source, target)
            price = await sdk.fetch_spot_price(future, source, target)
            route = ' -> '.join(kind.value for kind in path.display_path)
            print(f"{route}: pairs {path.pair_path}, tokens {path.token_path}, price {price / 10 ** 18:.6f}")


async def main():
    """Run all examples."""
    print("APWine SDK - Read-only Example")
    print("=" * 50)

    try:
        config = APWineConfig.from_env()
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        return

    async with RPCConnection(config) as connection:
        try:
            await connection.check_network()

            sdk = APWineSDK(
                network=config.network,
                provider=await connection.read_only(),
                default_slippage=config.default_slippage,
                deadline_seconds=config.deadline_seconds
            )
            await sdk.ready
            print(f"Controller: {sdk.controller.address}")

            aggregates = await example_future_aggregates(sdk)
            if aggregates:
                await example_lp_pools(sdk, aggregates[0].amm)
                await example_spot_prices(sdk, aggregates[0].vault)

        except APWineSDKError as e:
            logger.error(f"Example failed: {e}")

    print("\n" + "=" * 50)
    print("Example completed!")


if __name__ == "__main__":
    asyncio.run(main())
