"""Example: Connect a wallet and read balances through a JSON-RPC node."""

from __future__ import annotations

import asyncio
import logging
import os

from dotenv import load_dotenv

from bridge_wallet import (
    NATIVE_TOKEN_HASH,
    InjectedWalletAdapter,
    JsonRpcWalletProvider,
    WalletAdapterConfig,
    WalletError,
    WalletStore,
    fetch_chain_registry,
    fetch_token_registry,
)

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


async def main() -> None:
    """Restore or open a wallet session and print native and token balances."""

    rpc_url = os.getenv("BRIDGE_RPC_URL", "http://localhost:8545")
    tokens_url = os.getenv("BRIDGE_TOKENS_URL")
    chains_url = os.getenv("BRIDGE_CHAINS_URL")
    if not tokens_url or not chains_url:
        raise ValueError("BRIDGE_TOKENS_URL and BRIDGE_CHAINS_URL must be set")
    token_hash = os.getenv("BRIDGE_TOKEN_HASH")

    store = WalletStore()
    store.watch(lambda state: print(f"Wallet state: {state}"))

    adapter = InjectedWalletAdapter(
        JsonRpcWalletProvider(rpc_url),
        token_registry=fetch_token_registry(tokens_url),
        chain_registry=fetch_chain_registry(chains_url),
        state_sink=store,
        config=WalletAdapterConfig.from_env(),
    )

    try:
        await adapter.install()
        if not adapter.state.connected:
            await adapter.connect()

        state = adapter.state
        if state.chain_id is None:
            print("Wallet is on a network the bridge does not support")
            return

        native = await adapter.get_balance(
            chain_id=state.chain_id, address=state.address, token_hash=NATIVE_TOKEN_HASH
        )
        print(f"Native balance of {state.address}: {native}")

        if token_hash:
            balance = await adapter.get_balance(
                chain_id=state.chain_id, address=state.address, token_hash=token_hash
            )
            supply = await adapter.get_total_supply(chain_id=state.chain_id, token_hash=token_hash)
            print(f"Token {token_hash}: balance={balance} total_supply={supply}")
    except WalletError as exc:
        print(f"Wallet error ({exc.kind.value}): {exc.message}")
    finally:
        adapter.close()


if __name__ == "__main__":
    asyncio.run(main())
