"""Example: Approve a token if needed, lock it for bridging and poll the result."""

from __future__ import annotations

import asyncio
import logging
import os

from dotenv import load_dotenv

from bridge_wallet import (
    ChainId,
    ErrorKind,
    InjectedWalletAdapter,
    JsonRpcWalletProvider,
    TransactionStatus,
    WalletAdapterConfig,
    WalletError,
    fetch_chain_registry,
    fetch_token_registry,
)
from bridge_wallet.utils import decimal_to_integer

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

AMOUNT = "1.0"
FEE = "0.01"
POLL_INTERVAL = 3.0
MAX_POLLS = 40


async def wait_for_status(adapter: InjectedWalletAdapter, tx_hash: str) -> TransactionStatus:
    status = TransactionStatus.PENDING
    for _ in range(MAX_POLLS):
        status = await adapter.get_transaction_status(transaction_hash=tx_hash)
        if status is not TransactionStatus.PENDING:
            break
        await asyncio.sleep(POLL_INTERVAL)
    return status


async def main() -> None:
    """Lock AMOUNT of BRIDGE_TOKEN_HASH towards BRIDGE_TO_ADDRESS on Ethereum."""

    rpc_url = os.getenv("BRIDGE_RPC_URL", "http://localhost:8545")
    tokens_url = os.getenv("BRIDGE_TOKENS_URL")
    chains_url = os.getenv("BRIDGE_CHAINS_URL")
    token_hash = os.getenv("BRIDGE_TOKEN_HASH")
    to_address = os.getenv("BRIDGE_TO_ADDRESS")
    if not tokens_url or not chains_url:
        raise ValueError("BRIDGE_TOKENS_URL and BRIDGE_CHAINS_URL must be set")
    if not token_hash or not to_address:
        raise ValueError("BRIDGE_TOKEN_HASH and BRIDGE_TO_ADDRESS must be set")

    chain_registry = fetch_chain_registry(chains_url)
    adapter = InjectedWalletAdapter(
        JsonRpcWalletProvider(rpc_url),
        token_registry=fetch_token_registry(tokens_url),
        chain_registry=chain_registry,
        config=WalletAdapterConfig.from_env(),
    )

    try:
        await adapter.install()
        await adapter.connect()
        state = adapter.state
        if state.chain_id is None:
            print("Wallet is on a network the bridge does not support")
            return

        lock_proxy = chain_registry.get_chain(state.chain_id).lock_contract_hash
        allowance = await adapter.get_allowance(
            chain_id=state.chain_id,
            address=state.address,
            token_hash=token_hash,
            spender=lock_proxy,
        )
        if allowance is not None and int(decimal_to_integer(allowance, 18)) < int(
            decimal_to_integer(AMOUNT, 18)
        ):
            approve_hash = await adapter.approve(
                chain_id=state.chain_id,
                address=state.address,
                token_hash=token_hash,
                spender=lock_proxy,
                amount=AMOUNT,
            )
            print(f"Approve tx hash: {approve_hash}")
            print(f"Approve status: {(await wait_for_status(adapter, approve_hash)).value}")

        lock_hash = await adapter.lock(
            from_chain_id=state.chain_id,
            from_address=state.address,
            from_token_hash=token_hash,
            to_chain_id=ChainId.ETH,
            to_address=to_address,
            amount=AMOUNT,
            fee=FEE,
        )
        print(f"Lock tx hash: {lock_hash}")
        print(f"Lock status: {(await wait_for_status(adapter, lock_hash)).value}")
    except WalletError as exc:
        if exc.kind is ErrorKind.USER_REJECTED:
            print("Request rejected in the wallet")
        elif exc.kind is ErrorKind.INSUFFICIENT_FUNDS:
            print("Insufficient funds for amount and fee")
        else:
            print(f"Wallet error: {exc.message}")
    finally:
        adapter.close()


if __name__ == "__main__":
    asyncio.run(main())
