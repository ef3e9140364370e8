"""Tests for transaction submission."""

from __future__ import annotations

import asyncio

import pytest
from eth_abi import decode as abi_decode
from web3 import Web3

from bridge_wallet.constants import CONFIRMATION, ERROR, NATIVE_TOKEN_HASH, TRANSACTION_HASH
from bridge_wallet.evm.transactions import TransactionEmitter, confirm_later
from bridge_wallet.exceptions import ErrorKind, WalletError, WalletProviderError
from bridge_wallet.types import ChainId, TokenBasic
from bridge_wallet.utils import decimal_to_integer

from conftest import (
    LOCK_HASH,
    NFT_HASH,
    NFT_LOCK_HASH,
    TOKEN_HASH,
    TX_HASH,
    USER_ADDRESS,
    FakeWallet,
    selector,
)

DESTINATION = "0x" + "7e" * 20


def _listener_total(emitter: TransactionEmitter) -> int:
    return sum(emitter.listener_count(event) for event in (TRANSACTION_HASH, CONFIRMATION, ERROR))


def _decode_call(data: str, signature: str, types: list[str]) -> tuple:
    payload = data.removeprefix("0x")
    assert payload[:8] == selector(signature)
    return abi_decode(types, bytes.fromhex(payload[8:]))


class TestConfirmLater:
    """Test hash-first resolution of submissions."""

    def test_resolves_once_with_first_hash(self) -> None:
        async def scenario():
            emitter = TransactionEmitter()
            pending = asyncio.ensure_future(confirm_later(emitter))
            await asyncio.sleep(0)
            assert _listener_total(emitter) == 3

            await emitter.emit(TRANSACTION_HASH, "0xaaa")
            await emitter.emit(CONFIRMATION, 1, {"status": 1})
            await emitter.emit(TRANSACTION_HASH, "0xbbb")
            await emitter.emit(ERROR, RuntimeError("late"))
            return await pending, _listener_total(emitter)

        result, remaining = asyncio.run(scenario())

        assert result == "0xaaa"
        assert remaining == 0

    def test_rejects_on_error_before_hash(self) -> None:
        async def scenario():
            emitter = TransactionEmitter()
            pending = asyncio.ensure_future(confirm_later(emitter))
            await asyncio.sleep(0)

            await emitter.emit(ERROR, WalletProviderError("Rejected by user"))
            await emitter.emit(TRANSACTION_HASH, "0xaaa")
            with pytest.raises(WalletProviderError):
                await pending
            return _listener_total(emitter)

        assert asyncio.run(scenario()) == 0

    def test_non_exception_error_is_wrapped(self) -> None:
        async def scenario():
            emitter = TransactionEmitter()
            pending = asyncio.ensure_future(confirm_later(emitter))
            await asyncio.sleep(0)
            await emitter.emit(ERROR, "nonce too low")
            with pytest.raises(WalletProviderError, match="nonce too low"):
                await pending

        asyncio.run(scenario())

    def test_repeated_submissions_do_not_accumulate_listeners(self) -> None:
        async def scenario():
            emitter = TransactionEmitter()
            for index in range(5):
                pending = asyncio.ensure_future(confirm_later(emitter))
                await asyncio.sleep(0)
                await emitter.emit(TRANSACTION_HASH, f"0x{index}")
                await pending
            return _listener_total(emitter)

        assert asyncio.run(scenario()) == 0

    def test_cancellation_releases_listeners(self) -> None:
        async def scenario():
            emitter = TransactionEmitter()
            pending = asyncio.ensure_future(confirm_later(emitter))
            await asyncio.sleep(0)
            pending.cancel()
            with pytest.raises(asyncio.CancelledError):
                await pending
            return _listener_total(emitter)

        assert asyncio.run(scenario()) == 0


def _submit(make_adapter, wallet, call):
    async def scenario():
        adapter = make_adapter(wallet)
        return await call(adapter)

    return asyncio.run(scenario())


def test_native_lock_sends_amount_as_value(make_adapter) -> None:
    wallet = FakeWallet()

    tx_hash = _submit(
        make_adapter,
        wallet,
        lambda adapter: adapter.lock(
            from_chain_id=ChainId.BSC,
            from_address=USER_ADDRESS,
            from_token_hash=NATIVE_TOKEN_HASH,
            to_chain_id=ChainId.ETH,
            to_address=DESTINATION,
            amount="1.5",
            fee="0.01",
        ),
    )

    assert tx_hash == TX_HASH[2:]
    assert len(wallet.sent) == 1
    sent = wallet.sent[0]
    assert int(sent["value"], 16) == int(decimal_to_integer("1.5", 18))
    assert sent["to"] == Web3.to_checksum_address("0x" + LOCK_HASH)
    assert sent["from"] == Web3.to_checksum_address(USER_ADDRESS)

    args = _decode_call(
        sent["data"],
        "lock(address,uint64,bytes,uint256,uint256,uint256)",
        ["address", "uint64", "bytes", "uint256", "uint256", "uint256"],
    )
    assert args[0].lower() == "0x" + NATIVE_TOKEN_HASH
    assert args[1] == ChainId.ETH
    assert args[2] == bytes.fromhex("7e" * 20)
    assert args[3] == 1_500_000_000_000_000_000
    assert args[4] == 10_000_000_000_000_000
    assert args[5] == 0


def test_token_lock_sends_fee_as_value(make_adapter) -> None:
    wallet = FakeWallet()

    _submit(
        make_adapter,
        wallet,
        lambda adapter: adapter.lock(
            from_chain_id=ChainId.BSC,
            from_address=USER_ADDRESS,
            from_token_hash=TOKEN_HASH,
            to_chain_id=ChainId.ETH,
            to_address=DESTINATION,
            amount="25.1234567",
            fee="0.5",
        ),
    )

    sent = wallet.sent[0]
    assert int(sent["value"], 16) == 500_000
    args = _decode_call(
        sent["data"],
        "lock(address,uint64,bytes,uint256,uint256,uint256)",
        ["address", "uint64", "bytes", "uint256", "uint256", "uint256"],
    )
    assert args[0].lower() == "0x" + TOKEN_HASH
    assert args[3] == 25_123_456
    assert args[4] == 500_000


def test_lock_fee_uses_native_precision_on_nft_fee_chains(make_adapter, token_registry) -> None:
    token_registry.register(TokenBasic(chain_id=ChainId.HECO, token_hash=TOKEN_HASH, decimals=6))
    wallet = FakeWallet()

    _submit(
        make_adapter,
        wallet,
        lambda adapter: adapter.lock(
            from_chain_id=ChainId.HECO,
            from_address=USER_ADDRESS,
            from_token_hash=TOKEN_HASH,
            to_chain_id=ChainId.BSC,
            to_address=DESTINATION,
            amount="1",
            fee="0.5",
        ),
    )

    assert int(wallet.sent[0]["value"], 16) == 5 * 10**17


def test_nft_lock_pays_fee_in_native_unit(make_adapter) -> None:
    wallet = FakeWallet()

    tx_hash = _submit(
        make_adapter,
        wallet,
        lambda adapter: adapter.nft_lock(
            from_chain_id=ChainId.BSC,
            from_address=USER_ADDRESS,
            from_token_hash=NFT_HASH,
            to_chain_id=ChainId.ETH,
            to_address=DESTINATION,
            token_id="42",
            fee="0.2",
        ),
    )

    assert tx_hash == TX_HASH[2:]
    sent = wallet.sent[0]
    assert sent["to"] == Web3.to_checksum_address("0x" + NFT_LOCK_HASH)
    assert int(sent["value"], 16) == 2 * 10**17
    args = _decode_call(
        sent["data"],
        "lock(address,uint64,address,uint256,address,uint256,uint256)",
        ["address", "uint64", "address", "uint256", "address", "uint256", "uint256"],
    )
    assert args[0].lower() == "0x" + NFT_HASH
    assert args[2].lower() == DESTINATION
    assert args[3] == 42
    assert args[4].lower() == "0x" + "00" * 20
    assert args[5] == 2 * 10**17


def test_approve_encodes_spender_and_amount(make_adapter) -> None:
    wallet = FakeWallet()

    _submit(
        make_adapter,
        wallet,
        lambda adapter: adapter.approve(
            chain_id=ChainId.BSC,
            address=USER_ADDRESS,
            token_hash=TOKEN_HASH,
            spender=LOCK_HASH,
            amount="100",
        ),
    )

    sent = wallet.sent[0]
    assert sent["to"] == Web3.to_checksum_address("0x" + TOKEN_HASH)
    assert int(sent["value"], 16) == 0
    spender, amount = _decode_call(sent["data"], "approve(address,uint256)", ["address", "uint256"])
    assert spender.lower() == "0x" + LOCK_HASH
    assert amount == 100_000_000


def test_nft_approve(make_adapter) -> None:
    wallet = FakeWallet()

    _submit(
        make_adapter,
        wallet,
        lambda adapter: adapter.nft_approve(
            address=USER_ADDRESS, token_hash=NFT_HASH, spender=NFT_LOCK_HASH, token_id="7"
        ),
    )

    sent = wallet.sent[0]
    spender, token_id = _decode_call(
        sent["data"], "approve(address,uint256)", ["address", "uint256"]
    )
    assert spender.lower() == "0x" + NFT_LOCK_HASH
    assert token_id == 7


def test_submission_does_not_wait_for_receipt(make_adapter) -> None:
    wallet = FakeWallet()

    _submit(
        make_adapter,
        wallet,
        lambda adapter: adapter.approve(
            chain_id=ChainId.BSC,
            address=USER_ADDRESS,
            token_hash=TOKEN_HASH,
            spender=LOCK_HASH,
            amount="1",
        ),
    )

    assert wallet.methods("eth_getTransactionReceipt") == []


@pytest.mark.parametrize(
    ("error", "kind"),
    [
        (WalletProviderError("Rejected by user", code=4001), ErrorKind.USER_REJECTED),
        (
            WalletProviderError("insufficient funds for gas * price + value"),
            ErrorKind.INSUFFICIENT_FUNDS,
        ),
        (RuntimeError("nonce too low"), ErrorKind.UNKNOWN),
    ],
)
def test_submission_failure_is_classified(make_adapter, error, kind) -> None:
    wallet = FakeWallet()
    wallet.errors["eth_sendTransaction"] = error

    with pytest.raises(WalletError) as excinfo:
        _submit(
            make_adapter,
            wallet,
            lambda adapter: adapter.lock(
                from_chain_id=ChainId.BSC,
                from_address=USER_ADDRESS,
                from_token_hash=NATIVE_TOKEN_HASH,
                to_chain_id=ChainId.ETH,
                to_address=DESTINATION,
                amount="1",
                fee="0",
            ),
        )

    assert excinfo.value.kind is kind
    assert excinfo.value.cause is error


def test_unknown_destination_codec_fails_before_submission(make_adapter) -> None:
    wallet = FakeWallet()

    with pytest.raises(WalletError):
        _submit(
            make_adapter,
            wallet,
            lambda adapter: adapter.lock(
                from_chain_id=ChainId.BSC,
                from_address=USER_ADDRESS,
                from_token_hash=NATIVE_TOKEN_HASH,
                to_chain_id=ChainId.NEO,
                to_address="AKkkumHbBipZ46UMZJoFynJMXzSRnBvKcs",
                amount="1",
                fee="0",
            ),
        )

    assert wallet.sent == []
