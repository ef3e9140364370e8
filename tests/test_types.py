"""Tests for bridge_wallet.types models."""

from dataclasses import FrozenInstanceError, replace

import pytest

from bridge_wallet.types import ChainId, ConnectionState, WalletName


def test_connection_state_defaults() -> None:
    state = ConnectionState(name=WalletName.BINANCE)
    assert state.installed is False
    assert state.connected is False
    assert state.address is None
    assert state.chain_id is None


def test_connection_state_requires_address_when_connected() -> None:
    with pytest.raises(ValueError):
        ConnectionState(name=WalletName.BINANCE, connected=True)

    with pytest.raises(ValueError):
        ConnectionState(name=WalletName.BINANCE, connected=False, address="0x" + "00" * 20)


def test_connection_state_is_copy_on_write() -> None:
    state = ConnectionState(name=WalletName.BINANCE, installed=True)
    with pytest.raises(FrozenInstanceError):
        state.installed = False  # type: ignore[misc]

    updated = replace(state, chain_id=ChainId.BSC)
    assert updated.chain_id is ChainId.BSC
    assert state.chain_id is None
