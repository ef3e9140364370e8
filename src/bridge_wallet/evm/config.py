"""Configuration containers for the injected wallet adapter."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from ..constants import default_network_chain_ids, session_key_for
from ..exceptions import ValidationError
from ..types import ChainId, WalletName

DEFAULT_RECEIPT_TIMEOUT = 120.0

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class WalletAdapterConfig:
    """Aggregated configuration used to construct a wallet adapter."""

    wallet_name: WalletName = WalletName.BINANCE
    testnet: bool = True
    network_chain_ids: Mapping[int, ChainId] = field(default_factory=dict)
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT
    session_key: str | None = None

    def with_defaults(self) -> WalletAdapterConfig:
        """Return a copy with the network table and session key filled in."""

        network_chain_ids = dict(self.network_chain_ids) or default_network_chain_ids(
            self.testnet
        )
        return WalletAdapterConfig(
            wallet_name=self.wallet_name,
            testnet=self.testnet,
            network_chain_ids=network_chain_ids,
            receipt_timeout=self.receipt_timeout,
            session_key=self.session_key or session_key_for(self.wallet_name.value),
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> WalletAdapterConfig:
        """Build a configuration from ``BRIDGE_WALLET_*`` environment variables."""

        env = os.environ if environ is None else environ
        raw_name = env.get("BRIDGE_WALLET_NAME", WalletName.BINANCE.value)
        try:
            wallet_name = WalletName(raw_name)
        except ValueError as exc:
            raise ValidationError(
                "Unknown wallet name", field="BRIDGE_WALLET_NAME", value=raw_name
            ) from exc

        raw_timeout = env.get("BRIDGE_WALLET_RECEIPT_TIMEOUT", str(DEFAULT_RECEIPT_TIMEOUT))
        try:
            receipt_timeout = float(raw_timeout)
        except ValueError as exc:
            raise ValidationError(
                "Receipt timeout must be numeric",
                field="BRIDGE_WALLET_RECEIPT_TIMEOUT",
                value=raw_timeout,
            ) from exc

        testnet = env.get("BRIDGE_WALLET_TESTNET", "true").strip().lower() in _TRUE_VALUES
        return cls(
            wallet_name=wallet_name, testnet=testnet, receipt_timeout=receipt_timeout
        ).with_defaults()
