"""On-demand transaction status lookup."""

from __future__ import annotations

import logging

from eth_typing import HexStr
from web3.exceptions import TransactionNotFound

from ..classifier import ErrorClassifier
from ..types import TransactionStatus
from ..utils import to_standard_hex
from .connections import WalletConnections

logger = logging.getLogger(__name__)


class TransactionStatusPoller:
    """Map receipt presence and outcome to a :class:`TransactionStatus`.

    Every call re-reads the chain; the caller decides how often to poll.
    """

    def __init__(self, connections: WalletConnections, *, classifier: ErrorClassifier) -> None:
        self._connections = connections
        self._classifier = classifier

    async def get_transaction_status(self, *, transaction_hash: str) -> TransactionStatus:
        try:
            tx_hash = HexStr(f"0x{to_standard_hex(transaction_hash)}")
            try:
                receipt = await self._connections.web3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                receipt = None
        except Exception as exc:
            raise self._classifier.classify(exc) from exc

        if receipt is None:
            return TransactionStatus.PENDING
        status = TransactionStatus.DONE if receipt.get("status") else TransactionStatus.FAILED
        logger.debug("Transaction %s status %s", tx_hash, status.value)
        return status
