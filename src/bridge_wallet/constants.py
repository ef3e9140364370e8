"""Constants and mappings for the bridge wallet adapter."""

from .types import ChainId

# Token hash reserved for the chain's native coin
NATIVE_TOKEN_HASH = "0" * 40

# Fee token passed to the NFT lock proxy; the fee is always paid natively
NFT_FEE_TOKEN_HASH = "0x0000000000000000000000000000000000000000"
NATIVE_DECIMALS = 18

# Provider JSON-RPC methods
ETH_ACCOUNTS = "eth_accounts"
ETH_REQUEST_ACCOUNTS = "eth_requestAccounts"
ETH_CHAIN_ID = "eth_chainId"
ETH_SEND_TRANSACTION = "eth_sendTransaction"

# Provider events
ACCOUNTS_CHANGED = "accountsChanged"
CHAIN_CHANGED = "chainChanged"

# Submission signals
TRANSACTION_HASH = "transaction_hash"
CONFIRMATION = "confirmation"
ERROR = "error"

# EIP-1193 "User Rejected Request"
USER_REJECTED_CODE = 4001

BSC_MAINNET_NETWORK_ID = 56
BSC_TESTNET_NETWORK_ID = 97


def default_network_chain_ids(testnet: bool) -> dict[int, ChainId]:
    """Return the network id to logical chain id table for a deployment."""
    return {(BSC_TESTNET_NETWORK_ID if testnet else BSC_MAINNET_NETWORK_ID): ChainId.BSC}


def session_key_for(wallet_name: str) -> str:
    """Session flag key marking that ``wallet_name`` connected before."""
    return f"{wallet_name.upper()}_CONNECTED"
