"""Contract ABIs used by the adapter, enumerated once at import time."""

from .types import ContractKind


def _function(
    name: str,
    inputs: list[tuple[str, str]],
    outputs: list[tuple[str, str]] | None = None,
    *,
    state_mutability: str = "nonpayable",
) -> dict:
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": arg, "type": abi_type} for arg, abi_type in inputs],
        "outputs": [{"name": arg, "type": abi_type} for arg, abi_type in outputs or []],
        "stateMutability": state_mutability,
    }


ERC20_abi = [
    _function("balanceOf", [("owner", "address")], [("", "uint256")], state_mutability="view"),
    _function(
        "allowance",
        [("owner", "address"), ("spender", "address")],
        [("", "uint256")],
        state_mutability="view",
    ),
    _function("totalSupply", [], [("", "uint256")], state_mutability="view"),
    _function("approve", [("spender", "address"), ("amount", "uint256")], [("", "bool")]),
]

ERC721_abi = [
    _function("approve", [("to", "address"), ("tokenId", "uint256")]),
    _function("getApproved", [("tokenId", "uint256")], [("", "address")], state_mutability="view"),
]

LockProxy_abi = [
    _function(
        "lock",
        [
            ("fromAsset", "address"),
            ("toChainId", "uint64"),
            ("toAddress", "bytes"),
            ("amount", "uint256"),
            ("fee", "uint256"),
            ("id", "uint256"),
        ],
        [("", "bool")],
        state_mutability="payable",
    ),
]

NFTLockProxy_abi = [
    _function(
        "lock",
        [
            ("fromAsset", "address"),
            ("toChainId", "uint64"),
            ("toAddress", "address"),
            ("tokenId", "uint256"),
            ("feeToken", "address"),
            ("fee", "uint256"),
            ("id", "uint256"),
        ],
        [("", "bool")],
        state_mutability="payable",
    ),
]

CONTRACT_ABIS: dict[ContractKind, list[dict]] = {
    ContractKind.ERC20: ERC20_abi,
    ContractKind.ERC721: ERC721_abi,
    ContractKind.LOCK: LockProxy_abi,
    ContractKind.NFT_LOCK: NFTLockProxy_abi,
}
