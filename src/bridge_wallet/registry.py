"""Token, chain and address-codec lookups consulted by the adapter."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol

import requests
from web3 import Web3

from .exceptions import FormatError, NetworkError, RegistryLookupError
from .types import ChainId, ChainInfo, TokenBasic
from .utils import to_standard_hex

logger = logging.getLogger(__name__)

EVM_CHAIN_IDS = (ChainId.ETH, ChainId.BSC, ChainId.HECO, ChainId.OK, ChainId.MATIC)


class TokenRegistry(Protocol):
    def get_token_basic(self, chain_id: int, token_hash: str) -> TokenBasic: ...


class ChainRegistry(Protocol):
    def get_chain(self, chain_id: int) -> ChainInfo: ...


class ChainApi(Protocol):
    def address_to_hex(self, address: str) -> str: ...


def _pick(entry: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in entry and entry[key] is not None:
            return entry[key]
    return None


def _coerce_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        if isinstance(value, str):
            value = value.strip()
            return int(value, 0)
        return int(value)
    except (TypeError, ValueError):
        return None


class StaticTokenRegistry:
    """Token basics keyed by ``(chain_id, token_hash)``."""

    def __init__(self, tokens: Iterable[TokenBasic] = ()) -> None:
        self._tokens: dict[tuple[int, str], TokenBasic] = {}
        for token in tokens:
            self.register(token)

    def __len__(self) -> int:
        return len(self._tokens)

    def register(self, token: TokenBasic) -> None:
        self._tokens[(int(token.chain_id), to_standard_hex(token.token_hash))] = token

    def register_entries(self, entries: Any) -> None:
        """Register tokens from loosely shaped mappings (API or config)."""
        if not isinstance(entries, Sequence) or isinstance(entries, str | bytes):
            raise FormatError("Token entries must be a list", field="tokens", value=entries)

        for entry in entries:
            if not isinstance(entry, Mapping):
                continue
            chain_id = _coerce_int(_pick(entry, "chain_id", "chainId", "ChainId"))
            token_hash = _pick(entry, "token_hash", "tokenHash", "hash", "Hash")
            decimals = _coerce_int(_pick(entry, "decimals", "precision", "Precision"))
            if chain_id is None or token_hash is None or decimals is None:
                logger.debug("Skipping incomplete token entry %s", entry)
                continue
            self.register(
                TokenBasic(
                    chain_id=chain_id,
                    token_hash=to_standard_hex(str(token_hash)),
                    decimals=decimals,
                    name=_pick(entry, "name", "Name", "symbol"),
                )
            )

    def get_token_basic(self, chain_id: int, token_hash: str) -> TokenBasic:
        key = (int(chain_id), to_standard_hex(token_hash))
        try:
            return self._tokens[key]
        except KeyError:
            raise RegistryLookupError(
                f"Unknown token {key[1]} on chain {key[0]}", key=key
            ) from None


class StaticChainRegistry:
    """Chain bridge contracts keyed by chain id."""

    def __init__(self, chains: Iterable[ChainInfo] = ()) -> None:
        self._chains: dict[int, ChainInfo] = {}
        for chain in chains:
            self.register(chain)

    def register(self, chain: ChainInfo) -> None:
        self._chains[int(chain.chain_id)] = chain

    def register_entries(self, entries: Any) -> None:
        if not isinstance(entries, Sequence) or isinstance(entries, str | bytes):
            raise FormatError("Chain entries must be a list", field="chains", value=entries)

        for entry in entries:
            if not isinstance(entry, Mapping):
                continue
            chain_id = _coerce_int(_pick(entry, "chain_id", "chainId", "ChainId", "id"))
            lock_hash = _pick(entry, "lock_contract_hash", "lockContractHash", "LockProxy")
            if chain_id is None or lock_hash is None:
                logger.debug("Skipping incomplete chain entry %s", entry)
                continue
            nft_lock_hash = _pick(entry, "nft_lock_contract_hash", "nftLockContractHash")
            self.register(
                ChainInfo(
                    chain_id=chain_id,
                    lock_contract_hash=to_standard_hex(str(lock_hash)),
                    nft_lock_contract_hash=(
                        to_standard_hex(str(nft_lock_hash)) if nft_lock_hash else None
                    ),
                    nft_fee_name=_pick(entry, "nft_fee_name", "nftFeeName"),
                )
            )

    def get_chain(self, chain_id: int) -> ChainInfo:
        try:
            return self._chains[int(chain_id)]
        except KeyError:
            raise RegistryLookupError(f"Unknown chain {chain_id}", key=chain_id) from None


class EthereumChainApi:
    """Address codec for EVM chains."""

    def address_to_hex(self, address: str) -> str:
        if not Web3.is_address(address):
            raise FormatError(f"Invalid EVM address: {address!r}", field="address", value=address)
        return to_standard_hex(address)


class ChainApiRegistry:
    """Resolve the address codec used to encode destination addresses."""

    def __init__(self, apis: Mapping[int, ChainApi] | None = None) -> None:
        if apis is None:
            evm = EthereumChainApi()
            apis = {int(chain_id): evm for chain_id in EVM_CHAIN_IDS}
        self._apis: dict[int, ChainApi] = {int(key): value for key, value in apis.items()}

    def register(self, chain_id: int, api: ChainApi) -> None:
        self._apis[int(chain_id)] = api

    def get_chain_api(self, chain_id: int) -> ChainApi:
        try:
            return self._apis[int(chain_id)]
        except KeyError:
            raise RegistryLookupError(
                f"No address codec registered for chain {chain_id}", key=chain_id
            ) from None


def try_to_convert_address_to_hex(chain_api: ChainApi, address: str | None) -> str | None:
    """Return ``address`` in hex form, or ``None`` when it cannot be converted."""
    if not address:
        return None
    try:
        return chain_api.address_to_hex(address)
    except (FormatError, ValueError) as exc:
        logger.debug("Unable to convert address %s to hex: %s", address, exc)
        return None


def _fetch_entries(
    url: str, key: str, *, session: requests.Session | None, timeout: float
) -> list[Any]:
    http = session or requests.Session()
    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as exc:
        raise NetworkError(
            f"Failed to fetch {key}", endpoint=url, details={"error": str(exc)}
        ) from exc
    except ValueError as exc:
        raise NetworkError(
            f"Invalid JSON while fetching {key}", endpoint=url, details={"error": str(exc)}
        ) from exc

    entries = payload.get(key) if isinstance(payload, Mapping) else payload
    if not isinstance(entries, list):
        raise FormatError(f"Response is missing a '{key}' list", field=key, value=payload)
    return entries


def fetch_token_registry(
    url: str, *, session: requests.Session | None = None, timeout: float = 10.0
) -> StaticTokenRegistry:
    """Load token basics from a JSON endpoint returning ``{"tokens": [...]}``."""
    registry = StaticTokenRegistry()
    registry.register_entries(_fetch_entries(url, "tokens", session=session, timeout=timeout))
    logger.info("Fetched metadata for %d tokens", len(registry))
    return registry


def fetch_chain_registry(
    url: str, *, session: requests.Session | None = None, timeout: float = 10.0
) -> StaticChainRegistry:
    """Load chain bridge contracts from a JSON endpoint returning ``{"chains": [...]}``."""
    registry = StaticChainRegistry()
    registry.register_entries(_fetch_entries(url, "chains", session=session, timeout=timeout))
    return registry
