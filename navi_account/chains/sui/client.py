"""SUI RPC client with fallback support."""
import asyncio
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ...config import ChainConfig
from ...errors import LedgerLookupError, SimulationError, SubmissionFailure
from ...models import CoinObject

logger = logging.getLogger(__name__)

PAGE_LIMIT = 50
MULTI_GET_LIMIT = 50


class RpcError(RuntimeError):
    """JSON-RPC ``error`` reply; ``message`` is the ledger's text as sent."""

    def __init__(self, error: Any) -> None:
        super().__init__(f"RPC Error: {error}")
        self.error = error
        if isinstance(error, dict) and "message" in error:
            self.message = str(error["message"])
        else:
            self.message = str(error)


def _parse_coin(raw: dict[str, Any]) -> CoinObject:
    return CoinObject(
        object_id=raw["coinObjectId"],
        coin_type=raw["coinType"],
        balance=int(raw["balance"]),
        version=int(raw.get("version", 0)),
        digest=raw.get("digest", ""),
    )


class SuiClient:
    """SUI blockchain RPC client with automatic endpoint fallback.

    Reads rotate across endpoints on failure. Simulation and execution are
    sent once, to the preferred endpoint only.
    """

    def __init__(self, config: ChainConfig) -> None:
        self.endpoints = list(config.rpc_endpoints)
        self.timeout = config.rpc_timeout
        self.current_rpc_index = 0

    async def _post(self, rpc_url: str, payload: dict[str, Any]) -> dict[str, Any]:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)
        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.post(
                rpc_url,
                json=payload,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                return await response.json()

    async def rpc_call(self, method: str, params: list[Any]) -> Any:
        """Make RPC call with fallback to alternative endpoints."""
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            rpc_index = (self.current_rpc_index + attempt) % len(self.endpoints)
            rpc_url = self.endpoints[rpc_index]

            try:
                result = await self._post(rpc_url, payload)
                if "error" in result:
                    raise RpcError(result["error"])

                if rpc_index != self.current_rpc_index:
                    logger.info("Switched to RPC endpoint: %s", rpc_url)
                    self.current_rpc_index = rpc_index

                return result.get("result", {})
            except Exception as e:
                last_error = e
                logger.warning("RPC endpoint %s failed: %s", rpc_url, e)
                if attempt < len(self.endpoints) - 1:
                    logger.info("Trying next endpoint...")
                continue

        raise RuntimeError(f"All RPC endpoints failed. Last error: {last_error}")

    async def call_once(self, method: str, params: list[Any]) -> Any:
        """Single dispatch to the preferred endpoint; never rotates.

        Raises:
            RpcError: the ledger answered with a JSON-RPC error.
        """
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        result = await self._post(self.endpoints[self.current_rpc_index], payload)
        if "error" in result:
            raise RpcError(result["error"])
        return result.get("result", {})

    async def _read(self, method: str, params: list[Any]) -> Any:
        try:
            return await self.rpc_call(method, params)
        except RuntimeError as e:
            raise LedgerLookupError(f"{method} failed: {e}") from e

    # ------------------------------------------------------------------
    # Coins
    # ------------------------------------------------------------------

    async def get_coins(self, owner: str, coin_type: str) -> list[CoinObject]:
        """Get all coin objects of one type owned by ``owner`` (paginated)."""
        coins: list[CoinObject] = []
        cursor = None

        while True:
            result = await self._read(
                "suix_getCoins", [owner, coin_type, cursor, PAGE_LIMIT]
            )
            try:
                coins.extend(_parse_coin(c) for c in result.get("data", []))
            except (KeyError, TypeError, ValueError) as e:
                raise LedgerLookupError(f"Malformed coin page: {e}") from e

            cursor = result.get("nextCursor")
            if not result.get("hasNextPage", False) or not cursor:
                break

        return coins

    async def get_all_coins(self, owner: str) -> list[CoinObject]:
        """Get every coin object owned by ``owner`` (paginated)."""
        coins: list[CoinObject] = []
        cursor = None

        while True:
            result = await self._read(
                "suix_getAllCoins", [owner, cursor, PAGE_LIMIT]
            )
            try:
                coins.extend(_parse_coin(c) for c in result.get("data", []))
            except (KeyError, TypeError, ValueError) as e:
                raise LedgerLookupError(f"Malformed coin page: {e}") from e

            cursor = result.get("nextCursor")
            if not result.get("hasNextPage", False) or not cursor:
                break

        return coins

    async def get_balance(self, owner: str, coin_type: str) -> int:
        result = await self._read("suix_getBalance", [owner, coin_type])
        try:
            return int(result["totalBalance"])
        except (KeyError, TypeError, ValueError) as e:
            raise LedgerLookupError(f"Malformed balance for {coin_type}") from e

    async def get_coin_metadata(self, coin_type: str) -> dict[str, Any]:
        result = await self._read("suix_getCoinMetadata", [coin_type])
        if not result:
            raise LedgerLookupError(f"No coin metadata for {coin_type}")
        return result

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    async def multi_get_objects(self, object_ids: list[str]) -> list[dict[str, Any]]:
        """Get objects with owner info, in the order requested."""
        objects: list[dict[str, Any]] = []
        for start in range(0, len(object_ids), MULTI_GET_LIMIT):
            chunk = object_ids[start:start + MULTI_GET_LIMIT]
            result = await self._read(
                "sui_multiGetObjects",
                [chunk, {"showOwner": True, "showType": True}],
            )
            objects.extend(result or [])
        return objects

    async def get_dynamic_fields(self, parent_id: str) -> list[dict[str, Any]]:
        """Get dynamic fields of an object (paginated)."""
        fields: list[dict[str, Any]] = []
        cursor = None

        while True:
            result = await self._read(
                "suix_getDynamicFields", [parent_id, cursor, PAGE_LIMIT]
            )
            fields.extend(result.get("data", []))

            cursor = result.get("nextCursor")
            if not result.get("hasNextPage", False) or not cursor:
                break

        return fields

    async def get_dynamic_field_object(
        self, parent_id: str, key_type: str, key_value: Any
    ) -> dict[str, Any]:
        """Get a specific dynamic field object; ``{}`` when the field does not exist."""
        result = await self._read(
            "suix_getDynamicFieldObject",
            [parent_id, {"type": key_type, "value": key_value}],
        )
        return result.get("data") or {}

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    async def get_reference_gas_price(self) -> int:
        result = await self._read("suix_getReferenceGasPrice", [])
        return int(result)

    async def dev_inspect(self, sender: str, tx_kind_b64: str) -> dict[str, Any]:
        """Run a transaction kind without committing it. Sent once."""
        try:
            return await self.call_once(
                "sui_devInspectTransactionBlock", [sender, tx_kind_b64, None, None]
            )
        except RpcError as e:
            raise SimulationError(e.message) from e
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise SimulationError(f"Simulation request failed: {e}") from e

    async def execute_transaction(
        self, tx_bytes_b64: str, signatures: list[str]
    ) -> dict[str, Any]:
        """Submit a signed transaction and wait for local execution. Sent once."""
        try:
            return await self.call_once(
                "sui_executeTransactionBlock",
                [
                    tx_bytes_b64,
                    signatures,
                    {"showEffects": True},
                    "WaitForLocalExecution",
                ],
            )
        except RpcError as e:
            raise SubmissionFailure(e.message) from e
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise SubmissionFailure(f"Submission request failed: {e}") from e
