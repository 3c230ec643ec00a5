"""HTTP source for HL7 v2 definitions.

Fetches the four definition collections (segments, data types, tables and
trigger events) from an HL7 definition API. Every failure is raised as a
RegistrySourceError so the registry manager can substitute fallback data for
that collection alone.
"""

import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://hl7-definition.caristix.com/v2-api/1/HL7v2.5.1"

class RegistryCollection(str, Enum):
    SEGMENTS = "segments"
    DATA_TYPES = "dataTypes"
    TABLES = "tables"
    TRIGGER_EVENTS = "triggerEvents"

ENDPOINTS: Dict[RegistryCollection, str] = {
    RegistryCollection.SEGMENTS: "Segments",
    RegistryCollection.DATA_TYPES: "DataTypes",
    RegistryCollection.TABLES: "Tables",
    RegistryCollection.TRIGGER_EVENTS: "TriggerEvents",
}

class RegistrySourceError(Exception):
    """Raised when a definition collection cannot be obtained from its source."""
    def __init__(self, collection: RegistryCollection, reason: str):
        self.collection = collection
        self.reason = reason
        super().__init__(f"Failed to fetch {collection.value}: {reason}")

class Hl7DefinitionClient:
    """Async client for the HL7 definition API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Root of the versioned definition API
            timeout: Request timeout in seconds
            transport: Optional transport override (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def __repr__(self) -> str:
        return f"Hl7DefinitionClient(base_url='{self.base_url}')"

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={"Accept": "application/json"},
            transport=self._transport,
        )

    async def fetch_collection(self, collection: RegistryCollection) -> List[Dict[str, Any]]:
        """
        Fetch one collection as a list of raw records.

        Raises:
            RegistrySourceError: on transport errors, non-2xx responses or a
                body that is not a JSON list
        """
        url = f"{self.base_url}/{ENDPOINTS[collection]}"
        logger.info(f"Fetching {collection.value} from {url}")
        try:
            async with self._new_client() as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise RegistrySourceError(collection, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise RegistrySourceError(collection, f"{type(e).__name__}: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise RegistrySourceError(collection, f"invalid JSON: {e}") from e

        if not isinstance(data, list):
            raise RegistrySourceError(collection, f"expected a JSON list, got {type(data).__name__}")
        logger.info(f"Fetched {len(data)} {collection.value} records")
        return data
