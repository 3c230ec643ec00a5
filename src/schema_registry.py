import asyncio
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Tuple, Type

from pydantic import BaseModel, Field, ValidationError

from hl7_schema_models import SchemaRegistry, SegmentDefinition, DataTypeDefinition, CodeTable, TriggerEventDefinition
from registry_client import RegistryCollection, RegistrySourceError
from registry_fallback import build_fallback_registry

logger = logging.getLogger(__name__)

COLLECTION_MODELS: Dict[RegistryCollection, Type[BaseModel]] = {
    RegistryCollection.SEGMENTS: SegmentDefinition,
    RegistryCollection.DATA_TYPES: DataTypeDefinition,
    RegistryCollection.TABLES: CodeTable,
    RegistryCollection.TRIGGER_EVENTS: TriggerEventDefinition,
}

class RegistrySource(Protocol):
    async def fetch_collection(self, collection: RegistryCollection) -> List[Dict[str, Any]]:
        ...

class DirectoryRegistrySource:
    """
    Reads definition collections from JSON files on the local filesystem.
    Expects one file per collection: segments.json, dataTypes.json, tables.json, triggerEvents.json.
    """

    def __init__(self, definitions_path: str):
        self.definitions_path = Path(definitions_path)

    def __repr__(self) -> str:
        return f"DirectoryRegistrySource('{self.definitions_path}')"

    async def fetch_collection(self, collection: RegistryCollection) -> List[Dict[str, Any]]:
        collection_file = self.definitions_path / f"{collection.value}.json"
        logger.info(f"Loading {collection.value} from: {collection_file}")
        try:
            with open(collection_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise RegistrySourceError(collection, str(e)) from e
        if not isinstance(data, list):
            raise RegistrySourceError(collection, f"expected a JSON list, got {type(data).__name__}")
        return data

class RegistryStatus(str, Enum):
    PENDING = "pending"
    LOADED = "loaded"
    FALLBACK = "fallback"

class RegistryLoadResult(BaseModel):
    """Outcome of populating the registry: loaded from the source, or fallback engaged."""
    status: RegistryStatus
    registry: SchemaRegistry
    fallback_collections: List[RegistryCollection] = Field(default_factory=list)
    errors: Dict[str, str] = Field(default_factory=dict)

    @property
    def used_fallback(self) -> bool:
        return self.status is RegistryStatus.FALLBACK

def parse_collection(collection: RegistryCollection, records: List[Dict[str, Any]]) -> Tuple[List[BaseModel], int]:
    """Validates raw records, skipping the malformed ones. Returns (definitions, skipped_count)."""
    model = COLLECTION_MODELS[collection]
    definitions = []
    skipped = 0
    for record in records:
        try:
            definitions.append(model.model_validate(record))
        except ValidationError as e:
            skipped += 1
            record_id = record.get("id") if isinstance(record, dict) else None
            logger.error(f"Skipping malformed {collection.value} record '{record_id}': {e.error_count()} validation errors")
            logger.debug(f"Validation details for '{record_id}': {e}")
    return definitions, skipped

class SchemaRegistryManager:
    """
    Owns the process-wide registry lifecycle.
    Populates the registry once from the configured source, substituting the
    built-in fallback for every collection the source cannot supply.
    """

    def __init__(self, source: Optional[RegistrySource] = None):
        self.source = source
        self._fallback = build_fallback_registry()
        self._result: Optional[RegistryLoadResult] = None
        self._load_task: Optional["asyncio.Future[RegistryLoadResult]"] = None

    @property
    def status(self) -> RegistryStatus:
        return self._result.status if self._result else RegistryStatus.PENDING

    @property
    def load_result(self) -> Optional[RegistryLoadResult]:
        return self._result

    def get_registry(self) -> SchemaRegistry:
        """The populated registry, or the fallback while population is still pending."""
        if self._result is None:
            return self._fallback
        return self._result.registry

    async def load(self) -> RegistryLoadResult:
        """Populates the registry on first call; later and concurrent callers share that result."""
        if self._result is not None:
            return self._result
        if self._load_task is None:
            self._load_task = asyncio.ensure_future(self._populate())
        task = self._load_task
        try:
            # A cancelled caller must not cancel population for the others.
            result = await asyncio.shield(task)
        except BaseException:
            if task.done() and self._load_task is task:
                self._load_task = None
            raise
        self._result = result
        return result

    def load_blocking(self) -> RegistryLoadResult:
        """Synchronous wrapper around load() for callers without an event loop."""
        if self._result is not None:
            return self._result
        return asyncio.run(self.load())

    async def _populate(self) -> RegistryLoadResult:
        collections = list(RegistryCollection)
        if self.source is None:
            logger.warning("No definition source configured. Using the built-in fallback registry.")
            return RegistryLoadResult(
                status=RegistryStatus.FALLBACK,
                registry=self._fallback,
                fallback_collections=collections,
                errors={c.value: "no definition source configured" for c in collections},
            )

        logger.info(f"Populating HL7 definitions from {self.source!r}")
        outcomes = await asyncio.gather(
            *(self.source.fetch_collection(c) for c in collections),
            return_exceptions=True,
        )

        parsed: Dict[RegistryCollection, List[BaseModel]] = {}
        fallback_collections: List[RegistryCollection] = []
        errors: Dict[str, str] = {}
        for collection, outcome in zip(collections, outcomes):
            if isinstance(outcome, RegistrySourceError):
                logger.error(f"{outcome}. Substituting fallback {collection.value}.")
                errors[collection.value] = outcome.reason
                fallback_collections.append(collection)
                continue
            if isinstance(outcome, BaseException):
                raise outcome

            definitions, skipped = parse_collection(collection, outcome)
            if not definitions:
                logger.error(f"Source returned no usable {collection.value} ({skipped} malformed). Substituting fallback {collection.value}.")
                errors[collection.value] = "no usable records"
                fallback_collections.append(collection)
                continue
            logger.info(f"Loaded {len(definitions)} {collection.value} definitions ({skipped} skipped)")
            parsed[collection] = definitions

        registry = SchemaRegistry(
            segments=self._collection_or_fallback(parsed, RegistryCollection.SEGMENTS, self._fallback.segments),
            dataTypes=self._collection_or_fallback(parsed, RegistryCollection.DATA_TYPES, self._fallback.dataTypes),
            tables=self._collection_or_fallback(parsed, RegistryCollection.TABLES, self._fallback.tables),
            triggerEvents=self._collection_or_fallback(parsed, RegistryCollection.TRIGGER_EVENTS, self._fallback.triggerEvents),
        )

        status = RegistryStatus.FALLBACK if fallback_collections else RegistryStatus.LOADED
        if status is RegistryStatus.FALLBACK:
            logger.warning(f"Registry populated with fallback data for: {', '.join(c.value for c in fallback_collections)}")
        else:
            logger.info("Registry populated from source.")
        return RegistryLoadResult(status=status, registry=registry, fallback_collections=fallback_collections, errors=errors)

    @staticmethod
    def _collection_or_fallback(parsed: Dict[RegistryCollection, List[BaseModel]], collection: RegistryCollection, fallback: Dict[str, Any]) -> Dict[str, Any]:
        if collection in parsed:
            return {definition.id: definition for definition in parsed[collection]}
        return dict(fallback)
