from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator, model_validator
from typing import List, Optional, Dict, Any, Iterable

# --- Models for Field and Segment Definitions ---
class FieldDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    description: str = ""
    required: bool = False
    dataType: str = ""
    length: Optional[int] = Field(None, description="Maximum length of the field, if the standard defines one.")
    table: Optional[str] = Field(None, description="Id of the code table the field draws its values from.")

    @field_validator("name", "description", "dataType", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("required", mode="before")
    @classmethod
    def _required_only_when_true(cls, value: Any) -> bool:
        # Sources send null, "Y" or omit the flag; only a literal true marks a field required.
        return value is True

    @field_validator("length", mode="before")
    @classmethod
    def _blank_length_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip().isdigit():
            return None
        return value

    @field_validator("table", mode="before")
    @classmethod
    def _table_id_as_string(cls, value: Any) -> Any:
        # Table ids are zero padded ("0001"); sources occasionally send them as numbers.
        if isinstance(value, int):
            return f"{value:04d}"
        return value or None

class SegmentDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    description: str = ""
    fields: List[FieldDefinition] = Field(default_factory=list)

class DataTypeDefinition(BaseModel):
    """Composite data type. Components are only ever displayed, never validated."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    description: str = ""
    components: List[FieldDefinition] = Field(
        default_factory=list,
        validation_alias=AliasChoices("components", "fields"),
    )

class CodeTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    description: str = ""
    values: Dict[str, str] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value: Any) -> Any:
        if isinstance(value, int):
            return f"{value:04d}"
        return value

    @field_validator("values", mode="before")
    @classmethod
    def _values_as_mapping(cls, value: Any) -> Any:
        # Accept [{"id": "F", "description": "Female"}, ...] as well as {"F": "Female"}.
        if isinstance(value, list):
            return {str(entry.get("id")): entry.get("description") or "" for entry in value if isinstance(entry, dict)}
        return value or {}

class TriggerEventDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    description: str = ""
    segments: List[str] = Field(default_factory=list)
    requiredSegments: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _derive_required_segments(cls, data: Any) -> Any:
        # Some sources list segments as [{"id": "PID", "required": true}, ...].
        if not isinstance(data, dict):
            return data
        segments = data.get("segments")
        if isinstance(segments, list) and any(isinstance(s, dict) for s in segments):
            data = dict(data)
            data["segments"] = [s["id"] for s in segments if isinstance(s, dict) and "id" in s]
            if "requiredSegments" not in data:
                data["requiredSegments"] = [
                    s["id"] for s in segments if isinstance(s, dict) and "id" in s and s.get("required") is True
                ]
        return data

    @model_validator(mode="after")
    def _required_segments_are_declared(self) -> "TriggerEventDefinition":
        undeclared = [seg for seg in self.requiredSegments if seg not in self.segments]
        if undeclared:
            raise ValueError(f"requiredSegments {undeclared} are not listed in segments of '{self.id}'")
        return self

# --- The registry itself ---
class SchemaRegistry(BaseModel):
    """
    Read-only snapshot of every definition the validator consults.
    Built once, then passed explicitly into each validation or inspection call.
    """
    model_config = ConfigDict(frozen=True)

    version: str = "2.5.1"
    segments: Dict[str, SegmentDefinition] = Field(default_factory=dict)
    dataTypes: Dict[str, DataTypeDefinition] = Field(default_factory=dict)
    tables: Dict[str, CodeTable] = Field(default_factory=dict)
    triggerEvents: Dict[str, TriggerEventDefinition] = Field(default_factory=dict)

    @classmethod
    def from_collections(
        cls,
        segments: Iterable[SegmentDefinition] = (),
        data_types: Iterable[DataTypeDefinition] = (),
        tables: Iterable[CodeTable] = (),
        trigger_events: Iterable[TriggerEventDefinition] = (),
        version: str = "2.5.1",
    ) -> "SchemaRegistry":
        return cls(
            version=version,
            segments={s.id: s for s in segments},
            dataTypes={d.id: d for d in data_types},
            tables={t.id: t for t in tables},
            triggerEvents={e.id: e for e in trigger_events},
        )

    def get_segment_definition(self, segment_id: str) -> Optional[SegmentDefinition]:
        return self.segments.get(segment_id)

    def get_data_type(self, data_type_id: str) -> Optional[DataTypeDefinition]:
        return self.dataTypes.get(data_type_id)

    def get_table_values(self, table_id: Optional[str]) -> Optional[Dict[str, str]]:
        if not table_id:
            return None
        table = self.tables.get(table_id)
        return dict(table.values) if table else None

    def get_trigger_event(self, message_type: str) -> Optional[TriggerEventDefinition]:
        return self.triggerEvents.get(message_type)

    def is_empty(self) -> bool:
        return not (self.segments or self.dataTypes or self.tables or self.triggerEvents)
