from enum import Enum
from pydantic import BaseModel, Field
from typing import List, Optional, Dict

# Canonical Data Model (CDM) for a message as seen by the validator.
# Everything here is transient: it is re-derived from the editor text on every pass.

class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"

class CdmValidationError(BaseModel):
    """Represents one diagnostic found while validating a message."""
    line: int = 0
    segment: str = ""
    field: int = 0
    message: str
    severity: Severity = Severity.ERROR

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

class CdmSegment(BaseModel):
    """Represents a single segment line split into its raw fields."""
    segment_id: str
    fields: List[str]
    line_index: int
    raw_segment: str # Store the original line for reference

    def get_field(self, position: int) -> Optional[str]:
        """Retrieves a raw field by position. Position 0 is the segment id."""
        if 0 <= position < len(self.fields):
            return self.fields[position]
        return None

class CdmFieldInfo(BaseModel):
    """Resolved, display-ready description of one field of one segment."""
    segment: str
    field: int
    name: str
    description: str
    required: bool
    data_type: str
    length: Optional[int] = None
    table: Optional[str] = None
    table_values: Optional[Dict[str, str]] = None
    value: str = ""
    is_valid: bool = True
    validation_message: Optional[str] = None

def has_errors(diagnostics: List[CdmValidationError]) -> bool:
    return any(d.is_error for d in diagnostics)

def count_by_severity(diagnostics: List[CdmValidationError]) -> Dict[Severity, int]:
    counts = {severity: 0 for severity in Severity}
    for diagnostic in diagnostics:
        counts[diagnostic.severity] += 1
    return counts
