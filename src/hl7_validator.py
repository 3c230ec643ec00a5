import logging
from typing import List, Optional

from hl7_schema_models import SchemaRegistry, FieldDefinition
from hl7_parser import split_message, split_fields, segmentize, identify_message_type, HEADER_SEGMENT_ID
from cdm import CdmSegment, CdmValidationError, CdmFieldInfo, Severity

logger = logging.getLogger(__name__)

# --- Validation Helpers ---
def _is_present(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""

def _required_field_message(segment_id: str, field_number: int, field_def: FieldDefinition) -> str:
    return f"Required field {segment_id}-{field_number} ({field_def.name}) is missing"

def check_field(segment_id: str, field_number: int, field_def: FieldDefinition, value: Optional[str]) -> Optional[str]:
    """
    Single-field rule shared by the validator and the field resolver.
    Returns the failure message, or None when the value is acceptable.
    """
    if field_def.required and not _is_present(value):
        return _required_field_message(segment_id, field_number, field_def)
    return None

class SegmentValidator:
    def __init__(self, registry: SchemaRegistry):
        self.registry = registry

    def validate(self, segment: CdmSegment) -> List[CdmValidationError]:
        logger.debug(f"      --- Validating Segment: '{segment.raw_segment}' (Line: {segment.line_index}) ---")

        segment_def = self.registry.get_segment_definition(segment.segment_id)
        if not segment_def:
            logger.warning(f"[FAIL] Definition for '{segment.segment_id}' not found in registry. (Line: {segment.line_index})")
            return [CdmValidationError(
                line=segment.line_index,
                segment=segment.segment_id,
                field=0,
                message=f"Unknown segment: {segment.segment_id}",
                severity=Severity.WARNING,
            )]

        errors: List[CdmValidationError] = []
        for i, field_def in enumerate(segment_def.fields):
            field_number = i + 1
            value = segment.get_field(field_number)
            log_line_intro = f"        Validating {segment.segment_id}-{field_number} (Required: {field_def.required}): Data='{value}'"

            err_msg = check_field(segment.segment_id, field_number, field_def, value)
            if err_msg:
                logger.debug(f"{log_line_intro} -> [FAIL] {err_msg}")
                errors.append(CdmValidationError(
                    line=segment.line_index,
                    segment=segment.segment_id,
                    field=field_number,
                    message=err_msg,
                    severity=Severity.ERROR,
                ))
            else:
                logger.debug(f"{log_line_intro} -> [PASS]")
        return errors

def _check_required_segments(message_type: str, segments: List[CdmSegment], registry: SchemaRegistry) -> List[CdmValidationError]:
    trigger_event = registry.get_trigger_event(message_type)
    if not trigger_event:
        logger.warning(f"[STRUCTURAL WARNING] Message type '{message_type}' is not defined in the registry.")
        return [CdmValidationError(
            line=0,
            segment=HEADER_SEGMENT_ID,
            field=9,
            message=f"Unknown message type: {message_type}",
            severity=Severity.WARNING,
        )]

    present = {segment.segment_id for segment in segments}
    errors: List[CdmValidationError] = []
    for required_id in trigger_event.requiredSegments:
        if required_id not in present:
            error_msg = f"Required segment {required_id} is missing"
            logger.debug(f"[STRUCTURAL ERROR] {error_msg} (message type {message_type})")
            errors.append(CdmValidationError(line=0, segment=required_id, field=0, message=error_msg, severity=Severity.ERROR))
    return errors

def validate_message(text: Optional[str], registry: SchemaRegistry) -> List[CdmValidationError]:
    """
    Validates a whole message against the registry.

    Structural problems (empty message, no MSH, no message type) short-circuit
    and are reported alone. Otherwise the result lists the trigger event checks
    followed by every per-segment finding in line order. Malformed input never
    raises; it only produces diagnostics.
    """
    lines = split_message(text)
    if not lines:
        return [CdmValidationError(line=0, segment="", field=0, message="Empty message", severity=Severity.ERROR)]

    segments = segmentize(lines)
    if not any(segment.segment_id == HEADER_SEGMENT_ID for segment in segments):
        return [CdmValidationError(line=0, segment="", field=0, message="Missing MSH segment", severity=Severity.ERROR)]

    message_type = identify_message_type(lines)
    if not message_type:
        return [CdmValidationError(
            line=0,
            segment=HEADER_SEGMENT_ID,
            field=9,
            message="Invalid or missing message type",
            severity=Severity.ERROR,
        )]

    logger.debug(f"=== VALIDATING {message_type} MESSAGE ({len(segments)} segments) ===")
    errors = _check_required_segments(message_type, segments, registry)

    validator = SegmentValidator(registry)
    for segment in segments:
        errors.extend(validator.validate(segment))

    logger.debug(f"=== VALIDATION COMPLETE ({len(errors)} findings) ===")
    return errors

def resolve_field(lines: List[str], line_index: int, field_position: int, registry: SchemaRegistry) -> Optional[CdmFieldInfo]:
    """
    Resolves the field at (line_index, field_position) into display metadata.

    field_position indexes the raw split line, so position 0 (the segment id)
    never resolves. Returns None for any coordinate that does not land on a
    defined field.
    """
    if line_index < 0 or line_index >= len(lines):
        return None

    fields = split_fields(lines[line_index])
    segment_id = fields[0]
    segment_def = registry.get_segment_definition(segment_id)
    if not segment_def:
        return None

    field_index = field_position - 1
    if field_index < 0 or field_index >= len(segment_def.fields):
        return None

    field_def = segment_def.fields[field_index]
    value = fields[field_position] if field_position < len(fields) else ""
    validation_message = check_field(segment_id, field_position, field_def, value)

    return CdmFieldInfo(
        segment=segment_id,
        field=field_position,
        name=field_def.name,
        description=field_def.description,
        required=field_def.required,
        data_type=field_def.dataType,
        length=field_def.length,
        table=field_def.table,
        table_values=registry.get_table_values(field_def.table),
        value=value,
        is_valid=validation_message is None,
        validation_message=validation_message,
    )
