from typing import List, Optional
import logging

from pydantic import BaseModel, Field

from cdm import CdmValidationError, CdmFieldInfo, Severity, count_by_severity
from hl7_parser import split_message, identify_message_type, field_position_at
from hl7_schema_models import DataTypeDefinition
from hl7_validator import validate_message, resolve_field
from schema_registry import SchemaRegistryManager, RegistrySource, RegistryLoadResult, RegistryStatus

logger = logging.getLogger(__name__)

class ValidationResult(BaseModel):
    """Container for validation results."""
    valid: bool
    message_type: Optional[str] = None
    findings: List[CdmValidationError] = Field(default_factory=list)
    error_count: int = 0
    warning_count: int = 0
    registry_status: RegistryStatus = RegistryStatus.PENDING

    def findings_for(self, line: int, field: int) -> List[CdmValidationError]:
        return [f for f in self.findings if f.line == line and f.field == field]

class HL7ValidationService:
    """Service for HL7 v2 message validation and field inspection."""

    def __init__(self, source: Optional[RegistrySource] = None, registry_manager: Optional[SchemaRegistryManager] = None):
        self.registry_manager = registry_manager or SchemaRegistryManager(source)

    def load_definitions(self) -> RegistryLoadResult:
        return self.registry_manager.load_blocking()

    async def load_definitions_async(self) -> RegistryLoadResult:
        return await self.registry_manager.load()

    def validate(self, content: str) -> ValidationResult:
        """
        Validate message content against the current registry snapshot.

        Args:
            content: The raw message text, one segment per line

        Returns:
            ValidationResult containing validation status and findings
        """
        registry = self.registry_manager.get_registry()
        logger.info(f"Starting HL7 validation (registry status: {self.registry_manager.status.value})")

        findings = validate_message(content, registry)
        counts = count_by_severity(findings)
        is_valid = counts[Severity.ERROR] == 0

        if findings:
            logger.warning("--- HL7 VALIDATION SUMMARY: ISSUES FOUND ---")
            logger.warning(f"Errors: {counts[Severity.ERROR]}, Warnings: {counts[Severity.WARNING]}")
            for finding in findings:
                logger.warning(f"  - [{finding.severity.value}] line {finding.line}, {finding.segment or 'MESSAGE'}-{finding.field}: {finding.message}")
            logger.warning("--- END OF SUMMARY ---")
        logger.info(f"Validation completed: valid={is_valid}, findings={len(findings)}")

        return ValidationResult(
            valid=is_valid,
            message_type=identify_message_type(split_message(content)),
            findings=findings,
            error_count=counts[Severity.ERROR],
            warning_count=counts[Severity.WARNING],
            registry_status=self.registry_manager.status,
        )

    def inspect_field(self, content: str, line: int, field_position: int) -> Optional[CdmFieldInfo]:
        return resolve_field(split_message(content), line, field_position, self.registry_manager.get_registry())

    def inspect_position(self, content: str, line: int, column: int) -> Optional[CdmFieldInfo]:
        """Resolve the field under a character column of a segment line."""
        lines = split_message(content)
        if line < 0 or line >= len(lines):
            return None
        return resolve_field(lines, line, field_position_at(lines[line], column), self.registry_manager.get_registry())

    def describe_data_type(self, data_type_id: str) -> Optional[DataTypeDefinition]:
        return self.registry_manager.get_registry().get_data_type(data_type_id)
