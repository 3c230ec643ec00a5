"""
Integration tests for the definitions → validation → inspection workflow.
Tests the complete flow from loading definitions on disk through the command line tool.
"""

import pytest
import sys
import os
import json
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import main
from schema_registry import DirectoryRegistrySource, RegistryStatus
from validation_service import HL7ValidationService

pytestmark = pytest.mark.integration

@pytest.fixture
def definitions_dir(tmp_path: Path, registry_records: dict) -> Path:
    definitions = tmp_path / "definitions"
    definitions.mkdir()
    for name, records in registry_records.items():
        (definitions / f"{name}.json").write_text(json.dumps(records))
    return definitions

@pytest.fixture
def message_file(tmp_path: Path, valid_adt_a01_message: str) -> Path:
    path = tmp_path / "adt_a01.hl7"
    path.write_text(valid_adt_a01_message)
    return path

class TestIntegratedWorkflow:
    """Test cases for the integrated workflow."""

    def test_validate_with_definitions_from_disk(self, definitions_dir: Path, header_only_message: str):
        service = HL7ValidationService(source=DirectoryRegistrySource(str(definitions_dir)))
        load_result = service.load_definitions()
        result = service.validate(header_only_message)

        assert load_result.status is RegistryStatus.LOADED
        assert result.registry_status is RegistryStatus.LOADED
        assert [f.message for f in result.findings] == [
            "Required segment EVN is missing",
            "Required segment PID is missing",
            "Required segment PV1 is missing",
        ]
        assert not result.valid

    def test_edit_and_revalidate_cycle(self, definitions_dir: Path, valid_adt_a01_message: str):
        service = HL7ValidationService(source=DirectoryRegistrySource(str(definitions_dir)))
        service.load_definitions()

        edited = valid_adt_a01_message.replace("PV1|1|I|", "PV1|1||")
        result = service.validate(edited)
        assert [(f.line, f.field) for f in result.findings] == [(3, 2)]

        info = service.inspect_field(edited, 3, 2)
        assert not info.is_valid
        assert info.validation_message == result.findings[0].message

        assert service.validate(valid_adt_a01_message).valid

    def test_cli_valid_message(self, definitions_dir: Path, message_file: Path, capsys):
        service = main.build_service(definitions_dir=str(definitions_dir))
        exit_code = main.validate_file(str(message_file), service)

        output = capsys.readouterr().out
        assert exit_code == 0
        assert "Message Type: ADT^A01" in output
        assert "Message is valid." in output

    def test_cli_invalid_message_with_inspection(self, definitions_dir: Path, tmp_path: Path, header_only_message: str, capsys):
        path = tmp_path / "header_only.hl7"
        path.write_text(header_only_message)

        service = main.build_service(definitions_dir=str(definitions_dir))
        exit_code = main.validate_file(str(path), service, inspect=(0, 9))

        output = capsys.readouterr().out
        assert exit_code == 1
        assert "Found 3 error(s) and 0 warning(s):" in output
        assert "Required segment PV1 is missing" in output
        assert "MSH-9 Message Type (Required)" in output
        assert "Current Value: MSG1" in output

    def test_cli_json_output(self, definitions_dir: Path, message_file: Path, capsys):
        service = main.build_service(definitions_dir=str(definitions_dir))
        exit_code = main.validate_file(str(message_file), service, as_json=True)

        payload = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert payload["valid"] is True
        assert payload["registry_status"] == "loaded"
        assert payload["findings"] == []

    def test_cli_without_source_uses_fallback(self, message_file: Path, capsys):
        exit_code = main.validate_file(str(message_file), main.build_service())

        captured = capsys.readouterr()
        assert "using built-in definitions" in captured.err
        assert "Definitions:  fallback" in captured.out
        assert "Message Type: ADT^A01" in captured.out

    def test_cli_missing_file(self, tmp_path: Path, capsys):
        exit_code = main.validate_file(str(tmp_path / "missing.hl7"), main.build_service())
        assert exit_code == 1
        assert "File not found" in capsys.readouterr().out
