# FILE: tests/conftest.py

import pytest
import sys
import os
import logging

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from hl7_schema_models import SchemaRegistry, SegmentDefinition, DataTypeDefinition, CodeTable, TriggerEventDefinition

# ==============================================================================
# PYTEST CONFIGURATION & HOOKS
# ==============================================================================

def pytest_configure(config):
    """Configure pytest settings and markers."""
    config.addinivalue_line("markers", "unit: Pure unit tests with no external dependencies.")
    config.addinivalue_line("markers", "integration: Tests exercising several components together.")

@pytest.fixture(scope="session", autouse=True)
def setup_test_environment(pytestconfig):
    """Set up test environment with logging configuration."""
    # Use pytest's log_cli_level if available, otherwise default to INFO
    log_level = pytestconfig.getoption("log_cli_level") or "INFO"
    logging.basicConfig(
        level=log_level.upper(),
        format="[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] - %(message)s",
        stream=sys.stdout,
        force=True,
    )
    if log_level.upper() != "DEBUG":
        logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.info(f"Test logging configured with level: {log_level.upper()}")
    yield

# ==============================================================================
# SYNTHETIC REGISTRY (Completely isolated from the fallback and any network source)
# ==============================================================================

def _fields(*specs):
    """Builds field records from (name, required, dataType[, table]) tuples."""
    records = []
    for spec in specs:
        name, required, data_type = spec[:3]
        table = spec[3] if len(spec) > 3 else None
        records.append({"name": name, "description": f"{name} description.", "required": required, "dataType": data_type, "table": table})
    return records

SEGMENT_RECORDS = [
    {
        "id": "MSH",
        "name": "Message Header",
        "description": "Message header.",
        "fields": _fields(
            ("Field Separator", True, "ST"),
            ("Encoding Characters", True, "ST"),
            ("Sending Application", False, "HD"),
            ("Sending Facility", False, "HD"),
            ("Receiving Application", False, "HD"),
            ("Receiving Facility", False, "HD"),
            ("Date/Time of Message", False, "TS"),
            ("Security", False, "ST"),
            ("Message Type", True, "MSG"),
            ("Message Control ID", True, "ST"),
            ("Processing ID", False, "PT"),
            ("Version ID", False, "VID"),
        ),
    },
    {
        "id": "EVN",
        "name": "Event Type",
        "description": "Event type.",
        "fields": _fields(
            ("Event Type Code", False, "ID", "0003"),
            ("Recorded Date/Time", True, "TS"),
        ),
    },
    {
        "id": "PID",
        "name": "Patient Identification",
        "description": "Patient identification.",
        "fields": _fields(
            ("Set ID - PID", False, "SI"),
            ("Patient ID", False, "CX"),
            ("Patient Identifier List", True, "CX"),
            ("Alternate Patient ID - PID", False, "CX"),
            ("Patient Name", True, "XPN"),
            ("Mother's Maiden Name", False, "XPN"),
            ("Date/Time of Birth", False, "TS"),
            ("Administrative Sex", False, "IS", "0001"),
        ),
    },
    {
        "id": "PV1",
        "name": "Patient Visit",
        "description": "Patient visit.",
        "fields": _fields(
            ("Set ID - PV1", False, "SI"),
            ("Patient Class", True, "IS", "0004"),
            ("Assigned Patient Location", False, "PL"),
        ),
    },
]

DATA_TYPE_RECORDS = [
    {"id": "XPN", "name": "Extended Person Name", "description": "A person's name.",
     "components": _fields(("Family Name", False, "FN"), ("Given Name", False, "ST"))},
    {"id": "ST", "name": "String Data", "description": "String.", "components": []},
]

TABLE_RECORDS = [
    {"id": "0001", "name": "Administrative Sex", "description": "Sex codes.", "values": {"F": "Female", "M": "Male", "U": "Unknown"}},
    {"id": "0004", "name": "Patient Class", "description": "Patient class codes.", "values": {"I": "Inpatient", "O": "Outpatient"}},
]

TRIGGER_EVENT_RECORDS = [
    {"id": "ADT^A01", "name": "Admit/Visit Notification", "description": "Admit.",
     "segments": ["MSH", "EVN", "PID", "PV1"], "requiredSegments": ["MSH", "EVN", "PID", "PV1"]},
    {"id": "ORU^R01", "name": "Unsolicited Observation Message", "description": "Results.",
     "segments": ["MSH", "PID", "PV1"], "requiredSegments": ["MSH", "PID"]},
]

@pytest.fixture(scope="session")
def registry_records() -> dict:
    """Raw wire-format records for each collection, as a definition source would serve them."""
    return {
        "segments": SEGMENT_RECORDS,
        "dataTypes": DATA_TYPE_RECORDS,
        "tables": TABLE_RECORDS,
        "triggerEvents": TRIGGER_EVENT_RECORDS,
    }

@pytest.fixture(scope="session")
def registry() -> SchemaRegistry:
    """A small synthetic registry in which ADT^A01 requires MSH, EVN, PID and PV1."""
    return SchemaRegistry.from_collections(
        segments=[SegmentDefinition.model_validate(r) for r in SEGMENT_RECORDS],
        data_types=[DataTypeDefinition.model_validate(r) for r in DATA_TYPE_RECORDS],
        tables=[CodeTable.model_validate(r) for r in TABLE_RECORDS],
        trigger_events=[TriggerEventDefinition.model_validate(r) for r in TRIGGER_EVENT_RECORDS],
    )

# ==============================================================================
# MESSAGE FIXTURES
# ==============================================================================

@pytest.fixture(scope="session")
def header_only_message() -> str:
    return "MSH|^~\\&|A|B|C|D|20230101120000||ADT^A01|MSG1|P|2.5"

@pytest.fixture(scope="session")
def valid_adt_a01_message() -> str:
    """Provides a compliant ADT^A01 message for the synthetic registry."""
    return """
MSH|^~\\&|SENDING_APP|SENDING_FAC|RECEIVING_APP|RECEIVING_FAC|20230101120000||ADT^A01|MSG00001|P|2.5
EVN|A01|20230101120000
PID|1||10006579^^^1^MRN^1||SMITH^JOHN^M||19781211|M
PV1|1|I|WARD^ROOM^BED
""".strip()
