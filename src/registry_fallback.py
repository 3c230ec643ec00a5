# Minimal built-in definitions, substituted for any collection the configured source cannot supply.
from typing import Any, Dict, List, Optional

from hl7_schema_models import SchemaRegistry, SegmentDefinition, DataTypeDefinition, CodeTable, TriggerEventDefinition

def _field(name: str, description: str, data_type: str, required: bool = False, table: Optional[str] = None, length: Optional[int] = None) -> Dict[str, Any]:
    return {"name": name, "description": description, "required": required, "dataType": data_type, "table": table, "length": length}

FALLBACK_SEGMENTS: List[Dict[str, Any]] = [
    {
        "id": "MSH",
        "name": "Message Header",
        "description": "Defines the intent, source, destination, and some specifics of the syntax of a message.",
        "fields": [
            _field("Field Separator", "This field contains the separator character.", "ST", required=True, length=1),
            _field("Encoding Characters", "This field contains the encoding characters.", "ST", required=True, length=4),
            _field("Sending Application", "This field uniquely identifies the sending application.", "HD"),
            _field("Sending Facility", "This field identifies the sending facility.", "HD"),
            _field("Receiving Application", "This field uniquely identifies the receiving application.", "HD"),
            _field("Receiving Facility", "This field identifies the receiving facility.", "HD"),
            _field("Date/Time of Message", "This field contains the date and time that the sending system created the message.", "TS", required=True),
            _field("Security", "This field is reserved for implementation-specific usage.", "ST"),
            _field("Message Type", "This field contains the message type, trigger event, and message structure ID.", "MSG", required=True),
            _field("Message Control ID", "This field contains a number or other identifier that uniquely identifies the message.", "ST", required=True, length=20),
            _field("Processing ID", "This field is used to decide whether to process the message as defined in HL7 processing rules.", "PT", required=True),
            _field("Version ID", "This field contains the version ID of the HL7 standard.", "VID", required=True),
            _field("Sequence Number", "A non-negative integer that represents the sequence of messages sent by the sender.", "NM"),
            _field("Continuation Pointer", "This field contains the continuation pointer.", "ST"),
            _field("Accept Acknowledgment Type", "This field contains the accept acknowledgment type.", "ID", table="0155"),
            _field("Application Acknowledgment Type", "This field contains the application acknowledgment type.", "ID", table="0155"),
            _field("Country Code", "This field contains the country code.", "ID", table="0399"),
            _field("Character Set", "This field contains the character set.", "ID", table="0211"),
            _field("Principal Language of Message", "This field contains the principal language of message.", "CE"),
            _field("Alternate Character Set Handling Scheme", "This field contains the alternate character set handling scheme.", "ID", table="0356"),
        ],
    },
    {
        "id": "EVN",
        "name": "Event Type",
        "description": "The EVN segment is used to communicate necessary trigger event information to receiving applications.",
        "fields": [
            _field("Event Type Code", "This field contains the code for the event that triggered this message.", "ID", table="0003"),
            _field("Recorded Date/Time", "This field contains the date and time that the event was recorded.", "TS", required=True),
            _field("Date/Time Planned Event", "This field contains the date and time that the event was planned to occur.", "TS"),
            _field("Event Reason Code", "This field contains the reason for the event.", "IS", table="0062"),
            _field("Operator ID", "This field contains the ID of the operator who recorded the event.", "XCN"),
            _field("Event Occurred", "This field contains the date and time that the event occurred.", "TS"),
            _field("Event Facility", "This field contains the facility where the event occurred.", "HD"),
        ],
    },
    {
        "id": "PID",
        "name": "Patient Identification",
        "description": "The PID segment is used by all applications as the primary means of communicating patient identification information.",
        "fields": [
            _field("Set ID - PID", "This field contains the sequence number of this PID segment.", "SI"),
            _field("Patient ID", "This field has been retained for backward compatibility only.", "CX"),
            _field("Patient Identifier List", "This field contains the list of identifiers used by the healthcare facility to uniquely identify a patient.", "CX", required=True),
            _field("Alternate Patient ID - PID", "This field has been retained for backward compatibility only.", "CX"),
            _field("Patient Name", "This field contains the names of the patient.", "XPN", required=True),
            _field("Mother's Maiden Name", "This field contains the mother's maiden (unmarried) name.", "XPN"),
            _field("Date/Time of Birth", "This field contains the date and time of the patient's birth.", "TS"),
            _field("Administrative Sex", "This field contains the patient's sex.", "IS", table="0001"),
            _field("Patient Alias", "This field has been retained for backward compatibility only.", "XPN"),
            _field("Race", "This field refers to the patient's race.", "CE", table="0005"),
            _field("Patient Address", "This field contains the mailing address of the patient.", "XAD"),
            _field("County Code", "This field has been retained for backward compatibility only.", "IS"),
            _field("Phone Number - Home", "This field contains the patient's home phone numbers.", "XTN"),
            _field("Phone Number - Business", "This field contains the patient's business phone numbers.", "XTN"),
            _field("Primary Language", "This field contains the patient's primary language.", "CE", table="0296"),
            _field("Marital Status", "This field contains the patient's marital status.", "CE", table="0002"),
            _field("Religion", "This field contains the patient's religion.", "CE", table="0006"),
            _field("Patient Account Number", "This field contains the patient's account number.", "CX"),
            _field("SSN Number - Patient", "This field has been retained for backward compatibility only.", "ST"),
            _field("Driver's License Number - Patient", "This field contains the patient's driver's license number.", "DLN"),
        ],
    },
    {
        "id": "PV1",
        "name": "Patient Visit",
        "description": "The PV1 segment is used by Registration/Patient Administration applications to communicate information on an account or visit-specific basis.",
        "fields": [
            _field("Set ID - PV1", "This field contains the sequence number of this PV1 segment.", "SI"),
            _field("Patient Class", "This field indicates the patient's status or class.", "IS", required=True, table="0004"),
            _field("Assigned Patient Location", "This field contains the patient's assigned location.", "PL"),
            _field("Admission Type", "This field contains the admission type.", "IS", table="0007"),
            _field("Preadmit Number", "This field contains the preadmit number.", "CX"),
            _field("Prior Patient Location", "This field contains the prior patient location.", "PL"),
            _field("Attending Doctor", "This field contains the attending doctor for the patient.", "XCN"),
            _field("Referring Doctor", "This field contains the referring doctor for the patient.", "XCN"),
            _field("Consulting Doctor", "This field contains the consulting doctor for the patient.", "XCN"),
            _field("Hospital Service", "This field contains the hospital service.", "IS", table="0069"),
            _field("Temporary Location", "This field contains the temporary location.", "PL"),
            _field("Preadmit Test Indicator", "This field contains the preadmit test indicator.", "IS", table="0087"),
            _field("Re-admission Indicator", "This field contains the re-admission indicator.", "IS", table="0092"),
            _field("Admit Source", "This field contains the admit source.", "IS", table="0023"),
            _field("Ambulatory Status", "This field contains the ambulatory status.", "IS", table="0009"),
            _field("VIP Indicator", "This field contains the VIP indicator.", "IS", table="0099"),
            _field("Admitting Doctor", "This field contains the admitting doctor.", "XCN"),
            _field("Patient Type", "This field contains the patient type.", "IS", table="0018"),
            _field("Visit Number", "This field contains the visit number.", "CX"),
            _field("Financial Class", "This field contains the financial class.", "FC", table="0064"),
        ],
    },
]

FALLBACK_DATA_TYPES: List[Dict[str, Any]] = [
    {"id": "ST", "name": "String Data", "description": "Printable characters, left justified.", "components": []},
    {"id": "ID", "name": "Coded Value for HL7 Defined Tables", "description": "A value drawn from an HL7 defined table.", "components": []},
    {"id": "IS", "name": "Coded Value for User-Defined Tables", "description": "A value drawn from a site defined table.", "components": []},
    {
        "id": "TS",
        "name": "Time Stamp",
        "description": "Contains the exact time of an event, including the date and time.",
        "components": [
            _field("Time", "Date and time in YYYY[MM[DD[HH[MM[SS[.S[S[S[S]]]]]]]]][+/-ZZZZ] format.", "DTM", required=True),
            _field("Degree of Precision", "Retained for backward compatibility only.", "ID", table="0529"),
        ],
    },
    {
        "id": "HD",
        "name": "Hierarchic Designator",
        "description": "Identifies an entity (administrative, system, application, or other) responsible for managing or assigning identifiers.",
        "components": [
            _field("Namespace ID", "User-defined namespace identifier.", "IS", table="0300"),
            _field("Universal ID", "Universally unique identifier.", "ST"),
            _field("Universal ID Type", "Type of the universal identifier.", "ID", table="0301"),
        ],
    },
    {
        "id": "CX",
        "name": "Extended Composite ID with Check Digit",
        "description": "Identifier with optional check digit and assigning authority.",
        "components": [
            _field("ID Number", "The identifier value.", "ST", required=True),
            _field("Check Digit", "Check digit for the identifier.", "ST"),
            _field("Check Digit Scheme", "Algorithm used to generate the check digit.", "ID", table="0061"),
            _field("Assigning Authority", "System or organization that assigned the identifier.", "HD"),
            _field("Identifier Type Code", "Type of the identifier.", "ID", table="0203"),
        ],
    },
    {
        "id": "XPN",
        "name": "Extended Person Name",
        "description": "A person's name.",
        "components": [
            _field("Family Name", "The family (last) name.", "FN"),
            _field("Given Name", "The given (first) name.", "ST"),
            _field("Second and Further Given Names or Initials Thereof", "Middle names or initials.", "ST"),
            _field("Suffix", "Name suffix, e.g. JR or III.", "ST"),
            _field("Prefix", "Name prefix, e.g. DR.", "ST"),
        ],
    },
    {
        "id": "PL",
        "name": "Person Location",
        "description": "Location of a patient within a facility.",
        "components": [
            _field("Point of Care", "Nursing unit or clinic.", "IS", table="0302"),
            _field("Room", "Patient room.", "IS", table="0303"),
            _field("Bed", "Patient bed.", "IS", table="0304"),
            _field("Facility", "Facility the location belongs to.", "HD"),
        ],
    },
    {
        "id": "XCN",
        "name": "Extended Composite ID Number and Name for Persons",
        "description": "Identifies a person, typically a care provider, by id and name.",
        "components": [
            _field("ID Number", "The person's identifier.", "ST"),
            _field("Family Name", "The family (last) name.", "FN"),
            _field("Given Name", "The given (first) name.", "ST"),
        ],
    },
    {
        "id": "CE",
        "name": "Coded Element",
        "description": "A code together with its text and coding system.",
        "components": [
            _field("Identifier", "The code.", "ST"),
            _field("Text", "Descriptive text for the code.", "ST"),
            _field("Name of Coding System", "The coding system the code belongs to.", "ID", table="0396"),
        ],
    },
]

FALLBACK_TABLES: List[Dict[str, Any]] = [
    {
        "id": "0001",
        "name": "Administrative Sex",
        "description": "Codes for a person's administrative sex.",
        "values": {"F": "Female", "M": "Male", "O": "Other", "U": "Unknown", "A": "Ambiguous", "N": "Not applicable"},
    },
    {
        "id": "0002",
        "name": "Marital Status",
        "description": "Codes for a person's marital status.",
        "values": {
            "A": "Separated", "D": "Divorced", "M": "Married", "S": "Single", "W": "Widowed",
            "C": "Common law", "G": "Living together", "P": "Domestic partner", "R": "Registered domestic partner",
            "E": "Legally Separated", "N": "Annulled", "I": "Interlocutory", "B": "Unmarried",
            "U": "Unknown", "O": "Other", "T": "Unreported",
        },
    },
    {
        "id": "0003",
        "name": "Event Type",
        "description": "Trigger event codes.",
        "values": {
            "A01": "ADT/ACK - Admit/visit notification",
            "A02": "ADT/ACK - Transfer a patient",
            "A03": "ADT/ACK - Discharge/end visit",
            "A04": "ADT/ACK - Register a patient",
            "A05": "ADT/ACK - Pre-admit a patient",
            "A06": "ADT/ACK - Change an outpatient to an inpatient",
            "A07": "ADT/ACK - Change an inpatient to an outpatient",
            "A08": "ADT/ACK - Update patient information",
            "A09": "ADT/ACK - Patient departing - tracking",
            "A10": "ADT/ACK - Patient arriving - tracking",
        },
    },
    {
        "id": "0004",
        "name": "Patient Class",
        "description": "Codes for the patient's status or class.",
        "values": {
            "E": "Emergency", "I": "Inpatient", "O": "Outpatient", "P": "Preadmit", "R": "Recurring patient",
            "B": "Obstetrics", "C": "Commercial Account", "N": "Not Applicable", "U": "Unknown",
        },
    },
    {
        "id": "0155",
        "name": "Accept/Application Acknowledgment Conditions",
        "description": "Conditions under which acknowledgments are required.",
        "values": {"AL": "Always", "NE": "Never", "ER": "Error/reject conditions only", "SU": "Successful completion only"},
    },
]

def _adt_event(event: str, name: str, description: str) -> Dict[str, Any]:
    return {
        "id": f"ADT^{event}",
        "name": name,
        "description": description,
        "segments": ["MSH", "EVN", "PID", "PV1"],
        "requiredSegments": ["MSH", "PID", "PV1"],
    }

FALLBACK_TRIGGER_EVENTS: List[Dict[str, Any]] = [
    _adt_event("A01", "Admit/Visit Notification", "Sent when a patient is admitted to a healthcare facility."),
    _adt_event("A02", "Transfer a Patient", "Sent when a patient is transferred from one location to another within a healthcare facility."),
    _adt_event("A03", "Discharge/End Visit", "Sent when a patient leaves a healthcare facility."),
    _adt_event("A04", "Register a Patient", "Sent when a patient is registered as an outpatient or a pre-admitted patient."),
    {
        "id": "ORU^R01",
        "name": "Unsolicited Observation Message",
        "description": "Sent to transmit results of observations.",
        "segments": ["MSH", "PID", "PV1"],
        "requiredSegments": ["MSH", "PID"],
    },
]

def build_fallback_registry() -> SchemaRegistry:
    return SchemaRegistry.from_collections(
        segments=[SegmentDefinition.model_validate(s) for s in FALLBACK_SEGMENTS],
        data_types=[DataTypeDefinition.model_validate(d) for d in FALLBACK_DATA_TYPES],
        tables=[CodeTable.model_validate(t) for t in FALLBACK_TABLES],
        trigger_events=[TriggerEventDefinition.model_validate(e) for e in FALLBACK_TRIGGER_EVENTS],
    )
