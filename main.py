#!/usr/bin/env python3
"""
HL7 v2 Message Validator Command Line Tool

Validates a pipe-delimited HL7 v2 message against segment, table and trigger
event definitions, and optionally describes a single field.

Usage:
    python main.py message.hl7                                    # Validate with built-in definitions
    python main.py message.hl7 --definitions-dir definitions/     # Use local JSON definitions
    python main.py message.hl7 --definitions-url https://...      # Fetch definitions over HTTP
    python main.py message.hl7 --inspect 2 5                      # Describe PID-5 on line 2
"""

import argparse
import logging
import sys
from pathlib import Path

# Try importing from installed package first, fallback to src path
try:
    from registry_client import Hl7DefinitionClient
    from schema_registry import DirectoryRegistrySource
    from validation_service import HL7ValidationService
except ImportError:
    # Add src to path for imports when not installed
    sys.path.insert(0, str(Path(__file__).parent / "src"))
    from registry_client import Hl7DefinitionClient
    from schema_registry import DirectoryRegistrySource
    from validation_service import HL7ValidationService

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] - %(message)s"


def build_service(definitions_dir: str = None, definitions_url: str = None) -> HL7ValidationService:
    """Create a validation service for the requested definition source."""
    if definitions_dir:
        return HL7ValidationService(source=DirectoryRegistrySource(definitions_dir))
    if definitions_url:
        return HL7ValidationService(source=Hl7DefinitionClient(base_url=definitions_url))
    return HL7ValidationService()


def print_field_info(service: HL7ValidationService, content: str, line: int, field: int) -> None:
    info = service.inspect_field(content, line, field)
    print(f"\nField at line {line}, position {field}:")
    if info is None:
        print("  No field definition found at that position.")
        return

    print(f"  {info.segment}-{info.field} {info.name} ({'Required' if info.required else 'Optional'})")
    print(f"  {info.description}")
    print(f"  Data Type:     {info.data_type}")
    data_type = service.describe_data_type(info.data_type)
    if data_type and data_type.components:
        print(f"                 {data_type.name}: {', '.join(c.name for c in data_type.components)}")
    if info.length:
        print(f"  Max Length:    {info.length}")
    if info.table:
        print(f"  Value Table:   {info.table}")
    print(f"  Current Value: {info.value or '<empty>'}")
    if info.table_values and info.value in info.table_values:
        print(f"                 {info.value} = {info.table_values[info.value]}")
    if info.validation_message:
        print(f"  ! {info.validation_message}")


def validate_file(input_file: str, service: HL7ValidationService, inspect=None, as_json: bool = False) -> int:
    """Validate a message file and report the findings."""

    try:
        with open(input_file, 'r') as f:
            content = f.read()
    except FileNotFoundError as e:
        print(f"Error: File not found: {e}")
        return 1

    load_result = service.load_definitions()
    if load_result.used_fallback:
        missing = ', '.join(c.value for c in load_result.fallback_collections)
        print(f"Warning: using built-in definitions for: {missing}", file=sys.stderr)

    result = service.validate(content)

    if as_json:
        print(result.model_dump_json(indent=2))
    else:
        print(f"HL7 Validator - {input_file}")
        print("=" * 50)
        print(f"  Message Type: {result.message_type or 'unknown'}")
        print(f"  Definitions:  {result.registry_status.value}")
        if result.valid:
            print("\nMessage is valid.")
        else:
            print(f"\nFound {result.error_count} error(s) and {result.warning_count} warning(s):")
        for i, finding in enumerate(result.findings):
            location = f"line {finding.line}"
            if finding.segment:
                location += f", {finding.segment}-{finding.field}" if finding.field else f", {finding.segment}"
            print(f"  {i+1}. [{finding.severity.value.upper()}] {location}: {finding.message}")

    if inspect:
        print_field_info(service, content, inspect[0], inspect[1])

    return 0 if result.valid else 1


def main():
    """Main entry point with command line argument parsing."""

    parser = argparse.ArgumentParser(
        description="Validate HL7 v2 messages against segment and trigger event definitions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py adt_a01.hl7
  python main.py adt_a01.hl7 --definitions-dir ./definitions
  python main.py adt_a01.hl7 --inspect 2 5 --log-level DEBUG
        """
    )

    parser.add_argument('input_file', help='HL7 message file, one segment per line')
    source = parser.add_mutually_exclusive_group()
    source.add_argument('--definitions-dir',
                        help='Directory holding segments.json, dataTypes.json, tables.json and triggerEvents.json')
    source.add_argument('--definitions-url',
                        help='Base URL of an HL7 definition API')
    parser.add_argument('--inspect', nargs=2, type=int, metavar=('LINE', 'FIELD'),
                        help='Describe the field at LINE (0-based, blank lines skipped) and FIELD position')
    parser.add_argument('--json', action='store_true', help='Print the validation result as JSON')
    parser.add_argument('--log-level', default='WARNING',
                        help='Logging level (default: WARNING)')

    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format=LOG_FORMAT, stream=sys.stderr)

    service = build_service(args.definitions_dir, args.definitions_url)
    return validate_file(args.input_file, service, inspect=args.inspect, as_json=args.json)


if __name__ == "__main__":
    exit(main())
