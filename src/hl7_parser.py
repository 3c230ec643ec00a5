import logging
from typing import List, Optional

from cdm import CdmSegment

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = '|'
HEADER_SEGMENT_ID = 'MSH'
# MSH-9 sits at index 8 once the line is split (index 0 is the segment id).
MESSAGE_TYPE_POSITION = 8

def split_message(text: Optional[str]) -> List[str]:
    """
    Splits raw message text into its non-blank segment lines.

    Blank and whitespace-only lines are dropped, so every line index used
    elsewhere refers to this filtered list rather than to the original text.
    Retained lines are returned verbatim.
    """
    if not text:
        return []
    normalized = text.replace('\r\n', '\n').replace('\r', '\n')
    return [line for line in normalized.split('\n') if line.strip()]

def split_fields(line: str) -> List[str]:
    return line.split(FIELD_SEPARATOR)

def get_segment_id(line: str) -> str:
    return split_fields(line)[0]

def segmentize(lines: List[str]) -> List[CdmSegment]:
    segments = []
    for i, line in enumerate(lines):
        fields = split_fields(line)
        segments.append(CdmSegment(segment_id=fields[0], fields=fields, line_index=i, raw_segment=line))
    logger.debug(f"Segmentized {len(segments)} lines.")
    return segments

def find_header(lines: List[str]) -> Optional[str]:
    return next((line for line in lines if get_segment_id(line) == HEADER_SEGMENT_ID), None)

def identify_message_type(lines: List[str]) -> Optional[str]:
    """
    Returns the raw MSH-9 token of the first MSH line, e.g. "ADT^A01" or
    "ADT^A01^ADT_A01". The token is used verbatim as the trigger event key.
    """
    header = find_header(lines)
    if header is None:
        logger.debug("No MSH segment found; message type cannot be identified.")
        return None
    fields = split_fields(header)
    if len(fields) <= MESSAGE_TYPE_POSITION:
        logger.debug(f"MSH segment has only {len(fields)} fields; MSH-9 is absent.")
        return None
    return fields[MESSAGE_TYPE_POSITION]

def field_position_at(line: str, column: int) -> int:
    """
    Maps a character column within a segment line to the position of the field
    under it. A separator belongs to the field it closes; columns past the end
    of the line map to the last field.
    """
    if column <= 0:
        return 0
    end = 0
    fields = split_fields(line)
    for position, field in enumerate(fields):
        end += len(field) + 1
        if column < end:
            return position
    return len(fields) - 1
