"""
Client-side checks run before anything is sent.

Failures are reported as a mapping of field name to message; nothing here
raises for bad input.
"""
from typing import Dict, List, Optional

from contracts.upload import (
    ACCEPTED_FILE_TYPES,
    FILE_FIELD,
    MAX_FILE_SIZE,
    MSG_FILE_REQUIRED,
    MSG_FILE_TOO_LARGE,
    MSG_FILE_TYPE,
    MSG_NAME_REQUIRED,
    NAME_FIELD,
    FileCandidate,
    file_problem,
)

MSG_TOO_MANY_FILES = "Too many files"


def validate_name(name: Optional[str]) -> Optional[str]:
    if not name or not name.strip():
        return MSG_NAME_REQUIRED
    return None


def validate_file(candidate: Optional[FileCandidate]) -> Optional[str]:
    if candidate is None:
        return MSG_FILE_REQUIRED
    return file_problem(candidate.mime_type, candidate.size_bytes)


def validate_form(name: Optional[str], candidate: Optional[FileCandidate]) -> Dict[str, str]:
    errors = {}
    name_error = validate_name(name)
    if name_error:
        errors[NAME_FIELD] = name_error
    file_error = validate_file(candidate)
    if file_error:
        errors[FILE_FIELD] = file_error
    return errors


def rejection_reasons(candidate: FileCandidate) -> List[str]:
    """Every rule a dropped file breaks, for the picker's rejection list."""
    reasons = []
    if candidate.size_bytes > MAX_FILE_SIZE:
        reasons.append(MSG_FILE_TOO_LARGE)
    if candidate.mime_type not in ACCEPTED_FILE_TYPES:
        reasons.append(MSG_FILE_TYPE)
    return reasons


def describe_rejection(name: str, reasons: List[str]) -> str:
    return f"{name} - {', '.join(reasons)}"
