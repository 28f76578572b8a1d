"""
Immutable view state for one upload form.

Every transition returns a new FormState; nothing is mutated in place.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Mapping, Optional, Tuple

from contracts.upload import FILE_FIELD, NAME_FIELD, FileCandidate, StoredFile

MSG_SUCCESS_BANNER = "File uploaded successfully!"

LABEL_IDLE = "Upload File"
LABEL_BUSY = "Uploading..."


class Status(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    INVALID = "invalid"
    UPLOADING = "uploading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL = (Status.INVALID, Status.SUCCEEDED, Status.FAILED)


@dataclass(frozen=True)
class Preview:
    kind: str  # "image" or "file"
    name: str
    mime_type: str
    url: Optional[str] = None


@dataclass(frozen=True)
class UploadOutcome:
    success: bool
    message: str
    progress_percent: int = 0
    stored: Optional[StoredFile] = None


@dataclass(frozen=True)
class FormState:
    status: Status = Status.IDLE
    name: str = ""
    file: Optional[FileCandidate] = None
    preview: Optional[Preview] = None
    field_errors: Mapping[str, str] = field(default_factory=dict)
    rejections: Tuple[str, ...] = ()
    progress: int = 0
    outcome: Optional[UploadOutcome] = None

    @property
    def is_uploading(self) -> bool:
        return self.status is Status.UPLOADING

    @property
    def submit_enabled(self) -> bool:
        return not self.is_uploading

    @property
    def submit_label(self) -> str:
        return LABEL_BUSY if self.is_uploading else LABEL_IDLE

    def banner(self) -> Tuple[str, ...]:
        """Lines of the result banner; empty when there is no outcome."""
        if self.outcome is None:
            return ()
        lines = [self.outcome.message]
        if self.outcome.success and self.outcome.stored is not None:
            lines.append(f"Uploaded as: {self.outcome.stored.filename}")
        return tuple(lines)


def _interacted(state: FormState) -> FormState:
    # any edit after a finished attempt puts the form back to Idle
    if state.status in TERMINAL:
        return replace(state, status=Status.IDLE)
    return state


def _without(errors: Mapping[str, str], key: str) -> dict:
    return {k: v for k, v in errors.items() if k != key}


def with_name(state: FormState, name: str) -> FormState:
    state = _interacted(state)
    return replace(state, name=name, field_errors=_without(state.field_errors, NAME_FIELD))


def with_file(state: FormState, candidate: FileCandidate, preview: Optional[Preview]) -> FormState:
    state = _interacted(state)
    return replace(
        state,
        file=candidate,
        preview=preview,
        rejections=(),
        field_errors=_without(state.field_errors, FILE_FIELD),
    )


def with_rejection(state: FormState, rejections: Tuple[str, ...], error: str) -> FormState:
    state = _interacted(state)
    errors = dict(state.field_errors)
    errors[FILE_FIELD] = error
    return replace(state, rejections=rejections, field_errors=errors)


def begin_validation(state: FormState) -> FormState:
    # rejections stay listed until a file is accepted or another is rejected
    return replace(state, status=Status.VALIDATING, field_errors={}, progress=0, outcome=None)


def invalid(state: FormState, errors: Mapping[str, str]) -> FormState:
    return replace(state, status=Status.INVALID, field_errors=dict(errors))


def begin_upload(state: FormState) -> FormState:
    return replace(state, status=Status.UPLOADING, progress=0, outcome=None)


def progressed(state: FormState, percent: int) -> FormState:
    # progress never moves backwards within one upload
    percent = max(state.progress, min(100, max(0, percent)))
    if percent == state.progress:
        return state
    return replace(state, progress=percent)


def succeeded(state: FormState, stored: StoredFile) -> FormState:
    outcome = UploadOutcome(success=True, message=MSG_SUCCESS_BANNER, progress_percent=100, stored=stored)
    return replace(state, status=Status.SUCCEEDED, progress=100, outcome=outcome)


def failed(state: FormState, message: str) -> FormState:
    outcome = UploadOutcome(success=False, message=message, progress_percent=state.progress)
    return replace(state, status=Status.FAILED, outcome=outcome)
