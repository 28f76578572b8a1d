import logging
import threading
from typing import Callable, Iterable, List, Optional, Union

import requests

from contracts.upload import FileCandidate, UploadRequest
from client import state as st
from client.preview import PreviewSlot
from client.transport import DEFAULT_ENDPOINT, UploadError, percent, post_upload
from client.validation import (
    MSG_TOO_MANY_FILES,
    describe_rejection,
    rejection_reasons,
    validate_form,
)

logger = logging.getLogger(__name__)

Listener = Callable[[st.FormState], None]


class UploadForm:
    """
    One name field, one file slot, one submit button.

    Listeners get every new FormState, in order. Only one submission may be in
    flight; submit() while uploading returns the current state untouched.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        session: Optional[requests.Session] = None,
        preview_slot: Optional[PreviewSlot] = None,
        listeners: Iterable[Listener] = (),
    ):
        self.endpoint = endpoint
        self._session = session
        self._preview = preview_slot or PreviewSlot()
        self._listeners: List[Listener] = list(listeners)
        self._state = st.FormState()
        self._in_flight = threading.Lock()

    @property
    def state(self) -> st.FormState:
        return self._state

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _emit(self, new_state: st.FormState) -> st.FormState:
        if new_state is self._state:
            return new_state
        self._state = new_state
        for listener in self._listeners:
            listener(new_state)
        return new_state

    def set_name(self, name: str) -> st.FormState:
        return self._emit(st.with_name(self._state, name))

    def select_file(self, file: Union[str, FileCandidate]) -> bool:
        """
        Offer one file to the picker. Returns True when it became the active file.
        A rejected file leaves the previous active file (and its preview) in place.
        """
        candidate = FileCandidate.from_path(file) if isinstance(file, str) else file

        reasons = rejection_reasons(candidate)
        if reasons:
            logger.info("Rejected %s: %s", candidate.name, ", ".join(reasons))
            self._emit(st.with_rejection(self._state, (describe_rejection(candidate.name, reasons),), reasons[0]))
            return False

        preview = self._preview.show(candidate)
        self._emit(st.with_file(self._state, candidate, preview))
        return True

    def drop(self, files: List[Union[str, FileCandidate]]) -> bool:
        """Drag-and-drop: exactly one file is accepted, more are all rejected."""
        if len(files) == 1:
            return self.select_file(files[0])
        if not files:
            return False
        candidates = [FileCandidate.from_path(f) if isinstance(f, str) else f for f in files]
        rejections = tuple(describe_rejection(c.name, [MSG_TOO_MANY_FILES]) for c in candidates)
        self._emit(st.with_rejection(self._state, rejections, MSG_TOO_MANY_FILES))
        return False

    def submit(self) -> st.FormState:
        if not self._in_flight.acquire(blocking=False):
            logger.warning("Submit ignored: an upload is already in flight")
            return self._state
        try:
            return self._submit()
        finally:
            self._in_flight.release()

    def _submit(self) -> st.FormState:
        current = self._emit(st.begin_validation(self._state))

        errors = validate_form(current.name, current.file)
        if errors:
            return self._emit(st.invalid(current, errors))

        self._emit(st.begin_upload(current))
        upload = UploadRequest(display_name=current.name, file=current.file)

        def on_progress(sent, total):
            self._emit(st.progressed(self._state, percent(sent, total)))

        try:
            stored = post_upload(self.endpoint, upload, on_progress=on_progress, session=self._session)
        except UploadError as e:
            logger.info("Upload of %s failed: %s", upload.file.name, e.message)
            return self._emit(st.failed(self._state, e.message))

        # the bar shows 100% before the result banner appears
        self._emit(st.progressed(self._state, 100))
        return self._emit(st.succeeded(self._state, stored))

    def close(self) -> None:
        self._preview.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
