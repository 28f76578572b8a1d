"""Terminal front-end for the upload form: `upload-form --name NAME FILE`."""
import argparse
import logging
import sys

from contracts.upload import FILE_FIELD, NAME_FIELD
from client.form import UploadForm
from client.state import FormState, Status
from client.transport import DEFAULT_ENDPOINT

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_FAILED = 2

BAR_WIDTH = 30


def _bar(progress: int) -> str:
    filled = BAR_WIDTH * progress // 100
    return f"[{'#' * filled}{' ' * (BAR_WIDTH - filled)}] {progress}%"


class TerminalView:
    """Renders FormState changes as lines of text."""

    def __init__(self, out=None):
        self.out = out or sys.stdout
        self._last_progress = None
        self._shown_rejections = ()

    def __call__(self, state: FormState):
        if state.status is Status.UPLOADING:
            if state.progress != self._last_progress:
                self._last_progress = state.progress
                self.out.write(f"\r{state.submit_label} {_bar(state.progress)}")
                self.out.flush()
            return
        if self._last_progress is not None:
            self.out.write("\n")
            self._last_progress = None
        if state.rejections != self._shown_rejections:
            self._shown_rejections = state.rejections
            for line in state.rejections:
                self.out.write(f"rejected: {line}\n")
        if state.status is Status.INVALID:
            for field in (NAME_FIELD, FILE_FIELD):
                if field in state.field_errors:
                    self.out.write(f"{field}: {state.field_errors[field]}\n")
        for line in state.banner():
            self.out.write(f"{line}\n")


def build_parser():
    parser = argparse.ArgumentParser(prog="upload-form", description="Upload one JPEG, PNG or PDF file (max 5MB).")
    parser.add_argument("file", nargs="?", help="file to upload")
    parser.add_argument("--name", default="", help="your name")
    parser.add_argument("--endpoint", default=DEFAULT_ENDPOINT, help=f"upload URL (default {DEFAULT_ENDPOINT})")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv=None, out=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    view = TerminalView(out)
    with UploadForm(endpoint=args.endpoint, listeners=[view]) as form:
        form.set_name(args.name)
        if args.file:
            try:
                accepted = form.select_file(args.file)
            except OSError as e:
                view.out.write(f"{FILE_FIELD}: {e}\n")
                return EXIT_INVALID
            if accepted and form.state.preview is not None:
                preview = form.state.preview
                where = preview.url if preview.kind == "image" else "(file icon)"
                view.out.write(f"preview: {preview.name} {where}\n")

        final = form.submit()

    if final.status is Status.SUCCEEDED:
        view.out.write(f"url: {final.outcome.stored.url}\n")
        return EXIT_OK
    if final.status is Status.INVALID:
        return EXIT_INVALID
    return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
