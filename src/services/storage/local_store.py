import errno
import ntpath
import os
import posixpath
import shutil
import time

from contracts.upload import StoredFile, public_url


def current_millis() -> int:
    return int(time.time() * 1000)


def ensure_dir(path: str) -> None:
    """
    Create path (and parents). An already existing directory is not an error;
    any other failure propagates.
    """
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        if e.errno != errno.EEXIST or not os.path.isdir(path):
            raise


def client_basename(filename: str) -> str:
    # browsers send a bare name; strip any directory part a hand-made request may carry
    return ntpath.basename(posixpath.basename(filename or ""))


def unique_filename(original_name: str, millis: int) -> str:
    return f"{millis}-{original_name}"


def store_upload(stream, original_name: str, upload_dir: str) -> StoredFile:
    """
    Write the whole of `stream` to upload_dir under "<millis>-<original_name>".
    No temp file / rename: an interrupted write leaves a truncated file behind.
    """
    ensure_dir(upload_dir)

    filename = unique_filename(original_name, current_millis())
    dest = os.path.join(upload_dir, filename)
    with open(dest, "wb") as out:
        shutil.copyfileobj(stream, out)

    return StoredFile(filename=filename, original_name=original_name, url=public_url(filename))
