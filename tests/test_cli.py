import io

from client.cli import EXIT_FAILED, EXIT_INVALID, EXIT_OK, TerminalView, main
from client.form import UploadForm
from client.preview import PreviewSlot
from contracts.upload import FileCandidate


def test_cli_uploads_a_file(live_server, tmp_path, uploads_dir, png_bytes):
    path = tmp_path / "photo.png"
    path.write_bytes(png_bytes())
    out = io.StringIO()

    code = main(["--name", "Ann", "--endpoint", live_server + "/api/upload", str(path)], out=out)

    text = out.getvalue()
    assert code == EXIT_OK
    assert "preview: photo.png file://" in text
    assert "100%" in text
    assert "File uploaded successfully!" in text
    stored = [p.name for p in uploads_dir.iterdir()]
    assert len(stored) == 1
    assert f"Uploaded as: {stored[0]}" in text
    assert f"url: /uploads/{stored[0]}" in text


def test_cli_reports_field_errors(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("hi")
    out = io.StringIO()

    code = main([str(path), "--endpoint", "http://127.0.0.1:9/api/upload"], out=out)

    text = out.getvalue()
    assert code == EXIT_INVALID
    assert "rejected: notes.txt - Only JPEG, PNG, and PDF files are accepted" in text
    assert "name: Name is required" in text
    assert "file: File is required" in text


def test_cli_missing_path(tmp_path):
    out = io.StringIO()
    code = main(["--name", "Ann", str(tmp_path / "nope.pdf")], out=out)
    assert code == EXIT_INVALID
    assert out.getvalue().startswith("file: ")


def test_cli_upload_failure(tmp_path):
    path = tmp_path / "doc.pdf"
    path.write_bytes(b"%PDF-1.4")
    out = io.StringIO()

    code = main(["--name", "Ann", "--endpoint", "http://127.0.0.1:9/api/upload", str(path)], out=out)

    assert code == EXIT_FAILED
    assert "Upload failed" in out.getvalue()


def test_rejections_are_printed_once(tmp_path):
    out = io.StringIO()
    form = UploadForm(endpoint="http://127.0.0.1:9/api/upload", preview_slot=PreviewSlot(str(tmp_path)),
                      listeners=[TerminalView(out)])

    form.select_file(FileCandidate.from_bytes("anim.gif", b"GIF89a"))
    form.set_name("Ann")
    form.set_name("Ann B")
    form.submit()
    form.close()

    text = out.getvalue()
    assert text.count("rejected: anim.gif - Only JPEG, PNG, and PDF files are accepted") == 1
    assert "file: File is required" in text
