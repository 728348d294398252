from datetime import datetime

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import PDF_BYTES, upload_pdf

from report_portal.services.file_store import LocalReportFileStore


def _listing(client):
    response = client.get("/api/reports")
    assert response.status_code == 200
    return response.json()


def test_landing_page_is_public(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "/admin/reports" in response.text


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_upload_requires_login_and_creates_nothing(client, settings):
    response = upload_pdf(client)

    assert response.status_code == 303
    assert response.headers["location"] == "/admin/login"
    assert _listing(client)["total"] == 0
    assert not any(settings.upload_dir.glob("*"))


def test_upload_form_requires_login(client):
    response = client.get("/admin/report-upload", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/admin/login"


def test_upload_creates_one_record_with_file_on_disk(admin_client, settings):
    response = upload_pdf(admin_client)

    assert response.status_code == 303
    assert response.headers["location"] == "/admin/reports"

    data = _listing(admin_client)
    assert data["total"] == 1
    item = data["items"][0]
    assert item["original_name"] == "report1.pdf"
    assert item["file_size"] == len(PDF_BYTES)
    assert item["download_url"] == f"/uploads/reports/{item['filename']}"

    stored = settings.upload_dir / item["filename"]
    assert stored.is_file()
    assert stored.read_bytes() == PDF_BYTES


def test_stored_filename_does_not_embed_original_name(admin_client):
    upload_pdf(admin_client, name="../../etc/passwd.pdf")

    item = _listing(admin_client)["items"][0]
    assert item["original_name"].endswith("passwd.pdf")
    assert "/" not in item["filename"]
    assert "passwd" not in item["filename"]
    assert item["filename"].endswith(".pdf")


def test_same_name_uploads_do_not_collide(admin_client):
    upload_pdf(admin_client, content=PDF_BYTES + b"first")
    upload_pdf(admin_client, content=PDF_BYTES + b"second")

    items = _listing(admin_client)["items"]
    assert len(items) == 2
    assert items[0]["filename"] != items[1]["filename"]


def test_listing_is_most_recent_first(admin_client):
    for name in ("a.pdf", "b.pdf", "c.pdf"):
        assert upload_pdf(admin_client, name=name).status_code == 303

    items = _listing(admin_client)["items"]
    assert [i["original_name"] for i in items] == ["c.pdf", "b.pdf", "a.pdf"]

    uploaded = [datetime.fromisoformat(i["uploaded_at"]) for i in items]
    assert all(a >= b for a, b in zip(uploaded, uploaded[1:]))


def test_listing_page_is_public(admin_client):
    upload_pdf(admin_client)
    admin_client.get("/admin/logout")

    response = admin_client.get("/admin/reports")

    assert response.status_code == 200
    assert "report1.pdf" in response.text
    assert "/uploads/reports/" in response.text


def test_listing_page_empty_state(client):
    response = client.get("/admin/reports")

    assert response.status_code == 200
    assert "No reports" in response.text


def test_upload_download_round_trip(admin_client):
    upload_pdf(admin_client, name="report1.pdf")

    page = admin_client.get("/admin/reports")
    assert page.text.count("report1.pdf") == 1

    item = _listing(admin_client)["items"][0]
    response = admin_client.get(item["download_url"])

    assert response.status_code == 200
    assert response.content == PDF_BYTES
    assert response.headers["content-type"] == "application/pdf"
    disposition = response.headers["content-disposition"]
    assert disposition.startswith("attachment")
    assert "report1.pdf" in disposition


def test_download_unknown_file_is_404(client):
    response = client.get("/uploads/reports/1700000000000-missing.pdf")

    assert response.status_code == 404
    assert "not found" in response.text.lower()


def test_download_ignores_orphan_files(client, settings):
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    (settings.upload_dir / "orphan.pdf").write_bytes(PDF_BYTES)

    response = client.get("/uploads/reports/orphan.pdf")

    assert response.status_code == 404


def test_download_rejects_path_tricks(client):
    for name in ("..%5C..%5Csecret.pdf", ".hidden.pdf", "..pdf"):
        response = client.get(f"/uploads/reports/{name}")
        assert response.status_code == 404, name


def test_download_with_missing_file_on_disk_is_404(admin_client, settings):
    upload_pdf(admin_client)
    item = _listing(admin_client)["items"][0]
    (settings.upload_dir / item["filename"]).unlink()

    response = admin_client.get(item["download_url"])

    assert response.status_code == 404


def test_non_pdf_upload_is_rejected(admin_client, settings):
    response = upload_pdf(admin_client, name="notes.txt", content=b"hello", content_type="text/plain")

    assert response.status_code == 400
    assert "Only PDF files" in response.text
    assert _listing(admin_client)["total"] == 0


def test_empty_upload_is_rejected(admin_client):
    response = upload_pdf(admin_client, content=b"")

    assert response.status_code == 400
    assert "empty" in response.text
    assert _listing(admin_client)["total"] == 0


def test_missing_file_field_is_rejected(admin_client):
    response = admin_client.post(
        "/admin/report-upload", data={"other": "value"}, follow_redirects=False
    )

    assert response.status_code == 400
    assert "choose a PDF" in response.text


def test_oversized_upload_is_rejected(admin_client, settings):
    too_big = b"%PDF" + b"0" * settings.max_upload_bytes

    response = upload_pdf(admin_client, content=too_big)

    assert response.status_code == 400
    assert "too large" in response.text
    assert _listing(admin_client)["total"] == 0


def test_file_write_failure_is_a_generic_500(admin_client, monkeypatch):
    async def failing_save(self, filename, content):
        raise OSError("disk full at /secret/path")

    monkeypatch.setattr(LocalReportFileStore, "save", failing_save)

    response = upload_pdf(admin_client)

    assert response.status_code == 500
    assert "/secret/path" not in response.text
    assert _listing(admin_client)["total"] == 0


def test_metadata_failure_removes_written_file(admin_client, settings, monkeypatch):
    async def failing_flush(self, objects=None):
        raise OperationalError("INSERT INTO reports", {}, Exception("database is locked"))

    monkeypatch.setattr(AsyncSession, "flush", failing_flush)

    response = upload_pdf(admin_client)
    monkeypatch.undo()

    assert response.status_code == 500
    assert "database is locked" not in response.text
    assert not any(settings.upload_dir.glob("*.pdf"))
    assert _listing(admin_client)["total"] == 0
