import bcrypt
import pytest
from fastapi.testclient import TestClient

from report_portal.app import create_app
from report_portal.config import AppConfig

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct horse battery staple"
COOKIE_NAME = "report_portal_session"

PDF_BYTES = (
    b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog /Pages 2 0 R >>\nendobj\n"
    b"2 0 obj\n<< /Type /Pages /Kids [] /Count 0 >>\nendobj\n"
    b"trailer\n<< /Root 1 0 R >>\n%%EOF\n"
)


@pytest.fixture(scope="session")
def password_hash() -> str:
    # low cost factor keeps the suite fast
    return bcrypt.hashpw(ADMIN_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode(
        "ascii"
    )


@pytest.fixture
def settings(tmp_path, password_hash) -> AppConfig:
    return AppConfig(
        admin_username=ADMIN_USERNAME,
        admin_password_hash=password_hash,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'db' / 'reports.db'}",
        upload_dir=tmp_path / "uploads" / "reports",
        session_ttl_seconds=3600,
        session_cookie_name=COOKIE_NAME,
        max_upload_mb=1,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def login(client, username=ADMIN_USERNAME, password=ADMIN_PASSWORD):
    return client.post(
        "/admin/login",
        data={"username": username, "password": password},
        follow_redirects=False,
    )


def upload_pdf(client, name="report1.pdf", content=PDF_BYTES, content_type="application/pdf"):
    return client.post(
        "/admin/report-upload",
        files={"pdf": (name, content, content_type)},
        follow_redirects=False,
    )


@pytest.fixture
def admin_client(client):
    response = login(client)
    assert response.status_code == 303, response.text
    return client
