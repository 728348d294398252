from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from report_portal.api.error_handlers import register_error_handlers
from report_portal.api.routes.admin import router as admin_router
from report_portal.api.routes.pages import router as pages_router
from report_portal.api.routes.reports import router as reports_router
from report_portal.config import AppConfig, config
from report_portal.logger import logger
from report_portal.report_db.session import ReportDatabase
from report_portal.services.credentials import CredentialStore
from report_portal.services.file_store import LocalReportFileStore
from report_portal.services.session_store import SessionStore

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: AppConfig = app.state.settings
    db: ReportDatabase = app.state.db

    # An unreachable database aborts startup; the server never serves traffic
    try:
        await db.init_db()
    except Exception as e:
        logger.error(f"Failed to initialize report database: {e}")
        raise

    factory = db.session_factory()
    async with factory() as db_session:
        await SessionStore(db_session, settings.session_ttl_seconds).purge_expired()

    upload_dir = app.state.file_store.ensure_dir()
    logger.info(f"Report directory: {upload_dir}")

    if not app.state.credentials.configured:
        logger.warning(
            "ADMIN_USERNAME / ADMIN_PASSWORD are not set; admin login is disabled"
        )

    logger.info("Report portal started, ready to accept requests.")
    try:
        yield
    finally:
        await db.dispose()
        logger.info("Report portal stopped.")


def create_app(settings: Optional[AppConfig] = None) -> FastAPI:
    settings = settings or config.settings

    app = FastAPI(title="Report Portal", version="1.0.0", lifespan=lifespan)

    app.state.settings = settings
    app.state.db = ReportDatabase(settings.database_url)
    app.state.file_store = LocalReportFileStore(settings.upload_dir)
    app.state.credentials = CredentialStore(
        settings.admin_username, settings.admin_password_hash
    )

    register_error_handlers(app)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    # Routers
    app.include_router(pages_router)
    app.include_router(admin_router)
    app.include_router(reports_router)

    return app


# Module-level app for uvicorn
app = create_app()
