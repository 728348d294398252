from typing import Optional

from fastapi import APIRouter, Depends, Request

from report_portal.api.deps.auth import get_optional_admin_session
from report_portal.api.templating import render
from report_portal.report_db.models import AdminSession

router = APIRouter(tags=["Pages"])


@router.get("/")
async def landing_page(
    request: Request,
    admin_session: Optional[AdminSession] = Depends(get_optional_admin_session),
):
    return render(request, "index.html", admin_session=admin_session)


@router.get("/health")
async def health():
    return {"status": "ok"}
