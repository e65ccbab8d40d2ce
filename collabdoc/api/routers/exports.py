"""
Session export endpoints.

Routes:
- GET /sessions/{id}/export/markdown - Markdown download
- GET /sessions/{id}/export/html - Standalone HTML download

Dependencies: collabdoc.application.services
System role: Session export HTTP API
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from collabdoc.api.deps import get_export_service
from collabdoc.application.services import ExportService
from collabdoc.application.services.export_service import export_filename

from .router_utils import handle_api_errors, parse_uuid

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["exports"])


def _attachment(body: str, media_type: str, filename: str) -> Response:
    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{session_id}/export/markdown")
@handle_api_errors
async def export_markdown(
    session_id: str,
    export_service: ExportService = Depends(get_export_service),
) -> Response:
    """Download the whole session as a Markdown file."""
    session = await export_service.get_session_or_raise(parse_uuid(session_id))
    markdown = await export_service.export_to_markdown(session)
    return _attachment(
        markdown,
        "text/markdown; charset=utf-8",
        export_filename(session.title, "md"),
    )


@router.get("/{session_id}/export/html")
@handle_api_errors
async def export_html(
    session_id: str,
    export_service: ExportService = Depends(get_export_service),
) -> Response:
    """Download the whole session as a standalone HTML page."""
    session = await export_service.get_session_or_raise(parse_uuid(session_id))
    page = await export_service.export_to_html(session)
    return _attachment(
        page,
        "text/html; charset=utf-8",
        export_filename(session.title, "html"),
    )
