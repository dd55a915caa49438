"""Workspace API endpoints over the server-side content stores."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from sermon_studio.api.models import NoteCreateRequest, SermonCreateRequest
from sermon_studio.services.slides import sermon_lines
from sermon_studio.services.templates import TEMPLATES

if TYPE_CHECKING:
    from sermon_studio.containers import AppContainer
    from sermon_studio.services.workspace import Workspace

router = APIRouter(prefix="/workspace", tags=["workspace"])


def _get_workspace_token(request: Request) -> str | None:
    container: AppContainer = request.app.state.container
    return container.settings.workspace_token


async def require_workspace_token(
    x_workspace_token: str | None = Header(default=None),
    workspace_token: str | None = Depends(_get_workspace_token),
) -> None:
    """Ensure requests carry the workspace token when one is configured."""
    if workspace_token and x_workspace_token != workspace_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


def _workspace(request: Request) -> Workspace:
    container: AppContainer = request.app.state.container
    return container.workspace


def _rejected(workspace: Workspace, fallback: str) -> HTTPException:
    errors = [toast.message for toast in workspace.toasts.drain() if toast.level == "error"]
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=errors[-1] if errors else fallback,
    )


@router.get("/notes", dependencies=[Depends(require_workspace_token)])
async def list_notes(request: Request) -> dict[str, object]:
    """Reload and return the owner's notes."""
    notes = await _workspace(request).notes.load_notes()
    return {"notes": notes}


@router.post(
    "/notes",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_workspace_token)],
)
async def create_note(body: NoteCreateRequest, request: Request) -> dict[str, object]:
    workspace = _workspace(request)
    note = await workspace.notes.create_note(
        title=body.title, content=body.content, tags=body.tags
    )
    if note is None:
        raise _rejected(workspace, "Note was not created")
    return {"note": note}


@router.delete(
    "/notes/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_workspace_token)],
)
async def delete_note(note_id: UUID, request: Request) -> None:
    await _workspace(request).notes.delete_note(note_id)


@router.get("/commentaries", dependencies=[Depends(require_workspace_token)])
async def list_commentaries(request: Request) -> dict[str, object]:
    commentaries = await _workspace(request).commentaries.load_commentaries()
    return {"commentaries": commentaries}


@router.get(
    "/bible/{book}/{chapter}", dependencies=[Depends(require_workspace_token)]
)
async def chapter_annotations(book: str, chapter: int, request: Request) -> dict[str, object]:
    """Return highlights and notes for one chapter."""
    bible = _workspace(request).bible
    await bible.load_highlights_and_notes(book, chapter)
    return {"highlights": bible.highlights, "notes": bible.notes}


@router.get("/templates", dependencies=[Depends(require_workspace_token)])
async def list_templates() -> dict[str, object]:
    return {
        "templates": [
            {
                "key": template.key,
                "name": template.name,
                "description": template.description,
                "blocks": len(template.blocks),
            }
            for template in TEMPLATES
        ]
    }


@router.get("/sermons", dependencies=[Depends(require_workspace_token)])
async def list_sermons(request: Request) -> dict[str, object]:
    sermons = await _workspace(request).sermons.load_user_sermons()
    return {"sermons": sermons}


@router.post(
    "/sermons",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_workspace_token)],
)
async def create_sermon(
    body: SermonCreateRequest, request: Request
) -> dict[str, object]:
    """Create a sermon, seeded from a template when one is named."""
    workspace = _workspace(request)
    if body.template is not None:
        sermon = await workspace.sermons.create_sermon_from_template(body.template)
    else:
        sermon = await workspace.sermons.create_sermon(
            title=body.title, subtitle=body.subtitle
        )
    if sermon is None:
        raise _rejected(workspace, "Sermon was not created")
    return {"sermon": sermon}


@router.get(
    "/sermons/{sermon_id}/slides", dependencies=[Depends(require_workspace_token)]
)
async def sermon_slides(sermon_id: UUID, request: Request) -> dict[str, object]:
    """Return the presentable lines of every block of a sermon."""
    sermons = _workspace(request).sermons
    sermon = sermons.store.get(sermon_id)
    if sermon is None:
        await sermons.load_user_sermons()
        sermon = sermons.store.get(sermon_id)
    if sermon is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"slides": sermon_lines(list(sermon.blocks))}


@router.get("/toasts", dependencies=[Depends(require_workspace_token)])
async def drain_toasts(request: Request) -> dict[str, object]:
    """Return and clear pending notifications."""
    toasts = _workspace(request).toasts.drain()
    return {
        "toasts": [{"level": toast.level, "message": toast.message} for toast in toasts]
    }
