"""
Éditeur de pages — verbes toolbar + édition IA exposés en HTTP.

GET    /api/pages/{page_id}/blocks                      → blocs ordonnés + état
POST   /api/pages/{page_id}/blocks                      → insertion {type, content, position}
POST   /api/pages/{page_id}/blocks/{block_id}/select
POST   /api/pages/{page_id}/blocks/{block_id}/move      → {position} | {direction: up/down}
POST   /api/pages/{page_id}/blocks/{block_id}/duplicate
DELETE /api/pages/{page_id}/blocks/{block_id}           → jeton requis
PUT    /api/pages/{page_id}/blocks/{block_id}/content   → patch manuel {content, expected_version}
POST   /api/pages/{page_id}/blocks/{block_id}/edit      → édition IA {instruction}
POST   /api/pages/{page_id}/save                        → retente la sauvegarde
GET    /api/pages/{page_id}/preview                     → page HTML
GET    /api/pages/{page_id}/editor                      → canvas d'édition HTML
GET    /api/blocks/catalog                              → types, schémas, suggestions
"""
import logging
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, model_validator

from ...auth import TokenAuthorizer
from ...blocks import BLOCK_TYPES, content_schema
from ...errors import EditorError, SaveError
from ...generation import active_generator
from ...orchestrator import EditResult
from ...persistence import SqlPersistence
from ...prompts import describe, suggestions_for
from ...session import EditorSession

log = logging.getLogger(__name__)
router = APIRouter(tags=["Editor"])

STATUS_BY_CODE: Dict[str, int] = {
    "not_found":        404,
    "validation_error": 422,
    "conflict":         409,
    "version_conflict": 409,
    "read_only":        423,
    "unauthorized":     403,
    "generation_error": 502,
    "save_error":       500,
}

# Une session d'édition par page (éditeur mono-utilisateur).
# Lue et écrite depuis la boucle asyncio seulement : routes en `async def`.
_SESSIONS: Dict[str, EditorSession] = {}
_STATE: Dict[str, Any] = {"persistence": None, "generator": None, "authorizer": None}


def configure(persistence: Any = None, generator: Any = None, authorizer: Any = None) -> None:
    """Branche les collaborateurs et vide les sessions ouvertes."""
    _STATE.update(persistence=persistence, generator=generator, authorizer=authorizer)
    _SESSIONS.clear()


async def shutdown() -> None:
    """Ferme le client SDK du générateur (pool HTTP)."""
    aclose = getattr(_STATE["generator"], "aclose", None)
    if aclose is not None:
        await aclose()


def get_session(page_id: str) -> EditorSession:
    session = _SESSIONS.get(page_id)
    if session is None:
        if _STATE["persistence"] is None:
            _STATE["persistence"] = SqlPersistence()
        if _STATE["generator"] is None:
            _STATE["generator"] = active_generator()
        if _STATE["authorizer"] is None:
            _STATE["authorizer"] = TokenAuthorizer()
        persistence = _STATE["persistence"]
        # load synchrone : aucun point de suspension entre le test et l'affectation
        session = EditorSession(
            page_id, _STATE["generator"], persistence=persistence,
            authorizer=_STATE["authorizer"], blocks=persistence.load(page_id),
        )
        _SESSIONS[page_id] = session
        log.info("Session d'édition ouverte pour la page %s (%d blocs)", page_id, len(session.store))
    return session


def _token(request: Request) -> str:
    return (request.headers.get("x-admin-token")
            or request.query_params.get("token")
            or request.cookies.get("admin_token", ""))


def error_response(e: EditorError) -> JSONResponse:
    return JSONResponse(status_code=STATUS_BY_CODE.get(e.code, 400), content={
        "success": False, "result": None, "message": e.message, "error": e.to_dict(),
    })


def _result_response(result: EditResult) -> JSONResponse:
    status = 200 if result.success else STATUS_BY_CODE.get(result.error.code, 400)
    return JSONResponse(status_code=status, content=result.to_dict())


def _ok(result: Any, message: str, save_error: Optional[SaveError] = None) -> Dict[str, Any]:
    return {
        "success": True,
        "result": result,
        "message": message,
        "error": None,
        "save_error": save_error.to_dict() if save_error else None,
    }


# ── Schémas ────────────────────────────────────────────────────────────────────

class InsertRequest(BaseModel):
    type: str
    content: Dict[str, Any] = {}
    position: Optional[int] = None
    ai_generated: bool = False
    editable: bool = True


class MoveRequest(BaseModel):
    position: Optional[int] = None
    direction: Optional[Literal["up", "down"]] = None

    @model_validator(mode="after")
    def _target_given(self) -> "MoveRequest":
        # {"position": null} envoie explicitement en fin de page
        if self.direction is None and "position" not in self.model_fields_set:
            raise ValueError("position ou direction requis")
        return self


class ContentPatchRequest(BaseModel):
    content: Dict[str, Any]
    expected_version: int


class EditRequest(BaseModel):
    instruction: str


# ── Lecture ────────────────────────────────────────────────────────────────────

@router.get("/api/pages/{page_id}/blocks")
async def list_blocks(page_id: str):
    s = get_session(page_id)
    return {
        "page_id": page_id,
        "blocks": [b.model_dump(mode="json") for b in s.store.list()],
        "selected_id": s.selection.selected_id,
        "pending": s.orchestrator.pending_ids(),
        "dirty": s.orchestrator.dirty,
    }


@router.get("/api/pages/{page_id}/preview", response_class=HTMLResponse)
async def preview_page(page_id: str, title: str = ""):
    return HTMLResponse(get_session(page_id).render_page(title=title or page_id))


@router.get("/api/pages/{page_id}/editor", response_class=HTMLResponse)
async def editor_canvas(page_id: str):
    return HTMLResponse(get_session(page_id).render_editor())


@router.get("/api/blocks/catalog")
async def block_catalog():
    """Types de blocs disponibles + JSON schema + aide à l'édition IA."""
    return {"blocks": [
        {
            "type": t,
            "description": describe(t),
            "suggestions": suggestions_for(t),
            "schema": content_schema(t),
        }
        for t in BLOCK_TYPES
    ]}


# ── Commandes toolbar ──────────────────────────────────────────────────────────

@router.post("/api/pages/{page_id}/blocks")
async def insert_block(page_id: str, req: InsertRequest):
    s = get_session(page_id)
    block = s.store.insert(req.model_dump(exclude={"position"}), req.position)
    return _ok(block.model_dump(mode="json"), f"Bloc {block.type} ajouté", await s.save())


@router.post("/api/pages/{page_id}/blocks/{block_id}/select")
async def select_block(page_id: str, block_id: str):
    block = get_session(page_id).toolbar.select(block_id)
    return _ok(block.model_dump(mode="json"), "Bloc sélectionné")


@router.post("/api/pages/{page_id}/blocks/{block_id}/move")
async def move_block(page_id: str, block_id: str, req: MoveRequest):
    s = get_session(page_id)
    if req.direction == "up":
        s.toolbar.move_up(block_id)
    elif req.direction == "down":
        s.toolbar.move_down(block_id)
    else:
        s.toolbar.move_to(req.position, block_id)
    return _ok({"index": s.store.index_of(block_id)}, "Bloc déplacé", await s.save())


@router.post("/api/pages/{page_id}/blocks/{block_id}/duplicate")
async def duplicate_block(page_id: str, block_id: str):
    s = get_session(page_id)
    copy = s.toolbar.duplicate(block_id)
    return _ok(copy.model_dump(mode="json"), "Bloc dupliqué", await s.save())


@router.delete("/api/pages/{page_id}/blocks/{block_id}")
async def delete_block(page_id: str, block_id: str, request: Request):
    s = get_session(page_id)
    s.toolbar.delete(block_id, token=_token(request))
    return _ok({"block_id": block_id}, "Bloc supprimé", await s.save())


@router.put("/api/pages/{page_id}/blocks/{block_id}/content")
async def patch_content(page_id: str, block_id: str, req: ContentPatchRequest):
    result = await get_session(page_id).toolbar.edit_content(req.content, req.expected_version, block_id)
    return _result_response(result)


@router.post("/api/pages/{page_id}/blocks/{block_id}/edit")
async def edit_block_with_ai(page_id: str, block_id: str, req: EditRequest, request: Request):
    result = await get_session(page_id).toolbar.request_edit(req.instruction, block_id, token=_token(request))
    return _result_response(result)


@router.post("/api/pages/{page_id}/save")
async def save_page(page_id: str):
    err = await get_session(page_id).save()
    if err is not None:
        return error_response(err)
    return _ok({"page_id": page_id}, "Page sauvegardée")
