"""
Éditeur de pages par blocs — FastAPI app
Démarrer : uvicorn page_editor.api.main:app --reload --port 8001
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..errors import EditorError
from .routes.editor import error_response, router as editor_router, shutdown as editor_shutdown

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s — %(message)s")
log = logging.getLogger(__name__)

app = FastAPI(title="Page Editor — blocs & édition IA", version="1.0.0", docs_url="/docs")

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


@app.exception_handler(EditorError)
async def editor_error_handler(request: Request, exc: EditorError):
    """Erreurs métier → enveloppe {success, result, message, error} + statut HTTP."""
    log.info("%s %s → %s : %s", request.method, request.url.path, exc.code, exc.message)
    return error_response(exc)


app.include_router(editor_router)


@app.on_event("shutdown")
async def on_shutdown():
    await editor_shutdown()


@app.get("/health")
def health():
    return {"status": "ok"}
