"""
EditOrchestrator — pipeline « bloc sélectionné + instruction » → contenu mis à jour.

Machine à états par bloc : Idle → Pending → Idle (succès ou échec).
Verrou par bloc (pas par document) : au plus une génération en vol par id,
les autres blocs restent librement modifiables pendant ce temps.

Concurrence optimiste : la version du bloc est capturée avant la génération
et le patch échoue (Conflict) si le bloc a été modifié entre-temps.
"""
import asyncio
import logging
from functools import partial
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from .auth import Authorizer
from .blocks import Block, parse_content
from .errors import (
    Conflict, EditorError, GenerationError, NotFound, ReadOnlyBlock,
    SaveError, Unauthorized, ValidationError, VersionConflict,
)
from .generation import DEFAULT_TIMEOUT, GenerationCollaborator
from .store import BlockStore

log = logging.getLogger(__name__)


class EditResult(BaseModel):
    """Issue explicite d'une édition — aucune erreur ne traverse la frontière async."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    block_id: Optional[str] = None
    block: Optional[Block] = None
    message: str = ""
    error: Optional[EditorError] = None
    save_error: Optional[SaveError] = None

    @classmethod
    def failure(cls, block_id: Optional[str], error: EditorError) -> "EditResult":
        return cls(success=False, block_id=block_id, message=error.message, error=error)

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "result": self.block.model_dump(mode="json") if self.block else None,
            "message": self.message,
            "error": self.error.to_dict() if self.error else None,
            "save_error": self.save_error.to_dict() if self.save_error else None,
        }


class EditOrchestrator:

    def __init__(self, store: BlockStore, generator: GenerationCollaborator,
                 persistence: Any = None, authorizer: Optional[Authorizer] = None,
                 generation_timeout: float = DEFAULT_TIMEOUT):
        self._store = store
        self._generator = generator
        self._persistence = persistence
        self._authorizer = authorizer
        self.generation_timeout = generation_timeout
        self._pending: Dict[str, asyncio.Future] = {}
        self._save_lock = asyncio.Lock()
        self.dirty = False

    # ── État ─────────────────────────────────────────────────────────────────

    def is_pending(self, block_id: str) -> bool:
        return block_id in self._pending

    def pending_ids(self) -> List[str]:
        return list(self._pending)

    # ── Édition IA ───────────────────────────────────────────────────────────

    async def submit_edit(self, block_id: str, instruction: str,
                          token: Optional[str] = None) -> EditResult:
        """Demande une réécriture IA du bloc ; retourne toujours un EditResult."""
        if self._authorizer is not None and not self._authorizer.is_authorized(token):
            return EditResult.failure(block_id, Unauthorized("Accès refusé", block_id=block_id))

        try:
            block = self._store.get(block_id)
        except NotFound as e:
            return EditResult.failure(block_id, e)

        if not block.editable:
            return EditResult.failure(block_id, ReadOnlyBlock(
                f"Bloc {block_id} en lecture seule", block_id=block_id))
        if not (instruction or "").strip():
            return EditResult.failure(block_id, ValidationError(
                "Instruction d'édition vide", block_id=block_id))
        if block_id in self._pending:
            return EditResult.failure(block_id, Conflict(
                f"Édition déjà en cours pour le bloc {block_id}", block_id=block_id))

        result = await self._generate_and_patch(block, instruction.strip())
        if result.success:
            result.save_error = await self._persist()
        return result

    async def _generate_and_patch(self, block: Block, instruction: str) -> EditResult:
        block_id, snapshot_version = block.id, block.version
        task = asyncio.ensure_future(self._generator.generate(
            block.type, block.content.to_payload(), instruction, self.generation_timeout))
        self._pending[block_id] = task
        log.info("Bloc %s → Pending (v%d)", block_id, snapshot_version)

        released_on_settle = False
        try:
            try:
                raw = await asyncio.shield(task)
            except asyncio.CancelledError:
                if task.cancelled() and not asyncio.current_task().cancelling():
                    # annulation côté collaborateur, l'appelant attend toujours
                    return EditResult.failure(block_id, GenerationError(
                        "Génération annulée par le service", block_id=block_id))
                if not task.done():
                    if getattr(self._generator, "supports_cancellation", False):
                        task.cancel()
                    # sinon l'appel va à son terme et son résultat est ignoré,
                    # même si le bloc existe toujours (l'appelant a renoncé)
                    # le verrou tient jusqu'à ce que l'appel se termine réellement
                    task.add_done_callback(partial(self._release, block_id))
                    released_on_settle = True
                log.info("Bloc %s : édition annulée par l'appelant", block_id)
                raise
            except GenerationError as e:
                e.block_id = e.block_id or block_id
                log.warning("Bloc %s : génération échouée — %s", block_id, e.message)
                return EditResult.failure(block_id, e)
            except Exception as e:
                log.error(f"Bloc {block_id} : erreur du générateur : {e}")
                return EditResult.failure(block_id, GenerationError(
                    f"Échec de génération : {e}", block_id=block_id, cause=e))

            return self._apply_generated(block_id, block.type, raw, snapshot_version)
        finally:
            if not released_on_settle:
                self._release(block_id, task)

    def _apply_generated(self, block_id: str, block_type: str, raw: Any,
                         snapshot_version: int) -> EditResult:
        try:
            parse_content(block_type, raw)
        except ValidationError as e:
            return EditResult.failure(block_id, GenerationError(
                f"Contenu généré non conforme au type {block_type!r}", block_id=block_id, cause=e))

        try:
            updated = self._store.apply_content_patch(block_id, raw, snapshot_version, ai_generated=True)
        except NotFound as e:
            log.info("Bloc %s supprimé pendant la génération — résultat ignoré", block_id)
            return EditResult.failure(block_id, e)
        except VersionConflict as e:
            log.warning("Bloc %s modifié pendant la génération (v%s → v%s) — résultat ignoré",
                        block_id, e.expected, e.actual)
            return EditResult.failure(block_id, e)
        except ReadOnlyBlock as e:
            return EditResult.failure(block_id, e)

        log.info("Bloc %s → Idle (v%d, IA)", block_id, updated.version)
        return EditResult(success=True, block_id=block_id, block=updated,
                          message="Contenu mis à jour par l'IA")

    def _release(self, block_id: str, task: asyncio.Future) -> None:
        if self._pending.get(block_id) is task:
            del self._pending[block_id]
        if task.done() and not task.cancelled():
            task.exception()  # résultat consommé : pas d'avertissement « never retrieved »

    # ── Édition manuelle ─────────────────────────────────────────────────────

    async def apply_manual_edit(self, block_id: str, content: Any,
                                expected_version: int) -> EditResult:
        """Patch direct (formulaire) — même contrat de version, ai_generated remis à False."""
        try:
            updated = self._store.apply_content_patch(block_id, content, expected_version,
                                                      ai_generated=False)
        except EditorError as e:
            return EditResult.failure(block_id, e)
        result = EditResult(success=True, block_id=block_id, block=updated,
                            message="Contenu mis à jour")
        result.save_error = await self._persist()
        return result

    # ── Persistance ──────────────────────────────────────────────────────────

    async def save_document(self) -> Optional[SaveError]:
        """(Re)tente la sauvegarde du document courant ; None si tout va bien."""
        return await self._persist()

    async def _persist(self) -> Optional[SaveError]:
        if self._persistence is None:
            return None
        # sauvegardes en série : la photo est prise une fois le tour venu,
        # la dernière écrite est donc toujours la plus récente
        async with self._save_lock:
            try:
                await self._persistence.save(self._store.snapshot())
            except SaveError as e:
                self.dirty = True
                log.error("Sauvegarde échouée (%s) — document marqué modifié", e.message)
                return e
            except Exception as e:
                self.dirty = True
                log.error(f"Sauvegarde échouée : {e}")
                return SaveError(f"Sauvegarde échouée : {e}", cause=e)
            self.dirty = False
            return None
