"""
ToolbarCommands — verbes utilisateur (déplacer, dupliquer, supprimer, éditer).

Chaque commande enveloppe un seul appel store/orchestrateur : si cet appel
échoue, le document reste intact. Sans id explicite, la commande vise le
bloc sélectionné.
"""
import logging
from typing import Any, List, Optional

from .auth import Authorizer
from .blocks import Block
from .errors import NotFound, Unauthorized
from .orchestrator import EditOrchestrator, EditResult
from .prompts import suggestions_for
from .selection import SelectionController
from .store import BlockStore

log = logging.getLogger(__name__)


class ToolbarCommands:

    def __init__(self, store: BlockStore, selection: SelectionController,
                 orchestrator: EditOrchestrator, authorizer: Optional[Authorizer] = None):
        self._store = store
        self._selection = selection
        self._orchestrator = orchestrator
        self._authorizer = authorizer

    def _target(self, block_id: Optional[str]) -> str:
        target = block_id or self._selection.selected_id
        if target is None:
            raise NotFound("Aucun bloc sélectionné")
        return target

    def select(self, block_id: str) -> Block:
        self._selection.select(block_id)
        return self._store.get(block_id)

    def move_to(self, position: Optional[int], block_id: Optional[str] = None) -> None:
        self._store.move(self._target(block_id), position)

    def move_up(self, block_id: Optional[str] = None) -> None:
        target = self._target(block_id)
        index = self._store.index_of(target)
        if index > 0:
            self._store.move(target, index - 1)

    def move_down(self, block_id: Optional[str] = None) -> None:
        target = self._target(block_id)
        index = self._store.index_of(target)
        if index < len(self._store) - 1:
            self._store.move(target, index + 1)

    def duplicate(self, block_id: Optional[str] = None) -> Block:
        """Duplique puis sélectionne la copie."""
        copy = self._store.duplicate(self._target(block_id))
        self._selection.select(copy.id)
        return copy

    def delete(self, block_id: Optional[str] = None, token: Optional[str] = None) -> None:
        target = self._target(block_id)
        if self._authorizer is not None and not self._authorizer.is_authorized(token):
            raise Unauthorized("Accès refusé", block_id=target)
        self._store.remove(target)
        log.info("Bloc %s supprimé", target)

    async def edit_content(self, content: Any, expected_version: int,
                           block_id: Optional[str] = None) -> EditResult:
        try:
            target = self._target(block_id)
        except NotFound as e:
            return EditResult.failure(block_id, e)
        return await self._orchestrator.apply_manual_edit(target, content, expected_version)

    async def request_edit(self, instruction: str, block_id: Optional[str] = None,
                           token: Optional[str] = None) -> EditResult:
        try:
            target = self._target(block_id)
        except NotFound as e:
            return EditResult.failure(block_id, e)
        return await self._orchestrator.submit_edit(target, instruction, token=token)

    def suggestions(self, block_id: Optional[str] = None) -> List[str]:
        return suggestions_for(self._store.get(self._target(block_id)).type)
