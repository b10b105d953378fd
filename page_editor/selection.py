"""
SelectionController — au plus un bloc ciblé par la toolbar.

Relation de recherche (id), jamais de possession : le contrôleur ne garde
aucun Block en vie et se vide si le bloc sélectionné est supprimé.
"""
import logging
from typing import Optional

from .blocks import Block
from .errors import NotFound
from .store import BlockStore

log = logging.getLogger(__name__)


class SelectionController:

    def __init__(self, store: BlockStore):
        self._store = store
        self._selected_id: Optional[str] = None
        self._unsubscribe = store.subscribe(self._on_store_event)

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    def select(self, block_id: str) -> None:
        if block_id not in self._store:
            raise NotFound(f"Bloc introuvable : {block_id}", block_id=block_id)
        self._selected_id = block_id

    def clear(self) -> None:
        self._selected_id = None

    def is_selected(self, block_id: str) -> bool:
        return self._selected_id is not None and self._selected_id == block_id

    def selected(self) -> Optional[Block]:
        """Bloc sélectionné, relu dans le store (None si rien ou bloc disparu)."""
        if self._selected_id is None:
            return None
        if self._selected_id not in self._store:
            self._selected_id = None
            return None
        return self._store.get(self._selected_id)

    def close(self) -> None:
        self._unsubscribe()

    def _on_store_event(self, event: str, block_id: str) -> None:
        if event == "removed" and block_id == self._selected_id:
            log.debug("Sélection %s effacée (bloc supprimé)", block_id)
            self._selected_id = None
