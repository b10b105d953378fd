"""
EditorSession — câblage des composants d'une page pour une session d'édition.
"""
from typing import Any, Iterable, Optional

from .auth import Authorizer
from .blocks import Block
from .errors import SaveError
from .generation import DEFAULT_TIMEOUT, GenerationCollaborator
from .orchestrator import EditOrchestrator
from .renderer.html import render_editor, render_page
from .selection import SelectionController
from .store import BlockStore
from .toolbar import ToolbarCommands


class EditorSession:

    def __init__(self, page_id: Optional[str], generator: GenerationCollaborator,
                 persistence: Any = None, authorizer: Optional[Authorizer] = None,
                 blocks: Iterable[Block] = (), generation_timeout: float = DEFAULT_TIMEOUT):
        self.page_id = page_id
        self.store = BlockStore.from_blocks(page_id, blocks)
        self.selection = SelectionController(self.store)
        self.orchestrator = EditOrchestrator(
            self.store, generator, persistence=persistence,
            authorizer=authorizer, generation_timeout=generation_timeout,
        )
        self.toolbar = ToolbarCommands(self.store, self.selection, self.orchestrator,
                                       authorizer=authorizer)

    async def save(self) -> Optional[SaveError]:
        return await self.orchestrator.save_document()

    def render_editor(self) -> str:
        return render_editor(self.store.list(), selected_id=self.selection.selected_id,
                             pending_ids=self.orchestrator.pending_ids())

    def render_page(self, title: str = "") -> str:
        return render_page(self.store.list(), title=title)
