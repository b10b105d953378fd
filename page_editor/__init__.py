"""
Page Editor v1.0 — modèle de document par blocs + édition IA par instruction.

Usage :
    >>> from page_editor import EditorSession, BlockDraft
    >>> from page_editor.generation import active_generator
    >>> session = EditorSession("home", active_generator())
    >>> hero = session.store.insert(BlockDraft(type="hero", content={"headline": "Bienvenue"}), 0)
    >>> result = await session.toolbar.request_edit("raccourcis le titre", hero.id)
"""
from .blocks import (
    Block, BlockDraft, BlockContent, DocumentSnapshot,
    HeroContent, AboutContent, ServicesContent, ServiceItem,
    CTAContent, ContactContent, GenericContent,
    BLOCK_TYPES, parse_content,
)
from .errors import (
    EditorError, NotFound, ValidationError, Conflict, VersionConflict,
    GenerationError, SaveError, Unauthorized, ReadOnlyBlock,
)
from .store import BlockStore, END
from .selection import SelectionController
from .orchestrator import EditOrchestrator, EditResult
from .toolbar import ToolbarCommands
from .session import EditorSession
from .renderer.html import render_block, render_editor, render_page

__version__ = "1.0.0"

__all__ = [
    # Blocs
    "Block", "BlockDraft", "BlockContent", "DocumentSnapshot",
    "HeroContent", "AboutContent", "ServicesContent", "ServiceItem",
    "CTAContent", "ContactContent", "GenericContent",
    "BLOCK_TYPES", "parse_content",
    # Erreurs
    "EditorError", "NotFound", "ValidationError", "Conflict", "VersionConflict",
    "GenerationError", "SaveError", "Unauthorized", "ReadOnlyBlock",
    # Composants
    "BlockStore", "END", "SelectionController", "EditOrchestrator", "EditResult",
    "ToolbarCommands", "EditorSession",
    # Rendu
    "render_block", "render_editor", "render_page",
]
