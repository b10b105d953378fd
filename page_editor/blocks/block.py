"""
Block — contenu typé + identité + rang + provenance + version.

Les blocs sont immuables : seules les opérations du BlockStore produisent
une nouvelle version d'un bloc (model_copy), jamais une écriture externe.
"""
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .registry import ContentUnion


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Block(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    page_id: Optional[str] = None
    content: ContentUnion
    order: str
    ai_generated: bool = False
    editable: bool = True
    version: int = 1
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @computed_field
    @property
    def type(self) -> str:
        return self.content.kind

    @property
    def label(self) -> str:
        """Libellé affiché dans l'éditeur (type d'origine pour les blocs generic)."""
        source = getattr(self.content, "source_type", None)
        return (source or self.type).replace("-", " ").replace("_", " ")


class BlockDraft(BaseModel):
    """Bloc à insérer — id optionnel, contenu brut (dict) ou déjà typé."""
    id: Optional[str] = None
    type: str = "generic"
    content: Any = Field(default_factory=dict)
    ai_generated: bool = False
    editable: bool = True


class DocumentSnapshot(BaseModel):
    """Photo ordonnée d'une page — transmise au collaborateur de persistance."""
    page_id: Optional[str] = None
    blocks: List[Block] = []
    taken_at: datetime = Field(default_factory=utcnow)
