"""
Bloc générique — payload opaque, conservé tel quel.
Sert de repli pour les types non reconnus (compatibilité ascendante).
"""
from typing import Any, Dict, Literal, Optional

from pydantic import Field

from .base import BlockContent


class GenericContent(BlockContent):
    kind: Literal["generic"] = "generic"
    source_type: Optional[str] = None
    payload: Dict[str, Any] = Field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        return dict(self.payload)
