"""
Bloc — unité atomique de contenu d'une page.
Le type du bloc est porté par son contenu (champ `kind`) : union discriminée,
le type et le schéma du contenu ne peuvent donc jamais diverger.
"""
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class BlockContent(BaseModel):
    """Contenu d'un bloc. Schéma strict : clés inconnues et mauvais types refusés."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: str

    def to_payload(self) -> Dict[str, Any]:
        """Contenu sans le discriminant — forme échangée avec le générateur IA."""
        return self.model_dump(exclude={"kind"})
