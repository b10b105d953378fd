"""
Taxonomie d'erreurs de l'éditeur de blocs.

NotFound        → id de bloc absent (relire la liste)
ValidationError → contenu non conforme au schéma du type (rien n'est appliqué)
Conflict        → édition concurrente sur le même bloc / version périmée
GenerationError → le service de génération a échoué ou expiré (bloc inchangé)
SaveError       → persistance échouée APRÈS une mutation réussie (mémoire conservée)
"""
from typing import Optional


class EditorError(Exception):
    """Erreur de base — porte un code stable exposé par l'API."""
    code = "editor_error"

    def __init__(self, message: str = "", *, block_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.block_id = block_id

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "block_id": self.block_id}


class NotFound(EditorError):
    code = "not_found"


class ValidationError(EditorError):
    code = "validation_error"


class Conflict(EditorError):
    code = "conflict"


class VersionConflict(Conflict):
    """Patch appliqué avec une version attendue différente de la version stockée."""
    code = "version_conflict"

    def __init__(self, message: str = "", *, block_id: Optional[str] = None,
                 expected: Optional[int] = None, actual: Optional[int] = None):
        super().__init__(message, block_id=block_id)
        self.expected = expected
        self.actual = actual


class GenerationError(EditorError):
    code = "generation_error"

    def __init__(self, message: str = "", *, block_id: Optional[str] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, block_id=block_id)
        self.cause = cause

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["cause"] = repr(self.cause) if self.cause else None
        return d


class SaveError(EditorError):
    code = "save_error"

    def __init__(self, message: str = "", *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class Unauthorized(EditorError):
    code = "unauthorized"


class ReadOnlyBlock(EditorError):
    code = "read_only"
