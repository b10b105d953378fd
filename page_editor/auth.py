"""
Collaborateur identité — simple vérification de capacité par jeton.
Consulté avant une édition IA ou une suppression de bloc.
"""
import hmac
import os
from typing import Optional, Protocol


class Authorizer(Protocol):
    def is_authorized(self, token: Optional[str]) -> bool: ...


class TokenAuthorizer:
    """Compare le jeton fourni à ADMIN_TOKEN (comparaison à temps constant)."""

    def __init__(self, expected: Optional[str] = None):
        self._expected = expected if expected is not None else os.getenv("ADMIN_TOKEN", "changeme")

    def is_authorized(self, token: Optional[str]) -> bool:
        if not token:
            return False
        return hmac.compare_digest(token.encode(), self._expected.encode())


class AllowAll:
    """Session locale sans contrôle d'accès."""

    def is_authorized(self, token: Optional[str]) -> bool:
        return True
