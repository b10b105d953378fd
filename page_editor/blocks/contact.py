"""Bloc Contact — coordonnées (email, téléphone, adresse)."""
from typing import Literal, Optional

from .base import BlockContent


class ContactContent(BlockContent):
    kind: Literal["contact"] = "contact"
    title: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
