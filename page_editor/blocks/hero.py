"""Bloc Hero — titre principal, sous-titre, bouton d'appel."""
from typing import Literal, Optional

from .base import BlockContent


class HeroContent(BlockContent):
    kind: Literal["hero"] = "hero"
    headline: str = ""
    subheadline: str = ""
    cta: str = ""
    cta_href: str = "#"
    background_image: Optional[str] = None
