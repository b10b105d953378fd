"""Bloc About — présentation de l'entreprise."""
from typing import Literal

from .base import BlockContent


class AboutContent(BlockContent):
    kind: Literal["about"] = "about"
    title: str = ""
    body: str = ""
