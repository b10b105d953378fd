"""Bloc CTA — call-to-action avec bouton."""
from typing import Literal

from .base import BlockContent


class CTAContent(BlockContent):
    kind: Literal["cta"] = "cta"
    title: str = ""
    description: str = ""
    button_text: str = ""
    button_href: str = "#"
