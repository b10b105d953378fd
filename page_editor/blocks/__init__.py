"""
Blocs — exports publics + union discriminée des contenus.
"""
from .base import BlockContent
from .hero import HeroContent
from .about import AboutContent
from .services import ServicesContent, ServiceItem
from .cta import CTAContent
from .contact import ContactContent
from .generic import GenericContent
from .registry import (
    BLOCK_TYPES,
    CONTENT_REGISTRY,
    ContentUnion,
    content_schema,
    load_content,
    parse_content,
)
from .block import Block, BlockDraft, DocumentSnapshot, utcnow

__all__ = [
    # Contenus
    "BlockContent", "HeroContent", "AboutContent", "ServicesContent", "ServiceItem",
    "CTAContent", "ContactContent", "GenericContent",
    # Registry
    "BLOCK_TYPES", "CONTENT_REGISTRY", "ContentUnion",
    "content_schema", "load_content", "parse_content",
    # Bloc
    "Block", "BlockDraft", "DocumentSnapshot", "utcnow",
]
