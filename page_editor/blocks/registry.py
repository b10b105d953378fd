"""
Registry des variantes de contenu + validation par type.

parse_content(type, payload) :
  - type connu   → validation stricte du schéma (ValidationError sinon)
  - "generic"    → payload brut conservé tel quel
  - type inconnu → bloc generic, nom d'origine dans `source_type`
"""
from typing import Annotated, Any, Dict, Type, Union

from pydantic import Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError
from .about import AboutContent
from .base import BlockContent
from .contact import ContactContent
from .cta import CTAContent
from .generic import GenericContent
from .hero import HeroContent
from .services import ServicesContent

# Union discriminée par kind — utilisable comme type de champ Pydantic
ContentUnion = Annotated[
    Union[
        HeroContent,
        AboutContent,
        ServicesContent,
        CTAContent,
        ContactContent,
        GenericContent,
    ],
    Field(discriminator="kind"),
]

CONTENT_REGISTRY: Dict[str, Type[BlockContent]] = {
    "hero":     HeroContent,
    "about":    AboutContent,
    "services": ServicesContent,
    "cta":      CTAContent,
    "contact":  ContactContent,
    "generic":  GenericContent,
}

BLOCK_TYPES = tuple(CONTENT_REGISTRY)

_CONTENT_ADAPTER = TypeAdapter(ContentUnion)


def parse_content(block_type: str, payload: Any) -> BlockContent:
    """Valide `payload` contre le schéma enregistré pour `block_type`."""
    expected_kind = block_type if block_type in CONTENT_REGISTRY else "generic"

    if isinstance(payload, BlockContent):
        if payload.kind != expected_kind:
            raise ValidationError(
                f"Contenu de type {payload.kind!r} incompatible avec un bloc {block_type!r}")
        return payload

    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError(
            f"Contenu invalide pour {block_type!r} : objet attendu, reçu {type(payload).__name__}")

    if expected_kind == "generic":
        source = None if block_type == "generic" else block_type
        return GenericContent(source_type=source, payload=dict(payload))

    data = dict(payload)
    kind = data.pop("kind", block_type)
    if kind != block_type:
        raise ValidationError(f"Discriminant {kind!r} incompatible avec un bloc {block_type!r}")

    try:
        return CONTENT_REGISTRY[block_type].model_validate(data)
    except PydanticValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ValidationError(f"Contenu invalide pour {block_type!r} : {fields}") from e


def load_content(data: Dict[str, Any]) -> BlockContent:
    """Recharge un contenu sérialisé (model_dump) — discriminant `kind` requis."""
    try:
        return _CONTENT_ADAPTER.validate_python(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Contenu stocké illisible : {e.error_count()} erreur(s)") from e


def content_schema(block_type: str) -> Dict[str, Any]:
    """JSON schema du contenu d'un type (catalogue, prompts IA)."""
    content_cls = CONTENT_REGISTRY.get(block_type, GenericContent)
    return content_cls.model_json_schema()
