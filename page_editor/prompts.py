"""
Prompts d'édition IA + suggestions et descriptions par type de bloc.
"""
import json
from typing import Any, Dict, List

from .blocks import content_schema

EDIT_SYSTEM_PROMPT = (
    "You are a professional copywriter editing one section of a website. "
    "Edit the provided content based on the user's instructions. "
    "Return ONLY a JSON object with exactly the keys allowed by the schema, "
    "no explanations, no markdown."
)

EDIT_USER_PROMPT = """Section type: {block_type}

Allowed JSON schema for this section:
{schema_json}

Current content:
{content_json}

Edit instructions: {instruction}

Provide the edited content as a JSON object:"""


def build_edit_prompt(block_type: str, current_content: Dict[str, Any], instruction: str) -> str:
    schema = dict(content_schema(block_type))
    # le discriminant est géré par l'éditeur, pas par le modèle
    schema["properties"] = {k: v for k, v in schema.get("properties", {}).items() if k != "kind"}
    return EDIT_USER_PROMPT.format(
        block_type=block_type,
        schema_json=json.dumps(schema, ensure_ascii=False),
        content_json=json.dumps(current_content, ensure_ascii=False, default=str),
        instruction=instruction,
    )


# ── Aide à la saisie ─────────────────────────────────────────────────────────

GENERAL_SUGGESTIONS: List[str] = [
    "Make this more professional",
    "Add more personality",
    "Simplify the language",
    "Make it more engaging",
    "Add a call to action",
    "Improve the headline",
]

_SUGGESTIONS: Dict[str, List[str]] = {
    "hero": [
        "Make the headline more compelling",
        "Add urgency to the call-to-action",
        "Make it sound more professional",
        "Add benefits in the subheadline",
    ],
    "services": [
        "Add pricing information",
        "Make the descriptions more detailed",
        "Add customer benefits",
        "Include process steps",
    ],
    "about": [
        "Add company history",
        "Include team information",
        "Add mission statement",
        "Make it more personal",
    ],
    "contact": [
        "Add business hours",
        "Include social media links",
        "Add directions or map",
        "Include emergency contact",
    ],
}

_DESCRIPTIONS: Dict[str, str] = {
    "hero":     "The main header section with headline, subheadline, and call-to-action button.",
    "services": "A section showcasing your services or offerings with descriptions.",
    "about":    "Information about your business, mission, and values.",
    "contact":  "Contact information and form for visitors to reach you.",
    "cta":      "A call-to-action section to encourage visitor engagement.",
}


def suggestions_for(block_type: str) -> List[str]:
    return list(_SUGGESTIONS.get(block_type, GENERAL_SUGGESTIONS))


def describe(block_type: str) -> str:
    return _DESCRIPTIONS.get(block_type, "Content section for your website.")
