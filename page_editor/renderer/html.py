"""
Renderer HTML — (type, contenu) → fragment HTML.

Contrat défensif : fonction pure et totale, ne lève jamais. Un champ absent,
None ou mal typé est rendu vide (une liste de services absente = zéro
élément) ; un type inconnu rend le payload brut sans l'interpréter.
C'est le dernier rempart face à un contenu généré incomplet.
"""
import json
from html import escape
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from ..blocks import Block, BlockContent, GenericContent


# ── Accès tolérant aux champs ───────────────────────────────────────────────

def _fields(content: Any) -> Mapping[str, Any]:
    if isinstance(content, BlockContent):
        return content.model_dump()
    if isinstance(content, Mapping):
        return content
    return {}


def _text(d: Mapping[str, Any], key: str) -> str:
    value = d.get(key)
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return ""
    return escape(str(value))


def _items(d: Mapping[str, Any], key: str) -> List[Mapping[str, Any]]:
    value = d.get(key)
    if not isinstance(value, (list, tuple)):
        return []
    return [v for v in value if isinstance(v, Mapping)]


def _dump(payload: Any) -> str:
    try:
        return json.dumps(payload, ensure_ascii=False, indent=2, default=str)
    except (TypeError, ValueError):
        return repr(payload)


# ── Renderers par variante ──────────────────────────────────────────────────

def render_hero(d: Mapping[str, Any]) -> str:
    bg = _text(d, "background_image")
    style_attr = f" style=\"background-image:url('{bg}')\"" if bg else ""
    cta = _text(d, "cta")
    cta_html = f'\n    <a href="{_text(d, "cta_href") or "#"}" class="btn btn-primary">{cta}</a>' if cta else ""
    return f"""<div class="block hero"{style_attr}>
  <div class="hero__content">
    <h1 class="hero__title">{_text(d, "headline")}</h1>
    <p class="hero__subtitle">{_text(d, "subheadline")}</p>{cta_html}
  </div>
</div>"""


def render_about(d: Mapping[str, Any]) -> str:
    return f"""<div class="block about">
  <h2 class="about__title">{_text(d, "title")}</h2>
  <p class="about__body">{_text(d, "body")}</p>
</div>"""


def render_services(d: Mapping[str, Any]) -> str:
    items_html = "".join(
        f'\n    <div class="services__item"><h3>{_text(s, "title")}</h3><p>{_text(s, "description")}</p></div>'
        for s in _items(d, "services")
    )
    return f"""<div class="block services">
  <h2 class="services__title">{_text(d, "title")}</h2>
  <div class="services__grid">{items_html}
  </div>
</div>"""


def render_cta(d: Mapping[str, Any]) -> str:
    label = _text(d, "button_text")
    btn = f'\n  <a href="{_text(d, "button_href") or "#"}" class="btn btn-primary">{label}</a>' if label else ""
    return f"""<div class="block cta">
  <h2 class="cta__title">{_text(d, "title")}</h2>
  <p class="cta__description">{_text(d, "description")}</p>{btn}
</div>"""


def render_contact(d: Mapping[str, Any]) -> str:
    rows = ""
    for key, label in (("email", "Email"), ("phone", "Téléphone"), ("address", "Adresse")):
        value = _text(d, key)
        if value:
            rows += f'\n    <div class="contact__row"><span class="contact__label">{label} :</span> {value}</div>'
    return f"""<div class="block contact">
  <h2 class="contact__title">{_text(d, "title")}</h2>
  <div class="contact__info">{rows}
  </div>
</div>"""


def render_generic(block_type: Any, content: Any) -> str:
    """Payload brut, non interprété."""
    if isinstance(content, GenericContent):
        label, payload = content.source_type or "generic", content.payload
    else:
        label, payload = block_type, content
    return f"""<div class="block generic" data-type="{escape(str(label))}">
  <pre class="generic__payload">{escape(_dump(payload))}</pre>
</div>"""


_RENDERERS: Dict[str, Callable[[Mapping[str, Any]], str]] = {
    "hero":     render_hero,
    "about":    render_about,
    "services": render_services,
    "cta":      render_cta,
    "contact":  render_contact,
}


# ── Point d'entrée public ───────────────────────────────────────────────────

def render_block(block_type: Any, content: Any) -> str:
    """Dispatch par type ; `generic` et types inconnus → payload brut."""
    renderer = _RENDERERS.get(block_type) if isinstance(block_type, str) else None
    if renderer is None:
        return render_generic(block_type, content)
    return renderer(_fields(content))


# ── Canvas d'édition ────────────────────────────────────────────────────────

def _block_card(block: Block, selected: bool, pending: bool) -> str:
    classes = ["editor-block"]
    if selected:
        classes.append("editor-block--selected")
    if pending:
        classes.append("editor-block--pending")
    badge = '<span class="badge badge--ai">✨ Généré par IA</span>' if block.ai_generated else ""
    status = "Modifiable" if block.editable else "Lecture seule"
    action = ""
    if selected and block.editable:
        action = f'<button class="btn btn-edit"{" disabled" if pending else ""}>{"Génération…" if pending else "Éditer avec l’IA"}</button>'
    return f"""<div class="{" ".join(classes)}" data-block-id="{escape(block.id)}">
  <div class="editor-block__header">
    <span class="editor-block__type">{escape(block.label.capitalize())}</span>{badge}
    <span class="editor-block__meta">Rang : {escape(block.order)} • v{block.version} • {status}</span>
    {action}
  </div>
  <div class="editor-block__preview">
{render_block(block.type, block.content)}
  </div>
</div>"""


def render_editor(blocks: Iterable[Block], selected_id: Optional[str] = None,
                  pending_ids: Iterable[str] = ()) -> str:
    """Canvas de l'éditeur : en-tête par bloc (type, badge IA, rang, statut) + aperçu."""
    blocks = list(blocks)
    if not blocks:
        return """<div class="editor editor--empty">
  <h3>Aucun bloc de contenu</h3>
  <p>Cette page ne contient encore aucun bloc.</p>
</div>"""
    pending = set(pending_ids)
    cards = "\n".join(_block_card(b, b.id == selected_id, b.id in pending) for b in blocks)
    return f'<div class="editor">\n{cards}\n</div>'


# ── Page complète ───────────────────────────────────────────────────────────

_CSS = """
*{box-sizing:border-box;margin:0;padding:0}
body{font-family:'Segoe UI',sans-serif;color:#1a1a2e;line-height:1.6}
.block{padding:48px 24px;max-width:1100px;margin:0 auto}
.hero{text-align:center;background:linear-gradient(90deg,#3b82f6,#7c3aed);color:#fff;background-size:cover}
.hero__title{font-size:40px;margin-bottom:16px}
.services__grid{display:grid;grid-template-columns:repeat(auto-fit,minmax(240px,1fr));gap:16px}
.services__item{background:#f9fafb;border-radius:8px;padding:16px}
.cta{text-align:center;background:linear-gradient(90deg,#3b82f6,#7c3aed);color:#fff}
.btn{display:inline-block;margin-top:16px;padding:10px 24px;border-radius:6px;background:#fff;color:#2563eb;text-decoration:none;font-weight:600}
.generic__payload{background:#f3f4f6;padding:16px;border-radius:6px;font-size:12px;overflow:auto}
"""


def render_page(blocks: Iterable[Block], title: str = "", lang: str = "fr") -> str:
    """Page HTML autonome (aperçu / publication) — blocs dans l'ordre reçu."""
    sections = "\n".join(
        f'<section class="section" id="block-{escape(b.id)}">\n{render_block(b.type, b.content)}\n</section>'
        for b in blocks
    )
    return f"""<!DOCTYPE html>
<html lang="{escape(lang)}">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape(title)}</title>
  <style>{_CSS}</style>
</head>
<body>
{sections}
</body>
</html>"""
