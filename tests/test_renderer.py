"""
Tests du renderer HTML — fonction totale, jamais d'exception.
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from page_editor.blocks import BLOCK_TYPES, BlockDraft, GenericContent, HeroContent
from page_editor.renderer.html import _RENDERERS, render_block, render_editor, render_page


class TestRenderBlock:
    def test_hero(self):
        html = render_block("hero", {"headline": "Welcome", "subheadline": "Sub",
                                     "cta": "Go", "cta_href": "/go"})
        assert "Welcome" in html
        assert "Sub" in html
        assert 'href="/go"' in html

    def test_hero_without_cta_has_no_button(self):
        assert "btn" not in render_block("hero", {"headline": "x"})

    def test_accepts_content_models(self):
        assert "Typed" in render_block("hero", HeroContent(headline="Typed"))

    def test_services_items(self):
        html = render_block("services", {"title": "Offres", "services": [
            {"title": "Audit", "description": "A"}, {"title": "Conseil", "description": "B"}]})
        assert html.count("services__item") == 2
        assert "Conseil" in html

    @pytest.mark.parametrize("services", [None, "pas une liste", 42, {"title": "x"}])
    def test_services_missing_or_malformed_renders_zero_items(self, services):
        content = {"title": "Offres"}
        if services is not None:
            content["services"] = services
        html = render_block("services", content)
        assert "services__item" not in html
        assert "Offres" in html

    def test_services_skips_non_dict_items(self):
        html = render_block("services", {"services": ["x", {"title": "Ok"}, None]})
        assert html.count("services__item") == 1

    def test_cta_and_contact(self):
        assert "Réservez" in render_block("cta", {"title": "t", "button_text": "Réservez"})
        html = render_block("contact", {"title": "Contact", "email": "a@b.fr"})
        assert "a@b.fr" in html
        assert "Téléphone" not in html

    @pytest.mark.parametrize("block_type", list(BLOCK_TYPES) + ["carousel", "", None, 12])
    @pytest.mark.parametrize("content", [None, {}, [], "texte", 3, {"title": None, "headline": {"x": 1}}])
    def test_never_raises(self, block_type, content):
        assert isinstance(render_block(block_type, content), str)

    def test_unknown_type_renders_raw_payload(self):
        html = render_block("carousel", {"slides": ["a.jpg"]})
        assert 'data-type="carousel"' in html
        assert "a.jpg" in html

    def test_generic_content_uses_source_type(self):
        html = render_block("generic", GenericContent(source_type="faq", payload={"q": "Pourquoi ?"}))
        assert 'data-type="faq"' in html
        assert "Pourquoi ?" in html

    def test_text_is_escaped(self):
        html = render_block("about", {"title": "<script>alert(1)</script>"})
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_every_structured_type_has_renderer(self):
        assert set(_RENDERERS) == set(BLOCK_TYPES) - {"generic"}


class TestRenderEditor:
    def test_empty_document(self):
        assert "Aucun bloc de contenu" in render_editor([])

    def test_cards_badge_and_selection(self, store):
        a = store.insert({"type": "hero", "content": {"headline": "A"}, "ai_generated": True})
        b = store.insert(BlockDraft(type="about", editable=False))
        html = render_editor(store.list(), selected_id=a.id, pending_ids=[a.id])
        assert f'data-block-id="{a.id}"' in html
        assert f'data-block-id="{b.id}"' in html
        assert html.count("Généré par IA") == 1
        assert "editor-block--selected" in html
        assert "editor-block--pending" in html
        assert "Lecture seule" in html
        assert html.index(a.id) < html.index(b.id)


class TestRenderPage:
    def test_full_page(self, store, hero):
        store.insert({"type": "about", "content": {"title": "Nous"}})
        html = render_page(store.list(), title="Accueil & co")
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Accueil &amp; co</title>" in html
        assert html.index("Welcome") < html.index("Nous")
