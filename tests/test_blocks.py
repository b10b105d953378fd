"""
Tests des schémas de contenu + parse_content / load_content.
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from page_editor.blocks import (
    BLOCK_TYPES, AboutContent, Block, GenericContent, HeroContent, ServicesContent,
    content_schema, load_content, parse_content,
)
from page_editor.errors import ValidationError


class TestParseContent:
    def test_known_types_validate(self):
        c = parse_content("services", {"title": "Nos offres",
                                       "services": [{"title": "Audit", "description": "Complet"}]})
        assert isinstance(c, ServicesContent)
        assert c.services[0].title == "Audit"

    def test_defaults_for_missing_fields(self):
        c = parse_content("hero", {})
        assert c.headline == ""
        assert c.cta_href == "#"
        assert c.background_image is None

    def test_none_payload_is_empty(self):
        assert parse_content("about", None) == AboutContent()

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError) as exc:
            parse_content("about", {"title": "x", "footer": "y"})
        assert "footer" in exc.value.message

    def test_wrong_value_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_content("services", {"services": [{"title": 3}]})

    def test_non_dict_payload_rejected(self):
        with pytest.raises(ValidationError):
            parse_content("hero", ["headline"])

    def test_matching_kind_is_accepted(self):
        assert parse_content("hero", {"kind": "hero", "headline": "A"}).headline == "A"

    def test_mismatched_kind_rejected(self):
        with pytest.raises(ValidationError):
            parse_content("hero", {"kind": "about", "title": "A"})

    def test_unknown_type_falls_back_to_generic(self):
        c = parse_content("testimonials", {"quotes": ["Top"]})
        assert isinstance(c, GenericContent)
        assert c.source_type == "testimonials"
        assert c.payload == {"quotes": ["Top"]}

    def test_generic_keeps_any_payload(self):
        c = parse_content("generic", {"kind": "whatever", "n": 1})
        assert c.payload == {"kind": "whatever", "n": 1}

    def test_model_instance_kind_checked(self):
        h = HeroContent(headline="x")
        assert parse_content("hero", h) is h
        with pytest.raises(ValidationError):
            parse_content("cta", h)

    def test_pydantic_error_is_chained(self):
        with pytest.raises(ValidationError) as exc:
            parse_content("hero", {"headline": 1})
        assert exc.value.__cause__ is not None


class TestContentModels:
    def test_to_payload_excludes_kind(self):
        assert "kind" not in HeroContent(headline="x").to_payload()

    def test_generic_to_payload_is_raw(self):
        assert GenericContent(payload={"a": 1}).to_payload() == {"a": 1}

    def test_contents_are_frozen(self):
        c = AboutContent(title="x")
        with pytest.raises(Exception):
            c.title = "y"

    def test_block_type_follows_content(self):
        b = Block(id="b1", content=AboutContent(), order="i")
        assert b.type == "about"
        assert b.model_dump()["type"] == "about"

    def test_block_label_uses_source_type(self):
        b = Block(id="b1", content=GenericContent(source_type="price_table"), order="i")
        assert b.label == "price table"

    def test_load_content_round_trip(self):
        c = HeroContent(headline="Salut")
        assert load_content(c.model_dump()) == c

    def test_load_content_without_kind_rejected(self):
        with pytest.raises(ValidationError):
            load_content({"headline": "x"})

    def test_schema_for_every_type(self):
        for t in BLOCK_TYPES:
            assert "properties" in content_schema(t)
        assert content_schema("inconnu") == content_schema("generic")
