"""Tests SelectionController."""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from page_editor.errors import NotFound
from page_editor.selection import SelectionController


def test_select_and_clear(store, hero):
    sel = SelectionController(store)
    assert sel.selected_id is None
    sel.select(hero.id)
    assert sel.is_selected(hero.id)
    assert sel.selected().id == hero.id
    sel.clear()
    assert sel.selected() is None


def test_select_unknown_raises(store):
    sel = SelectionController(store)
    with pytest.raises(NotFound):
        sel.select("ghost")
    assert sel.selected_id is None


def test_removed_block_clears_selection(store, hero):
    sel = SelectionController(store)
    sel.select(hero.id)
    store.remove(hero.id)
    assert sel.selected_id is None


def test_removing_other_block_keeps_selection(store, hero):
    other = store.insert({"type": "about"})
    sel = SelectionController(store)
    sel.select(hero.id)
    store.remove(other.id)
    assert sel.selected_id == hero.id


def test_selected_reads_live_block(store, hero):
    sel = SelectionController(store)
    sel.select(hero.id)
    store.apply_content_patch(hero.id, {"headline": "Neuf"}, 1)
    assert sel.selected().content.headline == "Neuf"


def test_close_unsubscribes(store, hero):
    sel = SelectionController(store)
    sel.select(hero.id)
    sel.close()
    store.remove(hero.id)
    assert sel.selected_id == hero.id
    assert sel.selected() is None
    assert sel.selected_id is None
