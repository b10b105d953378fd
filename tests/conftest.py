"""
Fixtures partagées — collaborateurs factices (génération, persistance).
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from page_editor.blocks import DocumentSnapshot
from page_editor.errors import SaveError
from page_editor.store import BlockStore


class FakeGenerator:
    """Générateur contrôlable : résultat fixe/calculé, erreur, ou attente sur un Event."""

    def __init__(self, result: Any = None, error: Optional[BaseException] = None,
                 gate: Optional[asyncio.Event] = None, supports_cancellation: bool = True):
        self.result = result if result is not None else {}
        self.error = error
        self.gate = gate
        self.supports_cancellation = supports_cancellation
        self.calls: List[tuple] = []
        self.cancelled = False

    async def generate(self, block_type: str, current_content: Dict[str, Any],
                       instruction: str, timeout: float) -> Dict[str, Any]:
        self.calls.append((block_type, current_content, instruction, timeout))
        if self.gate is not None:
            try:
                await self.gate.wait()
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.error is not None:
            raise self.error
        if callable(self.result):
            return self.result(block_type, current_content, instruction)
        return dict(self.result)


class FakePersistence:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.saved: List[DocumentSnapshot] = []

    async def save(self, snapshot: DocumentSnapshot) -> None:
        if self.fail:
            raise SaveError("disque plein")
        self.saved.append(snapshot)


@pytest.fixture
def store():
    return BlockStore(page_id="home")


@pytest.fixture
def hero(store):
    return store.insert({"type": "hero", "content": {"headline": "Welcome"}}, 0)


@pytest.fixture
def persistence():
    return FakePersistence()
