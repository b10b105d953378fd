"""
BlockStore — collection ordonnée des blocs d'une page.

Invariants :
  - id uniques, jamais réutilisés (même après suppression)
  - `order` : rangs fractionnaires → ordre total strict, sans ex-aequo
  - chaque contenu valide le schéma de son type (ou bloc generic)
  - chaque opération s'applique entièrement ou lève sans effet partiel
"""
import logging
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from pydantic import ValidationError as PydanticValidationError

from .blocks import Block, BlockDraft, DocumentSnapshot, GenericContent, parse_content, utcnow
from .errors import NotFound, ReadOnlyBlock, ValidationError, VersionConflict
from .rank import is_valid_rank, rank_between

log = logging.getLogger(__name__)

END = None  # position sentinelle : fin de liste

Listener = Callable[[str, str], None]


class BlockStore:
    """Propriétaire exclusif des blocs d'un document."""

    def __init__(self, page_id: Optional[str] = None):
        self.page_id = page_id
        self._blocks: Dict[str, Block] = {}
        self._retired: Set[str] = set()
        self._listeners: List[Listener] = []

    @classmethod
    def from_blocks(cls, page_id: Optional[str], blocks: Iterable[Block]) -> "BlockStore":
        """Reconstruit un store depuis des blocs persistés (ids et rangs conservés)."""
        store = cls(page_id)
        orders: Set[str] = set()
        for b in blocks:
            if b.id in store._blocks:
                raise ValidationError(f"Identifiant dupliqué : {b.id}", block_id=b.id)
            if not is_valid_rank(b.order):
                raise ValidationError(f"Rang invalide : {b.order!r}", block_id=b.id)
            if b.order in orders:
                raise ValidationError(f"Rang dupliqué : {b.order}", block_id=b.id)
            orders.add(b.order)
            store._blocks[b.id] = b.model_copy(update={"page_id": page_id})
        return store

    # ── Lecture ──────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._blocks)

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._blocks

    def list(self) -> List[Block]:
        """Blocs triés par rang — copies, l'appelant ne peut pas muter le document."""
        return [b.model_copy(deep=True) for b in self._sorted()]

    def get(self, block_id: str) -> Block:
        return self._require(block_id).model_copy(deep=True)

    def index_of(self, block_id: str) -> int:
        self._require(block_id)
        return [b.id for b in self._sorted()].index(block_id)

    def snapshot(self) -> DocumentSnapshot:
        return DocumentSnapshot(page_id=self.page_id, blocks=self.list())

    # ── Abonnements ──────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Enregistre `listener(event, block_id)` ; retourne la fonction de désabonnement."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _emit(self, event: str, block_id: str) -> None:
        for listener in list(self._listeners):
            listener(event, block_id)

    # ── Mutations ────────────────────────────────────────────────────────────

    def insert(self, draft: Any, position: Optional[int] = END) -> Block:
        """Insère un bloc à `position` (0 = premier, END = dernier)."""
        if not isinstance(draft, BlockDraft):
            try:
                draft = BlockDraft.model_validate(draft)
            except PydanticValidationError as e:
                raise ValidationError(f"Bloc invalide : {e.error_count()} erreur(s)") from e

        block_id = draft.id or self._new_id()
        if block_id in self._blocks or block_id in self._retired:
            raise ValidationError(f"Identifiant déjà utilisé : {block_id}", block_id=block_id)

        content = parse_content(draft.type, draft.content)
        order = self._rank_at(position)
        now = utcnow()
        block = Block(
            id=block_id,
            page_id=self.page_id,
            content=content,
            order=order,
            ai_generated=draft.ai_generated,
            editable=draft.editable,
            version=1,
            created_at=now,
            updated_at=now,
        )
        self._blocks[block_id] = block
        log.debug("insert %s (%s) rang=%s", block_id, block.type, order)
        self._emit("inserted", block_id)
        return block.model_copy(deep=True)

    def move(self, block_id: str, position: Optional[int]) -> None:
        """Re-classe uniquement le bloc ciblé ; les autres rangs sont inchangés."""
        block = self._require(block_id)
        order = self._rank_at(position, exclude=block_id)
        self._blocks[block_id] = block.model_copy(update={"order": order})
        log.debug("move %s → %s rang=%s", block_id, position, order)
        self._emit("moved", block_id)

    def duplicate(self, block_id: str) -> Block:
        """Copie (nouvel id, version 1) placée juste après la source."""
        source = self._require(block_id)
        order = self._rank_at(self.index_of(block_id) + 1)
        now = utcnow()
        copy = source.model_copy(deep=True, update={
            "id": self._new_id(),
            "order": order,
            "version": 1,
            "created_at": now,
            "updated_at": now,
        })
        self._blocks[copy.id] = copy
        log.debug("duplicate %s → %s", block_id, copy.id)
        self._emit("duplicated", copy.id)
        return copy.model_copy(deep=True)

    def remove(self, block_id: str) -> None:
        """Supprime le bloc — NotFound s'il est déjà absent (pas idempotent)."""
        self._require(block_id)
        del self._blocks[block_id]
        self._retired.add(block_id)
        log.debug("remove %s", block_id)
        self._emit("removed", block_id)

    def apply_content_patch(self, block_id: str, new_content: Any, expected_version: int,
                            ai_generated: Optional[bool] = None) -> Block:
        """
        Remplace le contenu si `expected_version` == version stockée (concurrence optimiste).
        Version +1 ; `ai_generated` mis à jour dans la même opération si fourni.
        """
        block = self._require(block_id)
        if not block.editable:
            raise ReadOnlyBlock(f"Bloc {block_id} en lecture seule", block_id=block_id)

        if isinstance(new_content, dict) and isinstance(block.content, GenericContent):
            content = GenericContent(source_type=block.content.source_type, payload=dict(new_content))
        else:
            content = parse_content(block.type, new_content)

        if expected_version != block.version:
            raise VersionConflict(
                f"Version périmée pour {block_id} : attendue v{expected_version}, stockée v{block.version}",
                block_id=block_id, expected=expected_version, actual=block.version,
            )

        update: Dict[str, Any] = {"content": content, "version": block.version + 1, "updated_at": utcnow()}
        if ai_generated is not None:
            update["ai_generated"] = ai_generated
        patched = block.model_copy(update=update)
        self._blocks[block_id] = patched
        log.debug("patch %s v%d → v%d", block_id, block.version, patched.version)
        self._emit("patched", block_id)
        return patched.model_copy(deep=True)

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _require(self, block_id: str) -> Block:
        block = self._blocks.get(block_id)
        if block is None:
            raise NotFound(f"Bloc introuvable : {block_id}", block_id=block_id)
        return block

    def _sorted(self) -> List[Block]:
        return sorted(self._blocks.values(), key=lambda b: b.order)

    def _new_id(self) -> str:
        while True:
            block_id = uuid.uuid4().hex
            if block_id not in self._blocks and block_id not in self._retired:
                return block_id

    def _rank_at(self, position: Optional[int], exclude: Optional[str] = None) -> str:
        if position is not None and position < 0:
            raise ValidationError(f"Position invalide : {position}")
        ordered = [b for b in self._sorted() if b.id != exclude]
        if position is None or position > len(ordered):
            position = len(ordered)
        before = ordered[position - 1].order if position > 0 else None
        after = ordered[position].order if position < len(ordered) else None
        return rank_between(before, after)
