"""
Collaborateur de persistance — save(snapshot) idempotent + load(page_id).
"""
import asyncio
import logging
from typing import List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .blocks import Block, DocumentSnapshot
from .database import db_list_blocks, db_replace_page_blocks, init_db, make_engine, make_session_factory, row_to_block
from .errors import SaveError

log = logging.getLogger(__name__)


class SqlPersistence:

    def __init__(self, db_url: Optional[str] = None, engine: Optional[Engine] = None):
        self.engine = engine or make_engine(db_url)
        self._session_factory = make_session_factory(self.engine)
        init_db(self.engine)

    async def save(self, snapshot: DocumentSnapshot) -> None:
        """Réécrit l'état complet de la page — rejouer le même snapshot est sans effet."""
        if not snapshot.page_id:
            raise SaveError("Snapshot sans page_id")
        try:
            count = await asyncio.to_thread(self._save_sync, snapshot)
        except SQLAlchemyError as e:
            raise SaveError(f"Sauvegarde de la page {snapshot.page_id} échouée : {e}", cause=e) from e
        log.info("Page %s sauvegardée (%d blocs)", snapshot.page_id, count)

    def _save_sync(self, snapshot: DocumentSnapshot) -> int:
        with self._session_factory() as db:
            return db_replace_page_blocks(db, snapshot.page_id, snapshot.blocks)

    def load(self, page_id: str) -> List[Block]:
        with self._session_factory() as db:
            return [row_to_block(r) for r in db_list_blocks(db, page_id)]
