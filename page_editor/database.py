"""SQLite — engine + session + CRUD helpers des blocs"""
import json
import os
from pathlib import Path
from typing import Iterable, List, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .blocks import Block, load_content
from .models import Base, PageBlockDB

DATA_DIR = Path(__file__).parent.parent / "data"
DB_PATH = os.getenv("DB_PATH", str(DATA_DIR / "page_editor.db"))


def make_engine(db_url: Optional[str] = None) -> Engine:
    if db_url is None:
        Path(DB_PATH).parent.mkdir(parents=True, exist_ok=True)
        db_url = f"sqlite:///{DB_PATH}"
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    return create_engine(db_url, connect_args=connect_args)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)


# ── JSON helpers ──
def jd(o) -> str:
    return json.dumps(o, ensure_ascii=False)

def jo(s: str) -> dict:
    return json.loads(s or "{}")


# ── Conversion Block ↔ ligne ──
def block_to_row(page_id: str, b: Block) -> PageBlockDB:
    return PageBlockDB(
        block_id=b.id, page_id=page_id, block_type=b.type,
        content=jd(b.content.model_dump(mode="json")), rank=b.order,
        ai_generated=b.ai_generated, editable=b.editable, version=b.version,
        created_at=b.created_at, updated_at=b.updated_at,
    )

def row_to_block(row: PageBlockDB) -> Block:
    return Block(
        id=row.block_id, page_id=row.page_id, content=load_content(jo(row.content)),
        order=row.rank, ai_generated=row.ai_generated, editable=row.editable,
        version=row.version, created_at=row.created_at, updated_at=row.updated_at,
    )


# ── Blocs ──
def db_list_blocks(db: Session, page_id: str) -> List[PageBlockDB]:
    return db.query(PageBlockDB).filter_by(page_id=page_id).order_by(PageBlockDB.rank).all()

def db_replace_page_blocks(db: Session, page_id: str, blocks: Iterable[Block]) -> int:
    """Remplace l'état persisté de la page par `blocks` (upsert + suppression des absents)."""
    blocks = list(blocks)
    keep = {b.id for b in blocks}
    for row in db_list_blocks(db, page_id):
        if row.block_id not in keep:
            db.delete(row)
    db.flush()
    for b in blocks:
        db.merge(block_to_row(page_id, b))
    db.commit()
    return len(blocks)
