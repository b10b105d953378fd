"""
Modèles ORM — blocs persistés d'une page.
SQLAlchemy 2 (SQLite par défaut) ; le contenu est stocké en JSON texte.
"""
from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class PageBlockDB(Base):
    __tablename__ = "page_blocks"
    block_id:     Mapped[str]      = mapped_column(sa.String, primary_key=True)
    page_id:      Mapped[str]      = mapped_column(sa.String, nullable=False, index=True)
    block_type:   Mapped[str]      = mapped_column(sa.String, nullable=False)
    content:      Mapped[str]      = mapped_column(sa.Text, default="{}")
    rank:         Mapped[str]      = mapped_column(sa.String, nullable=False)
    ai_generated: Mapped[bool]     = mapped_column(sa.Boolean, default=False)
    editable:     Mapped[bool]     = mapped_column(sa.Boolean, default=True)
    version:      Mapped[int]      = mapped_column(sa.Integer, default=1)
    created_at:   Mapped[datetime] = mapped_column(sa.DateTime, default=datetime.utcnow)
    updated_at:   Mapped[datetime] = mapped_column(sa.DateTime, default=datetime.utcnow)

    __table_args__ = (
        sa.Index("idx_page_blocks_page_rank", "page_id", "rank"),
    )
