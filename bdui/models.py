"""
Data models — Page (ORM SQLite) + schémas requêtes Pydantic v2.
Les blocs d'une page sont stockés en JSON dans PageDB.blocks (liste ordonnée).
"""
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

import sqlalchemy as sa
from pydantic import BaseModel, Field
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# ── ORM ────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    pass


class PageDB(Base):
    __tablename__ = "pages"
    page_id:    Mapped[str]      = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title:      Mapped[str]      = mapped_column(sa.String, nullable=False, default="")
    slug:       Mapped[str]      = mapped_column(sa.String, nullable=False, index=True)
    blocks:     Mapped[str]      = mapped_column(sa.Text, nullable=False, default="[]")
    created_at: Mapped[datetime] = mapped_column(sa.DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(sa.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


# ── Pydantic ───────────────────────────────────────────────────────────

class BlockIn(BaseModel):
    id: Optional[str] = None
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)
    hidden: bool = False


class PageCreate(BaseModel):
    id: Optional[str] = None
    title: str = ""
    slug: str = "/"
    blocks: List[BlockIn] = Field(default_factory=list)


class PageUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    blocks: Optional[List[BlockIn]] = None
