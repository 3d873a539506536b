"""SQLite — init + session + CRUD pages"""
import json
import logging
import os
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base, PageDB

log = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"

DB_PATH      = os.getenv("DB_PATH", str(DATA_DIR / "bdui.db"))
ENGINE       = create_engine(f"sqlite:///{DB_PATH}", connect_args={"check_same_thread": False})
SessionLocal = sessionmaker(autoflush=False, bind=ENGINE)


def _home_blocks() -> List[Dict[str, Any]]:
    def card(title: str, description: str) -> dict:
        return {
            "id": str(uuid.uuid4()), "title": title, "description": description,
            "imageUrl": "https://via.placeholder.com/300x200",
        }

    return [
        {"id": str(uuid.uuid4()), "type": "banner", "hidden": False, "data": {
            "title": "Добро пожаловать!",
            "subtitle": "Backend Driven UI Demo",
            "imageUrl": "https://via.placeholder.com/1200x400",
            "buttonText": "Узнать больше",
            "buttonLink": "#about",
        }},
        {"id": str(uuid.uuid4()), "type": "text", "hidden": False, "data": {
            "title": "О проекте",
            "content": "Это демонстрационное приложение показывает возможности Backend Driven UI. "
                       "Контент страницы управляется через бэкенд и может быть изменен без пересборки фронтенда.",
        }},
        {"id": str(uuid.uuid4()), "type": "cards", "hidden": False, "data": {
            "title": "Наши возможности",
            "cards": [
                card("Динамический контент", "Контент управляется через бэкенд"),
                card("Гибкая настройка", "Легко добавлять и изменять блоки"),
                card("Быстрое обновление", "Изменения применяются мгновенно"),
            ],
        }},
    ]


def init_db(db_path: Optional[str] = None):
    """Crée le schéma (DB_PATH relu à l'appel) et la page d'accueil si la table est vide."""
    global ENGINE, DB_PATH
    db_path = db_path or os.getenv("DB_PATH", DB_PATH)
    if db_path != DB_PATH:
        DB_PATH = db_path
        ENGINE = create_engine(f"sqlite:///{DB_PATH}", connect_args={"check_same_thread": False})
        SessionLocal.configure(bind=ENGINE)
    Path(DB_PATH).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=ENGINE)
    with SessionLocal() as db:
        if db.query(PageDB).count() == 0:
            db.add(PageDB(page_id="home", title="Главная страница", slug="/", blocks=jd(_home_blocks())))
            db.commit()
            log.info("Page d'accueil initiale créée")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ── JSON helpers ──
def jl(s: str) -> list:
    try:
        return json.loads(s or "[]")
    except ValueError:
        log.warning("JSON blocs illisible, liste vide utilisée")
        return []

def jd(o) -> str:
    return json.dumps(o, ensure_ascii=False)


def normalize_slug(slug: Optional[str]) -> str:
    """Toujours un / initial ; vide ou "/" → page racine."""
    if not slug or slug == "/":
        return "/"
    return slug if slug.startswith("/") else "/" + slug


def page_to_dict(page: PageDB) -> Dict[str, Any]:
    return {"id": page.page_id, "title": page.title, "slug": page.slug, "blocks": jl(page.blocks)}


# ── Pages ──
def db_list_pages(db: Session) -> List[PageDB]:
    return db.query(PageDB).order_by(PageDB.created_at).all()

def db_get_page(db: Session, page_id: str) -> Optional[PageDB]:
    return db.query(PageDB).filter_by(page_id=page_id).first()

def db_get_page_by_slug(db: Session, slug: str) -> Optional[PageDB]:
    return db.query(PageDB).filter_by(slug=normalize_slug(slug)).first()

def db_create_page(db: Session, title: str, slug: str, blocks: list, page_id: Optional[str] = None) -> PageDB:
    obj = PageDB(page_id=page_id or str(uuid.uuid4()), title=title, slug=normalize_slug(slug), blocks=jd(blocks))
    db.add(obj); db.commit(); db.refresh(obj); return obj

def db_update_page(db: Session, page: PageDB, title: Optional[str] = None,
                   slug: Optional[str] = None, blocks: Optional[list] = None) -> PageDB:
    if title is not None:
        page.title = title
    if slug:
        page.slug = normalize_slug(slug)
    if blocks is not None:
        page.blocks = jd(blocks)
    db.commit(); db.refresh(page); return page

def db_delete_page(db: Session, page_id: str) -> bool:
    deleted = db.query(PageDB).filter_by(page_id=page_id).delete()
    db.commit()
    return deleted > 0
