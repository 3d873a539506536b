"""
Pages — CRUD + validation des blocs contre leurs contrats avant toute écriture.
GET    /api/pages
GET    /api/pages/root
GET    /api/pages/id/{page_id}
GET    /api/pages/{slug}
POST   /api/pages
PUT    /api/pages/{page_id}
DELETE /api/pages/{page_id}
"""
import logging
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from block_contracts import EditorBinding, new_id, validate_block_data

from ...database import (
    get_db, page_to_dict,
    db_list_pages, db_get_page, db_get_page_by_slug,
    db_create_page, db_update_page, db_delete_page,
)
from ...models import BlockIn, PageCreate, PageUpdate

log = logging.getLogger(__name__)
router = APIRouter(tags=["Pages"])


# ── Helpers ────────────────────────────────────────────────────────────────────

def _prepare_blocks(blocks: List[BlockIn]) -> Tuple[list, Optional[JSONResponse]]:
    """
    Valide chaque bloc puis normalise (id de bloc, id des éléments de liste).
    Premier bloc invalide → réponse 400 avec ses erreurs telles quelles.
    """
    taken = {b.id for b in blocks if b.id}
    prepared = []
    for block in blocks:
        result = validate_block_data(block.type, block.data)
        if not result.valid:
            log.warning("Bloc refusé type=%s id=%s (%d erreur(s))", block.type, block.id, len(result.errors))
            return [], JSONResponse({
                "error":     "Block validation failed",
                "blockType": block.type,
                "blockId":   block.id,
                "errors":    result.errors,
            }, status_code=400)

        block_id = block.id or new_id(taken)
        taken.add(block_id)
        data = EditorBinding.for_type(block.type).assign_item_ids(block.data)
        prepared.append({"id": block_id, "type": block.type, "data": dict(data), "hidden": block.hidden})
    return prepared, None


# ── Lecture ────────────────────────────────────────────────────────────────────

@router.get("/api/pages")
def list_pages(db: Session = Depends(get_db)):
    return [page_to_dict(p) for p in db_list_pages(db)]


@router.get("/api/pages/root")
def get_root_page(db: Session = Depends(get_db)):
    page = db_get_page_by_slug(db, "/")
    if not page:
        raise HTTPException(404, "Page not found")
    return page_to_dict(page)


@router.get("/api/pages/id/{page_id}")
def get_page_by_id(page_id: str, db: Session = Depends(get_db)):
    page = db_get_page(db, page_id)
    if not page:
        raise HTTPException(404, "Page not found")
    return page_to_dict(page)


@router.get("/api/pages/{slug:path}")
def get_page_by_slug(slug: str, db: Session = Depends(get_db)):
    page = db_get_page_by_slug(db, slug)
    if not page:
        raise HTTPException(404, "Page not found")
    return page_to_dict(page)


# ── Écriture ───────────────────────────────────────────────────────────────────

@router.post("/api/pages")
def create_page(req: PageCreate, db: Session = Depends(get_db)):
    blocks, error = _prepare_blocks(req.blocks)
    if error:
        return error
    if req.id and db_get_page(db, req.id):
        raise HTTPException(409, "Page id already exists")
    page = db_create_page(db, title=req.title, slug=req.slug, blocks=blocks, page_id=req.id)
    log.info("Page créée %s (%s, %d blocs)", page.page_id, page.slug, len(blocks))
    return page_to_dict(page)


@router.put("/api/pages/{page_id}")
def update_page(page_id: str, req: PageUpdate, db: Session = Depends(get_db)):
    blocks = None
    if req.blocks is not None:
        blocks, error = _prepare_blocks(req.blocks)
        if error:
            return error
    page = db_get_page(db, page_id)
    if not page:
        raise HTTPException(404, "Page not found")
    page = db_update_page(db, page, title=req.title, slug=req.slug, blocks=blocks)
    log.info("Page mise à jour %s", page_id)
    return page_to_dict(page)


@router.delete("/api/pages/{page_id}")
def delete_page(page_id: str, db: Session = Depends(get_db)):
    if db_delete_page(db, page_id):
        log.info("Page supprimée %s", page_id)
    return {"success": True}
