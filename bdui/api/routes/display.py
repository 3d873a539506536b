"""
Display — pages remises en forme pour le frontend de rendu.
GET /api/page             → page racine
GET /api/page/{slug}      → {id, title, blocks: [{id, type, **champs}]}
GET /api/navigation       → [{id, title, slug}]

Projection générique par contrat : seuls les champs déclarés sont exposés
(les éléments de liste gardent leur id), les blocs masqués sont retirés.
"""
from typing import Any, Dict, Mapping

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from block_contracts import Contract, get_contract

from ...database import get_db, db_get_page_by_slug, db_list_pages, jl

router = APIRouter(tags=["Display"])


def _project_item(contract_field, item: Any) -> Dict[str, Any]:
    item = item if isinstance(item, Mapping) else {}
    out = {"id": item.get("id")}
    for sub in contract_field.item_schema.fields:
        out[sub.name] = _project_value(sub, item.get(sub.name))
    return out


def _project_value(field, value: Any) -> Any:
    if field.kind.is_list:
        return [_project_item(field, it) for it in value] if isinstance(value, list) else []
    return value


def project_block(block: Mapping[str, Any], contract: Contract) -> Dict[str, Any]:
    data = block.get("data") if isinstance(block.get("data"), Mapping) else {}
    out = {"id": block.get("id"), "type": block.get("type")}
    for field in contract.fields:
        out[field.name] = _project_value(field, data.get(field.name))
    return out


def project_page(page: Mapping[str, Any]) -> Dict[str, Any]:
    blocks = []
    for block in page.get("blocks", []):
        if not isinstance(block, Mapping) or block.get("hidden"):
            continue
        contract = get_contract(block.get("type"))
        if contract is None:
            # type retiré du registry : le frontend ne saurait pas le rendre
            continue
        blocks.append(project_block(block, contract))
    return {"id": page.get("id"), "title": page.get("title"), "blocks": blocks}


@router.get("/api/page")
@router.get("/api/page/{slug:path}")
def get_display_page(slug: str = "/", db: Session = Depends(get_db)):
    page = db_get_page_by_slug(db, slug)
    if not page:
        raise HTTPException(404, "Page not found")
    return project_page({"id": page.page_id, "title": page.title, "blocks": jl(page.blocks)})


@router.get("/api/navigation")
def navigation(db: Session = Depends(get_db)):
    return [{"id": p.page_id, "title": p.title, "slug": p.slug} for p in db_list_pages(db)]
