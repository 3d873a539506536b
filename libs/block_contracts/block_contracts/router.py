"""
Router FastAPI — export du registry, validation, binding éditeur.

GET  /api/contracts                    → {type: contrat}
GET  /api/contracts/{type}             → contrat | 404
GET  /api/contracts/{type}/defaults    → données par défaut | 404
GET  /api/contracts/{type}/form        → fragment HTML du formulaire | 404
GET  /api/block-types                  → [{type, name, description}]
POST /api/validate                     → {valid, errors, issues}
POST /api/editor/new-block             → BlockInstance
POST /api/editor/set-scalar            → {data}
POST /api/editor/add-item              → {data}
POST /api/editor/update-item           → {data}
POST /api/editor/remove-item           → {data}
POST /api/editor/reorder               → {blocks}
"""
from typing import Any, Dict, List

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, Field

from .defaults import get_default_block_data
from .editor import EditorBinding, new_block, reorder
from .registry import REGISTRY
from .renderer.form import render_block_form
from .validator import validate_block_data

router = APIRouter(tags=["contracts"])


def _not_found() -> JSONResponse:
    return JSONResponse({"error": "Contract not found"}, status_code=404)


# ── Schémas requêtes ───────────────────────────────────────────────────────

class ValidateRequest(BaseModel):
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)


class NewBlockRequest(BaseModel):
    type: str


class SetScalarRequest(ValidateRequest):
    field: str
    value: Any = ""


class ListFieldRequest(ValidateRequest):
    field: str


class ListItemRequest(ListFieldRequest):
    item_id: str


class UpdateItemRequest(ListItemRequest):
    patch: Dict[str, Any] = Field(default_factory=dict)


class ReorderRequest(BaseModel):
    blocks: List[Dict[str, Any]] = Field(default_factory=list)
    index: int
    direction: str


# ── Registry ───────────────────────────────────────────────────────────────

@router.get("/api/contracts", summary="Tous les contrats de blocs")
def list_contracts() -> dict:
    return REGISTRY.export()


@router.get("/api/block-types", summary="Types de blocs disponibles")
def list_block_types() -> list:
    return [s.model_dump() for s in REGISTRY.list_all()]


@router.get("/api/contracts/{block_type}", summary="Contrat d'un type de bloc")
def get_contract(block_type: str):
    contract = REGISTRY.lookup(block_type)
    if contract is None:
        return _not_found()
    return contract.to_wire()


@router.get("/api/contracts/{block_type}/defaults", summary="Données par défaut d'un nouveau bloc")
def get_defaults(block_type: str):
    if block_type not in REGISTRY:
        return _not_found()
    return get_default_block_data(block_type)


@router.get("/api/contracts/{block_type}/form", response_class=HTMLResponse,
            summary="Formulaire d'édition vide d'un type de bloc")
def get_form(block_type: str):
    contract = REGISTRY.lookup(block_type)
    if contract is None:
        return _not_found()
    return HTMLResponse(render_block_form(contract, get_default_block_data(block_type)))


# ── Validation ─────────────────────────────────────────────────────────────

@router.post("/api/validate", summary="Valide les données d'un bloc")
def validate(req: ValidateRequest) -> dict:
    return validate_block_data(req.type, req.data).model_dump(mode="json")


# ── Binding éditeur ────────────────────────────────────────────────────────

@router.post("/api/editor/new-block", summary="Nouveau bloc avec données par défaut")
def editor_new_block(req: NewBlockRequest):
    if req.type not in REGISTRY:
        return _not_found()
    return new_block(req.type).model_dump()


@router.post("/api/editor/set-scalar")
def editor_set_scalar(req: SetScalarRequest):
    binding = EditorBinding.for_type(req.type)
    if binding is None:
        return _not_found()
    return {"data": binding.set_scalar(req.data, req.field, req.value)}


@router.post("/api/editor/add-item")
def editor_add_item(req: ListFieldRequest):
    binding = EditorBinding.for_type(req.type)
    if binding is None:
        return _not_found()
    return {"data": binding.add_list_item(req.data, req.field)}


@router.post("/api/editor/update-item")
def editor_update_item(req: UpdateItemRequest):
    binding = EditorBinding.for_type(req.type)
    if binding is None:
        return _not_found()
    return {"data": binding.update_list_item(req.data, req.field, req.item_id, req.patch)}


@router.post("/api/editor/remove-item")
def editor_remove_item(req: ListItemRequest):
    binding = EditorBinding.for_type(req.type)
    if binding is None:
        return _not_found()
    return {"data": binding.remove_list_item(req.data, req.field, req.item_id)}


@router.post("/api/editor/reorder")
def editor_reorder(req: ReorderRequest) -> dict:
    return {"blocks": list(reorder(req.blocks, req.index, req.direction))}
