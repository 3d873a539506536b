"""
Binding éditeur générique — modifie le payload d'un bloc à partir de son seul contrat.

Toutes les opérations sont copy-on-write : elles renvoient un nouveau dict (ou une
nouvelle liste de blocs) sans toucher à la valeur reçue ; les champs non concernés
sont conservés par référence. Une référence périmée (champ ou item_id inconnu,
index hors bornes) donne un no-op : la valeur d'entrée est renvoyée telle quelle.

    >>> binding = EditorBinding.for_type("cards")
    >>> data = binding.add_list_item({"title": "", "cards": []}, "cards")
    >>> item_id = data["cards"][-1]["id"]
    >>> binding.remove_list_item(data, "cards", item_id)["cards"]
    []
"""
import uuid
from collections.abc import Hashable
from enum import Enum
from typing import Any, Collection, Dict, List, Mapping, Optional, Sequence

from .core.schemas import BlockInstance, Contract, FieldSchema
from .defaults import defaults_for_fields, get_default_block_data
from .registry import REGISTRY, ContractRegistry


class MoveDirection(str, Enum):
    UP   = "up"
    DOWN = "down"


def new_id(existing: Collection[Any] = ()) -> str:
    """Identifiant uuid4, distinct de ceux de `existing`."""
    while True:
        candidate = str(uuid.uuid4())
        if candidate not in existing:
            return candidate


def _items(data: Mapping[str, Any], field_name: str) -> List[Any]:
    value = data.get(field_name)
    return value if isinstance(value, list) else []


def _item_ids(items: Sequence[Any]) -> set:
    ids = (it.get("id") for it in items if isinstance(it, Mapping))
    return {i for i in ids if isinstance(i, Hashable)}


class EditorBinding:
    """Opérations d'édition d'un type de bloc, dispatchées uniquement sur FieldSchema.kind."""

    def __init__(self, contract: Contract):
        self.contract = contract

    @classmethod
    def for_type(cls, block_type: str, registry: Optional[ContractRegistry] = None) -> Optional["EditorBinding"]:
        contract = (registry or REGISTRY).lookup(block_type)
        return cls(contract) if contract is not None else None

    def _list_field(self, field_name: str) -> Optional[FieldSchema]:
        field = self.contract.field(field_name) if isinstance(field_name, str) else None
        return field if field is not None and field.kind.is_list else None

    # ── Scalaires ────────────────────────────────────────────────────────────

    def set_scalar(self, data: Mapping[str, Any], field_name: str, value: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping) or not isinstance(field_name, str):
            return data
        field = self.contract.field(field_name)
        if field is None or field.kind.is_list:
            return data
        return {**data, field_name: value}

    # ── Listes d'objets ──────────────────────────────────────────────────────

    def add_list_item(self, data: Mapping[str, Any], field_name: str) -> Mapping[str, Any]:
        """Ajoute un élément vide (champs de l'itemSchema à "") avec un id neuf."""
        if not isinstance(data, Mapping):
            return data
        field = self._list_field(field_name)
        if field is None:
            return data
        items = _items(data, field_name)
        item = {"id": new_id(_item_ids(items)), **defaults_for_fields(field.item_schema.fields)}
        return {**data, field_name: [*items, item]}

    def update_list_item(self, data: Mapping[str, Any], field_name: str, item_id: Any,
                         patch: Mapping[str, Any]) -> Mapping[str, Any]:
        """Fusionne `patch` dans l'élément `item_id`.

        Seules les clés déclarées dans l'itemSchema sont appliquées ; les autres clés
        (dont "id") sont ignorées silencieusement, l'id n'est donc jamais réassigné.
        """
        if not isinstance(data, Mapping):
            return data
        field = self._list_field(field_name)
        if field is None:
            return data
        allowed = set(field.item_schema.field_names)
        changes = {k: v for k, v in patch.items() if k in allowed} if isinstance(patch, Mapping) else {}

        items = _items(data, field_name)
        new_items = []
        found = False
        for item in items:
            if not found and isinstance(item, Mapping) and item.get("id") == item_id:
                new_items.append({**item, **changes})
                found = True
            else:
                new_items.append(item)
        if not found:
            return data
        return {**data, field_name: new_items}

    def remove_list_item(self, data: Mapping[str, Any], field_name: str, item_id: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            return data
        if self._list_field(field_name) is None:
            return data
        items = _items(data, field_name)
        kept = [it for it in items if not (isinstance(it, Mapping) and it.get("id") == item_id)]
        if len(kept) == len(items):
            return data
        return {**data, field_name: kept}

    def assign_item_ids(self, data: Mapping[str, Any]) -> Mapping[str, Any]:
        """Donne un id aux éléments de liste stockés sans id (payloads importés)."""
        if not isinstance(data, Mapping):
            return data
        patched: Dict[str, Any] = {}
        for field in self.contract.fields:
            if not field.kind.is_list:
                continue
            items = _items(data, field.name)
            if all(isinstance(it, Mapping) and it.get("id") for it in items):
                continue
            taken = _item_ids(items)
            new_items = []
            for item in items:
                if isinstance(item, Mapping) and not item.get("id"):
                    item = {**item, "id": new_id(taken)}
                    taken.add(item["id"])
                new_items.append(item)
            patched[field.name] = new_items
        return {**data, **patched} if patched else data


# ── Séquence de blocs d'une page ────────────────────────────────────────────
# Une séquence qui n'en est pas une (None, str, dict…) est renvoyée telle quelle.

def _is_block_list(blocks: Any) -> bool:
    return isinstance(blocks, Sequence) and not isinstance(blocks, (str, bytes))


def reorder(blocks: Sequence[Any], index: int, direction: Any) -> Sequence[Any]:
    """Échange le bloc `index` avec son voisin ; déplacement hors bornes → no-op."""
    if not _is_block_list(blocks):
        return blocks
    try:
        direction = MoveDirection(direction)
    except ValueError:
        return blocks
    if not isinstance(index, int) or isinstance(index, bool):
        return blocks
    target = index - 1 if direction is MoveDirection.UP else index + 1
    if not (0 <= index < len(blocks)) or not (0 <= target < len(blocks)):
        return blocks
    moved = list(blocks)
    moved[index], moved[target] = moved[target], moved[index]
    return moved


def new_block(block_type: str, registry: Optional[ContractRegistry] = None,
              existing_ids: Collection[Any] = ()) -> BlockInstance:
    """Nouveau bloc : id neuf + données par défaut du contrat (type inconnu → data vide)."""
    return BlockInstance(
        id=new_id(existing_ids),
        type=block_type,
        data=get_default_block_data(block_type, registry),
        hidden=False,
    )


def _block_id(block: Any) -> Any:
    return block.get("id") if isinstance(block, Mapping) else None


def remove_block(blocks: Sequence[Any], block_id: Any) -> Sequence[Any]:
    if not _is_block_list(blocks):
        return blocks
    kept = [b for b in blocks if _block_id(b) != block_id]
    return blocks if len(kept) == len(blocks) else kept


def update_block_data(blocks: Sequence[Any], block_id: Any, patch: Mapping[str, Any]) -> Sequence[Any]:
    """Fusion superficielle de `patch` dans les données du bloc `block_id`."""
    if not _is_block_list(blocks) or not isinstance(patch, Mapping):
        return blocks
    for index, block in enumerate(blocks):
        if _block_id(block) == block_id:
            data = block.get("data")
            data = data if isinstance(data, Mapping) else {}
            updated = list(blocks)
            updated[index] = {**block, "data": {**data, **patch}}
            return updated
    return blocks


def set_block_hidden(blocks: Sequence[Any], block_id: Any, hidden: bool) -> Sequence[Any]:
    if not _is_block_list(blocks):
        return blocks
    for index, block in enumerate(blocks):
        if _block_id(block) == block_id:
            updated = list(blocks)
            updated[index] = {**block, "hidden": bool(hidden)}
            return updated
    return blocks
