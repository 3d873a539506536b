"""Données par défaut d'un nouveau bloc (forme valide, champs requis encore vides)."""
from typing import Any, Dict, Iterable, Optional

from .core.schemas import FieldSchema
from .registry import REGISTRY, ContractRegistry


def default_value(field: FieldSchema) -> Any:
    return [] if field.kind.is_list else ""


def defaults_for_fields(fields: Iterable[FieldSchema]) -> Dict[str, Any]:
    return {f.name: default_value(f) for f in fields}


def get_default_block_data(block_type: str, registry: Optional[ContractRegistry] = None) -> Dict[str, Any]:
    """Liste → [], tout autre kind → "" ; type inconnu → {}."""
    contract = (registry or REGISTRY).lookup(block_type)
    if contract is None:
        return {}
    return defaults_for_fields(contract.fields)
