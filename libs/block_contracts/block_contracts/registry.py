"""
Registry des contrats — construit une seule fois au démarrage, lecture seule ensuite.

    >>> from block_contracts.registry import get_contract, get_block_types
    >>> get_contract("banner").field_names
    ['title', 'subtitle', 'imageUrl', 'buttonText', 'buttonLink']

Contrats additionnels : fichier JSON (liste de contrats, même format que l'export
/api/contracts) désigné par BDUI_CONTRACTS_PATH.
"""
import json
import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from .catalog import contract_table
from .core.schemas import Contract, ContractError, ContractSummary

log = logging.getLogger(__name__)


class ContractRegistry:
    """Mapping immuable type de bloc → Contract (ordre de déclaration conservé)."""

    def __init__(self, contracts: Iterable[Contract]):
        table: Dict[str, Contract] = {}
        for contract in contracts:
            if contract.type in table:
                raise ContractError(f"Type de bloc déclaré deux fois : {contract.type!r}")
            table[contract.type] = contract
        self._contracts: Mapping[str, Contract] = MappingProxyType(table)

    @classmethod
    def from_table(cls, entries: Iterable[Dict[str, Any]]) -> "ContractRegistry":
        contracts = []
        for entry in entries:
            try:
                contracts.append(Contract.model_validate(entry))
            except ValidationError as e:
                raise ContractError(f"Contrat invalide {entry.get('type')!r} : {e}") from e
        return cls(contracts)

    def lookup(self, block_type: str) -> Optional[Contract]:
        return self._contracts.get(block_type)

    def list_all(self) -> List[ContractSummary]:
        return [c.summary() for c in self._contracts.values()]

    def all(self) -> Mapping[str, Contract]:
        return self._contracts

    def export(self) -> Dict[str, Dict[str, Any]]:
        """Registry complet sérialisé pour un client (type → contrat JSON)."""
        return {t: c.to_wire() for t, c in self._contracts.items()}

    def __contains__(self, block_type: object) -> bool:
        return block_type in self._contracts

    def __len__(self) -> int:
        return len(self._contracts)

    def __iter__(self):
        return iter(self._contracts)


def _load_extra_entries(path: Path) -> List[Dict[str, Any]]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = list(data.values())
    if not isinstance(data, list):
        raise ContractError(f"{path} : liste de contrats attendue")
    return data


def build_registry(extra_path: Optional[str] = None) -> ContractRegistry:
    """Table intégrée + contrats du fichier extra_path (ou BDUI_CONTRACTS_PATH)."""
    entries = contract_table()
    extra_path = extra_path or os.getenv("BDUI_CONTRACTS_PATH")
    if extra_path:
        extra = _load_extra_entries(Path(extra_path))
        log.info("Contrats additionnels chargés depuis %s (%d)", extra_path, len(extra))
        entries.extend(extra)
    registry = ContractRegistry.from_table(entries)
    log.debug("Registry construit : %d types de blocs", len(registry))
    return registry


REGISTRY: ContractRegistry = build_registry()


# ── Raccourcis module ───────────────────────────────────────────────────────

def get_contract(block_type: str) -> Optional[Contract]:
    return REGISTRY.lookup(block_type)


def get_all_contracts() -> Mapping[str, Contract]:
    return REGISTRY.all()


def get_block_types() -> List[ContractSummary]:
    return REGISTRY.list_all()
