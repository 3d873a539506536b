"""
Block Contracts v1.0 — contrats de blocs pour pages pilotées par le backend.

Usage :
    >>> from block_contracts import get_contract, validate_block_data, get_default_block_data
    >>> data = get_default_block_data("banner")
    >>> validate_block_data("banner", {**data, "title": "Hi"}).valid
    True

Édition générique :
    >>> from block_contracts import EditorBinding
    >>> binding = EditorBinding.for_type("cards")
    >>> data = binding.add_list_item(get_default_block_data("cards"), "cards")
"""

# ── Modèle ──────────────────────────────────────────────────────────────────
from .core.schemas import (
    ContractError,
    FieldKind,
    FieldSchema,
    ItemSchema,
    Contract,
    ContractSummary,
    BlockInstance,
)

# ── Registry ────────────────────────────────────────────────────────────────
from .registry import (
    REGISTRY,
    ContractRegistry,
    build_registry,
    get_contract,
    get_all_contracts,
    get_block_types,
)

# ── Validation / défauts ────────────────────────────────────────────────────
from .validator import IssueKind, ValidationIssue, ValidationResult, validate_block_data, is_valid_url
from .defaults import get_default_block_data

# ── Édition ─────────────────────────────────────────────────────────────────
from .editor import (
    EditorBinding,
    MoveDirection,
    new_block,
    new_id,
    remove_block,
    reorder,
    set_block_hidden,
    update_block_data,
)
from .renderer.form import render_block_form

__version__ = "1.0.0"

__all__ = [
    # modèle
    "ContractError", "FieldKind", "FieldSchema", "ItemSchema",
    "Contract", "ContractSummary", "BlockInstance",
    # registry
    "REGISTRY", "ContractRegistry", "build_registry",
    "get_contract", "get_all_contracts", "get_block_types",
    # validation / défauts
    "IssueKind", "ValidationIssue", "ValidationResult", "validate_block_data", "is_valid_url",
    "get_default_block_data",
    # édition
    "EditorBinding", "MoveDirection", "new_block", "new_id",
    "remove_block", "reorder", "set_block_hidden", "update_block_data",
    "render_block_form",
]
