"""Core module pour block_contracts."""
from .schemas import (
    ContractError,
    FieldKind,
    FieldSchema,
    ItemSchema,
    Contract,
    ContractSummary,
    BlockInstance,
)

__all__ = [
    "ContractError",
    "FieldKind",
    "FieldSchema",
    "ItemSchema",
    "Contract",
    "ContractSummary",
    "BlockInstance",
]
