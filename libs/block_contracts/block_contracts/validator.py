"""
Validation d'un payload de bloc contre son contrat.

Jamais d'exception : toutes les erreurs sont collectées et renvoyées comme données,
pour pouvoir valider en masse (tous les blocs de toutes les pages) sans interruption.

    >>> validate_block_data("banner", {"title": "Hi", "imageUrl": "not-a-url"}).errors
    ['field URL изображения must be a valid URL']
"""
import logging
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence

from pydantic import AnyUrl, BaseModel, Field, TypeAdapter, ValidationError

from .core.schemas import FieldKind, FieldSchema
from .registry import REGISTRY, ContractRegistry

log = logging.getLogger(__name__)

_URL_ADAPTER = TypeAdapter(AnyUrl)


class IssueKind(str, Enum):
    UNKNOWN_TYPE = "unknown_type"
    REQUIRED     = "required"
    EMPTY_LIST   = "empty_list"
    INVALID_URL  = "invalid_url"


class ValidationIssue(BaseModel):
    kind: IssueKind
    field: Optional[str] = None  # chemin, ex: "cards[0].title"
    message: str


class ValidationResult(BaseModel):
    valid: bool
    errors: List[str] = Field(default_factory=list)
    issues: List[ValidationIssue] = Field(default_factory=list)

    @property
    def unknown_type(self) -> bool:
        return any(i.kind is IssueKind.UNKNOWN_TYPE for i in self.issues)

    @classmethod
    def from_issues(cls, issues: List[ValidationIssue]) -> "ValidationResult":
        return cls(valid=not issues, errors=[i.message for i in issues], issues=issues)


# ── Helpers ─────────────────────────────────────────────────────────────────

def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def is_valid_url(value: Any) -> bool:
    """URL absolue bien formée (schéma obligatoire)."""
    if not isinstance(value, str):
        return False
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    return True


def _check_items(field: FieldSchema, items: Sequence[Any], label_path: str, path: str,
                 issues: List[ValidationIssue]) -> None:
    """Champs requis de chaque élément ; un élément invalide n'arrête pas les suivants."""
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            item = {}
        item_label = f"{label_path}[{index}]"
        item_path  = f"{path}[{index}]"
        for sub in field.item_schema.fields:
            value = item.get(sub.name)
            sub_label = f"{item_label}.{sub.display_label}"
            sub_path  = f"{item_path}.{sub.name}"
            if sub.required and _is_blank(value):
                issues.append(ValidationIssue(
                    kind=IssueKind.REQUIRED, field=sub_path, message=f"{sub_label} is required",
                ))
            if sub.kind.is_list:
                if sub.required and not (isinstance(value, list) and value):
                    issues.append(ValidationIssue(
                        kind=IssueKind.EMPTY_LIST, field=sub_path,
                        message=f"{sub_label} must contain at least one item",
                    ))
                if isinstance(value, list):
                    _check_items(sub, value, sub_label, sub_path, issues)


def _check_field(field: FieldSchema, value: Any, issues: List[ValidationIssue]) -> None:
    label = field.display_label
    if field.required and _is_blank(value):
        issues.append(ValidationIssue(
            kind=IssueKind.REQUIRED, field=field.name, message=f"field {label} is required",
        ))

    if field.kind is FieldKind.LIST_OF_OBJECTS:
        if field.required and not (isinstance(value, list) and value):
            issues.append(ValidationIssue(
                kind=IssueKind.EMPTY_LIST, field=field.name,
                message=f"field {label} must contain at least one item",
            ))
        if isinstance(value, list):
            _check_items(field, value, label, field.name, issues)

    elif field.kind is FieldKind.SCALAR_URL:
        if not _is_blank(value) and not is_valid_url(value):
            issues.append(ValidationIssue(
                kind=IssueKind.INVALID_URL, field=field.name,
                message=f"field {label} must be a valid URL",
            ))

    # SCALAR_TEXT / MULTILINE_TEXT : présence uniquement


# ── Point d'entrée public ───────────────────────────────────────────────────

def validate_block_data(block_type: str, data: Any,
                        registry: Optional[ContractRegistry] = None) -> ValidationResult:
    """
    Valide `data` contre le contrat de `block_type`.

    Type inconnu → une seule erreur, aucun contrôle de champ.
    Sinon : champs requis, listes non vides, éléments de liste, URLs — dans
    l'ordre de déclaration des champs, toutes les erreurs collectées.
    """
    contract = (registry or REGISTRY).lookup(block_type)
    if contract is None:
        return ValidationResult.from_issues([ValidationIssue(
            kind=IssueKind.UNKNOWN_TYPE, message=f"unknown block type: {block_type}",
        )])

    if not isinstance(data, Mapping):
        data = {}

    issues: List[ValidationIssue] = []
    for field in contract.fields:
        _check_field(field, data.get(field.name), issues)

    if issues:
        log.debug("Bloc %s invalide : %d erreur(s)", block_type, len(issues))
    return ValidationResult.from_issues(issues)
