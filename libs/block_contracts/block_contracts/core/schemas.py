"""
Schémas Pydantic des contrats de blocs.
Structure : Contract → FieldSchema → (ItemSchema → FieldSchema)…

Le JSON exporté aux clients garde les clés historiques de l'admin :
  kind        ↔ "type"        ("text" | "url" | "textarea" | "array")
  item_schema ↔ "itemSchema"  ({"type": "object", "fields": [...]})
"""
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ContractError(ValueError):
    """Contrat mal déclaré (table de contrats invalide au démarrage)."""


# ── Kinds ───────────────────────────────────────────────────────────────────

class FieldKind(str, Enum):
    SCALAR_TEXT     = "text"
    SCALAR_URL      = "url"
    MULTILINE_TEXT  = "textarea"
    LIST_OF_OBJECTS = "array"

    @property
    def is_list(self) -> bool:
        return self is FieldKind.LIST_OF_OBJECTS


# ── FieldSchema ─────────────────────────────────────────────────────────────

def _check_unique_names(fields, where: str) -> None:
    seen = set()
    for f in fields:
        if f.name in seen:
            raise ContractError(f"{where}: champ {f.name!r} déclaré deux fois")
        seen.add(f.name)


class FieldSchema(BaseModel):
    """Un champ du payload d'un bloc."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1)
    label: str = ""
    kind: FieldKind = Field(FieldKind.SCALAR_TEXT, alias="type")
    required: bool = False
    placeholder: Optional[str] = None
    rows: Optional[int] = Field(default=None, ge=1)
    item_schema: Optional["ItemSchema"] = Field(default=None, alias="itemSchema")

    @model_validator(mode="after")
    def _item_schema_matches_kind(self):
        if self.kind.is_list and (self.item_schema is None or not self.item_schema.fields):
            raise ContractError(f"champ {self.name!r} : une liste exige un itemSchema non vide")
        if not self.kind.is_list and self.item_schema is not None:
            raise ContractError(f"champ {self.name!r} : itemSchema réservé aux champs liste")
        return self

    @property
    def display_label(self) -> str:
        return self.label or self.name

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ItemSchema(BaseModel):
    """Schéma d'un élément de liste (un objet à champs)."""
    model_config = ConfigDict(frozen=True)

    type: Literal["object"] = "object"
    fields: Tuple[FieldSchema, ...] = ()

    @field_validator("fields")
    @classmethod
    def _unique(cls, v: Tuple[FieldSchema, ...]) -> Tuple[FieldSchema, ...]:
        _check_unique_names(v, "itemSchema")
        return v

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]


FieldSchema.model_rebuild()
ItemSchema.model_rebuild()


# ── Contract ────────────────────────────────────────────────────────────────

class ContractSummary(BaseModel):
    type: str
    name: str
    description: str = ""


class Contract(BaseModel):
    """Contrat d'un type de bloc : métadonnées + champs ordonnés."""
    model_config = ConfigDict(frozen=True)

    type: str = Field(..., min_length=1)
    name: str = ""
    description: str = ""
    fields: Tuple[FieldSchema, ...] = ()

    @field_validator("fields")
    @classmethod
    def _unique(cls, v: Tuple[FieldSchema, ...]) -> Tuple[FieldSchema, ...]:
        _check_unique_names(v, "contract")
        return v

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def field(self, name: str) -> Optional[FieldSchema]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def summary(self) -> ContractSummary:
        return ContractSummary(type=self.type, name=self.name, description=self.description)

    def to_wire(self) -> Dict[str, Any]:
        return {
            "type":        self.type,
            "name":        self.name,
            "description": self.description,
            "fields":      [f.to_wire() for f in self.fields],
        }


# ── BlockInstance ───────────────────────────────────────────────────────────

class BlockInstance(BaseModel):
    """Bloc concret d'une page (payload possiblement invalide)."""
    id: str
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)
    hidden: bool = False
