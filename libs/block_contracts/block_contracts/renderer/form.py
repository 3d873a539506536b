"""
Renderer de formulaires d'édition — un seul parcours de Contract.fields,
dispatch uniquement sur FieldSchema.kind (jamais sur le type de bloc).

Les noms d'input suivent le chemin du champ : "title", "cards[<item_id>].title".
"""
from html import escape
from typing import Any, Callable, Dict, Mapping, Optional

from ..core.schemas import Contract, FieldKind, FieldSchema


def _attr(value: Any) -> str:
    return escape("" if value is None else str(value), quote=True)


def _label(field: FieldSchema, input_name: str) -> str:
    star = ' <span class="form-required">*</span>' if field.required else ""
    return f'<label for="{_attr(input_name)}">{escape(field.display_label)}{star}</label>'


def _placeholder(field: FieldSchema) -> str:
    return f' placeholder="{_attr(field.placeholder)}"' if field.placeholder else ""


def _render_input(field: FieldSchema, value: Any, input_name: str, input_type: str) -> str:
    required = " required" if field.required else ""
    return (
        f'<div class="form-group">{_label(field, input_name)}'
        f'<input type="{input_type}" id="{_attr(input_name)}" name="{_attr(input_name)}"'
        f' value="{_attr(value)}"{_placeholder(field)}{required}></div>'
    )


def _render_text(field: FieldSchema, value: Any, input_name: str) -> str:
    return _render_input(field, value, input_name, "text")


def _render_url(field: FieldSchema, value: Any, input_name: str) -> str:
    return _render_input(field, value, input_name, "url")


def _render_textarea(field: FieldSchema, value: Any, input_name: str) -> str:
    rows = field.rows or 3
    required = " required" if field.required else ""
    return (
        f'<div class="form-group">{_label(field, input_name)}'
        f'<textarea id="{_attr(input_name)}" name="{_attr(input_name)}" rows="{rows}"'
        f'{_placeholder(field)}{required}>{escape("" if value is None else str(value))}</textarea></div>'
    )


def _render_list(field: FieldSchema, value: Any, input_name: str) -> str:
    items = value if isinstance(value, list) else []
    parts = []
    for index, item in enumerate(items):
        item = item if isinstance(item, Mapping) else {}
        item_key = item.get("id") or index
        item_prefix = f"{input_name}[{item_key}]"
        inner = "".join(
            render_field(sub, item.get(sub.name), f"{item_prefix}.{sub.name}")
            for sub in field.item_schema.fields
        )
        parts.append(
            f'<div class="list-item" data-item-id="{_attr(item.get("id", ""))}">{inner}'
            f'<button type="button" class="btn btn-danger btn-sm" data-action="remove-item"'
            f' data-field="{_attr(field.name)}" data-item-id="{_attr(item.get("id", ""))}">×</button></div>'
        )
    return (
        f'<fieldset class="list-field" data-field="{_attr(field.name)}">'
        f'<legend>{escape(field.display_label)}{" *" if field.required else ""}</legend>'
        f'{"".join(parts)}'
        f'<button type="button" class="btn btn-secondary" data-action="add-item"'
        f' data-field="{_attr(field.name)}">+</button></fieldset>'
    )


_RENDERERS: Dict[FieldKind, Callable[[FieldSchema, Any, str], str]] = {
    FieldKind.SCALAR_TEXT:     _render_text,
    FieldKind.SCALAR_URL:      _render_url,
    FieldKind.MULTILINE_TEXT:  _render_textarea,
    FieldKind.LIST_OF_OBJECTS: _render_list,
}


def render_field(field: FieldSchema, value: Any, input_name: Optional[str] = None) -> str:
    return _RENDERERS[field.kind](field, value, input_name or field.name)


def render_block_form(contract: Contract, data: Optional[Mapping[str, Any]] = None,
                      block_id: Optional[str] = None) -> str:
    """Formulaire HTML complet d'un bloc (fragment, sans <form>)."""
    data = data if isinstance(data, Mapping) else {}
    if not contract.fields:
        body = '<p class="form-empty">Aucun champ éditable : données fournies par le backend.</p>'
    else:
        body = "".join(render_field(f, data.get(f.name)) for f in contract.fields)
    block_attr = f' data-block-id="{_attr(block_id)}"' if block_id else ""
    return (
        f'<div class="block-form" data-block-type="{_attr(contract.type)}"{block_attr}>'
        f'<h3 class="block-form__title">{escape(contract.name or contract.type)}</h3>'
        f'{body}</div>'
    )
