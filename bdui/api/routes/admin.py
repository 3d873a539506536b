"""
Admin — éditeur de pages (HTML + script inline).
GET  /admin                  → liste des pages, création / suppression
GET  /admin/pages/{page_id}  → éditeur : un formulaire par bloc, généré depuis le contrat
POST /admin/render-blocks    → fragment HTML de la liste de blocs (re-rendu après action)

Les formulaires ne contiennent aucun code propre à un type de bloc : tout passe
par block_contracts.render_block_form. L'état de la page vit côté navigateur ;
chaque action passe par /api/editor/*, puis « Сохранить » envoie PUT /api/pages/{id}
(les erreurs de validation sont affichées telles quelles).
"""
import json
from html import escape
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from block_contracts import REGISTRY, get_contract, render_block_form

from ...database import get_db, db_get_page, db_list_pages, jl, page_to_dict

router = APIRouter(tags=["Admin"])

_STYLE = (
    "body{font-family:sans-serif;margin:0;background:#f9fafb;color:#111827}"
    ".wrap{max-width:960px;margin:0 auto;padding:24px}"
    ".block{background:#fff;border:1px solid #e5e7eb;border-radius:8px;padding:16px;margin-bottom:16px}"
    ".block--hidden{opacity:.5}"
    ".form-group{display:flex;flex-direction:column;margin-bottom:10px}"
    ".form-group input,.form-group textarea{padding:8px;border:1px solid #d1d5db;border-radius:6px}"
    ".list-item{border-left:3px solid #e94560;padding-left:12px;margin-bottom:12px}"
    ".errors{color:#c0392b;white-space:pre-line}"
    ".toast{position:fixed;bottom:20px;right:20px;background:#1a1a2e;color:#fff;padding:10px 16px;"
    "border-radius:6px;display:none}"
)

_COMMON_JS = """
async function post(url, body) {
  const r = await fetch(url, {
    method: 'POST',
    headers: {'Content-Type': 'application/json'},
    body: JSON.stringify(body)
  });
  return r.json();
}
function toast(msg) {
  const el = document.getElementById('toast');
  el.textContent = msg;
  el.style.display = 'block';
  setTimeout(() => el.style.display = 'none', 2500);
}
"""

_LIST_JS = """
document.addEventListener('click', async (e) => {
  const btn = e.target.closest('[data-action]');
  if (!btn) return;
  if (btn.dataset.action === 'create-page') {
    const title = document.getElementById('new-title').value;
    const slug = document.getElementById('new-slug').value;
    const r = await fetch('/api/pages', {
      method: 'POST',
      headers: {'Content-Type': 'application/json'},
      body: JSON.stringify({title, slug, blocks: []})
    });
    const d = await r.json();
    if (r.ok) location.href = '/admin/pages/' + encodeURIComponent(d.id);
    else toast((d.errors || [d.detail]).join('\\n'));
  } else if (btn.dataset.action === 'delete-page') {
    if (!confirm('Удалить страницу?')) return;
    await fetch('/api/pages/' + encodeURIComponent(btn.dataset.pageId), {method: 'DELETE'});
    location.reload();
  }
});
"""

_EDITOR_JS = """
const state = JSON.parse(document.getElementById('page-data').textContent);
const ITEM_NAME = /^([^\\[]+)\\[([^\\]]+)\\]\\.(.+)$/;

function blockOf(el) {
  const holder = el.closest('[data-block-id]');
  return holder ? state.blocks.find(b => b.id === holder.dataset.blockId) : null;
}
async function render() {
  const r = await fetch('/admin/render-blocks', {
    method: 'POST',
    headers: {'Content-Type': 'application/json'},
    body: JSON.stringify({blocks: state.blocks})
  });
  document.getElementById('blocks').innerHTML = await r.text();
}
async function save() {
  const r = await fetch('/api/pages/' + encodeURIComponent(state.id), {
    method: 'PUT',
    headers: {'Content-Type': 'application/json'},
    body: JSON.stringify({title: state.title, slug: state.slug, blocks: state.blocks})
  });
  const d = await r.json();
  const box = document.getElementById('errors');
  if (r.ok) {
    box.textContent = '';
    state.blocks = d.blocks;
    await render();
    toast('Сохранено');
  } else {
    box.textContent = (d.errors || [d.detail]).join('\\n');
  }
}
document.addEventListener('change', async (e) => {
  const input = e.target;
  if (input.id === 'page-title') { state.title = input.value; return; }
  if (input.id === 'page-slug') { state.slug = input.value; return; }
  const block = blockOf(input);
  if (!block || !input.name) return;
  const m = input.name.match(ITEM_NAME);
  const res = m
    ? await post('/api/editor/update-item', {
        type: block.type, data: block.data, field: m[1], item_id: m[2], patch: {[m[3]]: input.value}})
    : await post('/api/editor/set-scalar', {
        type: block.type, data: block.data, field: input.name, value: input.value});
  block.data = res.data;
});
document.addEventListener('click', async (e) => {
  const btn = e.target.closest('[data-action]');
  if (!btn) return;
  const action = btn.dataset.action;
  if (action === 'save') { await save(); return; }
  if (action === 'add-block') {
    state.blocks.push(await post('/api/editor/new-block', {type: btn.dataset.type}));
  } else if (action === 'move') {
    state.blocks = (await post('/api/editor/reorder', {
      blocks: state.blocks, index: Number(btn.dataset.index), direction: btn.dataset.direction})).blocks;
  } else {
    const block = blockOf(btn);
    if (!block) return;
    if (action === 'toggle-hidden') {
      block.hidden = !block.hidden;
    } else if (action === 'remove-block') {
      state.blocks = state.blocks.filter(b => b !== block);
    } else if (action === 'add-item') {
      block.data = (await post('/api/editor/add-item', {
        type: block.type, data: block.data, field: btn.dataset.field})).data;
    } else if (action === 'remove-item') {
      block.data = (await post('/api/editor/remove-item', {
        type: block.type, data: block.data, field: btn.dataset.field, item_id: btn.dataset.itemId})).data;
    } else {
      return;
    }
  }
  await render();
});
"""


class RenderBlocksRequest(BaseModel):
    blocks: List[Dict[str, Any]] = Field(default_factory=list)


def _layout(title: str, body: str, script: str) -> str:
    return (
        f'<!DOCTYPE html><html lang="ru"><head><meta charset="UTF-8">'
        f'<title>{escape(title)}</title><style>{_STYLE}</style></head>'
        f'<body><div class="wrap">{body}</div><div class="toast" id="toast"></div>'
        f'<script>{_COMMON_JS}{script}</script></body></html>'
    )


def _json_for_script(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False).replace("</", "<\\/")


def render_blocks(blocks: List[Dict[str, Any]]) -> str:
    """Liste de blocs éditables ; contrôles de déplacement selon la position."""
    parts = []
    for index, block in enumerate(blocks):
        if not isinstance(block, dict):
            continue
        block_id = escape(str(block.get("id", "")))
        contract = get_contract(block.get("type"))
        hidden_cls = " block--hidden" if block.get("hidden") else ""
        controls = (
            f'<div class="block-actions">'
            f'{"" if index == 0 else f"<button data-action=move data-direction=up data-index={index}>↑</button>"}'
            f'{"" if index == len(blocks) - 1 else f"<button data-action=move data-direction=down data-index={index}>↓</button>"}'
            f'<button data-action="toggle-hidden">👁</button>'
            f'<button data-action="remove-block">×</button>'
            f'</div>'
        )
        if contract is None:
            inner = f'<p>Неизвестный тип блока : <code>{escape(str(block.get("type")))}</code></p>'
        else:
            inner = render_block_form(contract, block.get("data"), block_id=block.get("id"))
        parts.append(f'<div class="block{hidden_cls}" data-block-id="{block_id}">{controls}{inner}</div>')
    return "".join(parts)


@router.get("/admin", response_class=HTMLResponse)
def admin_pages(db: Session = Depends(get_db)):
    rows = "".join(
        f'<li><a href="/admin/pages/{escape(p.page_id)}">{escape(p.title or p.page_id)}</a>'
        f' <code>{escape(p.slug)}</code> — {len(jl(p.blocks))} блоков'
        f' <button data-action="delete-page" data-page-id="{escape(p.page_id)}">Удалить</button></li>'
        for p in db_list_pages(db)
    )
    body = (
        f"<h1>Страницы</h1><ul>{rows}</ul>"
        f'<h2>Создать страницу</h2>'
        f'<input id="new-title" placeholder="Главная страница"> '
        f'<input id="new-slug" placeholder="/"> '
        f'<button data-action="create-page">Создать</button>'
    )
    return HTMLResponse(_layout("Страницы", body, _LIST_JS))


@router.get("/admin/pages/{page_id}", response_class=HTMLResponse)
def admin_page_editor(page_id: str, db: Session = Depends(get_db)):
    page = db_get_page(db, page_id)
    if not page:
        raise HTTPException(404, "Page not found")

    state = page_to_dict(page)
    palette = "".join(
        f'<button data-action="add-block" data-type="{escape(s.type)}">+ {escape(s.name)}</button> '
        for s in REGISTRY.list_all()
    )
    body = (
        f'<h1>{escape(page.title)}</h1>'
        f'<div class="form-group"><label for="page-title">Название страницы</label>'
        f'<input id="page-title" value="{escape(page.title, quote=True)}"></div>'
        f'<div class="form-group"><label for="page-slug">Slug (URL)</label>'
        f'<input id="page-slug" value="{escape(page.slug, quote=True)}"></div>'
        f'<button data-action="save">Сохранить</button>'
        f'<div class="errors" id="errors"></div>'
        f'<div class="add-blocks">{palette}</div>'
        f'<div class="blocks" id="blocks" data-page-id="{escape(page.page_id)}">{render_blocks(state["blocks"])}</div>'
        f'<script type="application/json" id="page-data">{_json_for_script(state)}</script>'
    )
    return HTMLResponse(_layout(page.title, body, _EDITOR_JS))


@router.post("/admin/render-blocks", response_class=HTMLResponse)
def admin_render_blocks(req: RenderBlocksRequest):
    return HTMLResponse(render_blocks(req.blocks))
