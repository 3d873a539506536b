"""
Table déclarative des contrats de blocs.

Les libellés sont affichés tels quels dans l'admin (et dans les messages de
validation). Les bannières « pilotées par le backend » n'ont aucun champ
éditable : elles sont générées depuis _EXTERNAL_BANNERS.
"""
from typing import Any, Dict, List

_IMAGE_PLACEHOLDER = "https://example.com/image.jpg"


_CONTRACT_TABLE: List[Dict[str, Any]] = [
    {
        "type": "text",
        "name": "Текстовый блок",
        "description": "Блок с заголовком и текстовым содержимым",
        "fields": [
            {"name": "title",   "label": "Заголовок",   "type": "text",     "required": True,
             "placeholder": "Введите заголовок"},
            {"name": "content", "label": "Содержимое", "type": "textarea", "required": True,
             "placeholder": "Введите текст", "rows": 5},
        ],
    },
    {
        "type": "banner",
        "name": "Баннер",
        "description": "Баннер с изображением, заголовком и кнопкой",
        "fields": [
            {"name": "title",      "label": "Заголовок",       "type": "text", "required": True,
             "placeholder": "Введите заголовок"},
            {"name": "subtitle",   "label": "Подзаголовок",    "type": "text", "required": False,
             "placeholder": "Введите подзаголовок"},
            {"name": "imageUrl",   "label": "URL изображения", "type": "url",  "required": False,
             "placeholder": _IMAGE_PLACEHOLDER},
            {"name": "buttonText", "label": "Текст кнопки",    "type": "text", "required": False,
             "placeholder": "Например: Узнать больше"},
            # Ancre ou chemin relatif accepté : pas un champ "url"
            {"name": "buttonLink", "label": "Ссылка кнопки",   "type": "text", "required": False,
             "placeholder": "Например: /about или #section"},
        ],
    },
    {
        "type": "cards",
        "name": "Блок с карточками",
        "description": "Блок с сеткой карточек",
        "fields": [
            {"name": "title", "label": "Заголовок блока", "type": "text", "required": False,
             "placeholder": "Введите заголовок"},
            {
                "name": "cards", "label": "Карточки", "type": "array", "required": True,
                "itemSchema": {"type": "object", "fields": [
                    {"name": "title",       "label": "Заголовок карточки", "type": "text", "required": True,
                     "placeholder": "Введите заголовок"},
                    {"name": "description", "label": "Описание",           "type": "text", "required": True,
                     "placeholder": "Введите описание"},
                    {"name": "imageUrl",    "label": "URL изображения",    "type": "url",  "required": False,
                     "placeholder": _IMAGE_PLACEHOLDER},
                ]},
            },
        ],
    },
    {
        "type": "gallery",
        "name": "Галерея",
        "description": "Галерея изображений",
        "fields": [
            {"name": "title", "label": "Заголовок (необязательно)", "type": "text", "required": False,
             "placeholder": "Введите заголовок"},
            {
                "name": "images", "label": "Изображения", "type": "array", "required": True,
                "itemSchema": {"type": "object", "fields": [
                    {"name": "url",     "label": "URL изображения", "type": "url",  "required": True,
                     "placeholder": _IMAGE_PLACEHOLDER},
                    {"name": "alt",     "label": "Alt текст",       "type": "text", "required": False,
                     "placeholder": "Описание изображения"},
                    {"name": "caption", "label": "Подпись",         "type": "text", "required": False,
                     "placeholder": "Подпись под изображением"},
                ]},
            },
        ],
    },
]


# (type, name) — bannières alimentées par le backend, sans champ éditable
_EXTERNAL_BANNERS = [
    ("promoBanner",   "Promo Banner"),
    ("travelBanner",  "Travel Banner"),
    ("newYearBanner", "New Year Banner"),
]

_EXTERNAL_DESCRIPTION = "Баннер с данными с бэка, без ручных настроек"


def contract_table() -> List[Dict[str, Any]]:
    """Retourne la table complète (contrats éditables + bannières externes), dans l'ordre d'affichage."""
    table = [dict(entry) for entry in _CONTRACT_TABLE]
    for block_type, name in _EXTERNAL_BANNERS:
        table.append({
            "type":        block_type,
            "name":        name,
            "description": _EXTERNAL_DESCRIPTION,
            "fields":      [],
        })
    return table
