"""Renderers HTML génériques (formulaires d'édition)."""
from .form import render_block_form, render_field

__all__ = ["render_block_form", "render_field"]
