from .html import render_block, render_editor, render_page

__all__ = ["render_block", "render_editor", "render_page"]
