"""Document tree access for docsnap."""

from .tree import DocumentTree, class_string, is_text_node, parse_html, text_content, word_count

__all__ = [
    "DocumentTree",
    "class_string",
    "is_text_node",
    "parse_html",
    "text_content",
    "word_count",
]
