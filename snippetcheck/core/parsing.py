"""Tree-sitter grammars for the supported snippet languages."""

from __future__ import annotations

from functools import lru_cache
from importlib import import_module
from typing import TYPE_CHECKING, Dict, Tuple

from tree_sitter import Language, Parser

from .errors import SnippetParseError

if TYPE_CHECKING:
    from tree_sitter import Tree


# language tag -> (grammar package, factory attribute)
GRAMMARS: Dict[str, Tuple[str, str]] = {
    "ts": ("tree_sitter_typescript", "language_typescript"),
    "tsx": ("tree_sitter_typescript", "language_tsx"),
    "js": ("tree_sitter_javascript", "language"),
    "jsx": ("tree_sitter_javascript", "language"),
}


@lru_cache(maxsize=None)
def load_language(language_tag: str) -> Language:
    """Return the Tree-sitter language used for ``language_tag``.

    ``ts`` uses the plain TypeScript grammar, ``tsx`` the JSX-enabled one;
    ``js`` and ``jsx`` share the JavaScript grammar, which accepts JSX.

    Raises:
        SnippetParseError: if the tag is unknown or the grammar package is missing
    """
    try:
        package, factory_name = GRAMMARS[language_tag]
    except KeyError as e:
        raise SnippetParseError(f"Unsupported snippet language: {language_tag}") from e
    try:
        module = import_module(package)
    except ModuleNotFoundError as e:
        raise SnippetParseError(f"Tree-sitter grammar package {package} is not installed") from e
    try:
        factory = getattr(module, factory_name)
    except AttributeError as e:
        raise SnippetParseError(f"Tree-sitter grammar package {package} has no {factory_name}()") from e
    return Language(factory())


def parse_snippet(language_tag: str, source: str) -> Tree:
    """Parse ``source`` with the grammar selected by ``language_tag``.

    Tree-sitter recovers from syntax errors instead of raising; callers that
    care inspect ``tree.root_node.has_error``.
    """
    parser = Parser(load_language(language_tag))
    try:
        return parser.parse(source.encode("utf-8"))
    except ValueError as e:
        raise SnippetParseError(f"Failed to parse {language_tag} snippet: {e}") from e
