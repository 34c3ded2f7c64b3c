"""
Tree-sitter based extraction of module references and exported symbols.

Source text is parsed into a syntax tree and walked structurally, so a
specifier that only appears inside a comment or a string is never taken for a
dependency.

Recognized references:
  - `import x from './a'`, `import './a'`, `import type { T } from './a'`
  - `export { x } from './a'`, `export * from './a'`
  - `import('./a')` with a plain string literal argument
  - `require('./a')` with a plain string literal argument

Recognized exported symbols:
  - `export function f() {}`      -> function:f
  - `export class C {}`           -> class:C
  - `export const a = 1, b = 2`   -> variable:a, variable:b
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from tree_sitter import Node, Parser, Tree
from tree_sitter_language_pack import get_parser as get_ts_parser

from graph.model import Symbol, SymbolKind
from .exceptions import ParseError

logger = logging.getLogger(__name__)


# Grammar used for each source suffix; suffixes not listed have no
# module syntax (e.g. ".json") and analyze to an empty result.
SUFFIX_TO_LANG = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}


class NodeCategory(Enum):
    """Syntax node categories the analyzer reacts to."""

    IMPORT_DECL = "import-decl"
    EXPORT_DECL = "export-decl"
    CALL_EXPR = "call-expr"
    LITERAL = "literal"
    FUNCTION_DECL = "function-decl"
    CLASS_DECL = "class-decl"
    VARIABLE_DECL = "variable-decl"


NODE_CATEGORIES: Dict[str, NodeCategory] = {
    "import_statement": NodeCategory.IMPORT_DECL,
    "export_statement": NodeCategory.EXPORT_DECL,
    "call_expression": NodeCategory.CALL_EXPR,
    "string": NodeCategory.LITERAL,
    "function_declaration": NodeCategory.FUNCTION_DECL,
    "generator_function_declaration": NodeCategory.FUNCTION_DECL,
    "function_signature": NodeCategory.FUNCTION_DECL,
    "class_declaration": NodeCategory.CLASS_DECL,
    "abstract_class_declaration": NodeCategory.CLASS_DECL,
    "lexical_declaration": NodeCategory.VARIABLE_DECL,
    "variable_declaration": NodeCategory.VARIABLE_DECL,
}

_DECLARATION_KINDS = {
    NodeCategory.FUNCTION_DECL: SymbolKind.FUNCTION,
    NodeCategory.CLASS_DECL: SymbolKind.CLASS,
}

# `export default class Foo {}` may surface as a named expression value.
_DEFAULT_VALUE_KINDS = {
    "class": SymbolKind.CLASS,
    "function": SymbolKind.FUNCTION,
    "function_expression": SymbolKind.FUNCTION,
    "generator_function": SymbolKind.FUNCTION,
}


@dataclass
class SourceAnalysis:
    """Raw module specifiers and exported symbols of one file."""

    references: List[str] = field(default_factory=list)
    symbols: List[Symbol] = field(default_factory=list)


_parsers = threading.local()


def _get_parser(language: str) -> Parser:
    # tree-sitter parsers are not safe to share between threads
    cache = getattr(_parsers, "cache", None)
    if cache is None:
        cache = _parsers.cache = {}
    if language not in cache:
        cache[language] = get_ts_parser(language)
    return cache[language]


def language_for(path: Path) -> Optional[str]:
    """Return the tree-sitter grammar name for ``path``, or None."""
    return SUFFIX_TO_LANG.get(path.suffix.lower())


def parse_source(content: bytes, language: str, file_path: Optional[str] = None) -> Tree:
    """
    Parse source bytes into a tree-sitter syntax tree.

    Raises:
        ParseError: If the grammar cannot be loaded or parsing fails.
    """
    try:
        return _get_parser(language).parse(content)
    except Exception as e:
        raise ParseError(f"Failed to parse source: {e}", language=language, file_path=file_path) from e


def analyze(path: Path, text: str) -> SourceAnalysis:
    """
    Extract module references and exported symbols from one file's text.

    Args:
        path: The file the text belongs to; its suffix selects the grammar.
        text: Decoded file contents.

    Returns:
        SourceAnalysis with references in source order (duplicates kept)
        and symbols in declaration order.

    Raises:
        ParseError: If the text cannot be parsed.
    """
    language = language_for(path)
    if language is None:
        return SourceAnalysis()

    content = text.encode("utf-8")
    tree = parse_source(content, language, str(path))
    result = SourceAnalysis()
    _walk(tree.root_node, content, result)
    return result


def analyze_file(path: Path) -> SourceAnalysis:
    """Read ``path`` as UTF-8 and analyze it."""
    return analyze(path, path.read_text(encoding="utf-8"))


def _walk(root: Node, content: bytes, result: SourceAnalysis) -> None:
    # Explicit stack keeps deeply nested files clear of the recursion limit.
    stack = [root]
    while stack:
        node = stack.pop()
        category = NODE_CATEGORIES.get(node.type)

        if category is NodeCategory.IMPORT_DECL:
            specifier = _literal_value(node.child_by_field_name("source"), content)
            if specifier is not None:
                result.references.append(specifier)
        elif category is NodeCategory.EXPORT_DECL:
            _visit_export(node, content, result)
        elif category is NodeCategory.CALL_EXPR:
            specifier = _call_specifier(node, content)
            if specifier is not None:
                result.references.append(specifier)

        stack.extend(reversed(node.children))


def _visit_export(node: Node, content: bytes, result: SourceAnalysis) -> None:
    """Handle `export ... from '...'` and exported declarations."""
    specifier = _literal_value(node.child_by_field_name("source"), content)
    if specifier is not None:
        result.references.append(specifier)

    declaration = node.child_by_field_name("declaration")
    if declaration is None:
        value = node.child_by_field_name("value")
        if value is not None and value.type in _DEFAULT_VALUE_KINDS:
            name = value.child_by_field_name("name")
            if name is not None:
                result.symbols.append(Symbol(_DEFAULT_VALUE_KINDS[value.type], _text(name, content)))
        return
    # `export declare const x: number;`
    if declaration.type == "ambient_declaration":
        declaration = next(
            (c for c in declaration.named_children if c.type in NODE_CATEGORIES),
            None,
        )
        if declaration is None:
            return

    category = NODE_CATEGORIES.get(declaration.type)
    if category in _DECLARATION_KINDS:
        name = declaration.child_by_field_name("name")
        if name is not None:
            _add_symbol(result, Symbol(_DECLARATION_KINDS[category], _text(name, content)))
    elif category is NodeCategory.VARIABLE_DECL:
        for declarator in declaration.named_children:
            if declarator.type != "variable_declarator":
                continue
            name = declarator.child_by_field_name("name")
            if name is not None and name.type == "identifier":
                result.symbols.append(Symbol(SymbolKind.VARIABLE, _text(name, content)))


def _add_symbol(result: SourceAnalysis, symbol: Symbol) -> None:
    # Overload signatures repeat the name of the implementation.
    if symbol not in result.symbols:
        result.symbols.append(symbol)


def _call_specifier(node: Node, content: bytes) -> Optional[str]:
    """Return the specifier of an `import('...')` or `require('...')` call."""
    function = node.child_by_field_name("function")
    if function is None:
        return None
    is_dynamic_import = function.type == "import"
    is_require = function.type == "identifier" and _text(function, content) == "require"
    if not (is_dynamic_import or is_require):
        return None

    arguments = node.child_by_field_name("arguments")
    if arguments is None or not arguments.named_children:
        return None
    return _literal_value(arguments.named_children[0], content)


def _literal_value(node: Optional[Node], content: bytes) -> Optional[str]:
    """Return the value of a plain string literal node, or None."""
    if node is None or NODE_CATEGORIES.get(node.type) is not NodeCategory.LITERAL:
        return None
    raw = _text(node, content)
    if len(raw) < 2:
        return None
    return raw[1:-1]


def _text(node: Node, content: bytes) -> str:
    return content[node.start_byte:node.end_byte].decode("utf-8", errors="replace")
