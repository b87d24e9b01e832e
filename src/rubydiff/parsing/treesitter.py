"""Tree-sitter parsing of Ruby source into the structure node vocabulary.

Recognized declarations are lowered to their dedicated node types
(``ClassDecl``, ``MethodDecl``, ...).  Everything else becomes a generic
``Node`` keyed by the tree-sitter node type, with leaf text as value.
Comments are dropped, so comment and whitespace edits never show up as
body changes.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import tree_sitter

from rubydiff.core.errors import ParseError
from rubydiff.structure.nodes import (
    Call,
    ClassDecl,
    MethodDecl,
    ModuleDecl,
    Node,
    SingletonClass,
    SingletonMethodDecl,
    String,
    Symbol,
    SyntaxNode,
)

log = structlog.get_logger(__name__)

GRAMMAR_MODULE = "tree_sitter_ruby"

_SKIPPED_TYPES = frozenset({"comment", "uninterpreted"})

# Anonymous tokens that are optional in Ruby syntax (`def a; end`, `foo(1)`).
_OPTIONAL_TOKENS = frozenset({";", "(", ")", "then", "do"})


def _text(node: Any) -> str:
    return node.text.decode("utf-8") if node.text else ""


def _field(node: Any, name: str, *fallback_types: str) -> Any:
    """Child by field name, falling back to the first child of a given type."""
    child = node.child_by_field_name(name)
    if child is not None:
        return child
    for candidate in node.named_children:
        if candidate.type in fallback_types:
            return candidate
    return None


def _first_error(node: Any) -> Any:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


@dataclass
class RubyParser:
    """Parses Ruby source with tree-sitter.

    Usage::

        parser = RubyParser()
        tree = parser.parse_file(Path("lib/foo.rb"))
        model = StructureBuilder().build(tree)
    """

    strict: bool = False
    _parser: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        try:
            grammar = importlib.import_module(GRAMMAR_MODULE)
            language = tree_sitter.Language(grammar.language())
        except (ImportError, AttributeError) as err:
            raise ParseError.grammar_unavailable("ruby") from err
        self._parser = tree_sitter.Parser(language)

    def parse_file(self, path: Path) -> SyntaxNode:
        return self.parse(path.read_bytes(), path=str(path))

    def parse(self, source: bytes | str, path: str = "<string>") -> SyntaxNode:
        """Parse source text into a ``program`` node.

        Raises:
            ParseError: The source has syntax errors and ``strict`` is set.
        """
        if isinstance(source, str):
            source = source.encode("utf-8")
        tree = self._parser.parse(source)
        root = tree.root_node

        if root.has_error:
            error = _first_error(root) or root
            line, column = error.start_point
            if self.strict:
                raise ParseError.syntax_error(path, line + 1, column + 1)
            log.warning("syntax_error_recovered", path=path, line=line + 1, column=column + 1)

        result = _lower(root)
        log.debug("source_parsed", path=path, bytes=len(source))
        return result


def _lower(node: Any) -> SyntaxNode:
    lower = _LOWERERS.get(node.type, _lower_generic)
    return lower(node)


def _lower_optional(node: Any) -> SyntaxNode | None:
    return _lower(node) if node is not None else None


def _lower_children(node: Any) -> Iterator[SyntaxNode]:
    for child in node.children:
        if child.type in _SKIPPED_TYPES:
            continue
        if not child.is_named and child.type in _OPTIONAL_TOKENS:
            continue
        yield _lower(child)


def _lower_generic(node: Any) -> Node:
    if node.child_count == 0:
        # Anonymous tokens carry their text in the type (``+``, ``end``).
        return Node(node.type, value=_text(node) if node.is_named else None)
    return Node(node.type, tuple(_lower_children(node)))


def _name_of(node: Any) -> str | None:
    name = node.child_by_field_name("name")
    if name is None:
        return None
    return _text(name) or None


def _body_of(node: Any) -> SyntaxNode | None:
    return _lower_optional(_field(node, "body", "body_statement"))


def _lower_module(node: Any) -> ModuleDecl:
    return ModuleDecl(_name_of(node), _body_of(node))


def _lower_class(node: Any) -> ClassDecl:
    superclass = _field(node, "superclass", "superclass")
    return ClassDecl(_name_of(node), _lower_optional(superclass), _body_of(node))


def _method_body(node: Any) -> SyntaxNode:
    parameters = _field(node, "parameters", "method_parameters")
    return Node("method_body", (_lower_optional(parameters), _body_of(node)))


def _lower_method(node: Any) -> MethodDecl:
    return MethodDecl(_name_of(node), _method_body(node))


def _lower_singleton_method(node: Any) -> SingletonMethodDecl:
    receiver = _lower_optional(node.child_by_field_name("object"))
    return SingletonMethodDecl(receiver, _name_of(node), _method_body(node))


def _lower_singleton_class(node: Any) -> SingletonClass:
    receiver = _lower_optional(node.child_by_field_name("value"))
    return SingletonClass(receiver, _body_of(node))


def _lower_call(node: Any) -> SyntaxNode:
    method = node.child_by_field_name("method")
    if node.child_by_field_name("receiver") is not None or method is None:
        return _lower_generic(node)
    if method.type != "identifier":
        return _lower_generic(node)

    args: list[SyntaxNode] = []
    arguments = node.child_by_field_name("arguments")
    if arguments is not None:
        args.extend(_lower(arg) for arg in arguments.named_children if arg.type not in _SKIPPED_TYPES)
    block = node.child_by_field_name("block")
    if block is not None:
        args.append(_lower(block))
    return Call(_text(method), tuple(args))


def _lower_block(node: Any) -> Node:
    """``{ |x| ... }`` and ``do |x| ... end`` lower to the same ``block`` node."""
    parameters = _field(node, "parameters", "block_parameters")
    body = _field(node, "body", "block_body", "body_statement")
    lowered_body = Node("block_body", tuple(_lower_children(body))) if body is not None else None
    return Node("block", (_lower_optional(parameters), lowered_body))


def _literal_content(node: Any) -> str | None:
    """Concatenated content of a quoted literal, or None if it interpolates."""
    parts: list[str] = []
    for child in node.named_children:
        if child.type != "string_content":
            return None
        parts.append(_text(child))
    return "".join(parts)


def _lower_simple_symbol(node: Any) -> Symbol:
    return Symbol(_text(node).removeprefix(":"))


def _lower_delimited_symbol(node: Any) -> SyntaxNode:
    content = _literal_content(node)
    if content is None:
        return _lower_generic(node)
    return Symbol(content)


def _lower_string(node: Any) -> SyntaxNode:
    content = _literal_content(node)
    if content is None:
        return _lower_generic(node)
    return String(content)


_LOWERERS = {
    "module": _lower_module,
    "class": _lower_class,
    "method": _lower_method,
    "singleton_method": _lower_singleton_method,
    "singleton_class": _lower_singleton_class,
    "call": _lower_call,
    "simple_symbol": _lower_simple_symbol,
    "delimited_symbol": _lower_delimited_symbol,
    "block": _lower_block,
    "do_block": _lower_block,
    "string": _lower_string,
}
