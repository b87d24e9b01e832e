"""Tests for tree-sitter lowering of Ruby source."""

from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("tree_sitter_ruby")

from rubydiff.core.errors import ErrorCode, ParseError  # noqa: E402
from rubydiff.diff.models import ChangeKind  # noqa: E402
from rubydiff.parsing import RubyParser  # noqa: E402
from rubydiff.structure import StructureBuilder, StructureModel  # noqa: E402
from rubydiff.structure.nodes import (  # noqa: E402
    Call,
    ClassDecl,
    MethodDecl,
    ModuleDecl,
    SingletonClass,
    SingletonMethodDecl,
    String,
    Symbol,
    iter_children,
)


@pytest.fixture(scope="module")
def parser() -> RubyParser:
    return RubyParser()


def _model(parser: RubyParser, source: str) -> StructureModel:
    return StructureBuilder().build(parser.parse(source))


def _find(tree: object, node_type: type) -> list[object]:
    found = []
    stack = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, node_type):
            found.append(node)
        stack.extend(reversed(list(iter_children(node))))  # type: ignore[arg-type]
    return found


class TestLowering:
    def test_declarations(self, parser: RubyParser) -> None:
        tree = parser.parse(
            """
            module Outer
              class Inner < Base
                def run(x)
                  x + 1
                end

                def self.build; end

                class << self
                  def create; end
                end
              end
            end
            """
        )
        assert [m.name for m in _find(tree, ModuleDecl)] == ["Outer"]
        classes = _find(tree, ClassDecl)
        assert [c.name for c in classes] == ["Inner"]
        assert classes[0].superclass is not None
        assert [m.name for m in _find(tree, MethodDecl)] == ["run", "create"]
        assert [m.name for m in _find(tree, SingletonMethodDecl)] == ["build"]
        assert len(_find(tree, SingletonClass)) == 1

    def test_receiverless_call_arguments(self, parser: RubyParser) -> None:
        tree = parser.parse('attr_reader :name, 1, :"computed", "label"')
        calls = _find(tree, Call)
        assert [c.name for c in calls] == ["attr_reader"]
        args = calls[0].args
        assert args[0] == Symbol("name")
        assert args[2] == Symbol("computed")
        assert args[3] == String("label")
        assert not isinstance(args[1], Symbol | String)

    def test_interpolated_symbol_is_not_literal(self, parser: RubyParser) -> None:
        tree = parser.parse('attr_reader :"x_#{suffix}"')
        (call,) = _find(tree, Call)
        assert not isinstance(call.args[0], Symbol)

    def test_call_with_receiver_is_generic(self, parser: RubyParser) -> None:
        tree = parser.parse("self.attr_reader :name")
        assert _find(tree, Call) == []

    def test_scoped_class_name(self, parser: RubyParser) -> None:
        (cls,) = _find(parser.parse("class A::B; end"), ClassDecl)
        assert cls.name == "A::B"


class TestStructureFromSource:
    def test_signatures(self, parser: RubyParser) -> None:
        model = _model(
            parser,
            """
            module Shop
              class Cart
                attr_accessor :items
                def total; end
                def self.empty; end
              end
            end
            """,
        )
        assert list(model.code_objects) == [
            "Shop",
            "Shop::Cart",
            "Shop::Cart {accessor items}",
            "Shop::Cart#total",
            "Shop::Cart.empty",
        ]

    def test_comments_and_whitespace_ignored(self, parser: RubyParser) -> None:
        before = _model(parser, "class Foo\n  def bar(a)\n    a + 1\n  end\nend\n")
        after = _model(
            parser,
            "# The Foo class\nclass Foo\n\n  # adds one\n  def bar( a )\n      a +   1 # inc\n  end\nend\n",
        )
        changes = before.diff(after)
        assert [c.kind for c in changes] == [ChangeKind.UNCHANGED]

    def test_semicolon_form_equal_to_multiline(self, parser: RubyParser) -> None:
        before = _model(parser, "class Foo; def bar; end; end")
        after = _model(parser, "class Foo\n  def bar\n  end\nend\n")
        assert not before.diff(after).has_changes

    def test_body_edit_is_modified(self, parser: RubyParser) -> None:
        before = _model(parser, "class Foo\n  def bar\n    1\n  end\nend\n")
        after = _model(parser, "class Foo\n  def bar\n    2\n  end\nend\n")
        changes = before.diff(after)
        assert changes["Foo"].kind is ChangeKind.MODIFIED
        assert changes["Foo"].children["Foo#bar"].kind is ChangeKind.MODIFIED

    def test_quoted_symbol_names_accessor(self, parser: RubyParser) -> None:
        model = _model(parser, 'class Foo\n  attr_reader :name, 1, :"computed"\nend\n')
        assert list(model.code_objects) == ["Foo", "Foo {reader name}", "Foo {reader computed}"]

    @pytest.mark.parametrize(
        ("before_source", "after_source"),
        [
            pytest.param(
                "def bar\n  items.each do |i| p i end\nend\n",
                "def bar\n  items.each { |i| p i }\nend\n",
                id="do-block-vs-braces",
            ),
            pytest.param(
                "def bar(a)\n  puts(a)\nend\n",
                "def bar(a)\n  puts a\nend\n",
                id="parentheses",
            ),
            pytest.param(
                "def bar\n  if ok then 1 end\nend\n",
                "def bar\n  if ok\n    1\n  end\nend\n",
                id="then",
            ),
            pytest.param(
                "def bar\n  puts 'hi'\nend\n",
                'def bar\n  puts "hi"\nend\n',
                id="quote-style",
            ),
            pytest.param(
                "def bar\n  run { |x| x }\nend\n",
                "def bar\n  # runs\n  run { |x|\n    x # same\n  }\nend\n",
                id="comments-in-block",
            ),
        ],
    )
    def test_formatting_variants_are_unchanged(
        self,
        parser: RubyParser,
        before_source: str,
        after_source: str,
    ) -> None:
        before = _model(parser, f"class Foo\n{before_source}end\n")
        after = _model(parser, f"class Foo\n{after_source}end\n")
        assert not before.diff(after).has_changes

    def test_block_body_edit_is_modified(self, parser: RubyParser) -> None:
        before = _model(parser, "class Foo\n  def bar\n    items.each { |i| p i }\n  end\nend\n")
        after = _model(parser, "class Foo\n  def bar\n    items.each do |i| p i + 1 end\n  end\nend\n")
        assert before.diff(after)["Foo"].children["Foo#bar"].kind is ChangeKind.MODIFIED

    def test_accessor_added(self, parser: RubyParser) -> None:
        before = _model(parser, "class Foo\n  def bar; end\nend\n")
        after = _model(parser, "class Foo\n  def bar; end\n  attr_accessor :baz\nend\n")
        nested = before.diff(after)["Foo"].children
        assert {c.signature: c.kind for c in nested} == {
            "Foo#bar": ChangeKind.UNCHANGED,
            "Foo {accessor baz}": ChangeKind.ADDED,
        }


class TestErrors:
    def test_recovers_by_default(self, parser: RubyParser) -> None:
        tree = parser.parse("class Foo\n  def bar(\nend\n")
        assert tree is not None

    def test_strict_raises(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            RubyParser(strict=True).parse("class Foo\n  def bar(\nend\n", path="broken.rb")
        assert exc_info.value.code == ErrorCode.PARSE_SYNTAX_ERROR
        assert exc_info.value.details["path"] == "broken.rb"

    def test_parse_file(self, parser: RubyParser, tmp_path: Path) -> None:
        source = tmp_path / "foo.rb"
        source.write_text("class Foo; end\n")
        assert [c.name for c in _find(parser.parse_file(source), ClassDecl)] == ["Foo"]
