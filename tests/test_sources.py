"""Tests for building models from files, directories and git revisions."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pygit2
import pytest

pytest.importorskip("tree_sitter_ruby")

from rubydiff.config.models import RubyDiffConfig, SourcesConfig  # noqa: E402
from rubydiff.core.errors import ErrorCode, ParseError, SourceError  # noqa: E402
from rubydiff.diff.models import ChangeKind  # noqa: E402
from rubydiff.sources import (  # noqa: E402
    collect_files,
    model_from_paths,
    model_from_revision,
)


def _commit(repo: pygit2.Repository, message: str) -> None:
    repo.index.add_all()
    repo.index.write()
    tree = repo.index.write_tree()
    sig = pygit2.Signature("Test", "test@test.com")
    parents = [] if repo.head_is_unborn else [repo.head.target]
    repo.create_commit("HEAD", sig, sig, message, tree, parents)


@pytest.fixture
def ruby_tree(tmp_path: Path) -> Path:
    root = tmp_path / "lib"
    (root / "shop").mkdir(parents=True)
    (root / "shop" / "cart.rb").write_text("module Shop\n  class Cart\n    def total; end\n  end\nend\n")
    (root / "shop" / "item.rb").write_text("module Shop\n  class Item\n    attr_reader :price\n  end\nend\n")
    (root / "README.md").write_text("# not ruby\n")
    return root


@pytest.fixture
def git_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Repository with two commits: HEAD~1 has Cart#total, HEAD adds Cart#clear."""
    repo_path = tmp_path / "repo"
    (repo_path / "lib").mkdir(parents=True)
    repo = pygit2.init_repository(str(repo_path))

    (repo_path / "lib" / "cart.rb").write_text("class Cart\n  def total; end\nend\n")
    (repo_path / "other.rb").write_text("class Other; end\n")
    _commit(repo, "Initial commit")

    (repo_path / "lib" / "cart.rb").write_text("class Cart\n  def total; end\n  def clear; end\nend\n")
    _commit(repo, "Add clear")

    yield repo_path


class TestCollectFiles:
    def test_directory_sorted_and_filtered(self, ruby_tree: Path) -> None:
        files = collect_files(ruby_tree, [".rb"])
        assert [f.name for f in files] == ["cart.rb", "item.rb"]

    def test_single_file(self, ruby_tree: Path) -> None:
        file = ruby_tree / "README.md"
        assert collect_files(file, [".rb"]) == [file]

    def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(SourceError) as exc_info:
            collect_files(tmp_path / "missing", [".rb"])
        assert exc_info.value.code == ErrorCode.SOURCE_NOT_FOUND


class TestModelFromPaths:
    def test_directory_is_one_model(self, ruby_tree: Path) -> None:
        model = model_from_paths([ruby_tree])
        assert list(model.code_objects) == [
            "Shop",
            "Shop::Cart",
            "Shop::Cart#total",
            "Shop::Item",
            "Shop::Item {reader price}",
        ]
        assert list(model.root_objects) == ["Shop"]

    def test_strict_parse_from_config(self, tmp_path: Path) -> None:
        broken = tmp_path / "broken.rb"
        broken.write_text("class Foo\n  def bar(\nend\n")
        config = RubyDiffConfig(sources=SourcesConfig(strict_parse=True))
        with pytest.raises(ParseError):
            model_from_paths([broken], config=config)

    def test_diff_two_trees(self, ruby_tree: Path, tmp_path: Path) -> None:
        new_root = tmp_path / "new"
        new_root.mkdir()
        (new_root / "cart.rb").write_text("module Shop\n  class Cart\n    def total; end\n  end\nend\n")

        changes = model_from_paths([ruby_tree]).diff(model_from_paths([new_root]))

        assert changes["Shop"].kind is ChangeKind.MODIFIED
        assert changes["Shop"].children["Shop::Item"].kind is ChangeKind.REMOVED


class TestModelFromRevision:
    def test_reads_revision(self, git_repo: Path) -> None:
        model = model_from_revision(git_repo, "HEAD~1")
        assert list(model.code_objects) == ["Cart", "Cart#total", "Other"]
        assert model.name == "HEAD~1"

    def test_diff_between_revisions(self, git_repo: Path) -> None:
        before = model_from_revision(git_repo, "HEAD~1")
        after = model_from_revision(git_repo, "HEAD")
        nested = before.diff(after)["Cart"].children
        assert {c.signature: c.kind for c in nested} == {
            "Cart#total": ChangeKind.UNCHANGED,
            "Cart#clear": ChangeKind.ADDED,
        }

    def test_pathspecs(self, git_repo: Path) -> None:
        model = model_from_revision(git_repo, "HEAD", pathspecs=["lib"])
        assert "Other" not in model.code_objects
        assert "Cart" in model.code_objects

    def test_unknown_revision(self, git_repo: Path) -> None:
        with pytest.raises(SourceError) as exc_info:
            model_from_revision(git_repo, "no-such-ref")
        assert exc_info.value.code == ErrorCode.SOURCE_REVISION_NOT_FOUND

    def test_not_a_repository(self, tmp_path: Path) -> None:
        with pytest.raises(SourceError) as exc_info:
            model_from_revision(tmp_path, "HEAD")
        assert exc_info.value.code == ErrorCode.SOURCE_NOT_FOUND
