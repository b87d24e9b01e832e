"""Build structure models from files, directories, or a git revision.

Every Ruby file of a source version is fed into a single build, so a
class spread across several files is one object in the model.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path, PurePosixPath

import pygit2
import structlog

from rubydiff.config.models import RubyDiffConfig
from rubydiff.core.errors import SourceError
from rubydiff.parsing import RubyParser
from rubydiff.structure import StructureBuilder, StructureModel

log = structlog.get_logger(__name__)


def collect_files(path: Path, extensions: Iterable[str]) -> list[Path]:
    """A file as-is, or every matching file below a directory in path order."""
    if path.is_file():
        return [path]
    if not path.is_dir():
        raise SourceError.not_found(str(path))
    suffixes = set(extensions)
    return sorted(p for p in path.rglob("*") if p.is_file() and p.suffix in suffixes)


def model_from_paths(
    paths: Sequence[Path],
    *,
    config: RubyDiffConfig | None = None,
    name: str | None = None,
) -> StructureModel:
    """Parse and build one model from files and directories.

    Raises:
        SourceError: A path does not exist.
        ParseError: A file has syntax errors and strict parsing is enabled.
    """
    config = config or RubyDiffConfig()
    parser = RubyParser(strict=config.sources.strict_parse)
    builder = StructureBuilder.from_config(config.structure)

    files: list[Path] = []
    for path in paths:
        files.extend(collect_files(path, config.sources.extensions))

    log.info("sources_collected", files=len(files), model=name)
    trees = (parser.parse_file(file) for file in files)
    return builder.build_many(trees, name=name or ", ".join(str(p) for p in paths))


def model_from_revision(
    repo_path: Path,
    revision: str,
    *,
    config: RubyDiffConfig | None = None,
    pathspecs: Sequence[str] = (),
) -> StructureModel:
    """Parse and build one model from the Ruby blobs of a git revision.

    Args:
        repo_path: Repository working directory (or .git directory).
        revision: Anything ``git rev-parse`` accepts (``HEAD~1``, a tag, a SHA).
        pathspecs: Optional path prefixes restricting which blobs are read.

    Raises:
        SourceError: Not a repository, or the revision does not resolve.
    """
    config = config or RubyDiffConfig()
    parser = RubyParser(strict=config.sources.strict_parse)
    builder = StructureBuilder.from_config(config.structure)

    try:
        repo = pygit2.Repository(str(repo_path))
    except pygit2.GitError as e:
        raise SourceError.not_found(str(repo_path)) from e

    try:
        commit = repo.revparse_single(revision).peel(pygit2.Commit)
    except (KeyError, ValueError, pygit2.GitError) as e:
        raise SourceError.revision_not_found(str(repo_path), revision) from e

    suffixes = set(config.sources.extensions)
    blobs = [
        (path, data)
        for path, data in _iter_blobs(repo, commit.tree, PurePosixPath())
        if path.suffix in suffixes and _matches(path, pathspecs)
    ]
    log.info("revision_collected", revision=revision, files=len(blobs))

    trees = (parser.parse(data, path=f"{revision}:{path}") for path, data in blobs)
    return builder.build_many(trees, name=revision)


def _iter_blobs(
    repo: pygit2.Repository,
    tree: pygit2.Tree,
    prefix: PurePosixPath,
) -> Iterator[tuple[PurePosixPath, bytes]]:
    for entry in sorted(tree, key=lambda e: e.name or ""):
        obj = repo[entry.id]
        path = prefix / (entry.name or "")
        if isinstance(obj, pygit2.Tree):
            yield from _iter_blobs(repo, obj, path)
        elif isinstance(obj, pygit2.Blob):
            yield path, bytes(obj.data)


def _matches(path: PurePosixPath, pathspecs: Sequence[str]) -> bool:
    if not pathspecs:
        return True
    return any(path == PurePosixPath(spec) or PurePosixPath(spec) in path.parents for spec in pathspecs)
