"""Materialize shared files into worktrees"""
import os
import shutil
from pathlib import Path
from typing import List, Mapping, Union

from git_worktree_keeper.constants import (
    BINARY_SNIFF_BYTES,
    PLACEHOLDERS,
    SHARED_COPY_DIR,
    SHARED_DIR,
    SHARED_SYMLINK_DIR,
    TEMPLATE_SUFFIX,
)
from git_worktree_keeper.exceptions import SharedPathConflictError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.template import FileKind, TemplateVars
from git_worktree_keeper.services.display_service import DisplayService

logger = get_logger(__name__)

PathLike = Union[str, Path]


def is_template_file(name: str) -> bool:
    """A file is a template when its name carries the marker suffix."""
    return name.endswith(TEMPLATE_SUFFIX) and name != TEMPLATE_SUFFIX


def strip_template_suffix(name: str) -> str:
    if is_template_file(name):
        return name[: -len(TEMPLATE_SUFFIX)]
    return name


def is_binary_content(data: bytes) -> bool:
    """NUL byte within the first 512 bytes means binary."""
    return b"\x00" in data[:BINARY_SNIFF_BYTES]


def is_binary_file(path: PathLike) -> bool:
    with open(path, "rb") as f:
        return is_binary_content(f.read(BINARY_SNIFF_BYTES))


def classify_file(path: PathLike) -> FileKind:
    """Decide how a shared file is materialized.

    Only marked files are sniffed; a marked file with binary content is
    copied as-is.
    """
    if not is_template_file(Path(path).name):
        return FileKind.PLAIN
    if is_binary_file(path):
        return FileKind.BINARY
    return FileKind.TEMPLATE


def process_template(content: str, variables: Mapping[str, str]) -> str:
    """Replace every placeholder token with its value (literal, no patterns)."""
    for token, value in variables.items():
        content = content.replace(token, value)
    return content


def has_template_vars(content: str) -> bool:
    return any(token in content for token in PLACEHOLDERS)


class TemplateService:
    """Copies `shared/copy` and links `shared/symlink` into a worktree."""

    def __init__(self, project_root: PathLike, display: DisplayService, dry_run: bool = False):
        self.project_root = Path(project_root)
        self.display = display
        self.dry_run = dry_run

    @property
    def copy_dir(self) -> Path:
        return self.project_root / SHARED_DIR / SHARED_COPY_DIR

    @property
    def symlink_dir(self) -> Path:
        return self.project_root / SHARED_DIR / SHARED_SYMLINK_DIR

    def _relative(self, path: Path) -> str:
        try:
            return str(path.relative_to(self.project_root))
        except ValueError:
            return str(path)

    def apply(self, worktree_path: PathLike, branch: str) -> None:
        """Copy shared files and recreate shared symlinks for one worktree."""
        worktree_path = Path(worktree_path)
        variables = TemplateVars.for_worktree(str(worktree_path.resolve()), branch)
        self.apply_copy(worktree_path, variables)
        self.apply_symlinks(worktree_path)

    def apply_copy(self, worktree_path: PathLike, variables: TemplateVars) -> List[Path]:
        """Walk shared/copy and write every file into the worktree.

        Returns:
            Destination paths written (or that would be written in preview mode)
        """
        source_root = self.copy_dir
        if not source_root.is_dir():
            logger.debug(f"No {self._relative(source_root)} directory, nothing to copy")
            return []

        worktree_path = Path(worktree_path)
        mapping = variables.as_mapping()
        written = []

        for dirpath, dirnames, filenames in os.walk(source_root):
            dirnames.sort()
            for filename in sorted(filenames):
                source = Path(dirpath) / filename
                rel = source.relative_to(source_root)
                dest = worktree_path / rel.parent / strip_template_suffix(filename)

                if self.dry_run:
                    self.display.dry_run(f"copy {self._relative(source)} -> {self._relative(dest)}")
                    written.append(dest)
                    continue

                dest.parent.mkdir(parents=True, exist_ok=True)
                kind = classify_file(source)
                if kind is FileKind.TEMPLATE:
                    self._write_template(source, dest, mapping)
                else:
                    if kind is FileKind.BINARY:
                        logger.debug(f"{rel} is binary, copying without substitution")
                    shutil.copy2(source, dest)
                logger.debug(f"Copied {rel} ({kind.value})")
                written.append(dest)

        return written

    @staticmethod
    def _write_template(source: Path, dest: Path, mapping: Mapping[str, str]) -> None:
        # surrogateescape keeps undecodable bytes intact through the round trip
        content = source.read_bytes().decode("utf-8", errors="surrogateescape")
        if not has_template_vars(content):
            logger.debug(f"{source.name} has no placeholders")
        rendered = process_template(content, mapping)
        dest.write_bytes(rendered.encode("utf-8", errors="surrogateescape"))
        shutil.copymode(source, dest)

    def apply_symlinks(self, worktree_path: PathLike) -> List[Path]:
        """Point each top-level entry of shared/symlink at the shared copy."""
        source_root = self.symlink_dir
        if not source_root.is_dir():
            logger.debug(f"No {self._relative(source_root)} directory, nothing to link")
            return []

        worktree_path = Path(worktree_path)
        linked = []

        for entry in sorted(source_root.iterdir()):
            dest = worktree_path / entry.name
            target = entry.resolve()

            if self.dry_run:
                self.display.dry_run(f"symlink {self._relative(dest)} -> {self._relative(target)}")
                linked.append(dest)
                continue

            self._clear_link_target(dest)
            os.symlink(target, dest)
            logger.debug(f"Linked {entry.name} -> {target}")
            linked.append(dest)

        return linked

    def _clear_link_target(self, dest: Path) -> None:
        """Remove whatever sits at `dest` so a symlink can take its place.

        An empty directory is removed; a non-empty one is left alone.
        """
        if dest.is_dir() and not dest.is_symlink():
            try:
                os.rmdir(dest)
            except OSError:
                raise SharedPathConflictError(self._relative(dest))
            return
        try:
            os.remove(dest)
        except FileNotFoundError:
            pass
