"""Mapping of source files to output files and public routes."""

from dataclasses import dataclass
from pathlib import Path, PurePath, PurePosixPath
from typing import Optional

from .errors import PathError


@dataclass(frozen=True)
class Location:
    """Where a source file comes from and where its output goes."""

    source_path: PurePath
    source_child_path: PurePath
    target_path: PurePath
    target_child_path: PurePath
    target_file_stem: str
    route: str
    short_route: str

    def to_context(self):
        return {
            'stem': self.target_file_stem,
            'path': PurePosixPath(*self.target_child_path.parts).as_posix(),
            'route': self.route,
            'short_route': self.short_route,
        }


def normalize_ext(ext):
    """Strip a leading dot, so 'html' and '.html' mean the same extension."""
    return (ext or '').strip().lstrip('.')


def resolve(source_path, source_root, output_root, target_ext, custom_stem: Optional[str] = None) -> Location:
    """
    Compute the Location of a source file.

    The output child path is the source child path with its stem optionally
    replaced by ``custom_stem`` and its extension replaced by ``target_ext``.
    No filesystem access is made.

    Raises:
        PathError: If ``source_path`` is not inside ``source_root``.
    """
    source_path = Path(source_path)
    source_root = Path(source_root)
    output_root = Path(output_root)

    try:
        source_child_path = source_path.relative_to(source_root)
    except ValueError as e:
        raise PathError(f"'{source_path}' is not inside the source directory '{source_root}'", stage='route') from e

    if not source_child_path.name:
        raise PathError(f"'{source_path}' does not name a file below '{source_root}'", stage='route')

    stem = custom_stem if custom_stem is not None else source_child_path.stem
    ext = normalize_ext(target_ext)
    file_name = f"{stem}.{ext}" if ext else stem

    target_child_path = source_child_path.with_name(file_name)
    target_path = output_root / target_child_path

    route = '/' + PurePosixPath(*target_child_path.parts).as_posix()
    short_route = route[:-(len(ext) + 1)] if ext else route

    return Location(
        source_path=source_path,
        source_child_path=source_child_path,
        target_path=target_path,
        target_child_path=target_child_path,
        target_file_stem=stem,
        route=route,
        short_route=short_route,
    )
