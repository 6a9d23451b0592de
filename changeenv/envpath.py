"""Rewrite a path so it points into a different environment tree."""

from __future__ import annotations

import os
from types import ModuleType
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from changeenv.exceptions import InvalidArgumentError, NoEnvironmentSegmentError


class PathParts(NamedTuple):
    """A normalized path split into volume, root flag and segments."""

    volume: str
    is_absolute: bool
    segments: Tuple[str, ...]


def _separators(flavour: ModuleType) -> str:
    return flavour.sep + (flavour.altsep or "")


def split_path(path: str, *, flavour: ModuleType = os.path) -> PathParts:
    """Decompose *path* after lexical normalization.

    ``flavour`` is the path module (``posixpath`` or ``ntpath``) whose rules
    apply; it defaults to the host's ``os.path``.
    """

    normalized = flavour.normpath(path)
    volume, rest = flavour.splitdrive(normalized)
    if not rest:
        return PathParts(volume, False, ())

    separators = _separators(flavour)
    is_absolute = rest[0] in separators
    stripped = rest.lstrip(separators)
    if not stripped:
        return PathParts(volume, is_absolute, ())

    if flavour.altsep:
        stripped = stripped.replace(flavour.altsep, flavour.sep)
    segments = tuple(part for part in stripped.split(flavour.sep) if part)
    return PathParts(volume, is_absolute, segments)


def assemble_path(parts: PathParts, *, flavour: ModuleType = os.path) -> str:
    """Join *parts* back into a path string (inverse of :func:`split_path`)."""

    joined = flavour.sep.join(parts.segments)
    if parts.is_absolute and joined:
        joined = flavour.sep + joined
    joined = parts.volume + joined
    if not joined:
        return flavour.sep
    if not parts.segments and parts.volume:
        return parts.volume + flavour.sep
    return joined


def find_environment_index(
    segments: Sequence[str],
    target_env: str,
    known_envs: Iterable[str],
) -> Optional[int]:
    """Return the index of the first segment naming an environment.

    A segment matches when it equals *target_env* or any of *known_envs*,
    ignoring case. Substrings never match.
    """

    candidates = {name.lower() for name in known_envs}
    candidates.add(target_env.lower())
    for index, segment in enumerate(segments):
        if segment.lower() in candidates:
            return index
    return None


def switch(
    from_path: str,
    target_env: str,
    known_envs: Iterable[str],
    *,
    flavour: ModuleType = os.path,
) -> str:
    """Return the equivalent of *from_path* inside the *target_env* tree.

    The left-most segment naming an environment is replaced by the trimmed
    *target_env*, spelled exactly as given. Every other segment, the volume
    prefix and the absolute/relative form of the path are preserved. The
    filesystem is never consulted, so the result need not exist.

    Raises:
        InvalidArgumentError: If *target_env* is blank or *from_path* is empty.
        NoEnvironmentSegmentError: If no segment names an environment.
    """

    target_env = target_env.strip()
    if not target_env:
        raise InvalidArgumentError("target environment must not be empty")
    if not from_path:
        raise InvalidArgumentError("current path must not be empty")

    parts = split_path(from_path, flavour=flavour)
    if not parts.segments:
        raise NoEnvironmentSegmentError(from_path)

    index = find_environment_index(parts.segments, target_env, known_envs)
    if index is None:
        raise NoEnvironmentSegmentError(from_path)

    segments: List[str] = list(parts.segments)
    segments[index] = target_env
    return assemble_path(parts._replace(segments=tuple(segments)), flavour=flavour)


__all__ = [
    "PathParts",
    "assemble_path",
    "find_environment_index",
    "split_path",
    "switch",
]
