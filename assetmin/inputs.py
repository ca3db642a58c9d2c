"""
Input shapes accepted by a minify task and their resolution into jobs.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import glob
import logging
import os
from typing import List, Mapping, Optional, Sequence, Tuple, Union

from assetmin.types import AssetType

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]
MappingEntry = Union[PathLike, Tuple[PathLike, PathLike]]


@dataclass
class Job:
    """One source -> destination minification unit."""
    source: Optional[str] = None
    destination: Optional[str] = None
    asset_type: Optional[AssetType] = None
    text: Optional[str] = None
    explicit: bool = False  # destination given as a named entry

    @property
    def label(self) -> str:
        if self.source is not None:
            return self.source
        return "<text>"


@dataclass
class FromMapping:
    """Explicit files: a dict of source -> destination or a list of sources and pairs."""
    entries: Union[Mapping[PathLike, PathLike], Sequence[MappingEntry]] = field(default_factory=list)


@dataclass
class FromPattern:
    """A glob pattern; when nothing matches the pattern is treated as source text."""
    pattern: str


@dataclass
class FromText:
    text: str


TaskInput = Union[FromMapping, FromPattern, FromText]


class GlobService(ABC):
    @abstractmethod
    def match(self, pattern: str) -> Optional[List[str]]:
        """Return the matched paths in order, or None when nothing matches."""
        pass


class FileGlob(GlobService):
    """Filesystem glob with ``**`` support."""

    def match(self, pattern: str) -> Optional[List[str]]:
        try:
            matches = sorted(
                path for path in glob.glob(pattern, recursive=True) if os.path.isfile(path)
            )
        except (ValueError, OSError) as e:
            logger.debug(f"Pattern could not be globbed, treating as text: {str(e)}")
            return None
        return matches or None


def _jobs_from_mapping(entries) -> List[Job]:
    jobs = []

    if isinstance(entries, Mapping):
        for source, destination in entries.items():
            jobs.append(
                Job(source=os.fspath(source), destination=os.fspath(destination), explicit=True)
            )
        return jobs

    for entry in entries:
        if isinstance(entry, tuple):
            source, destination = entry
            jobs.append(
                Job(source=os.fspath(source), destination=os.fspath(destination), explicit=True)
            )
        else:
            jobs.append(Job(source=os.fspath(entry)))
    return jobs


def resolve_input(task_input: TaskInput, glob_service: Optional[GlobService] = None) -> List[Job]:
    """
    Normalize a task input into an ordered list of jobs.

    Args:
        task_input: One of FromMapping, FromPattern or FromText
        glob_service: Pattern matcher, defaults to FileGlob

    Returns:
        List[Job]: Jobs in input order
    """
    if isinstance(task_input, FromMapping):
        return _jobs_from_mapping(task_input.entries)

    if isinstance(task_input, FromPattern):
        matcher = glob_service or FileGlob()
        files = matcher.match(task_input.pattern)
        if files:
            logger.debug(f"Pattern {task_input.pattern!r} matched {len(files)} file(s)")
            return [Job(source=os.fspath(path)) for path in files]
        # no match, handle the input as text
        return [Job(text=str(task_input.pattern))]

    if isinstance(task_input, FromText):
        return [Job(text=str(task_input.text))]

    raise TypeError(f"Unsupported task input: {type(task_input).__name__}")
