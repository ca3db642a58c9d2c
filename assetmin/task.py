"""
Minify task: resolves its input into jobs and writes minified CSS/JS.

Example:
    result = (
        MinifyTask(FromPattern("web/assets/*.css"))
        .to("web/dist")
        .run()
    )
"""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
import logging
import os
from typing import Dict, List, Optional, Union

from assetmin.backends import MinifierBackend, default_backends, minify
from assetmin.config import JsOptions
from assetmin.destinations import map_destinations
from assetmin.errors import (
    ErrorKind,
    MinifyError,
    ReadFailedError,
    UnsupportedTypeError,
    attach_job,
)
from assetmin.inputs import GlobService, Job, TaskInput, resolve_input
from assetmin.metrics import add_bytes_saved, increment_file_minified
from assetmin.types import AssetType, classify, get_extension
from assetmin.utils.formatting import format_bytes
from assetmin.writer import DEFAULT_PART_SUFFIX, atomic_write

logger = logging.getLogger(__name__)


def reduction_percent(size_before: int, size_after: int) -> Decimal:
    """Percentage of bytes removed, rounded half-up to one decimal place."""
    if size_before == 0:
        return Decimal(0)
    value = Decimal(100) - (Decimal(size_after) * 100 / Decimal(size_before))
    return value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


@dataclass
class JobOutcome:
    """Sizes recorded for one written file"""
    destination: str
    asset_type: AssetType
    size_before: int
    size_after: int
    reduction_percent: Decimal
    source: Optional[str] = None

    @property
    def bytes_saved(self) -> int:
        return self.size_before - self.size_after


@dataclass
class JobFailure:
    """First failure of a batch"""
    job: Optional[Job]
    kind: ErrorKind
    message: str


@dataclass
class BatchResult:
    outcomes: List[JobOutcome] = field(default_factory=list)
    failure: Optional[JobFailure] = None

    @property
    def success(self) -> bool:
        return self.failure is None

    @property
    def files_processed(self) -> int:
        return len(self.outcomes)

    @property
    def message(self) -> str:
        if self.failure is not None:
            return self.failure.message
        return "Asset(s) minified."


class MinifyTask:
    """
    Minifies asset files (CSS or JS).

    The input is one of FromMapping, FromPattern or FromText. Setters must
    be called before run(); the JS options are shared by every JS job.
    """

    def __init__(
        self,
        task_input: TaskInput,
        glob_service: Optional[GlobService] = None,
        backends: Optional[Dict[AssetType, MinifierBackend]] = None,
        options: Optional[JsOptions] = None,
        part_suffix: str = DEFAULT_PART_SUFFIX,
    ):
        self.jobs: List[Job] = resolve_input(task_input, glob_service)
        self.backends = backends if backends is not None else default_backends()
        self.options = options.model_copy() if options is not None else JsOptions()
        self.part_suffix = part_suffix
        self.destination: Optional[str] = None
        self.asset_type: Optional[AssetType] = None

    def to(self, destination: Union[str, os.PathLike]) -> "MinifyTask":
        """Set the destination for every bare source. Guesses the type from it."""
        self.destination = os.fspath(destination)

        ext = get_extension(self.destination)
        if self.destination and self.asset_type is None and ext:
            self.type(ext)

        return self

    def type(self, asset_type: Union[str, AssetType]) -> "MinifyTask":
        """Set the type (css or js), validated immediately."""
        self.asset_type = classify(asset_type)
        return self

    def single_line(self, single_line: bool) -> "MinifyTask":
        self.options.single_line = bool(single_line)
        return self

    def keep_important_comments(self, keep_important_comments: bool) -> "MinifyTask":
        self.options.keep_important_comments = bool(keep_important_comments)
        return self

    def special_var_pattern(self, pattern: Union[bool, str]) -> "MinifyTask":
        self.options = JsOptions(
            **{**self.options.model_dump(), "special_var_pattern": pattern}
        )
        return self

    def _text_type(self, job: Job) -> AssetType:
        if self.asset_type is None:
            raise UnsupportedTypeError("", job, message="Unknown type, set it with type() or to()")
        return self.asset_type

    def _authoritative_type(self, job: Job) -> AssetType:
        # the source extension wins over the destination and any explicit type
        if job.source is not None:
            return classify(get_extension(job.source))
        return self._text_type(job)

    def minified_text(self) -> str:
        """
        Minify a text source without touching the filesystem.

        Raises:
            MinifyError: If the type is unset or minification fails
            ValueError: If the task has no text source
        """
        text_jobs = [job for job in self.jobs if job.text is not None]
        if not text_jobs:
            raise ValueError("minified_text() needs a text source")
        job = text_jobs[0]
        return minify(job.text, self._text_type(job), self.options, self.backends)

    def __str__(self) -> str:
        return self.minified_text()

    def _read(self, job: Job) -> str:
        if job.text is not None:
            return job.text
        try:
            with open(job.source, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
                return f.read()
        except OSError as e:
            logger.error(f"Error reading {job.source}: {str(e)}")
            raise ReadFailedError(f"Could not read {job.source}: {str(e)}", job)

    def _run_job(self, job: Job) -> JobOutcome:
        text = self._read(job)
        job.asset_type = self._authoritative_type(job)

        size_before = len(text.encode("utf-8", "surrogateescape"))
        minified = minify(text, job.asset_type, self.options, self.backends)
        size_after = atomic_write(job.destination, minified, self.part_suffix)

        outcome = JobOutcome(
            destination=job.destination,
            asset_type=job.asset_type,
            size_before=size_before,
            size_after=size_after,
            reduction_percent=reduction_percent(size_before, size_after),
            source=job.source,
        )
        logger.info(f"Wrote {job.destination}")
        logger.info(
            f"Wrote {format_bytes(outcome.size_after)} "
            f"(reduced by {format_bytes(outcome.bytes_saved)} / {outcome.reduction_percent}%)"
        )
        return outcome

    def run(self) -> BatchResult:
        """
        Write the minified result of every job to its destination.

        Jobs run in order and the first failure stops the batch. Files
        written before the failure are kept.

        Returns:
            BatchResult: Outcomes of the written files and the failure, if any
        """
        result = BatchResult()

        try:
            map_destinations(self.jobs, self.destination)
        except MinifyError as e:
            return self._fail(result, e)

        for job in self.jobs:
            try:
                outcome = self._run_job(job)
            except MinifyError as e:
                increment_file_minified(job.asset_type.value if job.asset_type else "unknown", False)
                return self._fail(result, attach_job(e, job))

            increment_file_minified(outcome.asset_type.value, True)
            add_bytes_saved(outcome.asset_type.value, outcome.bytes_saved)
            result.outcomes.append(outcome)

        logger.info(f"Asset(s) minified: {result.files_processed} file(s)")
        return result

    def _fail(self, result: BatchResult, error: MinifyError) -> BatchResult:
        label = error.job.label if error.job is not None else "batch"
        logger.error(f"Minification stopped at {label}: {error.message}")
        result.failure = JobFailure(job=error.job, kind=error.kind, message=error.message)
        return result
