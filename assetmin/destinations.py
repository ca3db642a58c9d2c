import logging
import os
from typing import List, Optional

from assetmin.errors import (
    AmbiguousDestinationError,
    MissingDestinationError,
    attach_job,
    UnsupportedTypeError,
)
from assetmin.inputs import Job
from assetmin.types import classify, get_extension

logger = logging.getLogger(__name__)


def default_destination(source: str) -> str:
    """Build the conventional ``<stem>.min.<ext>`` path next to the source."""
    ext = get_extension(source)
    if not ext:
        return f"{source}.min"
    return f"{source[: -(len(ext) + 1)]}.min.{ext}"


def expand_directory(destination: str, source: Optional[str]) -> str:
    """If the destination is an existing directory, append the source filename."""
    if source is not None and os.path.isdir(destination):
        return os.path.join(destination, os.path.basename(source))
    return destination


def map_destinations(jobs: List[Job], shared_destination: Optional[str] = None) -> List[Job]:
    """
    Fill in a concrete destination file path for every job.

    Named entries keep their destination, bare sources use the shared
    destination when one is set and the ``.min.`` convention otherwise.
    Every file-backed job is classified from its source extension here so
    an unsupported or missing extension stops the batch before anything is
    written.

    Raises:
        UnsupportedTypeError: If a source has an unsupported extension
        AmbiguousDestinationError: If several bare sources share one file destination
        MissingDestinationError: If a text job has no file to be written to
    """
    bare_jobs = [job for job in jobs if not job.explicit]
    if (
        shared_destination
        and len(bare_jobs) > 1
        and not os.path.isdir(shared_destination)
    ):
        raise AmbiguousDestinationError(
            f"{len(bare_jobs)} sources cannot share the single destination {shared_destination}"
        )

    for job in jobs:
        if job.source is not None:
            try:
                job.asset_type = classify(get_extension(job.source))
            except UnsupportedTypeError as e:
                raise attach_job(e, job)

        if job.explicit:
            destination = job.destination
        elif shared_destination:
            destination = shared_destination
        elif job.source is not None:
            destination = default_destination(job.source)
        else:
            raise MissingDestinationError(
                "No destination set for text source, use to() or minified_text()", job
            )

        job.destination = expand_directory(os.fspath(destination), job.source)
        if job.source is None and os.path.isdir(job.destination):
            raise MissingDestinationError(
                f"Destination {job.destination} is a directory, text sources need a file path", job
            )
        logger.debug(f"Mapped {job.label} -> {job.destination}")

    return jobs
