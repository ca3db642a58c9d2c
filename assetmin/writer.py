import logging
import os
from contextlib import suppress

from assetmin.errors import WriteFailedError

logger = logging.getLogger(__name__)

DEFAULT_PART_SUFFIX = ".part"


def atomic_write(destination: str, content: str, suffix: str = DEFAULT_PART_SUFFIX) -> int:
    """
    Write content next to the destination, then rename it into place.

    The destination is either left untouched or replaced by the full
    content. An interrupted write leaves at most a stray ``<dst><suffix>``.

    Args:
        destination: Final file path
        content: Text to write (UTF-8)
        suffix: Suffix of the temporary sibling file

    Returns:
        int: Number of bytes written

    Raises:
        WriteFailedError: If the temporary file cannot be written or renamed
    """
    part_path = f"{destination}{suffix}"
    # undecodable source bytes come back out unchanged
    data = content.encode("utf-8", "surrogateescape")

    try:
        parent = os.path.dirname(destination)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(part_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
    except OSError as e:
        logger.error(f"Error writing {part_path}: {str(e)}")
        with suppress(OSError):
            os.remove(part_path)
        raise WriteFailedError(f"File write failed: {destination}")

    try:
        os.replace(part_path, destination)
    except OSError as e:
        logger.error(f"Error renaming {part_path} to {destination}: {str(e)}")
        raise WriteFailedError(f"File write failed: {destination}")

    return len(data)
