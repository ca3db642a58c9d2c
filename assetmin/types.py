from enum import Enum
import os
from typing import Union

from assetmin.errors import UnsupportedTypeError


class AssetType(str, Enum):
    CSS = "css"
    JS = "js"


SUPPORTED_TYPES = tuple(t.value for t in AssetType)


def get_extension(path: Union[str, os.PathLike]) -> str:
    """Get file extension (without the dot) from path."""
    _, ext = os.path.splitext(os.fspath(path))
    return ext[1:]


def classify(extension: Union[str, AssetType]) -> AssetType:
    """
    Derive the asset type from a file extension.

    The comparison is case-insensitive and a leading dot is ignored.

    Raises:
        UnsupportedTypeError: If the extension is not css or js
    """
    if isinstance(extension, AssetType):
        return extension

    value = (extension or "").lower()
    if value.startswith("."):
        value = value[1:]

    if value not in SUPPORTED_TYPES:
        raise UnsupportedTypeError(extension or "")
    return AssetType(value)


def classify_path(path: Union[str, os.PathLike]) -> AssetType:
    """Classify a file by its extension."""
    return classify(get_extension(path))
