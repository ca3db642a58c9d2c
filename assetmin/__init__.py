from assetmin.backends import CssBackend, JsBackend, MinifierBackend, minify
from assetmin.errors import ErrorKind, MinifyError
from assetmin.inputs import FileGlob, FromMapping, FromPattern, FromText, GlobService, Job
from assetmin.task import BatchResult, JobFailure, JobOutcome, MinifyTask
from assetmin.types import AssetType, classify

__all__ = [
    "CssBackend",
    "JsBackend",
    "MinifierBackend",
    "minify",
    "ErrorKind",
    "MinifyError",
    "FileGlob",
    "FromMapping",
    "FromPattern",
    "FromText",
    "GlobService",
    "Job",
    "BatchResult",
    "JobFailure",
    "JobOutcome",
    "MinifyTask",
    "AssetType",
    "classify",
]
