"""
Pluggable minifier backends for CSS and JavaScript.

The CSS backend wraps rcssmin. The JS backend wraps rjsmin and falls back
to jsmin, whichever is importable first.
"""

from abc import ABC, abstractmethod
import importlib
import logging
import re
from typing import Dict, Optional, Sequence, Tuple

from assetmin.config import JsOptions
from assetmin.errors import MinificationFailedError, MissingBackendError
from assetmin.types import AssetType

logger = logging.getLogger(__name__)

# string and template literals are matched first so their contents survive
BANG_COMMENT_RE = re.compile(
    r"('(?:\\.|[^'\\\n])*'|\"(?:\\.|[^\"\\\n])*\"|`(?:\\.|[^`\\])*`)"
    r"|/\*!.*?\*/\n?",
    re.S,
)
# newline after a statement or bracket opener, or before a closer
JOINABLE_NEWLINE_RE = re.compile(r"(?<=[;{,(\[])\n+|\n+(?=[}\])])")


class MinifierBackend(ABC):
    """Compresses text for one asset type."""

    name: str
    package: str

    @abstractmethod
    def is_available(self) -> bool:
        pass

    @abstractmethod
    def minify(self, text: str, options: Optional[JsOptions] = None) -> str:
        pass


class CssBackend(MinifierBackend):
    name = "rcssmin"
    package = "rcssmin"

    def __init__(self, module: str = "rcssmin"):
        self.module = module
        self._cssmin = None

    def _load(self):
        if self._cssmin is None:
            try:
                self._cssmin = importlib.import_module(self.module).cssmin
            except ImportError:
                raise MissingBackendError(self.name, self.package)
        return self._cssmin

    def is_available(self) -> bool:
        try:
            self._load()
        except MissingBackendError:
            return False
        return True

    def minify(self, text: str, options: Optional[JsOptions] = None) -> str:
        """Minify CSS content."""
        cssmin = self._load()
        try:
            minified = cssmin(text)
        except Exception as e:
            logger.error(f"Error minifying CSS: {str(e)}")
            raise MinificationFailedError(f"CSS minification failed: {str(e)}")
        if not isinstance(minified, str):
            raise MinificationFailedError("CSS minifier returned no text")
        return minified


class JsBackend(MinifierBackend):
    """
    JavaScript backend over interchangeable providers.

    Providers are tried in order; rjsmin is preferred and jsmin is accepted
    in its place. Both only strip whitespace and comments, so the
    special_var_pattern option is validated but has no effect on output.
    single_line=False returns the provider output as is; rjsmin already
    drops most line breaks, so the option rarely changes its output.
    """

    name = "rjsmin"
    package = "rjsmin"

    def __init__(self, providers: Sequence[str] = ("rjsmin", "jsmin")):
        self.providers = tuple(providers)
        self._provider: Optional[Tuple[str, object]] = None

    def _load(self) -> Tuple[str, object]:
        if self._provider is None:
            for module_name in self.providers:
                try:
                    module = importlib.import_module(module_name)
                except ImportError:
                    logger.debug(f"JS minifier {module_name} is not installed")
                    continue
                logger.debug(f"Using JS minifier {module_name}")
                self._provider = (module_name, module)
                break
            else:
                raise MissingBackendError(self.name, " or ".join(self.providers))
        return self._provider

    def is_available(self) -> bool:
        try:
            self._load()
        except MissingBackendError:
            return False
        return True

    def _squeeze(self, module_name: str, module, text: str, options: JsOptions) -> str:
        if module_name == "rjsmin":
            return module.jsmin(text, keep_bang_comments=options.keep_important_comments)

        minified = module.jsmin(text, quote_chars="'\"`")
        if not options.keep_important_comments:
            minified = BANG_COMMENT_RE.sub(lambda m: m.group(1) or "", minified)
        return minified

    def minify(self, text: str, options: Optional[JsOptions] = None) -> str:
        """Minify JavaScript content."""
        options = options or JsOptions()
        module_name, module = self._load()

        if options.special_var_pattern:
            logger.debug(f"{module_name} does not rename variables, special_var_pattern ignored")

        try:
            minified = self._squeeze(module_name, module, text, options)
        except Exception as e:
            logger.error(f"Error minifying JavaScript: {str(e)}")
            raise MinificationFailedError(f"JS minification failed: {str(e)}")
        if not isinstance(minified, str):
            raise MinificationFailedError("JS minifier returned no text")

        # template literals may hold significant newlines
        if options.single_line and "`" not in minified:
            minified = JOINABLE_NEWLINE_RE.sub("", minified)
        return minified.strip()


def default_backends() -> Dict[AssetType, MinifierBackend]:
    return {
        AssetType.CSS: CssBackend(),
        AssetType.JS: JsBackend(),
    }


def minify(
    text: str,
    asset_type: AssetType,
    options: Optional[JsOptions] = None,
    backends: Optional[Dict[AssetType, MinifierBackend]] = None,
) -> str:
    """
    Minify text with the backend registered for its type.

    Raises:
        MissingBackendError: If no backend library is available
        MinificationFailedError: If the backend could not produce output
    """
    backends = backends if backends is not None else default_backends()
    backend = backends.get(asset_type)
    if backend is None:
        raise MissingBackendError(f"{asset_type.value} minifier", "a registered backend")

    return backend.minify(text, options if asset_type == AssetType.JS else None)
