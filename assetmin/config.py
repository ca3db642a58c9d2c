from typing import List, Optional, Union
import os
import re
import logging
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator, ValidationError
from pydantic_settings import BaseSettings
from functools import lru_cache

from assetmin.types import SUPPORTED_TYPES

# Setup logging
logger = logging.getLogger(__name__)


class JsOptions(BaseModel):
    """
    Options passed to the JavaScript minifier.

    One instance is shared by every JS job of a task and must not be
    changed while the task is running.
    """
    single_line: bool = True
    keep_important_comments: bool = True
    special_var_pattern: Union[bool, str] = False

    @field_validator("special_var_pattern")
    @classmethod
    def validate_special_var_pattern(cls, v: Union[bool, str]) -> Union[bool, str]:
        if isinstance(v, str):
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"special_var_pattern is not a valid regular expression: {e}")
        return v

    @property
    def special_var_regex(self) -> Optional[re.Pattern]:
        if isinstance(self.special_var_pattern, str):
            return re.compile(self.special_var_pattern)
        return None


class BatchConfig(BaseModel):
    """
    One configured minification batch.

    Exactly one of sources, pattern or text must be set.
    """
    sources: Optional[Union[List[str], dict]] = None
    pattern: Optional[str] = None
    text: Optional[str] = None
    destination: Optional[str] = None
    type: Optional[str] = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v.lower() not in SUPPORTED_TYPES:
            raise ValueError(f"type must be one of {list(SUPPORTED_TYPES)}")
        return v.lower() if v else v

    @model_validator(mode="after")
    def validate_single_input(self) -> "BatchConfig":
        given = [name for name in ("sources", "pattern", "text") if getattr(self, name) is not None]
        if len(given) != 1:
            raise ValueError("Batch needs exactly one of sources, pattern or text")
        return self


class Config(BaseSettings):
    """
    Main minifier configuration.
    """
    js: JsOptions = Field(default_factory=JsOptions)
    part_suffix: str = ".part"
    log_level: str = "INFO"
    metrics_port: Optional[int] = None
    batches: List[BatchConfig] = Field(default_factory=list)

    @field_validator("metrics_port")
    @classmethod
    def validate_metrics_port(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and (v < 1 or v > 65535):
            raise ValueError("metrics_port must be between 1 and 65535")
        return v

    @field_validator("part_suffix")
    @classmethod
    def validate_part_suffix(cls, v: str) -> str:
        if not v or os.sep in v:
            raise ValueError("part_suffix must be a non-empty file name suffix")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()


@lru_cache()
def get_config() -> Config:
    """Get config singleton with caching."""
    return load_config()


def _env_bool(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Config: Validated configuration object

    Raises:
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_FILE", "assetmin.yml")

    logger.info(f"Loading configuration from {config_path}")

    try:
        if os.path.exists(config_path):
            with open(config_path, "r") as f:
                config_data = yaml.safe_load(f) or {}
        else:
            logger.warning(f"Config file not found: {config_path}, using environment variables")
            config_data = {}

        if not isinstance(config_data, dict):
            raise ValueError("Top level of the config file must be a mapping")

        # Override with environment variables
        if "log_level" not in config_data and "LOG_LEVEL" in os.environ:
            config_data["log_level"] = os.environ.get("LOG_LEVEL")

        if "metrics_port" not in config_data and "METRICS_PORT" in os.environ:
            config_data["metrics_port"] = int(os.environ.get("METRICS_PORT"))

        if "part_suffix" not in config_data and "ASSETMIN_PART_SUFFIX" in os.environ:
            config_data["part_suffix"] = os.environ.get("ASSETMIN_PART_SUFFIX")

        js_data = config_data.setdefault("js", {}) or {}
        config_data["js"] = js_data
        if "single_line" not in js_data and "ASSETMIN_JS_SINGLE_LINE" in os.environ:
            js_data["single_line"] = _env_bool("ASSETMIN_JS_SINGLE_LINE")
        if (
            "keep_important_comments" not in js_data
            and "ASSETMIN_JS_KEEP_IMPORTANT_COMMENTS" in os.environ
        ):
            js_data["keep_important_comments"] = _env_bool("ASSETMIN_JS_KEEP_IMPORTANT_COMMENTS")

        # Validate and create config
        try:
            return Config(**config_data)
        except ValidationError as e:
            logger.error(f"Configuration validation error: {str(e)}")
            for error in e.errors():
                loc = ".".join(str(x) for x in error["loc"])
                logger.error(f"  - {loc}: {error['msg']}")
            raise ValueError("Invalid configuration. See error log for details.")

    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {str(e)}")
    except ValueError:
        raise
    except Exception as e:
        logger.error(f"Configuration error: {str(e)}")
        raise ValueError(f"Configuration error: {str(e)}")
