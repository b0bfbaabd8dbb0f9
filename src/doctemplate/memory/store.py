"""YAML-backed store for values entered in earlier runs."""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Union

import yaml

from ..config import settings
from ..placeholders.models import DocTemplateError

logger = logging.getLogger(__name__)

SCALAR_TYPES = (str, int, float, bool, date, datetime)


class CacheLoadError(DocTemplateError):
    """Exception raised when a saved value file cannot be used."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Cannot load saved values from {path}: {reason}")


class CacheSaveError(DocTemplateError):
    """Exception raised when saved values cannot be written."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Cannot save values to {path}: {reason}")


class ValueCache:
    """
    Persistent name -> value mapping kept next to each template.

    The values of ``templates/_offer.docx`` live in
    ``templates/_offer.docx.yaml``, a plain YAML mapping that can be edited
    by hand.
    """

    def __init__(self, extension: Optional[str] = None, encoding: Optional[str] = None):
        self.extension = (extension or settings.cache_extension).lstrip(".")
        self.encoding = encoding or settings.encoding

    def path_for(self, template_path: Union[str, Path]) -> Path:
        """Get the cache file path for a template."""
        template_path = Path(template_path)
        return template_path.with_name(f"{template_path.name}.{self.extension}")

    def load(self, template_path: Union[str, Path]) -> dict[str, str]:
        """
        Load the values saved for a template.

        Args:
            template_path: Path of the template the values belong to

        Returns:
            Dict of name -> value, empty if nothing was saved yet

        Raises:
            CacheLoadError: If the file exists but is not a flat mapping
        """
        path = self.path_for(template_path)
        if not path.exists():
            logger.debug(f"No saved values at {path}")
            return {}

        try:
            content = yaml.safe_load(path.read_text(encoding=self.encoding))
        except (OSError, UnicodeDecodeError) as e:
            raise CacheLoadError(path, str(e)) from e
        except yaml.YAMLError as e:
            raise CacheLoadError(path, f"invalid YAML ({e})") from e

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise CacheLoadError(path, f"expected a mapping, found {type(content).__name__}")

        values = {}
        for name, value in content.items():
            if value is None:
                value = ""
            elif not isinstance(value, SCALAR_TYPES):
                raise CacheLoadError(
                    path, f"value of '{name}' must be a scalar, found {type(value).__name__}"
                )
            values[str(name)] = str(value)

        logger.info(f"Loaded {len(values)} saved values from {path}")
        return values

    def save(self, template_path: Union[str, Path], values: dict[str, str]) -> Path:
        """
        Save values for a template, replacing the previous file.

        Args:
            template_path: Path of the template the values belong to
            values: Mapping of name -> value to persist

        Returns:
            Path of the written cache file
        """
        path = self.path_for(template_path)
        content = yaml.safe_dump(
            {str(name): str(value) for name, value in values.items()},
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )

        try:
            path.write_text(content, encoding=self.encoding)
        except OSError as e:
            raise CacheSaveError(path, str(e)) from e

        logger.info(f"Saved {len(values)} values to {path}")
        return path
