"""Configuration management for doctemplate."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

load_dotenv()


class Settings(BaseModel):
    """Application settings."""

    # Character that opens and closes a placeholder (e.g. !name!)
    placeholder_marker: str = os.getenv("DOCTEMPLATE_MARKER", "!")

    # Locale used by the today() and currency() formula built-ins
    locale: str = os.getenv("DOCTEMPLATE_LOCALE", "de_DE")
    date_format: str = os.getenv("DOCTEMPLATE_DATE_FORMAT", "medium")

    # Saved values live next to the template as <template>.<cache_extension>
    cache_extension: str = os.getenv("DOCTEMPLATE_CACHE_EXTENSION", "yaml")

    # Output path: first output_marker in the file name becomes "<output_dir>/"
    output_marker: str = os.getenv("DOCTEMPLATE_OUTPUT_MARKER", "_")
    output_dir: str = os.getenv("DOCTEMPLATE_OUTPUT_DIR", "output")

    # Encoding of the document body and plain text templates
    encoding: str = os.getenv("DOCTEMPLATE_ENCODING", "utf-8")

    log_level: str = os.getenv("DOCTEMPLATE_LOG_LEVEL", "WARNING")

    @field_validator("placeholder_marker")
    @classmethod
    def _single_character_marker(cls, value: str) -> str:
        if len(value) != 1 or value in "<>=":
            raise ValueError("placeholder marker must be a single character other than '<', '>' or '='")
        return value

    @field_validator("cache_extension")
    @classmethod
    def _strip_extension_dot(cls, value: str) -> str:
        value = value.lstrip(".")
        if not value:
            raise ValueError("cache extension must not be empty")
        return value


settings = Settings()
