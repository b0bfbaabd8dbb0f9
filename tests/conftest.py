"""Pytest configuration and shared fixtures."""

import zipfile
from pathlib import Path
from typing import Callable

import pytest

from doctemplate.memory import ValueCache
from doctemplate.placeholders import MappingValueSource

CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="xml" ContentType="application/xml"/>'
    "</Types>"
)

STYLES = '<?xml version="1.0" encoding="UTF-8"?><w:styles/>'


def document_xml(body_text: str) -> str:
    """Wrap text in a minimal WordprocessingML body."""
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        f"<w:body><w:p><w:r><w:t>{body_text}</w:t></w:r></w:p></w:body>"
        "</w:document>"
    )


@pytest.fixture
def make_word_template(tmp_path: Path) -> Callable[..., Path]:
    """Create a minimal .docx package whose body contains the given text."""

    def _make(body_text: str, name: str = "_letter.docx") -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as archive:
            archive.writestr("[Content_Types].xml", CONTENT_TYPES)
            archive.writestr("word/document.xml", document_xml(body_text))
            archive.writestr("word/styles.xml", STYLES)
        return path

    return _make


@pytest.fixture
def make_text_template(tmp_path: Path) -> Callable[..., Path]:
    """Create a plain text template."""

    def _make(text: str, name: str = "_letter.txt") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _make


@pytest.fixture
def value_cache() -> ValueCache:
    return ValueCache(extension="yaml", encoding="utf-8")


@pytest.fixture
def answers() -> Callable[..., MappingValueSource]:
    """Build a value source answering from a dict and recording requests."""

    def _answers(**values: str) -> MappingValueSource:
        return MappingValueSource(values)

    return _answers
