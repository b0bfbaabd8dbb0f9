"""Read and write the body text of template documents."""

import logging
import os
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Optional, Union
from xml.sax.saxutils import escape as xml_escape

from ..config import settings
from ..placeholders.models import DocTemplateError

logger = logging.getLogger(__name__)

# Part of a WordprocessingML package that holds the document body
BODY_PART = "word/document.xml"

WORD_SUFFIXES = {".docx", ".docm", ".dotx", ".dotm"}


class DocumentIOError(DocTemplateError):
    """Exception raised when a document cannot be read or written."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        super().__init__(f"{path}: {reason}")


class TextDocument:
    """A plain text template; the whole file is the body."""

    def __init__(self, path: Union[str, Path], encoding: Optional[str] = None):
        self.path = Path(path)
        self.encoding = encoding or settings.encoding

    def read_text(self) -> str:
        try:
            return self.path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentIOError(self.path, f"cannot read template ({e})") from e

    def escape(self, value: str) -> str:
        return value

    def write_text(self, destination: Union[str, Path], text: str) -> Path:
        destination = Path(destination)
        _write_atomic(destination, lambda handle: handle.write(text.encode(self.encoding)))
        return destination


class WordDocument:
    """
    A Word template (.docx and friends).

    Only the body part is read and rewritten; every other part of the
    package is copied to the output unchanged.
    """

    def __init__(self, path: Union[str, Path], encoding: Optional[str] = None):
        self.path = Path(path)
        self.encoding = encoding or settings.encoding

    def read_text(self) -> str:
        try:
            with zipfile.ZipFile(self.path, "r") as archive:
                if BODY_PART not in archive.namelist():
                    raise DocumentIOError(self.path, f"invalid document, missing {BODY_PART}")
                return archive.read(BODY_PART).decode(self.encoding)
        except zipfile.BadZipFile as e:
            raise DocumentIOError(self.path, "not a valid document package") from e
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentIOError(self.path, f"cannot read template ({e})") from e

    def escape(self, value: str) -> str:
        """Escape a value for insertion into the body XML."""
        return xml_escape(value)

    def write_text(self, destination: Union[str, Path], text: str) -> Path:
        """Write a copy of the template with its body replaced by ``text``."""
        destination = Path(destination)

        def _copy_package(handle):
            try:
                with zipfile.ZipFile(self.path, "r") as source, zipfile.ZipFile(
                    handle, "w", zipfile.ZIP_DEFLATED
                ) as target:
                    for item in source.infolist():
                        if item.filename == BODY_PART:
                            target.writestr(item, text.encode(self.encoding))
                        else:
                            target.writestr(item, source.read(item.filename))
            except zipfile.BadZipFile as e:
                raise DocumentIOError(self.path, "not a valid document package") from e

        _write_atomic(destination, _copy_package)
        return destination


def open_document(path: Union[str, Path], encoding: Optional[str] = None):
    """Return the document handler for a template path, chosen by suffix."""
    path = Path(path)
    if path.suffix.lower() in WORD_SUFFIXES:
        return WordDocument(path, encoding)
    return TextDocument(path, encoding)


def _write_atomic(destination: Path, write):
    """Write through a temporary file so a failed write leaves no output."""
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{destination.name}.", suffix=".tmp", dir=destination.parent
        )
    except OSError as e:
        raise DocumentIOError(destination, f"cannot write document ({e})") from e

    try:
        with os.fdopen(fd, "wb") as handle:
            write(handle)
        shutil.move(temp_name, destination)
    except OSError as e:
        Path(temp_name).unlink(missing_ok=True)
        raise DocumentIOError(destination, f"cannot write document ({e})") from e
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise

    logger.debug(f"Wrote {destination}")
