"""Substitution engine tying scanning, saved values and resolution together."""

from .driver import DocumentText, SubstitutionDriver
from .models import ProcessResult
from .processor import TemplateProcessor, output_path_for

__all__ = [
    "DocumentText",
    "SubstitutionDriver",
    "ProcessResult",
    "TemplateProcessor",
    "output_path_for",
]
