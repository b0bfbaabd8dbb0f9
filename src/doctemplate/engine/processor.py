"""Fill a template file and write the finished document."""

import logging
from pathlib import Path
from typing import Optional, Union

from ..config import settings
from ..documents import open_document
from ..memory import ValueCache
from ..placeholders import PlaceholderParser, ValueSource
from .driver import SubstitutionDriver
from .models import ProcessResult

logger = logging.getLogger(__name__)


def output_path_for(
    template_path: Union[str, Path],
    output_dir: Optional[str] = None,
    marker: Optional[str] = None,
) -> Path:
    """
    Compute where the filled copy of a template goes.

    The first ``marker`` in the file name is replaced by ``<output_dir>/``,
    so ``letters/_offer.docx`` becomes ``letters/output/offer.docx``. A file
    name without the marker is placed in ``<output_dir>`` next to the
    template.
    """
    template_path = Path(template_path)
    output_dir = output_dir or settings.output_dir
    marker = marker if marker is not None else settings.output_marker

    name = template_path.name
    if marker and marker in name:
        head, tail = name.split(marker, 1)
        if tail:
            return template_path.parent / f"{head}{output_dir}" / tail

    return template_path.parent / output_dir / name


class TemplateProcessor:
    """Runs the substitution driver over template files."""

    def __init__(
        self,
        value_source: ValueSource,
        cache: Optional[ValueCache] = None,
        parser: Optional[PlaceholderParser] = None,
        output_dir: Optional[str] = None,
    ):
        self.cache = cache or ValueCache()
        self.driver = SubstitutionDriver(value_source, cache=self.cache, parser=parser)
        self.output_dir = output_dir

    def process(self, template_path: Union[str, Path], save: bool = False) -> ProcessResult:
        """
        Fill one template and write the result.

        Nothing is written unless every placeholder was filled: any error
        propagates before the output document or the cache file is touched.

        Args:
            template_path: The template to fill
            save: Persist the values entered in this run next to the template

        Returns:
            ProcessResult describing what was written
        """
        template_path = Path(template_path)
        logger.info(f"Processing template {template_path}")

        document = open_document(template_path)
        text = document.read_text()

        result = self.driver.fill(text, template_path, escape=document.escape)

        output_path = output_path_for(template_path, self.output_dir)
        document.write_text(output_path, result.text)
        logger.info(f"Wrote {output_path}")

        cache_path = None
        if save:
            # Saved values are kept and updated with the ones entered now
            values = {**result.cached_values, **result.entered_values}
            cache_path = self.cache.save(template_path, values)

        return ProcessResult(
            template_path=template_path,
            output_path=output_path,
            cache_path=cache_path,
            placeholder_count=len(result.placeholders),
            entered_values=result.entered_values,
        )
