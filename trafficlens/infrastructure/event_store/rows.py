# ==============================================================================
# Event Row Parsing
# ==============================================================================
"""
Turns raw event store rows into validated PageViewEvent models.

Rows that fail validation (missing visitor id, unparsable timestamp, ...)
are skipped with a warning so one bad row never sinks a whole window.
"""

import logging
from collections.abc import Generator, Iterable
from typing import Any

from pydantic import ValidationError

from trafficlens.core.models import PageViewEvent

logger = logging.getLogger(__name__)


def parse_page_views(
    rows: Iterable[dict[str, Any] | PageViewEvent],
) -> Generator[PageViewEvent, None, None]:
    """
    Parse rows and yield valid page views.

    Args:
        rows: Row dicts (snake_case or camelCase keys) or PageViewEvent instances

    Yields:
        PageViewEvent for every row that validates
    """
    skipped = 0
    for row in rows:
        if isinstance(row, PageViewEvent):
            yield row
            continue
        try:
            yield PageViewEvent.model_validate(row)
        except ValidationError as e:
            skipped += 1
            logger.warning("Skipping malformed page view row: %s", e.errors()[0]["msg"])
    if skipped:
        logger.warning("Skipped %d malformed page view rows", skipped)
