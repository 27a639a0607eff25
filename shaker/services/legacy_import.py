"""Bulk registration of bare display names from line-separated text."""

import logging
from pathlib import Path
from typing import Iterable, Union

from shaker.core.errors import RegistryError
from shaker.schemas.user import ImportSummary
from shaker.services.registry import UserRegistry

logger = logging.getLogger(__name__)


def import_display_names(registry: UserRegistry, lines: Iterable[str]) -> ImportSummary:
    summary = ImportSummary()
    for name in lines:
        if not name.strip():
            continue
        try:
            user = registry.register(None, name)
        except RegistryError as exc:
            logger.error("Unable to import legacy user %s: %s", name, exc)
            summary.failed += 1
            continue
        logger.debug("Imported legacy user %s as id %s", name, user.id)
        summary.imported += 1

    logger.info("Legacy import finished: %d imported, %d failed", summary.imported, summary.failed)
    return summary


def import_display_names_file(registry: UserRegistry, path: Union[str, Path]) -> ImportSummary:
    content = Path(path).read_text(encoding="utf-8")
    return import_display_names(registry, content.splitlines())
