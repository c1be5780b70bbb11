from __future__ import annotations

import logging
from pathlib import Path

from event_planner.planner.catalog import (
    DEFAULT_CATALOG_ROOT,
    RuleCatalog,
    default_catalog,
    load_catalog,
)
from event_planner.planner.errors import CatalogError
from event_planner.services.errors import ApiError

logger = logging.getLogger(__name__)


class CatalogRepository:
    """Loads the rule catalog once and hands out the same immutable value."""

    def __init__(self, catalog_root: Path | None = None) -> None:
        self.catalog_root = catalog_root
        self._catalog: RuleCatalog | None = None

    def load(self) -> RuleCatalog:
        if self._catalog is not None:
            return self._catalog

        try:
            if self.catalog_root is None:
                catalog = default_catalog()
            else:
                catalog = load_catalog(self.catalog_root)
        except CatalogError as exc:
            logger.error(
                "catalog_invalid",
                extra={"catalog_root": str(self.catalog_root or DEFAULT_CATALOG_ROOT)},
            )
            raise ApiError(
                status_code=500,
                code="CATALOG_INVALID",
                message=str(exc),
            ) from exc

        logger.info(
            "catalog_loaded",
            extra={
                "catalog_root": str(self.catalog_root or DEFAULT_CATALOG_ROOT),
                "event_types": len(catalog.event_types),
                "base_tasks": len(catalog.base_tasks),
                "families": len(catalog.families),
            },
        )
        self._catalog = catalog
        return catalog
