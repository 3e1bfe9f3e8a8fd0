"""Specialist catalog: static family tables and the owned registry."""

import logging

from hiveroute.catalog.families import FAMILY_BUILDERS
from hiveroute.catalog.registry import SpecialistCatalog

logger = logging.getLogger(__name__)


def build_default_catalog() -> SpecialistCatalog:
    """Build the full default catalog from every domain family.

    Each call returns an independent catalog with fresh fitness state.
    """
    templates = [template for build in FAMILY_BUILDERS for template in build()]
    catalog = SpecialistCatalog(templates)
    logger.debug("Built default catalog with %d species", catalog.count)
    return catalog


__all__ = ["SpecialistCatalog", "build_default_catalog"]
