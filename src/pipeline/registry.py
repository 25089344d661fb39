# src/pipeline/registry.py — v2
"""Analyzer registry — dynamic loading and lookup of analyzers.

Loads analyzer classes from ANALYZER_REGISTRY config, builds them from
settings, and exposes them in the fixed kind order used for dispatch.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

from resumelens.analyzers.base_analyzer import BaseAnalyzer
from resumelens.config.analyzers import ANALYZER_REGISTRY
from resumelens.core.models import ANALYZER_KINDS

if TYPE_CHECKING:
    from resumelens.config.settings import Settings

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Raised when analyzer loading or validation fails."""


class AnalyzerRegistry:
    """Registry of analyzers keyed by kind (at most one per kind)."""

    def __init__(self) -> None:
        self._analyzers: dict[str, BaseAnalyzer] = {}

    @property
    def kinds(self) -> list[str]:
        """Registered kinds in dispatch order."""
        return [a.kind for a in self.analyzers]

    @property
    def analyzers(self) -> list[BaseAnalyzer]:
        """Registered analyzers in fixed kind order."""
        order = {kind: i for i, kind in enumerate(ANALYZER_KINDS)}
        return sorted(self._analyzers.values(), key=lambda a: order.get(a.kind, len(order)))

    def load_all(self, settings: Settings | None = None) -> None:
        """Load every analyzer listed in ANALYZER_REGISTRY.

        Raises:
            RegistryError: If a configured analyzer cannot be loaded.
        """
        for class_path in ANALYZER_REGISTRY:
            analyzer = _import_analyzer(class_path, settings)
            self.register(analyzer)
            logger.debug("Loaded analyzer: %s v%s", analyzer.kind, analyzer.version)

        logger.info("Registry loaded %d analyzers", len(self._analyzers))

    def register(self, analyzer: BaseAnalyzer) -> None:
        """Register an analyzer instance, replacing any of the same kind."""
        if analyzer.kind not in ANALYZER_KINDS:
            raise RegistryError(f"Unknown analyzer kind: {analyzer.kind!r}")
        if analyzer.kind in self._analyzers:
            logger.warning("Overwriting existing analyzer: %s", analyzer.kind)
        self._analyzers[analyzer.kind] = analyzer

    def get(self, kind: str) -> BaseAnalyzer | None:
        """Get analyzer by kind, or None if not registered."""
        return self._analyzers.get(kind)

    def get_or_raise(self, kind: str) -> BaseAnalyzer:
        """Get analyzer by kind, raise if not found."""
        analyzer = self._analyzers.get(kind)
        if analyzer is None:
            raise RegistryError(f"Analyzer '{kind}' not found in registry")
        return analyzer

    def missing_kinds(self) -> list[str]:
        """Kinds with no registered analyzer."""
        return [k for k in ANALYZER_KINDS if k not in self._analyzers]


def _import_analyzer(class_path: str, settings: Settings | None) -> BaseAnalyzer:
    """Import and build an analyzer from a dotted class path.

    Args:
        class_path: e.g. 'resumelens.analyzers.ats_analyzer.AtsAnalyzer'
        settings: Passed to the class's from_settings().

    Returns:
        Instantiated BaseAnalyzer subclass.
    """
    parts = class_path.rsplit(".", 1)
    if len(parts) != 2:
        raise RegistryError(f"Invalid class path: {class_path}")
    module_path, class_name = parts

    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise RegistryError(f"Cannot import module {module_path}: {exc}") from exc

    cls = getattr(module, class_name, None)
    if cls is None:
        raise RegistryError(f"Class {class_name} not found in {module_path}")

    if not isinstance(cls, type) or not issubclass(cls, BaseAnalyzer):
        raise RegistryError(f"{class_path} is not a BaseAnalyzer subclass")

    return cls.from_settings(settings)
