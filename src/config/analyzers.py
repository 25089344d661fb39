# src/config/analyzers.py — v2
"""Declarative analyzer registry configuration.

Lists the analyzers dispatched by the orchestrator on every cache miss.
"""

from __future__ import annotations

# Fully qualified class paths for dynamic import by pipeline/registry.py.
ANALYZER_REGISTRY: list[str] = [
    "resumelens.analyzers.structure_analyzer.StructureAnalyzer",
    "resumelens.analyzers.ats_analyzer.AtsAnalyzer",
    "resumelens.analyzers.content_analyzer.ContentAnalyzer",
]
