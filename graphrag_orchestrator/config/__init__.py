"""
Configuration System

Configuration Priority (highest to lowest):
    1. Programmatic (passed to OrchestratorConfig())
    2. Environment variables (GRAPHRAG_* prefix)
    3. Built-in defaults

A TOML file can be loaded with OrchestratorConfig.from_file(); its values
are applied as programmatic overrides.
"""

from graphrag_orchestrator.config.settings import OrchestratorConfig

__all__ = ["OrchestratorConfig"]
