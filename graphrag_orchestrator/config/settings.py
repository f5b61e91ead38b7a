"""
OrchestratorConfig - Configuration Management

Sensible defaults with full override capability.

Example:
    >>> # Use defaults (reads from environment)
    >>> orchestrator = Orchestrator(store, store, store, llm)

    >>> # Explicit configuration
    >>> config = OrchestratorConfig(max_hops=3, top_k=8)
    >>> orchestrator = Orchestrator(store, store, store, llm, config=config)

    >>> # From config file
    >>> config = OrchestratorConfig.from_file("./graphrag.toml")

Environment Variables:
    GRAPHRAG_MAX_HOPS - Relationship hops explored during graph expansion
    GRAPHRAG_TOP_K - Chunks retrieved per query
    GRAPHRAG_EXPANSION_CONCURRENCY - Max concurrent relation queries per hop
    GRAPHRAG_INCLUDE_GRAPH_CONTEXT - Append expanded subgraph to the prompt ("true"/"false")
    GRAPHRAG_LLM_MODEL - Model requested from the LLM provider for answer generation
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, cast

# TOML support: tomllib is built-in for Python 3.11+, use tomli for 3.10
try:
    import tomllib

    def _load_toml(path: Path) -> dict[str, Any]:
        with open(path, "rb") as f:
            return cast(dict[str, Any], tomllib.load(f))

except ImportError:
    import tomli

    def _load_toml(path: Path) -> dict[str, Any]:
        with open(path, "rb") as f:
            return cast(dict[str, Any], tomli.load(f))


_TRUE_VALUES = {"1", "true", "yes", "on"}

_OPTIONS = (
    "max_hops",
    "expansion_concurrency",
    "top_k",
    "llm_model",
    "answer_temperature",
    "answer_max_tokens",
    "include_graph_context",
    "include_trace",
)


class OrchestratorConfig:
    """Configuration for the GraphRAG orchestrator."""

    # === Expansion Configuration ===

    max_hops: int = 2
    """Relationship hops explored from linked entities"""

    expansion_concurrency: int = 8
    """Max concurrent relation queries within one hop"""

    # === Retrieval Configuration ===

    top_k: int = 5
    """Chunks retrieved per query (also the citation count ceiling)"""

    # === Generation Configuration ===

    llm_model: str = "gpt-4o-mini"
    """Model passed to the LLM provider with every answer request"""

    answer_temperature: float = 0.0
    """Sampling temperature for answer generation"""

    answer_max_tokens: int = 1024
    """Maximum tokens in the generated answer"""

    include_graph_context: bool = False
    """Append expanded entities and relationships to the generation prompt"""

    # === Response Configuration ===

    include_trace: bool = True
    """Attach the diagnostic trace to responses"""

    def __init__(self, **kwargs: Any) -> None:
        """
        Initialize configuration.

        Args:
            **kwargs: Override any configuration option
        """
        # Load from environment first
        self._load_from_env()

        # Apply explicit overrides
        for key, value in kwargs.items():
            if key in _OPTIONS:
                setattr(self, key, value)
            else:
                raise ValueError(f"Unknown configuration option: {key}")

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        import os

        if hops := os.getenv("GRAPHRAG_MAX_HOPS"):
            self.max_hops = int(hops)
        if top_k := os.getenv("GRAPHRAG_TOP_K"):
            self.top_k = int(top_k)
        if concurrency := os.getenv("GRAPHRAG_EXPANSION_CONCURRENCY"):
            self.expansion_concurrency = int(concurrency)
        if graph_context := os.getenv("GRAPHRAG_INCLUDE_GRAPH_CONTEXT"):
            self.include_graph_context = graph_context.strip().lower() in _TRUE_VALUES
        if model := os.getenv("GRAPHRAG_LLM_MODEL"):
            self.llm_model = model

    @classmethod
    def from_file(cls, path: str | Path) -> OrchestratorConfig:
        """
        Load configuration from TOML file.

        Sections are flattened into option names; top-level scalar keys are
        taken as-is.

        Example TOML:
            [expansion]
            max_hops = 3
            concurrency = 4

            [retrieval]
            top_k = 8

            [generation]
            model = "gpt-4o"
            include_graph_context = true

        Args:
            path: Path to TOML configuration file

        Returns:
            OrchestratorConfig instance with values from file

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If the file names an unknown option
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        data = _load_toml(path)

        # Section keys that don't map 1:1 onto option names
        renames = {
            ("expansion", "concurrency"): "expansion_concurrency",
            ("generation", "model"): "llm_model",
            ("generation", "temperature"): "answer_temperature",
            ("generation", "max_tokens"): "answer_max_tokens",
        }
        sections = ("expansion", "retrieval", "generation", "response")

        flat_config: dict[str, Any] = {}
        for section in sections:
            for key, value in data.get(section, {}).items():
                flat_config[renames.get((section, key), key)] = value

        for key, value in data.items():
            if key not in sections and not isinstance(value, dict):
                flat_config[key] = value

        return cls(**flat_config)

    @classmethod
    def from_env(cls) -> OrchestratorConfig:
        """Load configuration from environment variables only."""
        return cls()

    def to_file(self, path: str | Path) -> None:
        """
        Save configuration to TOML file.

        Args:
            path: Path to write TOML configuration file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        sections: dict[str, dict[str, str | int | float | bool]] = {
            "expansion": {
                "max_hops": self.max_hops,
                "concurrency": self.expansion_concurrency,
            },
            "retrieval": {
                "top_k": self.top_k,
            },
            "generation": {
                "model": self.llm_model,
                "temperature": self.answer_temperature,
                "max_tokens": self.answer_max_tokens,
                "include_graph_context": self.include_graph_context,
            },
            "response": {
                "include_trace": self.include_trace,
            },
        }

        # Build TOML string manually (avoids extra dependency)
        lines = ["# GraphRAG Orchestrator Configuration", ""]

        for section_name, section_values in sections.items():
            lines.append(f"[{section_name}]")
            for key, value in section_values.items():
                if isinstance(value, str):
                    lines.append(f"{key} = {json.dumps(value)}")
                elif isinstance(value, bool):
                    lines.append(f"{key} = {str(value).lower()}")
                else:
                    lines.append(f"{key} = {value}")
            lines.append("")

        path.write_text("\n".join(lines))

    def with_overrides(self, **kwargs: Any) -> OrchestratorConfig:
        """Return new config with specified overrides."""
        new_config = OrchestratorConfig.__new__(OrchestratorConfig)
        for key in _OPTIONS:
            setattr(new_config, key, getattr(self, key))
        for key, value in kwargs.items():
            if key not in _OPTIONS:
                raise ValueError(f"Unknown configuration option: {key}")
            setattr(new_config, key, value)
        return new_config
