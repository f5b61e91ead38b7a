"""Tests for OrchestratorConfig."""

import pytest

from graphrag_orchestrator.config.settings import OrchestratorConfig

ENV_VARS = [
    "GRAPHRAG_MAX_HOPS",
    "GRAPHRAG_TOP_K",
    "GRAPHRAG_EXPANSION_CONCURRENCY",
    "GRAPHRAG_INCLUDE_GRAPH_CONTEXT",
    "GRAPHRAG_LLM_MODEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the host environment out of config tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    """Test default configuration values."""

    def test_defaults(self):
        config = OrchestratorConfig()

        assert config.max_hops == 2
        assert config.top_k == 5
        assert config.expansion_concurrency == 8
        assert config.include_graph_context is False
        assert config.include_trace is True
        assert config.answer_temperature == 0.0
        assert config.answer_max_tokens == 1024
        assert config.llm_model == "gpt-4o-mini"


class TestOverrides:
    """Test environment and keyword overrides."""

    def test_kwargs(self):
        config = OrchestratorConfig(max_hops=3, top_k=8)

        assert config.max_hops == 3
        assert config.top_k == 8

    def test_unknown_option(self):
        with pytest.raises(ValueError, match="Unknown configuration option"):
            OrchestratorConfig(max_depth=3)

    def test_private_option_rejected(self):
        with pytest.raises(ValueError):
            OrchestratorConfig(_load_from_env=None)

    @pytest.mark.parametrize("name", ["to_file", "with_overrides", "from_file", "from_env"])
    def test_method_names_rejected(self, name):
        with pytest.raises(ValueError, match="Unknown configuration option"):
            OrchestratorConfig(**{name: 1})

        with pytest.raises(ValueError, match="Unknown configuration option"):
            OrchestratorConfig().with_overrides(**{name: 1})

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("GRAPHRAG_MAX_HOPS", "4")
        monkeypatch.setenv("GRAPHRAG_TOP_K", "10")
        monkeypatch.setenv("GRAPHRAG_EXPANSION_CONCURRENCY", "2")
        monkeypatch.setenv("GRAPHRAG_INCLUDE_GRAPH_CONTEXT", "true")
        monkeypatch.setenv("GRAPHRAG_LLM_MODEL", "gpt-4o")

        config = OrchestratorConfig.from_env()

        assert config.max_hops == 4
        assert config.top_k == 10
        assert config.expansion_concurrency == 2
        assert config.include_graph_context is True
        assert config.llm_model == "gpt-4o"

    def test_environment_false_flag(self, monkeypatch):
        monkeypatch.setenv("GRAPHRAG_INCLUDE_GRAPH_CONTEXT", "no")

        assert OrchestratorConfig().include_graph_context is False

    def test_kwargs_beat_environment(self, monkeypatch):
        monkeypatch.setenv("GRAPHRAG_MAX_HOPS", "4")

        assert OrchestratorConfig(max_hops=1).max_hops == 1

    def test_with_overrides(self):
        base = OrchestratorConfig(top_k=7)

        derived = base.with_overrides(max_hops=0, include_trace=False)

        assert derived.max_hops == 0
        assert derived.include_trace is False
        assert derived.top_k == 7
        # Original untouched
        assert base.max_hops == 2
        assert base.include_trace is True

    def test_with_overrides_unknown(self):
        with pytest.raises(ValueError, match="Unknown configuration option"):
            OrchestratorConfig().with_overrides(hops=1)


class TestFileConfig:
    """Test TOML load/save."""

    def test_from_file(self, tmp_path):
        path = tmp_path / "graphrag.toml"
        path.write_text(
            "[expansion]\n"
            "max_hops = 3\n"
            "concurrency = 4\n"
            "\n"
            "[retrieval]\n"
            "top_k = 8\n"
            "\n"
            "[generation]\n"
            'model = "gpt-4o"\n'
            "temperature = 0.3\n"
            "include_graph_context = true\n"
            "\n"
            "[response]\n"
            "include_trace = false\n"
        )

        config = OrchestratorConfig.from_file(path)

        assert config.max_hops == 3
        assert config.expansion_concurrency == 4
        assert config.top_k == 8
        assert config.llm_model == "gpt-4o"
        assert config.answer_temperature == 0.3
        assert config.include_graph_context is True
        assert config.include_trace is False

    def test_from_file_top_level_keys(self, tmp_path):
        path = tmp_path / "graphrag.toml"
        path.write_text("max_hops = 1\n")

        assert OrchestratorConfig.from_file(path).max_hops == 1

    def test_from_file_unknown_key(self, tmp_path):
        path = tmp_path / "graphrag.toml"
        path.write_text("[retrieval]\nreranker = \"none\"\n")

        with pytest.raises(ValueError):
            OrchestratorConfig.from_file(path)

    def test_from_file_method_name_key(self, tmp_path):
        path = tmp_path / "graphrag.toml"
        path.write_text("with_overrides = 1\n")

        with pytest.raises(ValueError, match="Unknown configuration option"):
            OrchestratorConfig.from_file(path)

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            OrchestratorConfig.from_file(tmp_path / "missing.toml")

    def test_to_file_then_load(self, tmp_path):
        path = tmp_path / "nested" / "graphrag.toml"
        original = OrchestratorConfig(
            max_hops=3,
            top_k=9,
            llm_model="gpt-4o",
            include_graph_context=True,
            include_trace=False,
        )

        original.to_file(path)
        loaded = OrchestratorConfig.from_file(path)

        assert path.read_text().startswith("# GraphRAG Orchestrator Configuration")
        assert loaded.max_hops == 3
        assert loaded.top_k == 9
        assert loaded.llm_model == "gpt-4o"
        assert loaded.include_graph_context is True
        assert loaded.include_trace is False

    @pytest.mark.parametrize("model", ['my "quoted" model', "C:\\models\\local", "modèle\tv2"])
    def test_to_file_escapes_strings(self, tmp_path, model):
        path = tmp_path / "graphrag.toml"

        OrchestratorConfig(llm_model=model).to_file(path)

        assert OrchestratorConfig.from_file(path).llm_model == model
