"""Tests for configuration loading and precedence."""

import argparse

import pytest
from pydantic import ValidationError

from pattern_catalog_mcp.core import cache as core_cache
from pattern_catalog_mcp.core import config
from pattern_catalog_mcp.core.config import add_common_arguments, apply_config_args, validate_config_file
from pattern_catalog_mcp.core.exceptions import ConfigurationError
from pattern_catalog_mcp.models.config import CatalogConfig


def _parse(argv, tmp_path):
    parser = argparse.ArgumentParser()
    add_common_arguments(parser)
    parser.add_argument("--no-cache", action="store_true")
    parser.add_argument("--cache-size", type=int, default=None)
    parser.add_argument("--cache-ttl", type=int, default=None)
    return parser.parse_args(argv + ["--log-file", str(tmp_path / "test.log")])


class TestValidateConfigFile:
    """Tests for validate_config_file"""

    def test_valid_config(self, config_file):
        loaded = validate_config_file(config_file)

        assert loaded.catalog_dir == "catalog"
        assert sorted(loaded.languages) == ["go", "python", "typescript"]
        assert loaded.languages["go"] == ["go", "golang"]
        assert loaded.count_groups == {
            "patterns": ["creational", "structural", "behavioral"],
            "functions": ["function-pattern"],
        }

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="File does not exist"):
            validate_config_file(str(tmp_path / "absent.yaml"))

    def test_directory_is_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Path is not a file"):
            validate_config_file(str(tmp_path))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("")
        with pytest.raises(ConfigurationError, match="Config file is empty"):
            validate_config_file(str(path))

    def test_list_is_rejected(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("- python\n- go\n")
        with pytest.raises(ConfigurationError, match="Config must be a YAML dictionary"):
            validate_config_file(str(path))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("languages: [python\n")
        with pytest.raises(ConfigurationError, match="YAML parsing failed"):
            validate_config_file(str(path))

    def test_count_group_with_unknown_category(self, config_file):
        path = config_file.replace("catalog.yaml", "catalog_bad_group.yaml")
        with pytest.raises(ConfigurationError, match="Validation failed") as exc_info:
            validate_config_file(path)
        assert "behavioral" in str(exc_info.value)
        assert exc_info.value.config_path == path


class TestCatalogConfig:
    """Tests for the CatalogConfig model"""

    def test_defaults(self):
        loaded = CatalogConfig()
        assert "python" in loaded.languages
        assert loaded.difficulties == ["beginner", "intermediate", "advanced"]
        assert loaded.catalog_dir is None

    def test_language_names_and_aliases_are_normalized(self):
        loaded = CatalogConfig(languages={" Elixir ": ["EX", " exs", ""]})
        assert loaded.languages == {"elixir": ["elixir", "ex", "exs"]}

    def test_empty_languages_rejected(self):
        with pytest.raises(ValidationError, match="languages cannot be empty"):
            CatalogConfig(languages={})

    def test_duplicate_categories_rejected(self):
        with pytest.raises(ValidationError, match="duplicates"):
            CatalogConfig(categories=["creational", "Creational"], count_groups={})

    def test_empty_difficulties_rejected(self):
        with pytest.raises(ValidationError, match="list cannot be empty"):
            CatalogConfig(difficulties=[])

    def test_to_taxonomy(self):
        taxonomy = CatalogConfig(
            languages={"elixir": ["ex"]},
            categories=["creational", "architectural"],
            count_groups={"Patterns": ["creational", "architectural"]},
            stop_words=["The", "need"],
        ).to_taxonomy()

        assert taxonomy.resolve_language("EX") == "elixir"
        assert taxonomy.resolve_language("python") is None
        assert taxonomy.categories == ("creational", "architectural")
        assert taxonomy.count_groups == {"patterns": ("creational", "architectural")}
        assert taxonomy.stop_words == frozenset({"the", "need"})


class TestApplyConfigArgs:
    """Tests for flag > environment > default precedence"""

    def test_defaults(self, isolated_config, tmp_path):
        apply_config_args(_parse([], tmp_path))

        assert config.CONFIG_PATH is None
        assert config.CATALOG_DIR is None
        assert config.CACHE_ENABLED is True
        assert config.CACHE_SIZE == 100
        assert config.CACHE_TTL == 300
        assert core_cache.get_query_cache() is not None

    def test_catalog_dir_from_env(self, isolated_config, tmp_path):
        isolated_config.setenv("CATALOG_DIR", "/from/env")
        apply_config_args(_parse([], tmp_path))
        assert config.CATALOG_DIR == "/from/env"

    def test_flag_beats_env(self, isolated_config, tmp_path):
        isolated_config.setenv("CATALOG_DIR", "/from/env")
        isolated_config.setenv("CACHE_SIZE", "7")
        apply_config_args(_parse(["--catalog-dir", "/from/flag", "--cache-size", "3"], tmp_path))

        assert config.CATALOG_DIR == "/from/flag"
        assert config.CACHE_SIZE == 3

    def test_catalog_dir_from_config_file(self, isolated_config, config_file, tmp_path):
        apply_config_args(_parse(["--config", config_file], tmp_path))

        assert config.CONFIG_PATH == config_file
        assert config.CATALOG_DIR == "catalog"
        assert config.CATALOG_CONFIG.to_taxonomy().resolve_language("golang") == "go"

    def test_config_path_from_env(self, isolated_config, config_file, tmp_path):
        isolated_config.setenv("PATTERN_CATALOG_CONFIG", config_file)
        apply_config_args(_parse([], tmp_path))
        assert config.CONFIG_PATH == config_file

    def test_invalid_config_exits(self, isolated_config, config_file, tmp_path):
        bad = config_file.replace("catalog.yaml", "catalog_bad_group.yaml")
        with pytest.raises(SystemExit) as exc_info:
            apply_config_args(_parse(["--config", bad], tmp_path))
        assert exc_info.value.code == 1

    def test_cache_disabled_by_env(self, isolated_config, tmp_path):
        isolated_config.setenv("CACHE_DISABLED", "1")
        apply_config_args(_parse([], tmp_path))

        assert config.CACHE_ENABLED is False
        assert core_cache.get_query_cache() is None

    def test_invalid_int_env_falls_back(self, isolated_config, tmp_path):
        isolated_config.setenv("CACHE_TTL", "soon")
        apply_config_args(_parse([], tmp_path))
        assert config.CACHE_TTL == 300

    def test_workers_flag(self, isolated_config, tmp_path):
        apply_config_args(_parse(["--workers", "3"], tmp_path))
        assert config.WORKERS == 3

    def test_workers_are_capped(self, isolated_config, tmp_path):
        isolated_config.setenv("CATALOG_WORKERS", "64")
        apply_config_args(_parse([], tmp_path))
        assert config.WORKERS == 16
