"""Integration tests for the pattern-catalog command-line interface."""

import json

import pytest

from pattern_catalog_mcp.cli import EXIT_FAILED, EXIT_OK, EXIT_USAGE, main


@pytest.fixture
def run_cli(isolated_config, tmp_path, capsys):
    """Run the CLI with logs sent to a temporary file; returns (status, stdout, stderr)."""

    def run(*argv):
        command, rest = argv[0], list(argv[1:])
        status = main([command, "--log-file", str(tmp_path / "cli.log")] + rest)
        captured = capsys.readouterr()
        return status, captured.out, captured.err

    return run


class TestValidateCommand:
    """Test the validate subcommand"""

    def test_clean_catalog(self, run_cli, fixture_catalog_dir):
        status, out, _ = run_cli("validate", "--catalog-dir", fixture_catalog_dir)

        assert status == EXIT_OK
        assert "Catalog validation: 5 entries" in out
        assert "No error-severity violations" in out

    def test_broken_catalog(self, run_cli, broken_catalog_dir):
        status, out, err = run_cli("validate", "--catalog-dir", broken_catalog_dir)

        assert status == EXIT_FAILED
        assert "unresolved-reference" in out
        assert "coverage-count" in out
        assert "facade: missing-field" in err

    def test_json_report(self, run_cli, broken_catalog_dir):
        status, out, _ = run_cli("validate", "--catalog-dir", broken_catalog_dir, "--json")
        data = json.loads(out)

        assert status == EXIT_FAILED
        assert data["error_count"] == 2
        assert data["load_errors"] == [
            {"source_id": "facade", "kind": "missing-field", "message": "Missing required field: purpose"}
        ]

    def test_missing_directory(self, run_cli, tmp_path):
        status, _, err = run_cli("validate", "--catalog-dir", str(tmp_path / "absent"))

        assert status == EXIT_FAILED
        assert "does not exist" in err

    def test_no_directory_configured(self, run_cli):
        status, _, err = run_cli("validate")

        assert status == EXIT_FAILED
        assert "No catalog directory given" in err

    def test_directory_without_entries(self, run_cli, tmp_path):
        status, _, err = run_cli("validate", "--catalog-dir", str(tmp_path))

        assert status == EXIT_FAILED
        assert "No usable entries" in err

    def test_undecodable_file_is_reported(self, run_cli, tmp_path, document_factory):
        catalog_dir = tmp_path / "catalog"
        catalog_dir.mkdir()
        (catalog_dir / "good.md").write_text(document_factory("Good"), encoding="utf-8")
        (catalog_dir / "bad.md").write_bytes(b"---\ntitle: \xff\xfe\n---\n")

        status, out, err = run_cli("validate", "--catalog-dir", str(catalog_dir))

        assert status == EXIT_OK
        assert "bad: unreadable-source" in err
        assert "Load errors" in out

    def test_catalog_dir_from_env(self, run_cli, isolated_config, fixture_catalog_dir):
        isolated_config.setenv("CATALOG_DIR", fixture_catalog_dir)
        status, _, _ = run_cli("validate")
        assert status == EXIT_OK


class TestQueryCommand:
    """Test the query subcommand"""

    def test_json_results(self, run_cli, fixture_catalog_dir):
        status, out, _ = run_cli(
            "query", "event", "handling", "--catalog-dir", fixture_catalog_dir, "--language", "python", "--json"
        )
        data = json.loads(out)

        assert status == EXIT_OK
        assert data["tokens"] == ["event", "handling"]
        assert [r["entry_id"] for r in data["results"]] == ["observer"]
        assert data["results"][0]["variant"]["name"] == "Callback List"
        assert "payload" not in data["results"][0]["variant"]

    def test_text_results(self, run_cli, fixture_catalog_dir):
        status, out, _ = run_cli("query", "retry", "--catalog-dir", fixture_catalog_dir, "--language", "ts")

        assert status == EXIT_OK
        assert "retry-with-backoff" in out
        assert "matched: retry->tags(+3)" in out
        assert "use: p-retry (recommended) [p-retry]" in out

    def test_invalid_filter(self, run_cli, fixture_catalog_dir):
        status, out, _ = run_cli("query", "event", "--catalog-dir", fixture_catalog_dir, "--language", "klingon")

        assert status == EXIT_USAGE
        assert "Invalid query" in out

    def test_no_match(self, run_cli, fixture_catalog_dir):
        status, out, _ = run_cli("query", "quantum", "--catalog-dir", fixture_catalog_dir)

        assert status == EXIT_OK
        assert "No matching entries." in out

    def test_index_cache_is_written(self, run_cli, fixture_catalog_dir, tmp_path):
        index_path = tmp_path / "index.json"
        status, _, _ = run_cli(
            "query", "event", "--catalog-dir", fixture_catalog_dir, "--index-cache", str(index_path)
        )

        assert status == EXIT_OK
        assert json.loads(index_path.read_text())["entry_ids"] == [
            "observer",
            "retry-with-backoff",
            "singleton",
            "state",
        ]

    def test_config_file_taxonomy(self, run_cli, fixture_catalog_dir, config_file):
        status, out, _ = run_cli(
            "query", "--catalog-dir", fixture_catalog_dir, "--config", config_file, "--language", "golang", "--json"
        )
        data = json.loads(out)

        assert status == EXIT_OK
        assert data["filters"]["language"] == "go"
        assert data["results"] == []


class TestSummaryCommand:
    """Test the summary subcommand"""

    def test_json(self, run_cli, fixture_catalog_dir):
        status, out, _ = run_cli("summary", "--catalog-dir", fixture_catalog_dir, "--json")
        data = json.loads(out)

        assert status == EXIT_OK
        assert data["total_entries"] == 4
        assert data["by_group"] == {"patterns": 3, "functions": 1, "processes": 0}
        assert data["by_category"] == {"creational": 1, "behavioral": 2, "function-pattern": 1}

    def test_markdown(self, run_cli, fixture_catalog_dir):
        status, out, _ = run_cli("summary", "--catalog-dir", fixture_catalog_dir, "--markdown")

        assert status == EXIT_OK
        assert "**Total Patterns:** 3" in out
        assert "**Total Functions:** 1" in out
        assert "| typescript | 3 |" in out

    def test_text(self, run_cli, fixture_catalog_dir):
        status, out, _ = run_cli("summary", "--catalog-dir", fixture_catalog_dir)

        assert status == EXIT_OK
        assert "Catalog summary: 4 entries" in out
