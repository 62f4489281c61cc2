"""
Unit tests for the command-line interface.

Run with: pytest tests/unit/test_cli.py -v
"""

import json

import pytest
from click.testing import CliRunner

from main import cli


SITEMAP = (
    "## Machine-Readable URL List\n"
    "### Depth 0\n"
    "- ✅ https://docs.example.com/\n"
    "- 🔒 https://docs.example.com/admin\n"
    "### Files (not extracted recursively)\n"
    "- 📄 https://docs.example.com/manual.pdf\n"
)


class TestParseSitemapCommand:
    """Test suite for the parse-sitemap command"""

    def test_writes_json(self, tmp_path):
        """Test entries are written to the output file"""
        sitemap = tmp_path / "sitemap.md"
        sitemap.write_text(SITEMAP, encoding="utf-8")
        output = tmp_path / "out" / "entries.json"

        result = CliRunner().invoke(cli, ["parse-sitemap", str(sitemap), "--output", str(output)])

        assert result.exit_code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data == [
            {"url": "https://docs.example.com/", "depth": 0, "kind": "page", "status": "accessible"},
            {"url": "https://docs.example.com/manual.pdf", "depth": "files", "kind": "file", "status": "file"},
        ]

    def test_no_entries(self, tmp_path):
        """Test documents without the section report no entries"""
        sitemap = tmp_path / "sitemap.md"
        sitemap.write_text("# Nothing\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["parse-sitemap", str(sitemap)])

        assert result.exit_code == 0
        assert "No machine-readable entries" in result.output

    def test_missing_file(self, tmp_path):
        """Test a missing sitemap file is a usage error"""
        result = CliRunner().invoke(cli, ["parse-sitemap", str(tmp_path / "missing.md")])

        assert result.exit_code == 2


class TestInspectCommand:
    """Test suite for the inspect command"""

    def test_bad_config_exits(self, tmp_path):
        """Test an invalid config file stops before launching a browser"""
        config = tmp_path / "bad.yaml"
        config.write_text("reveal:\n  tab_settle_ms: 10\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["inspect", "https://docs.example.com/", "--config", str(config)])

        assert result.exit_code == 2
        assert "Configuration error" in result.output


class TestVersion:
    """Test suite for version output"""

    def test_version_option(self):
        """Test --version prints the package version"""
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "PageScout" in result.output


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
