"""End-to-end tests against the fixture project, through the API and the CLI."""

from __future__ import annotations

import json
import os

from click.testing import CliRunner

from vendorscope.cli import cli
from vendorscope.index import PackageIndex
from vendorscope.resolver import NamespaceResolver

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")
APP_MANIFEST = os.path.join(FIXTURES_DIR, "composer_app", "composer.json")
VENDOR_DIR = os.path.join(os.path.realpath(os.path.dirname(APP_MANIFEST)), "vendor")


def _resolver() -> NamespaceResolver:
    return NamespaceResolver(PackageIndex(APP_MANIFEST))


class TestInstalledProject:
    def test_deepest_namespace(self):
        package = _resolver().resolve_package_by_symbol("GuzzleHttp\\Promise\\FulfilledPromise")
        assert package.name == "guzzlehttp/promises"

    def test_shallow_namespace(self):
        package = _resolver().resolve_package_by_symbol("GuzzleHttp\\Client")
        assert package.name == "guzzlehttp/guzzle"

    def test_files_fallback(self):
        package = _resolver().resolve_package_by_symbol("getallheaders")
        assert package.name == "ralouphie/getallheaders"

    def test_unknown_symbol(self):
        assert _resolver().resolve_package_by_symbol("Acme\\Shop\\Cart") is None

    def test_install_path(self):
        resolver = _resolver()
        package = resolver.resolve_package_by_symbol("GuzzleHttp\\Client")
        assert resolver.resolve_install_path(package) == os.path.join(
            VENDOR_DIR, "guzzlehttp", "guzzle"
        )

    def test_metapackage_install_path(self):
        resolver = _resolver()
        meta = resolver.index.list_packages()[-1]
        assert resolver.resolve_install_path(meta) is None

    def test_source_directory_for_empty_root(self):
        resolver = _resolver()
        assert resolver.resolve_source_directory("Symfony\\Polyfill\\Mbstring\\Mbstring") == (
            os.path.join(VENDOR_DIR, "symfony", "polyfill-mbstring")
        )

    def test_multi_root_package(self):
        resolver = _resolver()
        package = resolver.resolve_package_by_symbol("Azonmedia\\Helpers\\Str")
        assert package.name == "azonmedia/utilities"
        assert resolver.get_namespace(package) == "Azonmedia\\Utilities\\"
        assert resolver.get_source_root(package) == "src/Utilities"


class TestCli:
    def test_manifest(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--manifest", APP_MANIFEST, "manifest"])
        assert result.exit_code == 0
        assert result.output.strip() == os.path.abspath(APP_MANIFEST)

    def test_which_json(self):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["--manifest", APP_MANIFEST, "--json", "which", "GuzzleHttp\\Promise\\Each"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data == [{
            "symbol": "GuzzleHttp\\Promise\\Each",
            "package": "guzzlehttp/promises",
            "source_directory": os.path.join(VENDOR_DIR, "guzzlehttp", "promises", "src"),
        }]

    def test_which_unresolved_exits_nonzero(self):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["--manifest", APP_MANIFEST, "--json", "which", "GuzzleHttp\\Client", "Nope\\X"]
        )
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert [row["package"] for row in data] == ["guzzlehttp/guzzle", None]

    def test_which_table(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--manifest", APP_MANIFEST, "which", "getallheaders"])
        assert result.exit_code == 0
        assert "ralouphie/getallheaders" in result.output

    def test_list_json(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--manifest", APP_MANIFEST, "--json", "list"])
        assert result.exit_code == 0
        rows = json.loads(result.output)
        assert len(rows) == 6
        assert rows[0]["namespace"] == "GuzzleHttp\\"
        assert rows[-1]["install_path"] is None

    def test_show(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--manifest", APP_MANIFEST, "show", "guzzlehttp/promises"])
        assert result.exit_code == 0
        assert "version: 2.0.2" in result.output
        assert "source_root: src/" in result.output

    def test_show_unknown_package(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--manifest", APP_MANIFEST, "show", "nope/nope"])
        assert result.exit_code == 1
        assert "not installed" in result.output

    def test_missing_manifest(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["--manifest", str(tmp_path / "composer.json"), "manifest"]
        )
        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_manifest_from_environment(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["manifest"], env={"VENDORSCOPE_MANIFEST": APP_MANIFEST})
        assert result.exit_code == 0
        assert result.output.strip() == os.path.abspath(APP_MANIFEST)
