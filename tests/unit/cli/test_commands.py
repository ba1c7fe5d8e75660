"""Unit tests for CLI commands."""

import httpx
import pytest
from typer.testing import CliRunner

from gisph import __version__
from gisph.cli.app import app
from gisph.cli.commands.regions import extract_regions, field_rows, parse_filter, region_rows
from gisph.core.store import AUTO_UPDATE_DISABLED_KEY, LAST_UPDATE_CHECK_KEY, ConfigStore

runner = CliRunner()


def _regions_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/v1/regions":
        return httpx.Response(200, json={
            "data": [
                {"id": 1, "name": "NCR", "title": "National Capital Region", "code": "130000000"},
                {"id": 2, "name": "CAR"},
            ],
            "error": None,
        })
    if request.url.path == "/v1/regions/1":
        return httpx.Response(200, json={"data": {"id": 1, "name": "NCR", "bounds": [1, 2]}})
    return httpx.Response(404, json={"message": "Region not found"})


class TestMainApp:
    """Tests for main app options."""

    def test_help(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "CLI tool for GIS.ph API" in result.stdout

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_verbose_flag(self, make_context) -> None:
        result = runner.invoke(app, ["-v", "config", "list"], obj=make_context())
        assert result.exit_code == 0

    def test_debug_flag(self, make_context) -> None:
        result = runner.invoke(app, ["--debug", "config", "list"], obj=make_context())
        assert result.exit_code == 0
        assert "Debug mode enabled" in result.output

    def test_unknown_command_fails(self) -> None:
        result = runner.invoke(app, ["nope"])
        assert result.exit_code != 0


class TestRegionsCommands:
    """Tests for regions list/get."""

    def test_list_help(self) -> None:
        result = runner.invoke(app, ["regions", "list", "--help"])
        assert result.exit_code == 0
        assert "List all regions" in result.stdout

    def test_list_as_table(self, make_context) -> None:
        result = runner.invoke(app, ["regions", "list"], obj=make_context(_regions_handler))

        assert result.exit_code == 0
        assert "National Capital Region" in result.output
        assert "N/A" in result.output
        assert "Total: 2 region(s)" in result.output

    def test_list_sends_limit_and_filter(self, make_context) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": []})

        result = runner.invoke(
            app,
            ["regions", "list", "--limit", "3", "--filter", "status:active"],
            obj=make_context(handler),
        )

        assert result.exit_code == 0
        assert seen[0].url.params["limit"] == "3"
        assert seen[0].url.params["status"] == "active"
        assert "No regions found." in result.output

    def test_list_with_object_instead_of_list(self, make_context) -> None:
        handler = lambda request: httpx.Response(200, json={"data": {"id": 1, "name": "NCR"}})

        result = runner.invoke(app, ["regions", "list"], obj=make_context(handler))

        assert result.exit_code == 0
        assert "No regions found." in result.output
        assert "Total:" not in result.output

    def test_list_rejects_malformed_filter(self, make_context) -> None:
        result = runner.invoke(app, ["regions", "list", "--filter", "active"], obj=make_context(_regions_handler))
        assert result.exit_code == 1
        assert "Invalid filter" in result.output

    def test_list_rejects_unknown_format(self, make_context) -> None:
        result = runner.invoke(app, ["regions", "list", "--format", "xml"], obj=make_context(_regions_handler))
        assert result.exit_code != 0

    def test_get_defaults_to_json(self, make_context) -> None:
        result = runner.invoke(app, ["regions", "get", "1"], obj=make_context(_regions_handler))

        assert result.exit_code == 0
        assert '"name": "NCR"' in result.output

    def test_get_as_table(self, make_context) -> None:
        result = runner.invoke(app, ["regions", "get", "1", "--format", "table"], obj=make_context(_regions_handler))

        assert result.exit_code == 0
        assert "Field" in result.output
        assert "bounds" in result.output
        assert "[1, 2]" in result.output

    def test_api_error_exits_1(self, make_context) -> None:
        result = runner.invoke(app, ["regions", "get", "999"], obj=make_context(_regions_handler))

        assert result.exit_code == 1
        assert "API Error (404): Region not found" in result.output

    def test_network_error_exits_1(self, make_context) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        result = runner.invoke(app, ["regions", "list"], obj=make_context(handler))

        assert result.exit_code == 1
        assert "Unable to reach API at https://api.gis.ph" in result.output

    def test_configured_api_url_and_key_are_used(self, make_context, store: ConfigStore) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        store.set("apiUrl", "https://staging.gis.test")
        store.set("apiKey", "sk_store")
        result = runner.invoke(app, ["regions", "list"], obj=make_context(handler))

        assert result.exit_code == 0
        assert seen[0].url.host == "staging.gis.test"
        assert seen[0].headers["authorization"] == "Bearer sk_store"


class TestRegionHelpers:
    """Tests for the pure helpers behind the regions commands."""

    def test_parse_filter_splits_on_first_colon(self) -> None:
        assert parse_filter("url:http://x") == ("url", "http://x")

    @pytest.mark.parametrize("expression", ["active", ":active"])
    def test_parse_filter_rejects_malformed(self, expression: str) -> None:
        assert parse_filter(expression) is None

    def test_extract_regions_envelopes(self) -> None:
        assert extract_regions([{"id": 1}]) == [{"id": 1}]
        assert extract_regions({"data": [{"id": 1}]}) == [{"id": 1}]
        assert extract_regions({"regions": [{"id": 2}]}) == [{"id": 2}]
        assert extract_regions({"error": "x"}) == []

    def test_extract_regions_ignores_single_object_envelope(self) -> None:
        assert extract_regions({"data": {"id": 1, "name": "NCR"}}) == []
        assert extract_regions({"data": None, "regions": [{"id": 2}]}) == [{"id": 2}]

    def test_region_rows_fill_missing_fields(self) -> None:
        assert region_rows([{"id": 7}]) == [{"ID": 7, "Name": "N/A", "Title": "N/A", "Code": "N/A"}]

    def test_field_rows_serialize_nested_values(self) -> None:
        assert field_rows({"id": 1, "tags": ["a"]}) == [
            {"Field": "id", "Value": 1},
            {"Field": "tags", "Value": '["a"]'},
        ]


class TestConfigCommands:
    """Tests for config set/get/list/delete/auto-update."""

    def test_set_masks_sensitive_value(self, make_context, store: ConfigStore) -> None:
        result = runner.invoke(app, ["config", "set", "apiKey", "sk_live_12345678"], obj=make_context())

        assert result.exit_code == 0
        assert "***5678" in result.output
        assert "sk_live_12345678" not in result.output
        assert store.get("apiKey") == "sk_live_12345678"

    def test_get_existing(self, make_context, store: ConfigStore) -> None:
        store.set("apiUrl", "https://api.gis.ph")
        result = runner.invoke(app, ["config", "get", "apiUrl"], obj=make_context())

        assert result.exit_code == 0
        assert "apiUrl: https://api.gis.ph" in result.output

    def test_get_missing(self, make_context) -> None:
        result = runner.invoke(app, ["config", "get", "nothing"], obj=make_context())

        assert result.exit_code == 0
        assert 'Configuration key "nothing" not found' in result.output

    def test_delete(self, make_context, store: ConfigStore) -> None:
        store.set("apiUrl", "https://api.gis.ph")
        result = runner.invoke(app, ["config", "delete", "apiUrl"], obj=make_context())

        assert result.exit_code == 0
        assert store.get("apiUrl") is None

    def test_list_hides_internal_keys_and_masks(self, make_context, store: ConfigStore) -> None:
        app_ctx = make_context()
        store.set("apiKey", "abcdefgh")
        store.set(LAST_UPDATE_CHECK_KEY, 1)

        result = runner.invoke(app, ["config", "list"], obj=app_ctx)

        assert result.exit_code == 0
        assert "***efgh" in result.output
        assert LAST_UPDATE_CHECK_KEY not in result.output
        assert AUTO_UPDATE_DISABLED_KEY not in result.output
        assert "Auto-update checks: disabled" in result.output

    def test_list_empty(self, make_context) -> None:
        app_ctx = make_context(lambda request: httpx.Response(503), auto_update=True)
        result = runner.invoke(app, ["config", "list"], obj=app_ctx)

        assert result.exit_code == 0
        assert "No configuration set" in result.output

    def test_list_with_numeric_key_in_file(self, make_context, store: ConfigStore) -> None:
        app_ctx = make_context()
        store.path.write_text("1: one\napiUrl: https://x\nautoUpdateCheckDisabled: true\n")

        result = runner.invoke(app, ["config", "list"], obj=app_ctx)

        assert result.exit_code == 0
        assert "1: one" in result.output
        assert "apiUrl: https://x" in result.output

    def test_path(self, make_context, store: ConfigStore) -> None:
        result = runner.invoke(app, ["config", "path"], obj=make_context())
        assert result.stdout.strip() == str(store.path)

    def test_auto_update_enable_and_disable(self, make_context, store: ConfigStore) -> None:
        app_ctx = make_context()

        result = runner.invoke(app, ["config", "auto-update", "enable"], obj=app_ctx)
        assert result.exit_code == 0
        assert store.get(AUTO_UPDATE_DISABLED_KEY) is False

        result = runner.invoke(app, ["config", "auto-update", "disable"], obj=app_ctx)
        assert result.exit_code == 0
        assert store.get(AUTO_UPDATE_DISABLED_KEY) is True

    def test_auto_update_invalid_action(self, make_context) -> None:
        result = runner.invoke(app, ["config", "auto-update", "sometimes"], obj=make_context())

        assert result.exit_code == 1
        assert "Invalid action: sometimes" in result.output

    def test_corrupt_store_exits_1(self, make_context, store: ConfigStore) -> None:
        app_ctx = make_context()
        store.path.write_text("- not\n- a mapping\n")

        result = runner.invoke(app, ["config", "get", "apiUrl"], obj=app_ctx)

        assert result.exit_code == 1
        assert "not a key-value mapping" in " ".join(result.output.split())
