"""Unit tests for output formatting."""

import json

import pytest

from gisph.cli.formatter import NO_DATA, format_json, format_key_value, format_table


class TestFormatTable:
    """Tests for format_table."""

    @pytest.mark.parametrize("rows", [[], None, "text", [1, 2]])
    def test_empty_or_invalid_input_is_neutral(self, rows) -> None:
        assert format_table(rows) == NO_DATA

    def test_headers_and_cells_present(self) -> None:
        output = format_table([
            {"ID": 1, "Name": "Ilocos Region"},
            {"ID": 2, "Name": "Cagayan Valley"},
        ])

        lines = output.splitlines()
        assert "ID" in lines[1] and "Name" in lines[1]
        assert "Ilocos Region" in output
        assert "Cagayan Valley" in output

    def test_columns_are_aligned(self) -> None:
        output = format_table([{"A": "x"}, {"A": "much longer value"}])
        widths = {len(line) for line in output.splitlines()}
        assert len(widths) == 1

    def test_missing_cells_render_empty(self) -> None:
        output = format_table([{"ID": 1, "Code": "NCR"}, {"ID": 2}])
        assert "NCR" in output
        assert "None" not in output

    def test_markup_like_text_is_kept_verbatim(self) -> None:
        output = format_table([{"Name": "[bold]Region[/bold]"}])
        assert "[bold]Region[/bold]" in output

    def test_no_colour_codes(self) -> None:
        assert "\x1b[" not in format_table([{"ID": 1}])


class TestFormatJson:
    """Tests for format_json."""

    def test_round_trips(self) -> None:
        data = {"data": [{"id": 1, "name": "A"}], "error": None}
        assert json.loads(format_json(data)) == data

    def test_pretty_printed(self) -> None:
        assert format_json({"a": 1}) == '{\n  "a": 1\n}'

    def test_keeps_non_ascii(self) -> None:
        assert "Parañaque" in format_json({"name": "Parañaque"})


class TestFormatKeyValue:
    """Tests for format_key_value."""

    def test_lines_per_key(self) -> None:
        assert format_key_value({"id": 1, "name": "A"}) == "id: 1\nname: A"

    def test_nested_values_as_json(self) -> None:
        output = format_key_value({"bounds": {"lat": 14.6}})
        assert output.startswith("bounds: {")
        assert '"lat": 14.6' in output

    def test_non_dict_is_stringified(self) -> None:
        assert format_key_value(42) == "42"
        assert format_key_value(None) == "None"
