"""Tests for naming template parsing and filename rendering."""

import pytest

from rehash_cli.reconcile.templates import get_file_type, parse_naming_template, render_filename


class TestParseNamingTemplate:

    def test_truncated_chunkhash_is_content(self):
        template = parse_naming_template("[name].[chunkhash:8].js")
        assert template.fingerprint_kind == "content"
        assert template.truncate_length == 8
        assert template.uses_content_fingerprint

    def test_chunkhash_without_length(self):
        template = parse_naming_template("js/[id].[chunkhash].js")
        assert template.fingerprint_kind == "content"
        assert template.truncate_length is None

    def test_hash_is_structural(self):
        template = parse_naming_template("[name].[hash:20].js")
        assert template.fingerprint_kind == "structural"
        assert template.truncate_length == 20
        assert not template.uses_content_fingerprint

    def test_match_is_case_insensitive(self):
        assert parse_naming_template("[name].[ChunkHash:6].js").fingerprint_kind == "content"

    @pytest.mark.parametrize("raw", ["[name].js", "", None, "hashed/[name].js"])
    def test_no_placeholder(self, raw):
        template = parse_naming_template(raw)
        assert template.fingerprint_kind is None
        assert template.truncate_length is None

    def test_raw_is_kept(self):
        assert parse_naming_template("[name].[chunkhash:8].js").raw == "[name].[chunkhash:8].js"


class TestGetFileType:

    @pytest.mark.parametrize("filename,expected", [
        ("app.abcdef12.js", "js"),
        ("app.abcdef12.js.map", "map"),
        ("app.abcdef12.js?v=3.1", "js"),
        ("js/app.css", "css"),
    ])
    def test_last_segment(self, filename, expected):
        assert get_file_type(filename) == expected


class TestRenderFilename:

    def test_name_and_truncated_hash(self):
        template = parse_naming_template("[name].[chunkhash:8].js")
        assert render_filename(template, 0, "app", "11223344", "js") == "app.11223344.js"

    def test_id_and_directory(self):
        template = parse_naming_template("static/js/[id].[chunkhash].js")
        assert render_filename(template, 5, None, "ffee", "js") == "static/js/5.ffee.js"

    def test_extension_follows_renamed_file(self):
        template = parse_naming_template("[name].[chunkhash:8].js")
        assert render_filename(template, 1, "app", "11223344", "mjs") == "app.11223344.mjs"

    def test_structural_placeholder_is_left_alone(self):
        template = parse_naming_template("[name].[hash:4].[chunkhash:8].js")
        assert render_filename(template, 1, "app", "11223344", "js") == "app.[hash:4].11223344.js"
