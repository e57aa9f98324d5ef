"""Tests for loading a compilation from a stats file."""

import json

import pytest

from rehash_cli.reconcile import ReconcileError, load_compilation
from rehash_cli.reconcile.host import dump_assets


def _stats(tmp_path, data):
    path = tmp_path / "stats.json"
    path.write_text(json.dumps(data))
    return path


def test_load_compilation(tmp_path, dist, write_files):
    write_files({"app.abcdef12.js": "x", "1.ffff0000.js": "y"})
    path = _stats(tmp_path, {
        "outputPath": "dist",
        "output": {"filename": "[name].[chunkhash:8].js", "chunkFilename": "[id].[chunkhash:8].js"},
        "chunks": [
            {"id": 0, "name": "app", "hash": "abcdef1234567890", "files": ["app.abcdef12.js"], "entry": True},
            {"id": 1, "name": None, "hash": "ffff0000aaaa", "files": ["1.ffff0000.js", "1.ffff0000.js.map"]},
        ],
    })

    compilation = load_compilation(path)

    assert compilation.output_path == dist
    assert compilation.entry_template == "[name].[chunkhash:8].js"
    assert compilation.non_entry_template == "[id].[chunkhash:8].js"
    app, lazy = compilation.units
    assert (app.id, app.name, app.is_entry) == (0, "app", True)
    assert (lazy.id, lazy.name, lazy.is_entry) == (1, None, False)
    # Only files present on disk are seeded into the asset table
    assert dump_assets(compilation) == ["1.ffff0000.js", "app.abcdef12.js"]


def test_chunk_filename_defaults_to_filename(tmp_path):
    path = _stats(tmp_path, {"output": {"filename": "[name].[chunkhash].js"}, "chunks": []})
    compilation = load_compilation(path, output_path=tmp_path)
    assert compilation.non_entry_template == "[name].[chunkhash].js"
    assert compilation.output_path == tmp_path


@pytest.mark.parametrize("data", [
    [],
    {"chunks": [{"name": "no-id"}]},
    {"chunks": [{"id": 1, "hash": "abcd", "files": "app.js"}]},
    {"chunks": [{"id": 1, "files": ["1.js"]}]},
    {"chunks": [{"id": 1, "hash": "", "files": ["1.js"]}]},
])
def test_invalid_stats(tmp_path, data):
    with pytest.raises(ReconcileError):
        load_compilation(_stats(tmp_path, data))


def test_malformed_stats(tmp_path):
    path = tmp_path / "stats.json"
    path.write_text("{")
    with pytest.raises(ReconcileError):
        load_compilation(path)
