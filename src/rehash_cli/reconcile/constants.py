"""Shared constants for fingerprint reconciliation.

Naming templates follow the bundler convention: ``[id]`` and ``[name]`` are
literal unit tokens and the fingerprint placeholder is ``[hash]`` (structural,
derived from the whole build) or ``[chunkhash]`` (derived from the unit's own
content), optionally truncated with ``:<digits>``.
"""

import re

# Placeholder tokens
ID_TOKEN = "[id]"
NAME_TOKEN = "[name]"

# Group 1: 'chunkhash' / 'hash'; group 2: truncation length (absent when the
# template does not truncate).
FINGERPRINT_PLACEHOLDER_REGEX = re.compile(r"\[((?:chunk)?hash)(?::(\d+))?\]", re.IGNORECASE)
CONTENT_PLACEHOLDER_REGEX = re.compile(r"\[chunkhash(?::\d+)?\]", re.IGNORECASE)

# Fingerprint kinds
CONTENT_KIND = "content"
STRUCTURAL_KIND = "structural"
PLACEHOLDER_KINDS = {
    "chunkhash": CONTENT_KIND,
    "hash": STRUCTURAL_KIND,
}

# Output artifacts
SOURCE_MAP_EXTENSION = "map"
SOURCE_MAP_SUFFIX = ".map"
DEFAULT_SCRIPT_EXTENSIONS = ("js",)
DEFAULT_MANIFEST_JSON_NAME = "manifest.json"
DEFAULT_MANIFEST_CHUNK_NAME = "manifest"
DEFAULT_HASH_FUNCTION = "md5"

# JSON manifest indentation
MANIFEST_JSON_INDENT = 2
