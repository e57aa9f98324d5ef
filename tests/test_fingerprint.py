"""Tests for content fingerprints and payload patching."""

import hashlib

import pytest

from rehash_cli.reconcile.errors import ConfigurationError
from rehash_cli.reconcile.fingerprint import (
    compute_fingerprint,
    fingerprint_artifact,
    fingerprint_function,
    truncate_fingerprint,
)
from rehash_cli.reconcile.patching import patch_occurrences
from rehash_cli.reconcile.store import OutputDirectory


def test_compute_fingerprint_is_md5_of_utf8():
    payload = "console.log('héllo')"
    assert compute_fingerprint(payload) == hashlib.md5(payload.encode("utf-8")).hexdigest()


def test_compute_fingerprint_matches_raw_bytes_of_undecodable_payload(dist):
    raw = b"var s='caf\xe9';"
    (dist / "legacy.js").write_bytes(raw)
    payload = OutputDirectory(dist).read_text("legacy.js")
    assert compute_fingerprint(payload) == hashlib.md5(raw).hexdigest()


def test_compute_fingerprint_other_algorithm():
    assert compute_fingerprint("x", "sha256") == hashlib.sha256(b"x").hexdigest()


def test_unknown_algorithm_is_configuration_error():
    with pytest.raises(ConfigurationError):
        fingerprint_function("not-a-hash")


def test_fingerprint_function_is_deterministic():
    fingerprint = fingerprint_function("md5")
    assert fingerprint("abc") == fingerprint("abc")


@pytest.mark.parametrize("length", [0, 1, 8, 32, 100, "8"])
def test_truncate_valid_length(length):
    full = compute_fingerprint("payload")
    truncated = truncate_fingerprint(full, length)
    assert len(truncated) == min(int(length), len(full))
    assert full.startswith(truncated)


@pytest.mark.parametrize("length", [None, "", "abc", -1, "-1", 3.7, 3.0, True, False, object()])
def test_truncate_invalid_length_is_identity(length):
    assert truncate_fingerprint("abcdef", length) == "abcdef"


def test_fingerprint_artifact_ignores_own_name():
    before = "code();\n//# sourceMappingURL=app.aaaa.js.map"
    after = "code();\n//# sourceMappingURL=app.bbbb.js.map"
    fingerprint = fingerprint_function("md5")
    assert fingerprint_artifact(fingerprint, before, "app.aaaa.js") == \
        fingerprint_artifact(fingerprint, after, "js/app.bbbb.js")


class TestPatchOccurrences:

    def test_replaces_every_occurrence(self):
        assert patch_occurrences("a.js a.js", "a.js", "b.js") == "b.js b.js"

    def test_metacharacters_are_literal(self):
        assert patch_occurrences("a.js axjs", "a.js", "b.js") == "b.js axjs"

    def test_empty_old_is_noop(self):
        assert patch_occurrences("abc", "", "x") == "abc"

    def test_whole_token_skips_embedded_matches(self):
        payload = '"abcdef12" "xabcdef12" abcdef12;'
        assert patch_occurrences(payload, "abcdef12", "11223344", whole_token=True) == \
            '"11223344" "xabcdef12" 11223344;'
