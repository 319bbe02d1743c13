"""Tests for ModuleIndex and Module aggregation."""

from pathlib import Path

import pytest

from modulemd_model.core.index import Module, ModuleIndex
from modulemd_model.errors import DuplicateError, ParseError, UpgradeError, ValidationError
from modulemd_model.models.defaults import Defaults
from modulemd_model.models.stream import ModuleStream

DATA_DIR = Path(__file__).parent / "data"


def _stream(name, stream_name, version=0, context=None, mdversion=2):
    stream = ModuleStream.new(mdversion, name, stream_name)
    stream.version = version
    stream.context = context
    stream.summary = "summary"
    return stream


def _doc(name, stream_name, extra=""):
    return (
        "---\ndocument: modulemd\nversion: 2\ndata:\n"
        f"  name: {name}\n  stream: {stream_name}\n{extra}...\n"
    )


# ═══════════════════════════════════════════
# Adding Streams
# ═══════════════════════════════════════════


class TestAddStream:
    def test_add_and_lookup(self):
        index = ModuleIndex()
        assert index.add_stream(_stream("foo", "latest", 1)) is True
        module = index.get_module("foo")
        assert module.get_stream_names() == ["latest"]
        assert module.get_stream_by_nsvca("latest", 1).summary == "summary"

    def test_identical_readd_is_noop(self):
        index = ModuleIndex()
        index.add_stream(_stream("foo", "latest", 1))
        assert index.add_stream(_stream("foo", "latest", 1)) is False
        assert index.stream_count() == 1

    def test_conflicting_readd_raises(self):
        index = ModuleIndex()
        index.add_stream(_stream("foo", "latest", 1))
        other = _stream("foo", "latest", 1)
        other.summary = "different"
        with pytest.raises(DuplicateError) as exc_info:
            index.add_stream(other)
        assert exc_info.value.nsvca == "foo:latest:1"

    def test_same_name_different_context(self):
        index = ModuleIndex()
        index.add_stream(_stream("foo", "latest", 1, "aaaa"))
        index.add_stream(_stream("foo", "latest", 1, "bbbb"))
        assert index.stream_count() == 2

    def test_index_owns_a_copy(self):
        index = ModuleIndex()
        stream = _stream("foo", "latest")
        index.add_stream(stream)
        stream.summary = "changed"
        assert index.get_module("foo").get_stream_by_nsvca("latest", 0).summary == "summary"

    def test_missing_module_name(self):
        with pytest.raises(ValidationError):
            ModuleIndex().add_stream(ModuleStream.new(2))

    def test_missing_stream_name_gets_placeholder(self):
        index = ModuleIndex()
        index.add_stream(_stream("foo", None))
        index.add_stream(_stream("foo", None, 2))
        assert index.get_module("foo").get_stream_names() == ["__unknown_1__", "__unknown_2__"]

    def test_unnamed_readd_is_noop(self):
        index = ModuleIndex()
        stream = _stream("foo", None)
        assert index.add_stream(stream) is True
        assert index.add_stream(stream) is False
        assert index.get_module("foo").get_stream_names() == ["__unknown_1__"]

    def test_highest_version_by_name(self):
        module = Module("foo")
        for version in (3, 10, 7):
            module.add_stream(_stream("foo", "latest", version))
        assert module.get_stream_by_name("latest").version == 10
        assert module.get_stream_by_name("other") is None

    def test_search_streams(self):
        module = Module("foo")
        module.add_stream(_stream("foo", "a", 1))
        module.add_stream(_stream("foo", "a", 2))
        module.add_stream(_stream("foo", "b", 1))
        assert [s.nsvc_string() for s in module.search_streams(version=1)] == ["foo:a:1", "foo:b:1"]


class TestDefaults:
    def test_default_streams(self):
        index = ModuleIndex()
        index.add_defaults(Defaults("foo", "latest"))
        index.add_defaults(Defaults("bar"))
        assert index.get_default_streams() == {"foo": "latest"}

    def test_mismatched_defaults_ignored(self, caplog):
        module = Module("foo")
        module.set_defaults(Defaults("bar", "x"))
        assert module.defaults is None
        assert "Ignoring defaults" in caplog.text


# ═══════════════════════════════════════════
# Dumping
# ═══════════════════════════════════════════


class TestDump:
    def test_dump_order(self):
        index = ModuleIndex()
        index.add_stream(_stream("zeta", "a"))
        index.add_stream(_stream("alpha", "b", 2))
        index.add_stream(_stream("alpha", "b", 1))
        index.add_stream(_stream("alpha", "a", 5))
        index.add_defaults(Defaults("zeta", "a"))

        output = index.dump_to_string()
        headers = [line for line in output.splitlines() if line.startswith(("  name:", "  stream:", "  version:", "  module:"))]
        assert headers == [
            "  name: alpha", "  stream: a", "  version: 5",
            "  name: alpha", "  stream: b", "  version: 1",
            "  name: alpha", "  stream: b", "  version: 2",
            "  module: zeta", "  stream: a",
            "  name: zeta", "  stream: a",
        ]
        assert output.count("---\n") == 5
        assert output.count("...\n") == 5

    def test_empty_index(self):
        assert ModuleIndex().dump_to_string() == ""

    def test_round_trip(self):
        text = (DATA_DIR / "defaults.yaml").read_text() + (DATA_DIR / "spec.v2.yaml").read_text()
        index = ModuleIndex()
        assert index.update_from_string(text) == []
        assert index.dump_to_string() == text


# ═══════════════════════════════════════════
# Reading Multi-Document Input
# ═══════════════════════════════════════════


class TestUpdateFromString:
    def test_bad_document_is_reported_by_index(self):
        text = _doc("foo", "a") + _doc("foo", "b", "  version: notanumber\n") + _doc("foo", "c")
        index = ModuleIndex()
        failures = index.update_from_string(text)
        assert [f.document_index for f in failures] == [1]
        assert isinstance(failures[0].error, ValidationError)
        assert index.get_module("foo").get_stream_names() == ["a", "c"]

    def test_bad_document_content_does_not_stop_reading(self):
        text = _doc("foo", "a") + _doc("foo", "b", "  xmd:\n    ? [x, y]\n    : z\n") + _doc("foo", "c")
        index = ModuleIndex()
        failures = index.update_from_string(text)
        assert [f.document_index for f in failures] == [1]
        assert isinstance(failures[0].error, ParseError)
        assert failures[0].error.document_index == 1
        assert index.get_module("foo").get_stream_names() == ["a", "c"]

    def test_syntax_error_keeps_earlier_documents(self):
        text = _doc("foo", "a") + "---\ndocument: [\n...\n"
        index = ModuleIndex()
        failures = index.update_from_string(text)
        assert len(failures) == 1
        assert failures[0].document_index == 1
        assert isinstance(failures[0].error, ParseError)
        assert index.get_module("foo").get_stream_names() == ["a"]

    def test_duplicate_is_a_failure(self):
        text = _doc("foo", "a", "  summary: one\n") + _doc("foo", "a", "  summary: two\n")
        failures = ModuleIndex().update_from_string(text)
        assert isinstance(failures[0].error, DuplicateError)

    def test_permissive_index(self):
        from modulemd_model.core.reader import Strictness

        text = _doc("foo", "a", "  unknown: 1\n")
        assert len(ModuleIndex().update_from_string(text)) == 1
        assert ModuleIndex(Strictness.PERMISSIVE).update_from_string(text) == []

    def test_upgrade_streams(self):
        index = ModuleIndex()
        index.add_stream(_stream("foo", "a", mdversion=1))
        index.upgrade_streams(2)
        assert index.get_module("foo").get_all_streams()[0].mdversion == 2

    def test_failed_upgrade_leaves_index_unchanged(self):
        index = ModuleIndex()
        index.add_stream(_stream("aaa", "a", mdversion=1))
        index.add_stream(_stream("zzz", "a", mdversion=2))
        before = index.get_module("aaa").get_all_streams()[0]
        with pytest.raises(UpgradeError):
            index.upgrade_streams(1)
        assert index.get_module("aaa").get_all_streams()[0] is before
        assert index.get_module("zzz").get_all_streams()[0].mdversion == 2

    @pytest.mark.asyncio
    async def test_update_from_file(self):
        index = ModuleIndex()
        failures = await index.update_from_file(DATA_DIR / "spec.v1.yaml")
        assert failures == []
        assert index.module_names == ["foo"]
