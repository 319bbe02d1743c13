"""Tests for the module stream model and its common contract."""

import datetime

import pytest

from modulemd_model.errors import ValidationError
from modulemd_model.models.component import Component, ModuleComponent, RpmComponent
from modulemd_model.models.dependencies import Dependencies
from modulemd_model.models.profile import Profile
from modulemd_model.models.rpm_map import RpmMapEntry
from modulemd_model.models.service_level import ServiceLevel
from modulemd_model.models.stream import ModuleStream
from modulemd_model.models.stream_v1 import ModuleStreamV1
from modulemd_model.models.stream_v2 import ModuleStreamV2


@pytest.fixture(params=[1, 2])
def mdversion(request):
    return request.param


@pytest.fixture
def populated():
    stream = ModuleStream.new(2, "foo", "latest")
    stream.version = 42
    stream.context = "c0ffee43"
    stream.summary = "Summary"
    stream.description = "Description"
    stream.add_module_license("MIT")
    stream.add_content_license("GPLv2+")
    stream.add_rpm_api("bar")
    stream.add_profile(Profile("default", rpms={"bar", "baz"}))
    stream.add_servicelevel(ServiceLevel("rawhide", datetime.date(2077, 10, 23)))
    stream.add_component(RpmComponent("bar", rationale="needed", arches={"x86_64"}))
    deps = Dependencies()
    deps.add_runtime_stream("platform", "f30")
    stream.add_dependencies(deps)
    stream.set_xmd({"some_key": ["a", "b"]})
    return stream


# ═══════════════════════════════════════════
# Construction
# ═══════════════════════════════════════════


class TestNew:
    def test_versions(self):
        assert isinstance(ModuleStream.new(1), ModuleStreamV1)
        assert isinstance(ModuleStream.new(2), ModuleStreamV2)

    def test_bases_are_abstract(self):
        with pytest.raises(TypeError):
            ModuleStream()
        with pytest.raises(TypeError):
            Component("x")

    @pytest.mark.parametrize("bad", [0, 3])
    def test_rejects_unsupported_mdversion(self, bad):
        with pytest.raises(ValueError):
            ModuleStream.new(bad, "foo", "bar")

    def test_starts_empty(self, mdversion):
        stream = ModuleStream.new(mdversion)
        assert stream.module_name is None
        assert stream.version == 0
        assert stream.get_profile_names() == []
        assert stream.xmd is None

    def test_empty_string_clears_text(self, mdversion):
        stream = ModuleStream.new(mdversion, "foo", "bar")
        stream.description = "Something"
        stream.description = ""
        assert stream.description is None

    @pytest.mark.parametrize("bad", [-1, 2**64, "1", True])
    def test_version_must_be_uint64(self, bad):
        stream = ModuleStream.new(2)
        with pytest.raises(ValueError):
            stream.version = bad


# ═══════════════════════════════════════════
# Identity Strings
# ═══════════════════════════════════════════


class TestNsvc:
    def test_progression(self, mdversion):
        assert ModuleStream.new(mdversion).nsvc_string() is None
        assert ModuleStream.new(mdversion, "modulename").nsvc_string() is None

        stream = ModuleStream.new(mdversion, "modulename", "streamname")
        assert stream.nsvc_string() == "modulename:streamname:0"
        stream.version = 42
        assert stream.nsvc_string() == "modulename:streamname:42"
        stream.context = "deadbeef"
        assert stream.nsvc_string() == "modulename:streamname:42:deadbeef"

    def test_arch_is_never_part_of_nsvc(self):
        stream = ModuleStream.new(2, "modulename", "streamname")
        stream.arch = "x86_64"
        assert stream.nsvc_string() == "modulename:streamname:0"


class TestNsvca:
    def test_absent_segments_are_skipped_at_the_end(self, mdversion):
        assert ModuleStream.new(mdversion).nsvca_string() is None
        assert ModuleStream.new(mdversion, "modulename").nsvca_string() == "modulename"
        stream = ModuleStream.new(mdversion, "modulename", "streamname")
        assert stream.nsvca_string() == "modulename:streamname"

    def test_absent_segments_are_empty_in_the_middle(self, mdversion):
        stream = ModuleStream.new(mdversion, "modulename", "streamname")
        stream.version = 42
        stream.arch = "x86_64"
        assert stream.nsvca_string() == "modulename:streamname:42::x86_64"

    def test_name_and_arch_only(self):
        stream = ModuleStream.new(2, "modulename")
        stream.arch = "x86_64"
        assert stream.nsvca_string() == "modulename::::x86_64"
        stream.version = 2019
        assert stream.nsvca_string() == "modulename::2019::x86_64"
        stream.context = "feedfeed"
        assert stream.nsvca_string() == "modulename::2019:feedfeed:x86_64"


# ═══════════════════════════════════════════
# Equality and Copy
# ═══════════════════════════════════════════


class TestEquality:
    def test_copy_equals(self, populated):
        assert populated.copy() == populated
        assert populated.equals(populated.copy())

    def test_copy_is_deep(self, populated):
        clone = populated.copy()
        clone.get_profile("default").add_rpm("extra")
        clone.dependencies[0].add_runtime_stream("platform", "f31")
        clone.xmd.get("some_key").items.clear()
        clone.add_module_license("BSD")
        assert populated.get_profile("default").rpms == {"bar", "baz"}
        assert populated.dependencies[0].get_runtime_streams("platform") == ["f30"]
        assert populated.get_xmd() == {"some_key": ["a", "b"]}
        assert populated.get_module_licenses() == ["MIT"]

    def test_copy_with_rename(self, populated):
        clone = populated.copy(module_name="bar", stream_name="stable")
        assert clone.nsvc_string() == "bar:stable:42:c0ffee43"
        assert clone.get_profile_names() == populated.get_profile_names()
        assert clone != populated

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda s: setattr(s, "summary", "Other"),
            lambda s: setattr(s, "version", 43),
            lambda s: s.add_rpm_api("other"),
            lambda s: s.add_content_license("BSD"),
            lambda s: s.get_profile("default").add_rpm("qux"),
            lambda s: s.get_rpm_component("bar").add_restricted_arch("i686"),
            lambda s: s.set_xmd({"some_key": ["b", "a"]}),
            lambda s: s.add_dependencies(Dependencies()),
        ],
    )
    def test_single_difference_breaks_equality(self, populated, mutate):
        other = populated.copy()
        mutate(other)
        assert other != populated

    def test_insertion_history_is_irrelevant(self):
        a = ModuleStream.new(2, "foo", "bar")
        a.add_rpm_api("x")
        a.add_rpm_api("y")

        b = ModuleStream.new(2, "foo", "bar")
        b.add_rpm_api("y")
        b.add_rpm_api("z")
        b.remove_rpm_api("z")
        b.add_rpm_api("x")
        b.add_rpm_api("x")
        assert a == b

    def test_dependency_list_order_matters(self):
        first = Dependencies(requires={"platform": {"f30"}})
        second = Dependencies(requires={"platform": {"f31"}})
        a = ModuleStream.new(2, "foo", "bar")
        a.add_dependencies(first)
        a.add_dependencies(second)
        b = ModuleStream.new(2, "foo", "bar")
        b.add_dependencies(second)
        b.add_dependencies(first)
        assert a != b

    def test_different_versions_never_equal(self):
        assert ModuleStream.new(1, "foo", "bar") != ModuleStream.new(2, "foo", "bar")

    def test_adders_store_copies(self):
        stream = ModuleStream.new(2, "foo", "bar")
        profile = Profile("default", rpms={"a"})
        stream.add_profile(profile)
        profile.add_rpm("b")
        assert stream.get_profile("default").rpms == {"a"}


# ═══════════════════════════════════════════
# Dependency Queries
# ═══════════════════════════════════════════


class TestDependsOn:
    def test_v1(self):
        stream = ModuleStream.new(1, "foo", "bar")
        stream.add_runtime_requirement("platform", "f30")
        stream.add_buildtime_requirement("platform", "f29")
        assert stream.depends_on_stream("platform", "f30")
        assert not stream.depends_on_stream("platform", "f29")
        assert stream.build_depends_on_stream("platform", "f29")
        assert not stream.build_depends_on_stream("base", "f29")

    def test_v2_any_dependency_set(self):
        stream = ModuleStream.new(2, "foo", "bar")
        stream.add_dependencies(Dependencies(requires={"platform": {"f28"}}))
        stream.add_dependencies(Dependencies(requires={"platform": {"f30"}}, buildrequires={"platform": {"f30"}}))
        assert stream.depends_on_stream("platform", "f30")
        assert stream.depends_on_stream("platform", "f28")
        assert stream.build_depends_on_stream("platform", "f30")
        assert not stream.build_depends_on_stream("platform", "f28")

    def test_v2_negated_streams_never_match(self):
        stream = ModuleStream.new(2, "foo", "bar")
        stream.add_dependencies(Dependencies(requires={"platform": {"-f27"}}))
        assert not stream.depends_on_stream("platform", "f27")
        assert not stream.depends_on_stream("platform", "-f27")


# ═══════════════════════════════════════════
# Validation
# ═══════════════════════════════════════════


class TestValidate:
    def test_buildorder_with_buildafter(self, mdversion):
        stream = ModuleStream.new(mdversion, "foo", "bar")
        stream.add_component(RpmComponent("a"))
        stream.add_component(RpmComponent("b", buildorder=10, buildafter={"a"}))
        with pytest.raises(ValidationError) as exc_info:
            stream.validate()
        assert exc_info.value.rule == "buildorder-with-buildafter"
        assert exc_info.value.components == ("b",)

    def test_mixed_ordering_schemes(self):
        stream = ModuleStream.new(2, "foo", "bar")
        stream.add_component(RpmComponent("a", buildorder=10))
        stream.add_component(RpmComponent("b", buildafter={"c"}))
        stream.add_component(ModuleComponent("c"))
        with pytest.raises(ValidationError) as exc_info:
            stream.validate()
        assert exc_info.value.rule == "mixed-build-ordering"

    def test_unknown_buildafter(self):
        stream = ModuleStream.new(2, "foo", "bar")
        stream.add_component(RpmComponent("a", buildafter={"missing"}))
        with pytest.raises(ValidationError) as exc_info:
            stream.validate()
        assert exc_info.value.rule == "unknown-buildafter"
        assert "missing" in exc_info.value.components

    def test_buildafter_across_component_kinds(self):
        stream = ModuleStream.new(2, "foo", "bar")
        stream.add_component(ModuleComponent("base"))
        stream.add_component(RpmComponent("a", buildafter={"base"}))
        stream.validate()

    def test_arches_subset(self):
        stream = ModuleStream.new(2, "foo", "bar")
        stream.buildopts.arches = {"x86_64"}
        stream.add_component(RpmComponent("a", arches={"x86_64", "s390x"}))
        with pytest.raises(ValidationError) as exc_info:
            stream.validate()
        assert exc_info.value.rule == "arches-not-subset"

        stream.get_rpm_component("a").arches = {"x86_64"}
        stream.validate()


class TestEntities:
    def test_rpm_map_nevra(self):
        entry = RpmMapEntry(name="bar", version="1.23", release="1.module_deadbeef", arch="x86_64")
        assert entry.nevra == "bar-0:1.23-1.module_deadbeef.x86_64"

    def test_rpm_map_lookup(self):
        stream = ModuleStream.new(2, "foo", "bar")
        entry = RpmMapEntry(name="bar", version="1", release="1", arch="noarch", epoch=2)
        stream.set_rpm_artifact_map_entry(entry, "sha256", "abc")
        assert stream.get_rpm_artifact_map_entry("sha256", "abc") == entry
        assert stream.get_rpm_artifact_map_entry("sha256", "def") is None
        assert stream.get_rpm_artifact_map_entry("md5", "abc") is None

    def test_dependencies_empty_stream_set(self):
        deps = Dependencies()
        deps.set_empty_buildtime_dependencies_for_module("extras")
        assert deps.get_buildtime_modules() == ["extras"]
        assert deps.get_buildtime_streams("extras") == []
        assert deps.get_runtime_streams("extras") is None

    def test_xmd_round_trip(self):
        stream = ModuleStream.new(2, "foo", "bar")
        stream.set_xmd({"something": ["foo", "bar"], "n": 1})
        assert stream.get_xmd() == {"something": ["foo", "bar"], "n": 1}
        stream.set_xmd(None)
        assert stream.get_xmd() is None
