"""Unit tests for attribute filtering.

Tests cover:
- Platform extraction from metadata keys
- Control arg detection
- Each filtering rule, including platform-scoped named contexts
"""

from __future__ import annotations

import pytest

from buildinfo.attrs import filter_attrs, is_control_arg, platform_from_key
from buildinfo.constants import KNOWN_ATTRS, KNOWN_CONTROL_ARGS


class TestPlatformFromKey:
    """Tests for platform_from_key."""

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("meta", ""),
            ("meta/linux/amd64", "linux/amd64"),
            ("meta/linux/arm64/v8", "linux/arm64/v8"),
            ("", ""),
        ],
        ids=["no-platform", "platform", "platform-variant", "empty"],
    )
    def test_splits_once(self, key: str, expected: str) -> None:
        """Everything after the first slash is the platform."""
        assert platform_from_key(key) == expected


class TestIsControlArg:
    """Tests for is_control_arg."""

    @pytest.mark.parametrize("name", KNOWN_CONTROL_ARGS)
    def test_known_control_args(self, name: str) -> None:
        """Every known control arg is detected under build-arg:."""
        assert is_control_arg(f"build-arg:{name}")

    def test_prefix_match(self) -> None:
        """Control args match by prefix."""
        assert is_control_arg("build-arg:BUILDKIT_INLINE_CACHE_EXTRA")

    @pytest.mark.parametrize(
        "key",
        ["build-arg:FOO", "BUILDKIT_INLINE_CACHE", "label:BUILDKIT_SYNTAX", "build-arg:buildkit_syntax"],
        ids=["regular-arg", "bare", "label", "lowercase"],
    )
    def test_not_control_args(self, key: str) -> None:
        """Only build-arg: prefixed, exact-case names are control args."""
        assert not is_control_arg(key)


class TestFilterAttrs:
    """Tests for filter_attrs."""

    def test_mixed_attributes(self) -> None:
        """Control args and unknown keys are dropped, the rest kept."""
        attrs = {
            "build-arg:BUILDKIT_INLINE_CACHE": "1",
            "build-arg:FOO": "bar",
            "label:com.x": "y",
            "target": "builder",
            "unknown": "z",
        }

        assert filter_attrs("meta", attrs) == {
            "build-arg:FOO": "bar",
            "label:com.x": "y",
            "target": "builder",
        }

    def test_none_values_dropped(self) -> None:
        """None values are dropped even for always-kept namespaces."""
        assert filter_attrs("meta", {"build-arg:FOO": None, "target": None}) == {}

    def test_empty_string_kept(self) -> None:
        """Empty string is a value, unlike None."""
        assert filter_attrs("meta", {"build-arg:FOO": ""}) == {"build-arg:FOO": ""}

    @pytest.mark.parametrize("key", sorted(KNOWN_ATTRS))
    def test_known_attrs_kept(self, key: str) -> None:
        """Every known bare attribute survives."""
        assert filter_attrs("meta", {key: "v"}) == {key: "v"}

    @pytest.mark.parametrize(
        "key",
        ["platform", "cmdline", "hostname", "image-resolve-mode", "targets", "Context"],
    )
    def test_other_bare_keys_dropped(self, key: str) -> None:
        """Bare keys outside the allow-list are dropped."""
        assert filter_attrs("meta", {key: "v"}) == {}

    def test_build_args_and_labels_kept_with_platform(self) -> None:
        """Platform scoping does not apply to build args and labels."""
        attrs = {"build-arg:A::linux/arm64": "1", "label:b": "2"}

        assert filter_attrs("meta/linux/amd64", attrs) == attrs

    def test_context_without_platform_kept_unchanged(self) -> None:
        """Without a platform, named contexts keep their suffix."""
        attrs = {"context:base::linux/amd64": "ref1", "context:base::linux/arm64": "ref2"}

        assert filter_attrs("meta", attrs) == attrs

    def test_context_scoped_to_platform(self) -> None:
        """With a platform, only matching contexts are kept and renamed."""
        attrs = {"context:base::linux/amd64": "ref1", "context:base::linux/arm64": "ref2"}

        assert filter_attrs("meta/linux/amd64", attrs) == {"context:base": "ref1"}

    def test_context_other_platform_dropped(self) -> None:
        """A context for another platform is dropped; the matching one is renamed."""
        attrs = {"context:base::linux/amd64": "x", "context:base::linux/arm64": "y"}

        assert filter_attrs("meta/linux/arm64", attrs) == {"context:base": "y"}

    def test_context_value_suffix_stripped(self) -> None:
        """The platform suffix is stripped from the value too."""
        attrs = {"context:base::linux/amd64": "docker-image://alpine::linux/amd64"}

        assert filter_attrs("meta/linux/amd64", attrs) == {"context:base": "docker-image://alpine"}

    def test_context_without_suffix_dropped_with_platform(self) -> None:
        """Unsuffixed contexts do not belong to any platform variant."""
        assert filter_attrs("meta/linux/amd64", {"context:base": "ref"}) == {}

    def test_input_is_not_modified(self) -> None:
        """A new mapping is returned."""
        attrs = {"unknown": "z", "target": "t"}

        filter_attrs("meta", attrs)

        assert attrs == {"unknown": "z", "target": "t"}

    def test_none_attrs(self) -> None:
        """Absent attrs filter to an empty mapping."""
        assert filter_attrs("meta", None) == {}
