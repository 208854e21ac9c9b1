"""Tests for initial catalog source resolution."""

import logging
from unittest.mock import MagicMock

import pytest

from catalog_bootstrap.base.errors import UnrecoverableError
from catalog_bootstrap.initialization import (
    InitializationSettings,
    PopulateMode,
    ResolvedSource,
    SourceResolver,
)


@pytest.fixture
def local_bom(tmp_path, sample_bom):
    path = tmp_path / "catalog.bom"
    path.write_text(sample_bom)
    return path


@pytest.fixture
def local_xml(tmp_path, legacy_xml):
    path = tmp_path / "catalog.xml"
    path.write_text(legacy_xml)
    return path


class TestPrecedence:
    """Test the order in which initial sources are chosen."""

    def test_explicit_uri_wins(self, make_context, local_bom):
        """Test that the explicit initial URI beats configuration and local files."""
        context = make_context({"catalog": {"url": "mem://configured.bom"}})
        settings = InitializationSettings(initial_uri="mem://explicit.bom")

        source = SourceResolver().resolve(settings, context)

        assert source.uri == "mem://explicit.bom"
        assert source.mode is PopulateMode.AUTODETECT
        assert not source.deprecated

    def test_configured_url_beats_local_files(self, make_context, local_bom):
        """Test that catalog.url is used before the local catalog.bom."""
        context = make_context({"catalog": {"url": "  mem://configured.bom  "}})

        source = SourceResolver().resolve(InitializationSettings(), context)

        assert source.uri == "mem://configured.bom"
        assert source.mode is PopulateMode.AUTODETECT

    def test_blank_configured_url_is_ignored(self, make_context, local_bom):
        """Test that a whitespace-only catalog.url counts as unset."""
        context = make_context({"catalog": {"url": "   "}})

        source = SourceResolver().resolve(InitializationSettings(), context)

        assert source.uri == local_bom.resolve().as_uri()

    def test_local_bom_is_yaml_only(self, make_context, local_bom, local_xml):
        """Test that the local catalog.bom is preferred and read as YAML."""
        source = SourceResolver().resolve(InitializationSettings(), make_context())

        assert source.uri == local_bom.resolve().as_uri()
        assert source.mode is PopulateMode.YAML
        assert not source.deprecated

    def test_local_xml_is_deprecated(self, make_context, local_xml):
        """Test that the legacy catalog.xml is read as XML and flagged deprecated."""
        source = SourceResolver().resolve(InitializationSettings(), make_context())

        assert source.uri == local_xml.resolve().as_uri()
        assert source.mode is PopulateMode.XML
        assert source.deprecated

    def test_directory_named_like_catalog_is_ignored(self, make_context, tmp_path):
        """Test that only regular files count as local catalogs."""
        (tmp_path / "catalog.bom").mkdir()

        assert SourceResolver().resolve(InitializationSettings(), make_context()) is None

    def test_nothing_found(self, make_context):
        """Test that no source at all resolves to None."""
        assert SourceResolver().resolve(InitializationSettings(), make_context()) is None


class TestDisallowLocal:
    """Test that disallow-local mode never resolves a source."""

    def test_nothing_is_resolved(self, make_context, local_bom):
        """Test that even an explicit URI is ignored."""
        provider = MagicMock()
        settings = InitializationSettings(initial_uri="mem://explicit.bom", disallow_local=True)

        source = SourceResolver([provider]).resolve(settings, make_context())

        assert source is None
        provider.assert_not_called()

    def test_logged_on_first_pass_only(self, make_context, caplog):
        """Test that the skip is only mentioned on the first pass."""
        settings = InitializationSettings(disallow_local=True)
        resolver = SourceResolver()

        with caplog.at_level(logging.DEBUG, logger="CATALOG_INIT"):
            resolver.resolve(settings, make_context(), first_pass=True)
            resolver.resolve(settings, make_context(), first_pass=False)

        assert caplog.text.count("disallow-local mode set") == 1


class TestFallbackProviders:
    """Test fallback source providers."""

    def test_provider_used_when_nothing_else(self, make_context):
        """Test that providers are consulted in order after the local files."""
        context = make_context()
        fallback = ResolvedSource("classpath://my_app/default.bom", PopulateMode.AUTODETECT, "bundled")
        first = MagicMock(return_value=None)
        second = MagicMock(return_value=fallback)

        source = SourceResolver([first, second]).resolve(InitializationSettings(), context)

        assert source is fallback
        first.assert_called_once_with(context)
        second.assert_called_once_with(context)

    def test_provider_not_called_when_local_file_exists(self, make_context, local_bom):
        """Test that providers are only a last resort."""
        provider = MagicMock()
        resolver = SourceResolver()
        resolver.add_fallback_provider(provider)

        resolver.resolve(InitializationSettings(), make_context())

        provider.assert_not_called()

    def test_failing_provider_is_skipped(self, make_context, caplog):
        """Test that an ordinary provider failure is logged and skipped."""
        fallback = ResolvedSource("mem://fallback.bom", PopulateMode.YAML, "fallback")
        broken = MagicMock(side_effect=RuntimeError("provider exploded"))

        with caplog.at_level(logging.WARNING):
            source = SourceResolver([broken, lambda context: fallback]).resolve(
                InitializationSettings(), make_context()
            )

        assert source is fallback
        assert "provider exploded" in caplog.text

    def test_fatal_provider_failure_propagates(self, make_context):
        """Test that unrecoverable provider failures are not swallowed."""
        broken = MagicMock(side_effect=UnrecoverableError("fatal"))

        with pytest.raises(UnrecoverableError):
            SourceResolver([broken]).resolve(InitializationSettings(), make_context())
