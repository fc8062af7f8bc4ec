#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for renderer options."""

import dataclasses

import pytest

from rfcxml.options import BaseRendererOptions, Xml2RfcRendererOptions


@pytest.mark.unit
class TestXml2RfcRendererOptions:
    """Test the xml2rfc options dataclass."""

    def test_defaults(self):
        """Test default values."""
        options = Xml2RfcRendererOptions()

        assert options.standalone is True
        assert options.citation_order == "insertion"
        assert options.citation_conflict == "last"
        assert options.reference_prefix == "reference."
        assert options.validate_output is False

    def test_frozen(self):
        """Test that options cannot be modified in place."""
        options = Xml2RfcRendererOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.standalone = False  # type: ignore[misc]

    def test_create_updated(self):
        """Test deriving a modified copy."""
        options = Xml2RfcRendererOptions()
        updated = options.create_updated(citation_order="sorted", standalone=False)

        assert updated.citation_order == "sorted"
        assert updated.standalone is False
        assert options.citation_order == "insertion"
        assert isinstance(updated, Xml2RfcRendererOptions)

    @pytest.mark.parametrize(
        "field_name,value",
        [("citation_order", "alphabetical"), ("citation_conflict", "normative")],
    )
    def test_invalid_policy(self, field_name, value):
        """Test that unknown policy values are rejected."""
        with pytest.raises(ValueError, match=field_name):
            Xml2RfcRendererOptions(**{field_name: value})

    def test_create_updated_validates(self):
        """Test that derived copies are validated too."""
        with pytest.raises(ValueError):
            Xml2RfcRendererOptions().create_updated(citation_order="random")

    def test_field_names(self):
        """Test the list of option names used by the CLI and config loader."""
        assert Xml2RfcRendererOptions.field_names() == {
            "standalone",
            "citation_order",
            "citation_conflict",
            "reference_prefix",
            "validate_output",
        }
        assert BaseRendererOptions.field_names() == set()

    def test_every_field_has_help(self):
        """Test that each option carries CLI help text."""
        for f in dataclasses.fields(Xml2RfcRendererOptions):
            assert f.metadata.get("help"), f.name

    def test_choices_match_validation(self):
        """Test that advertised choices are accepted."""
        for f in dataclasses.fields(Xml2RfcRendererOptions):
            for choice in f.metadata.get("choices", []):
                Xml2RfcRendererOptions(**{f.name: choice})
