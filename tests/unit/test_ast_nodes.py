#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for AST node construction and title metadata parsing."""

import datetime

import pytest

from rfcxml.ast import Author, Citation, DocumentMatter, Heading, TitleBlock


@pytest.mark.unit
class TestNodeValidation:
    """Test value checks done when nodes are created."""

    def test_heading_level_must_be_positive(self):
        """Test that a level of zero is rejected."""
        with pytest.raises(ValueError, match="Heading level"):
            Heading(level=0)

    def test_deep_heading_allowed(self):
        """Test that deep levels are accepted."""
        assert Heading(level=9).level == 9

    def test_citation_kind(self):
        """Test that unknown citation kinds are rejected."""
        assert Citation(target="RFC2119").kind == "informative"
        with pytest.raises(ValueError, match="Citation kind"):
            Citation(target="RFC2119", kind="mandatory")  # type: ignore[arg-type]

    def test_document_matter(self):
        """Test that unknown matter names are rejected."""
        assert DocumentMatter(matter="back").matter == "back"
        with pytest.raises(ValueError, match="Document matter"):
            DocumentMatter(matter="middle")  # type: ignore[arg-type]


@pytest.mark.unit
class TestAuthor:
    """Test author parsing."""

    def test_from_dict(self):
        """Test plain keys."""
        author = Author.from_dict({"initials": "R.", "surname": "Roe", "email": "r@example.org"})

        assert author == Author(initials="R.", surname="Roe", email="r@example.org")

    def test_nested_address_email(self):
        """Test the email given inside an address table."""
        author = Author.from_dict({"Fullname": "Rae Roe", "Address": {"Email": "rae@example.org"}})

        assert author.fullname == "Rae Roe"
        assert author.email == "rae@example.org"


@pytest.mark.unit
class TestTitleBlockFromDict:
    """Test title block parsing from mappings."""

    def test_snake_case_keys(self):
        """Test field names as used in Python."""
        block = TitleBlock.from_dict(
            {"title": "T", "doc_name": "draft-x-00", "authors": [{"surname": "Doe"}], "keywords": ["a", "b"]}
        )

        assert block.doc_name == "draft-x-00"
        assert block.authors == [Author(surname="Doe")]
        assert block.keywords == ["a", "b"]

    def test_toml_style_keys(self):
        """Test capitalized keys and singular list names."""
        block = TitleBlock.from_dict(
            {"Title": "T", "DocName": "draft-y-01", "author": {"Surname": "Doe"}, "keyword": "single"}
        )

        assert block.doc_name == "draft-y-01"
        assert [a.surname for a in block.authors] == ["Doe"]
        assert block.keywords == ["single"]

    def test_dates(self):
        """Test date objects, datetimes and ISO strings."""
        expected = datetime.date(2024, 3, 5)

        assert TitleBlock.from_dict({"date": expected}).date == expected
        assert TitleBlock.from_dict({"date": datetime.datetime(2024, 3, 5, 12, 0)}).date == expected
        assert TitleBlock.from_dict({"date": "2024-03-05T10:00:00Z"}).date == expected
        assert TitleBlock.from_dict({"date": ""}).date is None

    def test_invalid_date(self):
        """Test that an unreadable date raises ValueError."""
        with pytest.raises(ValueError, match="Invalid title block date"):
            TitleBlock.from_dict({"date": "March 2024"})

    def test_missing_fields_default_empty(self):
        """Test defaults for an empty mapping."""
        block = TitleBlock.from_dict({})

        assert block.title == ""
        assert block.authors == []
        assert block.date is None


@pytest.mark.unit
class TestTitleBlockFromToml:
    """Test TOML title blocks."""

    def test_percent_prefixed_lines(self):
        """Test the marker-prefixed block form."""
        text = "\n".join(
            [
                '% Title = "Example Protocol"',
                '% abbrev = "Example"',
                '% docName = "draft-example-protocol-00"',
                '% ipr = "trust200902"',
                "% date = 2024-03-05",
                "%",
                "% [[author]]",
                '% initials = "J."',
                '% surname = "Doe"',
                "% [author.address]",
                '% email = "jane@example.org"',
            ]
        )
        block = TitleBlock.from_toml(text)

        assert block.title == "Example Protocol"
        assert block.doc_name == "draft-example-protocol-00"
        assert block.date == datetime.date(2024, 3, 5)
        assert block.authors == [Author(initials="J.", surname="Doe", email="jane@example.org")]

    def test_invalid_toml(self):
        """Test that malformed TOML raises ValueError."""
        with pytest.raises(ValueError):
            TitleBlock.from_toml('% title = "unterminated')
