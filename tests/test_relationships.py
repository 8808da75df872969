"""Tests for manifest order and relationship resolution."""

import pytest

from slidereel.parsers.xml_utils import NS_PKG_RELS


class TestResolveTarget:
    def test_relative_target(self):
        from slidereel.parsers.relationships import resolve_target

        assert resolve_target("slides/slide1.xml") == "ppt/slides/slide1.xml"

    def test_absolute_target(self):
        from slidereel.parsers.relationships import resolve_target

        assert resolve_target("/ppt/slides/slide4.xml") == "ppt/slides/slide4.xml"

    def test_parent_segments_normalized(self):
        from slidereel.parsers.relationships import resolve_target

        assert resolve_target("../ppt/slides/slide2.xml") == "ppt/slides/slide2.xml"


class TestParseSlideRelationships:
    def test_slide_relationships(self, make_package, make_slide):
        from slidereel.parsers.archive import PackageArchive
        from slidereel.parsers.relationships import parse_slide_relationships

        data = make_package([make_slide("a"), make_slide("b")])
        with PackageArchive(data) as archive:
            rels = parse_slide_relationships(archive)
        assert rels == {
            "rId1": "ppt/slides/slide1.xml",
            "rId2": "ppt/slides/slide2.xml",
        }

    def test_non_slide_and_external_relationships_ignored(self, make_package, make_slide):
        from slidereel.parsers.archive import PackageArchive
        from slidereel.parsers.relationships import parse_slide_relationships

        rels_xml = (
            f'<Relationships xmlns="{NS_PKG_RELS}">'
            '<Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/slide" Target="slides/slide1.xml"/>'
            '<Relationship Id="rId2" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/theme" Target="theme/theme1.xml"/>'
            '<Relationship Id="rId3" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/slide" Target="http://example.com/x" TargetMode="External"/>'
            "</Relationships>"
        )
        data = make_package(
            [make_slide("a")],
            overrides={"ppt/_rels/presentation.xml.rels": rels_xml},
        )
        with PackageArchive(data) as archive:
            rels = parse_slide_relationships(archive)
        assert rels == {"rId1": "ppt/slides/slide1.xml"}

    def test_missing_rels_part_gives_empty_map(self, make_package, make_slide):
        from slidereel.parsers.archive import PackageArchive
        from slidereel.parsers.relationships import parse_slide_relationships

        data = make_package([make_slide("a")], omit=("ppt/_rels/presentation.xml.rels",))
        with PackageArchive(data) as archive:
            assert parse_slide_relationships(archive) == {}

    def test_malformed_rels_part_gives_empty_map(self, make_package, make_slide):
        from slidereel.parsers.archive import PackageArchive
        from slidereel.parsers.relationships import parse_slide_relationships

        data = make_package(
            [make_slide("a")],
            overrides={"ppt/_rels/presentation.xml.rels": "<Relationships><oops"},
        )
        with PackageArchive(data) as archive:
            assert parse_slide_relationships(archive) == {}


    def test_corrupt_rels_part_gives_empty_map(self, make_package, make_slide, corrupt):
        from slidereel.parsers.archive import PackageArchive
        from slidereel.parsers.relationships import parse_slide_relationships

        data = corrupt(make_package([make_slide("a")]), "ppt/_rels/presentation.xml.rels")
        with PackageArchive(data) as archive:
            assert parse_slide_relationships(archive) == {}


class TestParseSlideOrder:
    def test_manifest_order(self, make_package, make_slide):
        from slidereel.parsers.archive import PackageArchive
        from slidereel.parsers.relationships import parse_slide_order

        data = make_package(
            [make_slide("a"), make_slide("b"), make_slide("c")],
            rids=["rId3", "rId1", "rId2"],
        )
        with PackageArchive(data) as archive:
            assert parse_slide_order(archive) == ["rId3", "rId1", "rId2"]

    def test_nonstandard_prefixes(self, make_package, make_slide):
        from slidereel.parsers.archive import PackageArchive
        from slidereel.parsers.relationships import parse_slide_order

        presentation = (
            '<pres:presentation '
            'xmlns:pres="http://schemas.openxmlformats.org/presentationml/2006/main" '
            'xmlns:rel="http://schemas.openxmlformats.org/officeDocument/2006/relationships">'
            '<pres:sldIdLst><pres:sldId id="256" rel:id="rId7"/></pres:sldIdLst>'
            "</pres:presentation>"
        )
        data = make_package([make_slide("a")], overrides={"ppt/presentation.xml": presentation})
        with PackageArchive(data) as archive:
            assert parse_slide_order(archive) == ["rId7"]

    def test_unprefixed_id_fallback(self, make_package, make_slide):
        from slidereel.parsers.archive import PackageArchive
        from slidereel.parsers.relationships import parse_slide_order

        presentation = (
            '<p:presentation xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main" '
            'xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships">'
            '<p:sldIdLst><p:sldId id="rId1"/><p:sldId id="256" r:id="rId2"/><p:sldId/></p:sldIdLst>'
            "</p:presentation>"
        )
        data = make_package(
            [make_slide("a"), make_slide("b")],
            overrides={"ppt/presentation.xml": presentation},
        )
        with PackageArchive(data) as archive:
            assert parse_slide_order(archive) == ["rId1", "rId2", None]

    def test_numeric_id_without_relationship_id(self, make_package, make_slide):
        from slidereel.parsers.archive import PackageArchive
        from slidereel.parsers.relationships import parse_slide_order, resolve_slide_parts

        data = make_package([make_slide("a"), make_slide("b")], rids=[None, "rId2"])
        with PackageArchive(data) as archive:
            assert parse_slide_order(archive) == ["256", "rId2"]
            assert [r.slide_number for r in resolve_slide_parts(archive)] == [2]

    def test_corrupt_presentation_part(self, make_package, make_slide, corrupt):
        from slidereel.errors import InvalidPackageStructure
        from slidereel.parsers.archive import PackageArchive
        from slidereel.parsers.relationships import parse_slide_order

        data = corrupt(make_package([make_slide("a")]), "ppt/presentation.xml")
        with PackageArchive(data) as archive:
            with pytest.raises(InvalidPackageStructure):
                parse_slide_order(archive)

    def test_missing_presentation_part(self, make_package, make_slide):
        from slidereel.errors import InvalidPackageStructure
        from slidereel.parsers.archive import PackageArchive
        from slidereel.parsers.relationships import parse_slide_order

        data = make_package([make_slide("a")], omit=("ppt/presentation.xml",))
        with PackageArchive(data) as archive:
            with pytest.raises(InvalidPackageStructure):
                parse_slide_order(archive)

    def test_malformed_presentation_part(self, make_package, make_slide):
        from slidereel.errors import InvalidPackageStructure
        from slidereel.parsers.archive import PackageArchive
        from slidereel.parsers.relationships import parse_slide_order

        data = make_package([make_slide("a")], overrides={"ppt/presentation.xml": "<p:presentation"})
        with PackageArchive(data) as archive:
            with pytest.raises(InvalidPackageStructure):
                parse_slide_order(archive)


class TestResolveSlideReferences:
    def test_unresolved_reference_keeps_manifest_numbers(self):
        from slidereel.parsers.relationships import resolve_slide_references

        refs = resolve_slide_references(
            ["rId1", "rId2", "rId3"],
            {"rId1": "ppt/slides/slide1.xml", "rId3": "ppt/slides/slide3.xml"},
        )
        assert [(r.slide_number, r.part_path) for r in refs] == [
            (1, "ppt/slides/slide1.xml"),
            (3, "ppt/slides/slide3.xml"),
        ]

    def test_reference_without_id_skipped(self):
        from slidereel.parsers.relationships import resolve_slide_references

        refs = resolve_slide_references([None, "rId1"], {"rId1": "ppt/slides/slide1.xml"})
        assert [r.slide_number for r in refs] == [2]

    def test_resolve_slide_parts_follows_manifest_not_archive(self, make_package, make_slide):
        from slidereel.parsers.archive import PackageArchive
        from slidereel.parsers.relationships import resolve_slide_parts

        data = make_package(
            [make_slide("a"), make_slide("b"), make_slide("c")],
            rids=["rId2", "rId3", "rId1"],
            reverse_entries=True,
        )
        with PackageArchive(data) as archive:
            refs = resolve_slide_parts(archive)
        assert [r.part_path for r in refs] == [
            "ppt/slides/slide2.xml",
            "ppt/slides/slide3.xml",
            "ppt/slides/slide1.xml",
        ]
        assert [r.slide_number for r in refs] == [1, 2, 3]

