"""Shared fixtures: hand-built OOXML packages.

Packages are written with zipfile directly so tests control entry order,
missing parts and malformed XML, none of which a real authoring tool emits.
"""

import io
import struct
import zipfile
from xml.sax.saxutils import escape

import pytest

from slidereel.parsers.xml_utils import NS_A, NS_P, NS_PKG_RELS, NS_R

SLIDE_REL_TYPE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/slide"


def shape_xml(text: str, *, sz: int | None = None, ph: str | None = None,
              offset: tuple[int, int] = (457200, 1600200),
              extent: tuple[int, int] = (8229600, 1143000)) -> str:
    ph_xml = f'<p:nvPr><p:ph type="{ph}"/></p:nvPr>' if ph else "<p:nvPr/>"
    rpr = f'<a:rPr lang="en-US" sz="{sz}"/>' if sz else '<a:rPr lang="en-US"/>'
    return (
        "<p:sp>"
        f'<p:nvSpPr><p:cNvPr id="2" name="Shape"/><p:cNvSpPr/>{ph_xml}</p:nvSpPr>'
        f'<p:spPr><a:xfrm><a:off x="{offset[0]}" y="{offset[1]}"/>'
        f'<a:ext cx="{extent[0]}" cy="{extent[1]}"/></a:xfrm></p:spPr>'
        f"<p:txBody><a:bodyPr/><a:p><a:r>{rpr}<a:t>{escape(text)}</a:t></a:r></a:p></p:txBody>"
        "</p:sp>"
    )


def slide_xml(*texts: str, shapes: str = "", background: str | None = None) -> str:
    """A slide part with one text shape per string, plus any raw shape XML."""
    bg = (
        f'<p:bg><p:bgPr><a:solidFill><a:srgbClr val="{background}"/></a:solidFill></p:bgPr></p:bg>'
        if background else ""
    )
    body = "".join(shape_xml(t) for t in texts) + shapes
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<p:sld xmlns:a="{NS_A}" xmlns:p="{NS_P}" xmlns:r="{NS_R}">'
        f"<p:cSld>{bg}<p:spTree>{body}</p:spTree></p:cSld></p:sld>"
    )


def presentation_xml(rids: list[str | None]) -> str:
    ids = "".join(
        f'<p:sldId id="{256 + i}" r:id="{rid}"/>' if rid else f'<p:sldId id="{256 + i}"/>'
        for i, rid in enumerate(rids)
    )
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<p:presentation xmlns:a="{NS_A}" xmlns:p="{NS_P}" xmlns:r="{NS_R}">'
        f"<p:sldIdLst>{ids}</p:sldIdLst></p:presentation>"
    )


def rels_xml(relationships: dict[str, str]) -> str:
    rels = "".join(
        f'<Relationship Id="{rid}" Type="{SLIDE_REL_TYPE}" Target="{target}"/>'
        for rid, target in relationships.items()
    )
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<Relationships xmlns="{NS_PKG_RELS}">{rels}</Relationships>'
    )


def build_package(
    slides: list[str],
    *,
    rids: list[str | None] | None = None,
    relationships: dict[str, str] | None = None,
    media: dict[str, bytes] | None = None,
    overrides: dict[str, str | bytes] | None = None,
    omit: tuple[str, ...] = (),
    reverse_entries: bool = False,
) -> bytes:
    """Zip a minimal presentation package.

    Slide i (0-based) is stored at ppt/slides/slide{i+1}.xml behind
    relationship rId{i+1}; the manifest lists them in that order unless
    `rids` says otherwise.
    """
    if rids is None:
        rids = [f"rId{i + 1}" for i in range(len(slides))]
    if relationships is None:
        relationships = {f"rId{i + 1}": f"slides/slide{i + 1}.xml" for i in range(len(slides))}

    entries: dict[str, str | bytes] = {
        "[Content_Types].xml": '<?xml version="1.0"?><Types/>',
        "ppt/presentation.xml": presentation_xml(rids),
        "ppt/_rels/presentation.xml.rels": rels_xml(relationships),
    }
    for i, xml in enumerate(slides):
        entries[f"ppt/slides/slide{i + 1}.xml"] = xml
    entries.update(media or {})
    entries.update(overrides or {})

    names = [name for name in entries if name not in omit]
    if reverse_entries:
        names.reverse()

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for name in names:
            zf.writestr(name, entries[name])
    return buffer.getvalue()


def corrupt_entry(data: bytes, name: str) -> bytes:
    """Overwrite an entry's compressed data with 0xFF bytes.

    0xFF opens a deflate block of reserved type, so decompression fails on
    the first byte; stored entries fail their CRC check instead.
    """
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        info = zf.getinfo(name)
    start = info.header_offset
    name_len, extra_len = struct.unpack("<HH", data[start + 26:start + 30])
    data_start = start + 30 + name_len + extra_len
    size = info.compress_size
    return data[:data_start] + b"\xff" * size + data[data_start + size:]


@pytest.fixture
def make_package():
    return build_package


@pytest.fixture
def corrupt():
    return corrupt_entry


@pytest.fixture
def make_slide():
    return slide_xml


@pytest.fixture
def make_shape():
    return shape_xml


@pytest.fixture
def small_config():
    """Extraction config with a small canvas to keep rendering fast."""
    from slidereel.schemas.config import ExtractionConfig, RenderConfig

    return ExtractionConfig(render=RenderConfig(width=480, height=270, margin=20))
