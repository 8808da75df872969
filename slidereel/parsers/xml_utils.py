"""Namespace-prefix-tolerant XML helpers built on lxml.

OOXML parts bind namespaces to conventional prefixes (`p:`, `a:`, `r:`),
but nothing requires a producer to use those prefixes. Selection here is
by local name, with an optional namespace URI filter.
"""

from lxml import etree

NS_A = "http://schemas.openxmlformats.org/drawingml/2006/main"
NS_P = "http://schemas.openxmlformats.org/presentationml/2006/main"
NS_R = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
NS_PKG_RELS = "http://schemas.openxmlformats.org/package/2006/relationships"

# No DTDs, no entity expansion, no network access
_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)


def parse_xml(data: str | bytes) -> etree._Element:
    """Parse an XML part and return its root element.

    Raises lxml.etree.XMLSyntaxError on malformed input.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return etree.fromstring(data, parser=_PARSER)


def local_name(elem) -> str:
    tag = elem.tag
    if not isinstance(tag, str):
        # Comments and processing instructions
        return ""
    return etree.QName(tag).localname


def namespace_of(elem) -> str | None:
    tag = elem.tag
    if not isinstance(tag, str):
        return None
    return etree.QName(tag).namespace


def _matches(elem, name: str, namespace: str | None) -> bool:
    if local_name(elem) != name:
        return False
    return namespace is None or namespace_of(elem) in (namespace, None)


def iter_local(root, name: str, namespace: str | None = None):
    """Yield descendants (and root) with the given local name, in document order.

    When `namespace` is given, elements in that namespace and elements with
    no namespace at all both match.
    """
    for elem in root.iter():
        if _matches(elem, name, namespace):
            yield elem


def find_local(root, name: str, namespace: str | None = None):
    """First descendant with the given local name, or None."""
    return next(iter_local(root, name, namespace), None)


def closest_local(elem, name: str, namespace: str | None = None):
    """Nearest ancestor-or-self with the given local name, or None."""
    node = elem
    while node is not None:
        if _matches(node, name, namespace):
            return node
        node = node.getparent()
    return None


def text_content(elem) -> str:
    """Concatenated text of an element and all its descendants."""
    return "".join(elem.itertext())


def get_qualified_attr(elem, name: str) -> str | None:
    """Read a namespace-qualified attribute by local name, whatever its URI.

    Unqualified attributes never match; callers that accept them fall back
    to `elem.get(name)` themselves.
    """
    for key, value in elem.attrib.items():
        qname = etree.QName(key)
        if qname.namespace and qname.localname == name:
            return value
    return None
