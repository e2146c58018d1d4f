"""Representation selection and XML codec tests."""

from __future__ import annotations

from xml.etree import ElementTree

import pytest

from app.utils.errors import MalformedRequestError
from app.utils.negotiation import (
    JSON_MEDIA_TYPE,
    XML_MEDIA_TYPE,
    parse_xml,
    preferred_media_type,
    to_xml,
)


@pytest.mark.parametrize(
    ("accept", "expected"),
    [
        (None, JSON_MEDIA_TYPE),
        ("", JSON_MEDIA_TYPE),
        ("*/*", JSON_MEDIA_TYPE),
        ("application/json", JSON_MEDIA_TYPE),
        ("application/xml", XML_MEDIA_TYPE),
        ("text/xml", XML_MEDIA_TYPE),
        ("application/json, application/xml", JSON_MEDIA_TYPE),
        ("application/xml, application/json", XML_MEDIA_TYPE),
        ("application/json;q=0.5, application/xml", XML_MEDIA_TYPE),
        ("application/xml;q=0, application/json", JSON_MEDIA_TYPE),
        ("text/html", JSON_MEDIA_TYPE),
    ],
)
def test_preferred_media_type(accept: str | None, expected: str) -> None:
    """XML is chosen only when it ranks first."""
    assert preferred_media_type(accept) == expected


def test_parse_xml_reads_child_elements() -> None:
    """Each child element becomes a field; empty elements are empty strings."""
    payload = parse_xml(b"<UserUpdateRequest><login>neo</login><firstName/></UserUpdateRequest>")
    assert payload == {"login": "neo", "firstName": ""}


def test_parse_xml_rejects_garbage() -> None:
    """Broken XML is a malformed request."""
    with pytest.raises(MalformedRequestError):
        parse_xml(b"<login>neo")


def test_to_xml_nests_lists_and_dicts() -> None:
    """Lists use the item tag; scalars become text."""
    document = to_xml(
        "ArrayOfUserView",
        [{"login": "neo", "active": True, "lastName": None}],
        item_tag="UserView",
    )
    root = ElementTree.fromstring(document)
    item = root.find("UserView")
    assert item is not None
    assert item.findtext("login") == "neo"
    assert item.findtext("active") == "true"
    assert item.find("lastName") is not None
    assert item.findtext("lastName") in (None, "")


def test_parse_xml_drops_namespaces() -> None:
    """Namespaced child elements map to plain field names."""
    payload = parse_xml(
        b'<UserCreateRequest xmlns="urn:users"><login>neo</login>'
        b'<a:lastName xmlns:a="urn:other">Anderson</a:lastName></UserCreateRequest>'
    )
    assert payload == {"login": "neo", "lastName": "Anderson"}


def test_to_xml_strips_characters_xml_cannot_carry() -> None:
    """Stored values with control characters still produce well-formed XML."""
    document = to_xml("UserView", {"firstName": "Tho\x01mas\x0b", "lastName": "A\tB"})
    root = ElementTree.fromstring(document)
    assert root.findtext("firstName") == "Thomas"
    assert root.findtext("lastName") == "A\tB"
