"""JSON/XML request parsing and response rendering."""

from __future__ import annotations

import json
import re
from typing import Any
from xml.etree import ElementTree

from fastapi import Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.utils.errors import MalformedRequestError, UnsupportedMediaTypeError

JSON_MEDIA_TYPE = "application/json"
XML_MEDIA_TYPE = "application/xml"

_JSON_TYPES = {"application/json", "text/json", "application/json-patch+json"}
_XML_TYPES = {"application/xml", "text/xml"}

# Characters XML 1.0 cannot carry even when escaped.
_XML_ILLEGAL_CHARACTERS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def _base_media_type(value: str) -> str:
    return value.split(";", 1)[0].strip().lower()


def is_json_media_type(media_type: str) -> bool:
    return media_type in _JSON_TYPES or (
        media_type.startswith("application/") and media_type.endswith("+json")
    )


def is_xml_media_type(media_type: str) -> bool:
    return media_type in _XML_TYPES or (
        media_type.startswith("application/") and media_type.endswith("+xml")
    )


def _accept_entries(accept: str) -> list[tuple[str, float]]:
    entries: list[tuple[str, float]] = []
    for raw in accept.split(","):
        if not raw.strip():
            continue
        media_type, *params = [part.strip() for part in raw.split(";")]
        quality = 1.0
        for param in params:
            name, _, value = param.partition("=")
            if name.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        entries.append((media_type.lower(), quality))
    # sorted() is stable, so equal weights keep header order.
    return sorted(entries, key=lambda entry: entry[1], reverse=True)


def preferred_media_type(accept: str | None) -> str:
    """Pick JSON or XML for a response from an ``Accept`` header.

    JSON wins unless an XML type is ranked strictly first.
    """
    if not accept:
        return JSON_MEDIA_TYPE
    for media_type, quality in _accept_entries(accept):
        if quality <= 0:
            continue
        if is_xml_media_type(media_type):
            return XML_MEDIA_TYPE
        if is_json_media_type(media_type) or media_type in {"*/*", "application/*", "text/*"}:
            return JSON_MEDIA_TYPE
    return JSON_MEDIA_TYPE


def _local_name(tag: str) -> str:
    return tag.rpartition("}")[2]


def _element_value(element: ElementTree.Element) -> Any:
    children = list(element)
    if not children:
        return element.text or ""
    return {_local_name(child.tag): _element_value(child) for child in children}


def parse_xml(raw: bytes) -> dict[str, Any]:
    """Parse an XML document whose root holds one child element per field.

    Namespaces are dropped, so DataContract-style documents read the same.
    """
    try:
        root = ElementTree.fromstring(raw)
    except ElementTree.ParseError as exc:
        raise MalformedRequestError("Request body is not valid XML") from exc
    return {_local_name(child.tag): _element_value(child) for child in root}


async def read_body(request: Request) -> Any:
    """Return the decoded request body, or None when it is empty.

    Raises:
        MalformedRequestError: the body cannot be decoded.
        UnsupportedMediaTypeError: the content type is neither JSON nor XML.
    """
    raw = await request.body()
    if not raw.strip():
        return None

    media_type = _base_media_type(request.headers.get("content-type", ""))
    if not media_type or is_json_media_type(media_type):
        try:
            return json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MalformedRequestError("Request body is not valid JSON") from exc
    if is_xml_media_type(media_type):
        return parse_xml(raw)
    raise UnsupportedMediaTypeError(media_type)


def _build_element(tag: str, value: Any, item_tag: str) -> ElementTree.Element:
    element = ElementTree.Element(tag)
    if isinstance(value, dict):
        for key, child in value.items():
            element.append(_build_element(str(key), child, item_tag))
    elif isinstance(value, list):
        for child in value:
            element.append(_build_element(item_tag, child, item_tag))
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    elif value is not None:
        element.text = _XML_ILLEGAL_CHARACTERS.sub("", str(value))
    return element


def to_xml(root_tag: str, value: Any, item_tag: str = "item") -> bytes:
    """Serialize JSON-compatible data as an XML document."""
    element = _build_element(root_tag, value, item_tag)
    return ElementTree.tostring(element, encoding="utf-8", xml_declaration=True)


def render(
    request: Request,
    payload: Any,
    *,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
    xml_root: str = "response",
    xml_item: str = "item",
) -> Response:
    """Render ``payload`` as JSON or XML depending on the request's ``Accept``."""
    content = jsonable_encoder(payload)
    if preferred_media_type(request.headers.get("accept")) == XML_MEDIA_TYPE:
        return Response(
            content=to_xml(xml_root, content, xml_item),
            status_code=status_code,
            headers=headers,
            media_type=XML_MEDIA_TYPE,
        )
    return JSONResponse(content=content, status_code=status_code, headers=headers)
