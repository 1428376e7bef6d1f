"""
CityInfo API: Response Representations
======================================

What:  JSON (default) and XML representations of the API's response bodies.
How:   The Accept header is parsed into media ranges with quality values.
       XML is produced when application/xml or text/xml ranks strictly above
       JSON and the client did not also send */* (browsers send */* with
       everything, and get JSON). A missing Accept header gets JSON.
Who:   GET and POST handlers of the cities and points-of-interest routers.
       Error bodies are always JSON.

XML shape (element names are the PascalCase property names):
    <Cities>
      <City><Id>2</Id><Name>Antwerp</Name><Description>...</Description></City>
    </Cities>

    <City>
      ...
      <NumberOfPointsOfInterest>2</NumberOfPointsOfInterest>
      <PointsOfInterest>
        <PointOfInterest><Id>1</Id><Name>Cathedral</Name>...</PointOfInterest>
      </PointsOfInterest>
    </City>

    A null member is an empty element: <Description />
"""

import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

JSON_MEDIA_TYPE = "application/json"
XML_MEDIA_TYPES = ("application/xml", "text/xml")

# Element name of each entry in a nested list member
_ITEM_ELEMENTS = {"PointsOfInterest": "PointOfInterest"}


class XMLResponse(Response):
    media_type = "application/xml"


# ── Content Negotiation ───────────────────────────────────────────────────

def parse_accept(header: str) -> List[Tuple[str, float]]:
    """
    Split an Accept header into (media range, quality) pairs.

    "application/xml;q=0.9, */*;q=0.1" → [("application/xml", 0.9), ("*/*", 0.1)]
    """
    ranges: List[Tuple[str, float]] = []
    for part in header.split(","):
        pieces = [piece.strip() for piece in part.split(";")]
        media = pieces[0].lower()
        if not media:
            continue
        quality = 1.0
        for param in pieces[1:]:
            name, _, value = param.partition("=")
            if name.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        ranges.append((media, quality))
    return ranges


def _quality(ranges: List[Tuple[str, float]], media_type: str) -> float:
    """Quality of the most specific range matching media_type, 0 when none does."""
    major = media_type.split("/")[0]
    best: Optional[Tuple[int, float]] = None
    for media, quality in ranges:
        if media == media_type:
            specificity = 2
        elif media == f"{major}/*":
            specificity = 1
        elif media == "*/*":
            specificity = 0
        else:
            continue
        if best is None or specificity > best[0]:
            best = (specificity, quality)
    return best[1] if best else 0.0


def wants_xml(request: Request) -> bool:
    accept = request.headers.get("accept")
    if not accept:
        return False
    ranges = parse_accept(accept)
    if any(media == "*/*" for media, _ in ranges):
        return False
    xml_quality = max(_quality(ranges, media) for media in XML_MEDIA_TYPES)
    return xml_quality > 0 and xml_quality > _quality(ranges, JSON_MEDIA_TYPE)


# ── XML Serialization ─────────────────────────────────────────────────────

def _element_name(key: str) -> str:
    return key[:1].upper() + key[1:]


def _fill(element: ET.Element, value: Any) -> None:
    if isinstance(value, dict):
        for key, member in value.items():
            child = ET.SubElement(element, _element_name(key))
            _fill(child, member)
    elif isinstance(value, list):
        item_name = _ITEM_ELEMENTS.get(element.tag, "Item")
        for member in value:
            _fill(ET.SubElement(element, item_name), member)
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    elif value is not None:
        element.text = str(value)


def to_xml(content: Any, root: str, item: Optional[str] = None) -> bytes:
    """
    Serialize response content (pydantic models, or lists of them) to XML.

    Args:
        content: Model or list of models; encoded by alias like the JSON body.
        root: Name of the document element.
        item: Element name of each entry when content is a list.
    """
    data = jsonable_encoder(content)
    document = ET.Element(root)
    if isinstance(data, list):
        for entry in data:
            _fill(ET.SubElement(document, item or "Item"), entry)
    else:
        _fill(document, data)
    return ET.tostring(document, encoding="utf-8", xml_declaration=True)


def represent(
    request: Request,
    content: Any,
    root: str,
    item: Optional[str] = None,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
) -> Response:
    """Build the response for `content` in the representation the client asked for."""
    if wants_xml(request):
        return XMLResponse(to_xml(content, root, item), status_code=status_code, headers=headers)
    return JSONResponse(jsonable_encoder(content), status_code=status_code, headers=headers)
