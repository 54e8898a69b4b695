#!/usr/bin/env python3
"""Concept extraction from GCMD KMS SKOS/RDF exports.

The NASA KMS API returns one ``skos:Concept`` element per vocabulary term:

    <skos:Concept rdf:about="https://gcmd.earthdata.nasa.gov/kms/concept/...">
        <skos:prefLabel xml:lang="en">ATMOSPHERE</skos:prefLabel>
        <skos:definition>...</skos:definition>
        <skos:broader rdf:resource="..."/>
    </skos:Concept>

This module flattens those elements into ``ConceptRecord`` values. It does no
I/O; the caller supplies the document content.
"""

from dataclasses import dataclass
from typing import Optional, Union
from xml.etree.ElementTree import Element, ParseError

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from .uri import normalize_identifier

RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
SKOS_NS = "http://www.w3.org/2004/02/skos/core#"
GCMD_NS = "https://gcmd.earthdata.nasa.gov/kms#"
XML_NS = "http://www.w3.org/XML/1998/namespace"
NS = {"rdf": RDF_NS, "skos": SKOS_NS, "gcmd": GCMD_NS}

DEFAULT_LANGUAGE = "en"


class ConceptParseError(Exception):
    """Raised when a concept document is not well-formed XML."""
    pass


@dataclass(frozen=True)
class ConceptRecord:
    """One flat concept as read from the export."""
    id: str
    text: str = ""
    language: str = DEFAULT_LANGUAGE
    description: str = ""
    broader_id: Optional[str] = None


def _parse_document(document: Union[str, bytes]) -> Element:
    # An XML declaration must be the first thing in the document
    try:
        return ET.fromstring(document.lstrip())
    except ParseError as e:
        raise ConceptParseError(f"Invalid concept XML: {str(e)}") from e
    except DefusedXmlException as e:
        raise ConceptParseError(f"Forbidden XML construct in concept document: {str(e)}") from e


def _text_of(element: Element, tag: str) -> str:
    """Text of the first matching child, or an empty string."""
    child = element.find(f"./skos:{tag}", NS)
    return child.text.strip() if child is not None and child.text else ""


def _record_from_concept(concept: Element) -> ConceptRecord:
    identifier = normalize_identifier(concept.attrib.get(f"{{{RDF_NS}}}about", ""))

    language = DEFAULT_LANGUAGE
    pref_label = concept.find("./skos:prefLabel", NS)
    if pref_label is not None:
        language = pref_label.attrib.get(f"{{{XML_NS}}}lang") or DEFAULT_LANGUAGE

    broader_id = None
    broader = concept.find("./skos:broader", NS)
    if broader is not None:
        broader_id = normalize_identifier(broader.attrib.get(f"{{{RDF_NS}}}resource", "")) or None

    return ConceptRecord(
        id=identifier,
        text=_text_of(concept, "prefLabel"),
        language=language,
        description=_text_of(concept, "definition"),
        broader_id=broader_id,
    )


def extract_concepts(document: Union[str, bytes]) -> list[ConceptRecord]:
    """Extract all concepts from a SKOS/RDF document, in document order.

    Args:
        document: Raw RDF/XML content

    Returns:
        List of ConceptRecord; empty when the document holds no concepts

    Raises:
        ConceptParseError: If the document is malformed
    """
    root = _parse_document(document)
    return [_record_from_concept(concept) for concept in root.iter(f"{{{SKOS_NS}}}Concept")]


def extract_total_hits(document: Union[str, bytes]) -> int:
    """Read the ``gcmd:hits`` result count used for paging through the KMS API.

    Returns 0 when the element is missing or not an integer.

    Raises:
        ConceptParseError: If the document is malformed
    """
    root = _parse_document(document)
    hits = root.find(".//gcmd:gcmd/gcmd:hits", NS)
    if hits is None or not hits.text:
        return 0
    try:
        return int(hits.text.strip())
    except ValueError:
        return 0
