#!/usr/bin/env python3
"""Subject tag classification for dataset metadata.

A DataCite ``<subject>`` is either a free keyword typed by a curator, or a
pointer into a controlled vocabulary. Controlled subjects carry at least one
of ``subjectScheme``, ``schemeURI`` or ``valueURI``; their text is a GCMD
path such as ``Science Keywords > EARTH SCIENCE > ATMOSPHERE``.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union
from xml.etree.ElementTree import Element, ParseError

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from .uri import build_canonical_uri, extract_uuid

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " > "

# Vocabulary labels that may prefix a controlled path; only one is stripped
VOCABULARY_PREFIX_PATTERN = re.compile(
    r"^(?:science keywords|platforms|instruments)\s*>\s*",
    re.IGNORECASE,
)

# Substring of subjectScheme -> GCMD keyword type, checked in order
GCMD_SCHEME_TYPES = (
    ("science keywords", "science"),
    ("platforms", "platforms"),
    ("instruments", "instruments"),
)


class SubjectParseError(Exception):
    """Raised when a metadata document with subjects is not well-formed XML."""
    pass


@dataclass(frozen=True)
class SubjectTag:
    """A subject as found in dataset metadata."""
    text: str
    scheme: Optional[str] = None
    scheme_uri: Optional[str] = None
    value_uri: Optional[str] = None

    @property
    def is_controlled(self) -> bool:
        return bool(self.scheme or self.scheme_uri or self.value_uri)


@dataclass
class ControlledPath:
    """A controlled subject split into its hierarchy segments."""
    segments: list[str]
    scheme: Optional[str] = None
    scheme_uri: Optional[str] = None
    value_uri: Optional[str] = None


@dataclass
class SubjectClassification:
    free_keywords: list[str] = field(default_factory=list)
    controlled_paths: list[ControlledPath] = field(default_factory=list)


@dataclass
class GcmdKeyword:
    """A controlled subject resolved to a GCMD concept."""
    uuid: str
    id: str
    path: list[str]
    type: str  # 'science', 'platforms' or 'instruments'


def parse_controlled_path(text: str) -> list[str]:
    """Split a controlled subject into path segments.

    ``"Science Keywords > EARTH SCIENCE > ATMOSPHERE"`` becomes
    ``["EARTH SCIENCE", "ATMOSPHERE"]``. Text without a recognized vocabulary
    prefix is split the same way.
    """
    remainder = VOCABULARY_PREFIX_PATTERN.sub("", text.strip(), count=1)
    segments = (segment.strip() for segment in remainder.split(PATH_SEPARATOR))
    return [segment for segment in segments if segment]


def classify_subjects(tags: Iterable[SubjectTag]) -> SubjectClassification:
    """Split subject tags into free keywords and controlled paths.

    Blank free keywords are dropped, as are controlled subjects with no path
    segments. Input order is preserved within each group.
    """
    result = SubjectClassification()

    for tag in tags:
        text = (tag.text or "").strip()

        if not tag.is_controlled:
            if text:
                result.free_keywords.append(text)
            continue

        segments = parse_controlled_path(text)
        if not segments:
            continue
        result.controlled_paths.append(ControlledPath(
            segments=segments,
            scheme=tag.scheme,
            scheme_uri=tag.scheme_uri,
            value_uri=tag.value_uri,
        ))

    return result


def _local_name(element: Element) -> str:
    tag = element.tag
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def extract_subject_tags(document: Union[str, bytes]) -> list[SubjectTag]:
    """Read ``subjects/subject`` elements from a DataCite XML document.

    Namespaces are ignored so kernel-3 and kernel-4 documents both work.

    Raises:
        SubjectParseError: If the document is malformed
    """
    try:
        root = ET.fromstring(document.lstrip())
    except (ParseError, DefusedXmlException) as e:
        raise SubjectParseError(f"Invalid metadata XML: {str(e)}") from e

    tags = []
    for subjects in root.iter():
        if _local_name(subjects) != "subjects":
            continue
        for subject in subjects:
            if _local_name(subject) != "subject":
                continue
            tags.append(SubjectTag(
                text="".join(subject.itertext()),
                scheme=subject.attrib.get("subjectScheme"),
                scheme_uri=subject.attrib.get("schemeURI"),
                value_uri=subject.attrib.get("valueURI"),
            ))

    return tags


def _gcmd_type(scheme: str) -> Optional[str]:
    lowered = scheme.lower()
    for needle, keyword_type in GCMD_SCHEME_TYPES:
        if needle in lowered:
            return keyword_type
    return None


def extract_gcmd_keywords(tags: Iterable[SubjectTag]) -> list[GcmdKeyword]:
    """Resolve controlled subjects that point into a GCMD vocabulary.

    A subject qualifies when it has a scheme naming Science Keywords,
    Platforms or Instruments, a value URI ending in a concept UUID, and
    non-blank text. Everything else is skipped.
    """
    keywords = []

    for tag in tags:
        text = (tag.text or "").strip()
        if not tag.scheme or not tag.value_uri or not text:
            continue

        keyword_type = _gcmd_type(tag.scheme)
        if keyword_type is None:
            continue

        uuid = extract_uuid(tag.value_uri.strip())
        if uuid is None:
            logger.debug(f"Skipping GCMD subject without concept UUID: {tag.value_uri}")
            continue

        keywords.append(GcmdKeyword(
            uuid=uuid,
            id=build_canonical_uri(uuid),
            path=parse_controlled_path(text),
            type=keyword_type,
        ))

    return keywords
