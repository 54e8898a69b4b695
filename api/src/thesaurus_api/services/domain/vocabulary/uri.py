#!/usr/bin/env python3
"""GCMD concept identifier normalization.

GCMD concepts have been published under two URI generations:

- legacy: ``http://gcmdservices.gsfc.nasa.gov/kms/concepts/concept_scheme/sciencekeywords/<uuid>``
  (host and path vary by vocabulary)
- canonical: ``https://gcmd.earthdata.nasa.gov/kms/concept/<uuid>``

Both end in the same UUID, which is the only stable part of the identifier.
"""

import re
from typing import Any, Optional

CANONICAL_CONCEPT_BASE = "https://gcmd.earthdata.nasa.gov/kms/concept/"

# Anchored at the end: legacy paths may contain other hex-looking segments
UUID_SUFFIX_PATTERN = re.compile(
    r"([0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})$",
    re.IGNORECASE,
)

# Legacy thesaurus names -> vocabulary slugs used by the keyword picker
LEGACY_THESAURUS_VOCABULARIES = {
    "NASA/GCMD Earth Science Keywords": "gcmd-science-keywords",
    "GCMD Platforms": "gcmd-platforms",
    "GCMD Instruments": "gcmd-instruments",
}


def extract_uuid(value: Optional[str]) -> Optional[str]:
    """Return the trailing UUID of a concept URI, or None.

    The UUID keeps the case it had in the input.
    """
    if not value:
        return None
    match = UUID_SUFFIX_PATTERN.search(value)
    return match.group(1) if match else None


def build_canonical_uri(uuid: str) -> str:
    """Build the current GCMD concept URI for a UUID."""
    return f"{CANONICAL_CONCEPT_BASE}{uuid}"


def to_canonical(value: Optional[str]) -> Optional[str]:
    """Rewrite any concept URI (legacy or canonical) to the canonical form."""
    uuid = extract_uuid(value)
    if uuid is None:
        return None
    return build_canonical_uri(uuid)


def is_absolute(identifier: str) -> bool:
    return identifier.startswith("http")


def normalize_identifier(identifier: str) -> str:
    """Normalize an identifier read from an ``rdf:about``/``rdf:resource`` attribute.

    Absolute identifiers are kept verbatim, even under hosts we do not
    recognize. Bare identifiers are expanded to the canonical concept URI;
    when no UUID can be found the bare value is appended to the canonical
    base as-is.
    """
    if not identifier or is_absolute(identifier):
        return identifier
    return to_canonical(identifier) or build_canonical_uri(identifier)


def map_vocabulary_type(thesaurus: Optional[str]) -> Optional[str]:
    """Map a legacy thesaurus name to its vocabulary slug."""
    if not thesaurus:
        return None
    return LEGACY_THESAURUS_VOCABULARIES.get(thesaurus)


def get_supported_thesauri() -> list[str]:
    return list(LEGACY_THESAURUS_VOCABULARIES)


def transform_legacy_keyword(
    keyword: str,
    thesaurus: Optional[str],
    uri: Optional[str],
    description: Optional[str] = None,
) -> Optional[dict[str, Any]]:
    """Convert a keyword stored with a legacy GCMD URI to the current format.

    Returns None when the thesaurus is not a supported GCMD vocabulary or the
    URI carries no UUID.
    """
    vocabulary = map_vocabulary_type(thesaurus)
    if vocabulary is None:
        return None

    uuid = extract_uuid(uri)
    if uuid is None:
        return None

    return {
        "id": build_canonical_uri(uuid),
        "text": keyword,
        "vocabulary": vocabulary,
        "path": keyword,
        "uuid": uuid,
        "description": description,
    }


def transform_legacy_keywords(keywords: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Transform legacy keyword rows, dropping those that cannot be migrated.

    Each row is a mapping with ``keyword``, ``thesaurus``, ``uri`` and
    optionally ``description``.
    """
    transformed = []
    for row in keywords:
        result = transform_legacy_keyword(
            row.get("keyword", ""),
            row.get("thesaurus"),
            row.get("uri"),
            row.get("description"),
        )
        if result is not None:
            transformed.append(result)
    return transformed
