#!/usr/bin/env python3
"""
Thesaurus Service

Builds GCMD thesaurus forests from KMS RDF pages and keeps them in the
thesaurus store. Fetching the pages from NASA KMS is the refresh job's
responsibility; this service only ever sees document content.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Iterable, Optional, Union

from minio import Minio

from ..clients.s3_client import get_json_content, upload_json
from ..core.config import VocabularyConfig, VocabularySettings, vocabulary_config
from .domain.vocabulary import (
    ConceptForest,
    build_hierarchy,
    count_concepts,
    extract_concepts,
    extract_total_hits,
    forest_to_dict,
)

logger = logging.getLogger(__name__)

# One lock per vocabulary type so "build, then store" never interleaves.
# Lazy-initialized to avoid event loop issues at module load time.
_build_locks: dict[str, asyncio.Lock] = {}


def _get_build_lock(vocabulary_type: str) -> asyncio.Lock:
    """Get or create the build lock for a vocabulary type."""
    if vocabulary_type not in _build_locks:
        _build_locks[vocabulary_type] = asyncio.Lock()
    return _build_locks[vocabulary_type]


def build_thesaurus(
    pages: Iterable[Union[str, bytes]],
    settings: VocabularySettings,
    clock: Optional[Callable[[], datetime]] = None
) -> ConceptForest:
    """Build one vocabulary's forest from its KMS result pages.

    Concepts of all pages are concatenated in page order before the hierarchy
    is resolved, so broader links may cross page boundaries.

    Raises:
        ConceptParseError: If any page is malformed; nothing is built
    """
    records = []
    for page_number, page in enumerate(pages, start=1):
        page_records = extract_concepts(page)
        logger.info(
            f"Extracted {len(page_records)} concepts from page {page_number}",
            extra={"vocabulary_type": settings.vocabulary_type}
        )
        records.extend(page_records)

    forest = build_hierarchy(records, settings.scheme, settings.scheme_uri, clock)

    log_extra = {"vocabulary_type": settings.vocabulary_type}
    if forest.orphaned_ids:
        logger.info(
            f"{len(forest.orphaned_ids)} concepts reference a missing broader concept and were promoted to roots",
            extra=log_extra
        )
    if forest.omitted_ids:
        logger.warning(
            f"{len(forest.omitted_ids)} concepts are part of broader cycles and were omitted: "
            f"{', '.join(forest.omitted_ids[:10])}",
            extra=log_extra
        )

    logger.info(
        f"Built hierarchy with {count_concepts(forest.roots)} concepts under {len(forest.roots)} roots",
        extra=log_extra
    )
    return forest


def get_local_status(payload: Any) -> dict[str, Any]:
    """Summarize a stored forest payload.

    Anything that is not a JSON object counts as "no local thesaurus".
    """
    if not isinstance(payload, dict):
        return {"exists": False, "conceptCount": 0, "lastUpdated": None}

    data = payload.get("data")
    return {
        "exists": True,
        "conceptCount": count_concepts(data) if isinstance(data, list) else 0,
        "lastUpdated": payload.get("lastUpdated"),
    }


def compare_with_remote(payload: Any, remote_count: int) -> dict[str, Any]:
    """Compare a stored forest with the concept count KMS reports.

    An update is only offered when KMS has more concepts than we store.
    """
    status = get_local_status(payload)
    return {
        "localCount": status["conceptCount"],
        "remoteCount": remote_count,
        "updateAvailable": remote_count > status["conceptCount"],
        "lastUpdated": status["lastUpdated"],
    }


class ThesaurusService:
    """
    Service for building and reading stored thesauri.

    Forests are stored as JSON objects in MinIO, one per vocabulary type.
    """

    def __init__(self, s3: Minio, config: VocabularyConfig = vocabulary_config):
        self.s3 = s3
        self.config = config

    def get_thesaurus(self, vocabulary_type: str) -> Optional[dict[str, Any]]:
        """
        Load the stored forest payload for a vocabulary type.

        Returns:
            Payload ``{"lastUpdated", "data"}`` or None if nothing usable is stored

        Raises:
            UnknownVocabularyError: If the vocabulary type is not configured
        """
        settings = self.config.get(vocabulary_type)
        payload = get_json_content(self.s3, self.config.BUCKET, settings.object_name)
        return payload if isinstance(payload, dict) else None

    def get_status(self, vocabulary_type: str) -> dict[str, Any]:
        return get_local_status(self.get_thesaurus(vocabulary_type))

    def compare(self, vocabulary_type: str, remote_document: Union[str, bytes, int]) -> dict[str, Any]:
        """
        Compare the stored forest with KMS.

        Args:
            vocabulary_type: Vocabulary type
            remote_document: A KMS result page (its ``gcmd:hits`` is read) or
                the remote concept count itself
        """
        if isinstance(remote_document, int):
            remote_count = remote_document
        else:
            remote_count = extract_total_hits(remote_document)
        return compare_with_remote(self.get_thesaurus(vocabulary_type), remote_count)

    async def rebuild(
        self,
        vocabulary_type: str,
        pages: list[Union[str, bytes]],
        clock: Optional[Callable[[], datetime]] = None
    ) -> dict[str, Any]:
        """
        Build a forest from RDF pages and store it, replacing the previous one.

        The stored object is only written after the whole build succeeded.

        Raises:
            UnknownVocabularyError: If the vocabulary type is not configured
            ConceptParseError: If any page is malformed
        """
        settings = self.config.get(vocabulary_type)

        async with _get_build_lock(vocabulary_type):
            forest = build_thesaurus(pages, settings, clock)
            payload = forest_to_dict(forest)
            await upload_json(
                self.s3,
                self.config.BUCKET,
                settings.object_name,
                payload,
                ttl=settings.cache_ttl
            )

        return {
            "thesaurusType": vocabulary_type,
            "conceptCount": count_concepts(payload["data"]),
            "lastUpdated": payload["lastUpdated"],
            "objectName": settings.object_name,
            "orphanedCount": len(forest.orphaned_ids),
            "omittedCount": len(forest.omitted_ids),
        }
