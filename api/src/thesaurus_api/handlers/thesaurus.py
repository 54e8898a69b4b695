#!/usr/bin/env python3

import logging
from typing import Any

from fastapi import HTTPException, UploadFile
from minio import Minio

from ..core.config import UnknownVocabularyError
from ..models.models import ThesaurusComparison, ThesaurusRebuildResponse, ThesaurusStatus
from ..services.domain.vocabulary import ConceptParseError
from ..services.thesaurus_service import ThesaurusService

logger = logging.getLogger(__name__)


def handle_get_thesaurus(vocabulary_type: str, s3: Minio) -> dict[str, Any]:
    """Return the stored forest payload for the keyword picker"""
    try:
        payload = ThesaurusService(s3).get_thesaurus(vocabulary_type)
    except UnknownVocabularyError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    if payload is None:
        raise HTTPException(status_code=404, detail=f"Thesaurus {vocabulary_type} has not been built yet")

    return payload


def handle_thesaurus_status(vocabulary_type: str, s3: Minio) -> ThesaurusStatus:
    """Return concept count and build time of the stored forest"""
    try:
        status = ThesaurusService(s3).get_status(vocabulary_type)
    except UnknownVocabularyError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    return ThesaurusStatus(**status)


def handle_thesaurus_compare(vocabulary_type: str, remote_hits: int, s3: Minio) -> ThesaurusComparison:
    """Compare the stored forest with the concept count reported by KMS"""
    if remote_hits < 0:
        raise HTTPException(status_code=400, detail="remote_hits must not be negative")

    try:
        comparison = ThesaurusService(s3).compare(vocabulary_type, remote_hits)
    except UnknownVocabularyError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    return ThesaurusComparison(**comparison)


async def handle_thesaurus_rebuild(
    vocabulary_type: str,
    files: list[UploadFile],
    s3: Minio
) -> ThesaurusRebuildResponse:
    """Rebuild a thesaurus from uploaded KMS RDF pages (in upload order)"""
    if not files:
        raise HTTPException(status_code=400, detail="At least one RDF page is required")

    pages = [await file.read() for file in files]
    logger.info(
        f"Rebuilding thesaurus from {len(pages)} RDF pages",
        extra={"vocabulary_type": vocabulary_type}
    )

    try:
        result = await ThesaurusService(s3).rebuild(vocabulary_type, pages)
    except UnknownVocabularyError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ConceptParseError as e:
        logger.error(f"Thesaurus rebuild failed: {e}", extra={"vocabulary_type": vocabulary_type})
        raise HTTPException(status_code=400, detail=str(e)) from e

    return ThesaurusRebuildResponse(**result)
