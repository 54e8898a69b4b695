#!/usr/bin/env python3

import logging

from fastapi import HTTPException

from ..models.models import (
    ControlledPathModel,
    GcmdKeywordModel,
    LegacyKeywordRequest,
    MigratedKeyword,
    SubjectClassifyRequest,
    SubjectClassifyResponse,
    SubjectTagModel,
)
from ..services.domain.vocabulary import (
    SubjectParseError,
    SubjectTag,
    classify_subjects,
    extract_gcmd_keywords,
    extract_subject_tags,
)
from ..services.domain.vocabulary.uri import transform_legacy_keywords

logger = logging.getLogger(__name__)


def _to_tag(model: SubjectTagModel) -> SubjectTag:
    return SubjectTag(
        text=model.text,
        scheme=model.subjectScheme,
        scheme_uri=model.schemeURI,
        value_uri=model.valueURI,
    )


def _classify(tags: list[SubjectTag]) -> SubjectClassifyResponse:
    classification = classify_subjects(tags)
    return SubjectClassifyResponse(
        freeKeywords=classification.free_keywords,
        controlledPaths=[
            ControlledPathModel(
                path=controlled.segments,
                subjectScheme=controlled.scheme,
                schemeURI=controlled.scheme_uri,
                valueURI=controlled.value_uri,
            )
            for controlled in classification.controlled_paths
        ],
        gcmdKeywords=[
            GcmdKeywordModel(uuid=k.uuid, id=k.id, path=k.path, type=k.type)
            for k in extract_gcmd_keywords(tags)
        ],
    )


def handle_classify_subjects(request: SubjectClassifyRequest) -> SubjectClassifyResponse:
    """Classify subjects sent as JSON"""
    return _classify([_to_tag(subject) for subject in request.subjects])


def handle_classify_subjects_xml(content: bytes) -> SubjectClassifyResponse:
    """Classify the subjects of an uploaded DataCite XML document"""
    try:
        tags = extract_subject_tags(content)
    except SubjectParseError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    logger.info(f"Found {len(tags)} subjects in uploaded metadata")
    return _classify(tags)


def handle_migrate_legacy_keywords(request: LegacyKeywordRequest) -> list[MigratedKeyword]:
    """Rewrite keywords stored with legacy GCMD URIs; unsupported rows are dropped"""
    rows = [keyword.model_dump() for keyword in request.keywords]
    migrated = transform_legacy_keywords(rows)

    skipped = len(rows) - len(migrated)
    if skipped:
        logger.info(f"Skipped {skipped} legacy keywords without a supported thesaurus or concept UUID")

    return [MigratedKeyword(**keyword) for keyword in migrated]
