#!/usr/bin/env python3

from pydantic import BaseModel

# Pydantic Models

# Thesaurus Models


class ConceptNodeModel(BaseModel):
    """One concept of a stored thesaurus forest (keyword picker payload)."""
    id: str
    text: str
    language: str = "en"
    scheme: str
    schemeURI: str
    description: str = ""
    children: list["ConceptNodeModel"] = []


class ThesaurusPayload(BaseModel):
    lastUpdated: str | None = None
    data: list[ConceptNodeModel] = []


class ThesaurusStatus(BaseModel):
    exists: bool
    conceptCount: int = 0
    lastUpdated: str | None = None


class ThesaurusComparison(BaseModel):
    localCount: int
    remoteCount: int
    updateAvailable: bool
    lastUpdated: str | None = None


class ThesaurusRebuildResponse(BaseModel):
    thesaurusType: str
    conceptCount: int
    lastUpdated: str
    objectName: str
    orphanedCount: int = 0  # Concepts promoted to root because their parent is missing
    omittedCount: int = 0   # Concepts left out because of broader cycles


# Subject Models


class SubjectTagModel(BaseModel):
    """A DataCite subject with its optional vocabulary attributes."""
    text: str
    subjectScheme: str | None = None
    schemeURI: str | None = None
    valueURI: str | None = None


class SubjectClassifyRequest(BaseModel):
    subjects: list[SubjectTagModel] = []


class ControlledPathModel(BaseModel):
    path: list[str]
    subjectScheme: str | None = None
    schemeURI: str | None = None
    valueURI: str | None = None


class GcmdKeywordModel(BaseModel):
    uuid: str
    id: str
    path: list[str]
    type: str  # 'science', 'platforms', 'instruments'


class SubjectClassifyResponse(BaseModel):
    freeKeywords: list[str] = []
    controlledPaths: list[ControlledPathModel] = []
    gcmdKeywords: list[GcmdKeywordModel] = []


class LegacyKeyword(BaseModel):
    """A keyword row stored with a legacy GCMD URI."""
    keyword: str
    thesaurus: str | None = None
    uri: str | None = None
    description: str | None = None


class LegacyKeywordRequest(BaseModel):
    keywords: list[LegacyKeyword] = []


class MigratedKeyword(BaseModel):
    id: str
    text: str
    vocabulary: str
    path: str
    uuid: str
    description: str | None = None
