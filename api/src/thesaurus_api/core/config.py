#!/usr/bin/env python3
"""
Configuration settings for GCMD thesaurus vocabularies and storage.

Each supported vocabulary type is bound to its scheme title/URI, the KMS
endpoint the refresh job fetches from, the object name the built forest is
stored under and a cache TTL. TTLs and the storage bucket can be overridden
via environment variables.
"""

import logging
from dataclasses import dataclass

from .env_utils import getenv_clean, getenv_int

logger = logging.getLogger(__name__)

KMS_CONCEPT_SCHEME_URL = "https://cmr.earthdata.nasa.gov/kms/concepts/concept_scheme"
GCMD_CONCEPT_SCHEME_URI = "https://gcmd.earthdata.nasa.gov/kms/concepts/concept_scheme"

DEFAULT_CACHE_TTL = 86400  # 24 hours


class UnknownVocabularyError(Exception):
    """Raised for a vocabulary type that is not configured."""
    pass


@dataclass(frozen=True)
class VocabularySettings:
    """Settings bound to one vocabulary type."""
    vocabulary_type: str    # 'science_keywords', 'platforms' or 'instruments'
    display_name: str
    scheme: str             # Scheme title stamped on every concept node
    scheme_uri: str
    kms_slug: str           # Concept scheme name in the KMS API
    object_name: str        # Object key of the stored forest JSON
    cache_ttl: int          # Seconds

    @property
    def kms_url(self) -> str:
        return f"{KMS_CONCEPT_SCHEME_URL}/{self.kms_slug}?format=rdf"

    @property
    def cache_key(self) -> str:
        return f"thesaurus:{self.vocabulary_type}"


def _ttl(vocabulary_type: str) -> int:
    return getenv_int(f"THESAURUS_{vocabulary_type.upper()}_TTL", DEFAULT_CACHE_TTL)


class VocabularyConfig:
    """Vocabulary and thesaurus storage configuration.

    Values are read when the instance is created, so tests can patch the
    environment and build a fresh instance.
    """

    SCIENCE_KEYWORDS = "science_keywords"
    PLATFORMS = "platforms"
    INSTRUMENTS = "instruments"

    def __init__(self):
        # Bucket holding the built forests
        self.BUCKET = getenv_clean("THESAURUS_BUCKET", "thesauri")

        # KMS page size used by the external fetcher
        self.KMS_PAGE_SIZE = getenv_int("THESAURUS_KMS_PAGE_SIZE", 2000)

        self.vocabularies = {
            self.SCIENCE_KEYWORDS: VocabularySettings(
                vocabulary_type=self.SCIENCE_KEYWORDS,
                display_name="Science Keywords",
                scheme="NASA/GCMD Earth Science Keywords",
                scheme_uri=f"{GCMD_CONCEPT_SCHEME_URI}/sciencekeywords",
                kms_slug="sciencekeywords",
                object_name="gcmd-science-keywords.json",
                cache_ttl=_ttl(self.SCIENCE_KEYWORDS),
            ),
            self.PLATFORMS: VocabularySettings(
                vocabulary_type=self.PLATFORMS,
                display_name="Platforms",
                scheme="NASA/GCMD Earth Platforms Keywords",
                scheme_uri=f"{GCMD_CONCEPT_SCHEME_URI}/platforms",
                kms_slug="platforms",
                object_name="gcmd-platforms.json",
                cache_ttl=_ttl(self.PLATFORMS),
            ),
            self.INSTRUMENTS: VocabularySettings(
                vocabulary_type=self.INSTRUMENTS,
                display_name="Instruments",
                scheme="NASA/GCMD Instruments",
                scheme_uri=f"{GCMD_CONCEPT_SCHEME_URI}/instruments",
                kms_slug="instruments",
                object_name="gcmd-instruments.json",
                cache_ttl=_ttl(self.INSTRUMENTS),
            ),
        }

    def valid_types(self) -> list[str]:
        return list(self.vocabularies)

    def get(self, vocabulary_type: str) -> VocabularySettings:
        """Get settings for a vocabulary type.

        Raises:
            UnknownVocabularyError: If the type is not configured
        """
        settings = self.vocabularies.get(vocabulary_type)
        if settings is None:
            raise UnknownVocabularyError(
                f"Invalid thesaurus type: {vocabulary_type}. "
                f"Valid types: {', '.join(self.valid_types())}"
            )
        return settings


# Singleton instance
vocabulary_config = VocabularyConfig()
