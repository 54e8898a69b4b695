#!/usr/bin/env python3

import os
from unittest.mock import patch

import pytest

from thesaurus_api.core.config import DEFAULT_CACHE_TTL, UnknownVocabularyError, VocabularyConfig
from thesaurus_api.core.env_utils import getenv_clean, getenv_int, getenv_list


class TestVocabularyConfig:
    """Test suite for vocabulary configuration."""

    def test_supported_types(self):
        assert VocabularyConfig().valid_types() == ["science_keywords", "platforms", "instruments"]

    @pytest.mark.parametrize("vocabulary_type,object_name,scheme", [
        ("science_keywords", "gcmd-science-keywords.json", "NASA/GCMD Earth Science Keywords"),
        ("platforms", "gcmd-platforms.json", "NASA/GCMD Earth Platforms Keywords"),
        ("instruments", "gcmd-instruments.json", "NASA/GCMD Instruments"),
    ])
    def test_vocabulary_settings(self, vocabulary_type, object_name, scheme):
        settings = VocabularyConfig().get(vocabulary_type)

        assert settings.object_name == object_name
        assert settings.scheme == scheme
        assert settings.scheme_uri.startswith("https://gcmd.earthdata.nasa.gov/kms/concepts/concept_scheme/")
        assert settings.cache_key == f"thesaurus:{vocabulary_type}"

    def test_kms_url(self):
        settings = VocabularyConfig().get("science_keywords")

        assert settings.kms_url == "https://cmr.earthdata.nasa.gov/kms/concepts/concept_scheme/sciencekeywords?format=rdf"

    def test_unknown_type(self):
        with pytest.raises(UnknownVocabularyError) as exc_info:
            VocabularyConfig().get("projects")

        assert "projects" in str(exc_info.value)
        assert "science_keywords" in str(exc_info.value)

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        config = VocabularyConfig()

        assert config.BUCKET == "thesauri"
        assert config.KMS_PAGE_SIZE == 2000
        assert config.get("platforms").cache_ttl == DEFAULT_CACHE_TTL

    @patch.dict(os.environ, {
        "THESAURUS_BUCKET": "vocabularies\r\n",
        "THESAURUS_PLATFORMS_TTL": "3600",
        "THESAURUS_INSTRUMENTS_TTL": "soon",
    })
    def test_environment_overrides(self):
        config = VocabularyConfig()

        assert config.BUCKET == "vocabularies"
        assert config.get("platforms").cache_ttl == 3600
        assert config.get("instruments").cache_ttl == DEFAULT_CACHE_TTL


class TestEnvUtils:
    """Test suite for environment variable helpers."""

    @patch.dict(os.environ, {"TEST_VALUE": "  value\r\n"})
    def test_getenv_clean_strips(self):
        assert getenv_clean("TEST_VALUE") == "value"

    @patch.dict(os.environ, {}, clear=True)
    def test_getenv_clean_default(self):
        assert getenv_clean("MISSING", "fallback") == "fallback"
        assert getenv_clean("MISSING") is None

    @patch.dict(os.environ, {"TEST_INT": "", "TEST_BAD": "12a"})
    def test_getenv_int_fallbacks(self):
        assert getenv_int("TEST_INT", 5) == 5
        assert getenv_int("TEST_BAD", 7) == 7

    @patch.dict(os.environ, {"TEST_LIST": "http://a, ,http://b,"})
    def test_getenv_list(self):
        assert getenv_list("TEST_LIST") == ["http://a", "http://b"]

    @patch.dict(os.environ, {"TEST_LIST": " , "})
    def test_getenv_list_default(self):
        assert getenv_list("TEST_LIST", ["x"]) == ["x"]
