"""
GCMD Vocabulary Domain

Pure processing of GCMD controlled vocabularies:
- Concept extraction from KMS SKOS/RDF exports
- Concept URI normalization (legacy and current identifier forms)
- Hierarchy building (broader links to a rooted concept forest)
- Subject classification (free keywords vs. controlled paths)

Nothing in this package performs network or storage I/O.
"""

from .extractor import ConceptParseError, ConceptRecord, extract_concepts, extract_total_hits
from .hierarchy import (
    ConceptForest,
    ConceptNode,
    build_hierarchy,
    count_concepts,
    forest_to_dict,
    iter_forest,
)
from .subjects import (
    ControlledPath,
    GcmdKeyword,
    SubjectClassification,
    SubjectParseError,
    SubjectTag,
    classify_subjects,
    extract_gcmd_keywords,
    extract_subject_tags,
    parse_controlled_path,
)
from .uri import build_canonical_uri, extract_uuid, normalize_identifier, to_canonical

__all__ = [
    # Extraction
    "ConceptParseError",
    "ConceptRecord",
    "extract_concepts",
    "extract_total_hits",
    # URIs
    "build_canonical_uri",
    "extract_uuid",
    "normalize_identifier",
    "to_canonical",
    # Hierarchy
    "ConceptForest",
    "ConceptNode",
    "build_hierarchy",
    "count_concepts",
    "forest_to_dict",
    "iter_forest",
    # Subjects
    "ControlledPath",
    "GcmdKeyword",
    "SubjectClassification",
    "SubjectParseError",
    "SubjectTag",
    "classify_subjects",
    "extract_gcmd_keywords",
    "extract_subject_tags",
    "parse_controlled_path",
]
