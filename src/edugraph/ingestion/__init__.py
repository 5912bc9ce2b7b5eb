"""Ingestion layer for edugraph - structured lecture conversion."""

from edugraph.ingestion.structured import (
    ConversionResult,
    StructuredLectureConverter,
    convert_structured,
    load_structured_file,
    map_category,
    parse_timestamp,
)

__all__ = [
    "ConversionResult",
    "StructuredLectureConverter",
    "convert_structured",
    "load_structured_file",
    "map_category",
    "parse_timestamp",
]
