"""Converter specs and the converter table."""

from .base import ConverterRequirement, ConverterSpec
from .registry import ConverterTable, create_default_table

__all__ = [
    "ConverterRequirement",
    "ConverterSpec",
    "ConverterTable",
    "create_default_table",
]
