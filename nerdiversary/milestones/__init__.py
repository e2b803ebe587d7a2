"""Milestone engine: generators, the calculate() fold and the offset table."""
from .engine import InvalidInput, calculate
from .kinds import Category, MilestoneEvent, MilestoneKind
from .offsets import Offset, OffsetTable, OffsetTableError, build_offset_table, get_offset_table

__all__ = [
    "Category",
    "InvalidInput",
    "MilestoneEvent",
    "MilestoneKind",
    "Offset",
    "OffsetTable",
    "OffsetTableError",
    "build_offset_table",
    "calculate",
    "get_offset_table",
]
