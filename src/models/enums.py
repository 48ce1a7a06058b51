"""Enumeration types for portfolio RAG data models."""

from enum import Enum


class SourceStatus(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"
