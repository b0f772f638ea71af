"""Duplicate detection and merge building blocks that do not touch the session."""

from crm_dedupe.duplicates.errors import (
    AlreadyMergedError,
    InvalidMergeRequestError,
    MergeError,
    RecordNotFoundError,
    ScanLimitExceededError,
    TransferFailureError,
)
from crm_dedupe.duplicates.kinds import EntityKind, EntityKindSpec, MergeableRecord, get_kind_spec
from crm_dedupe.duplicates.manifest import ReferenceTransfer, TransferKind, get_manifest
from crm_dedupe.duplicates.similarity import KindWeights, MatchField, score, snapshot_attributes

__all__ = [
    "AlreadyMergedError",
    "EntityKind",
    "EntityKindSpec",
    "InvalidMergeRequestError",
    "KindWeights",
    "MatchField",
    "MergeError",
    "MergeableRecord",
    "RecordNotFoundError",
    "ReferenceTransfer",
    "ScanLimitExceededError",
    "TransferFailureError",
    "TransferKind",
    "get_kind_spec",
    "get_manifest",
    "score",
    "snapshot_attributes",
]
