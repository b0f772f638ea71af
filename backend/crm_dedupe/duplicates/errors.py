"""Failure taxonomy for duplicate detection and merging."""


class MergeError(Exception):
    """Base merge failure; the transaction has been rolled back when this surfaces."""

    kind = "merge_error"

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class RecordNotFoundError(MergeError):
    kind = "not_found"


class InvalidMergeRequestError(MergeError):
    kind = "invalid_request"


class AlreadyMergedError(MergeError):
    kind = "already_merged"


class TransferFailureError(MergeError):
    kind = "transfer_failure"

    def __init__(self, reason: str, *, entry_name: str | None = None):
        super().__init__(reason)
        self.entry_name = entry_name


class ScanLimitExceededError(Exception):
    """Batch scan refused because the live record count is above the configured ceiling."""

    def __init__(self, record_count: int, limit: int):
        super().__init__(
            f"Duplicate scan covers {record_count} records; the configured ceiling is {limit}."
        )
        self.record_count = record_count
        self.limit = limit
