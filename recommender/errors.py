from __future__ import annotations


class RecordNotFound(KeyError):
    """Raised when a record id is not part of the current index snapshot."""

    def __init__(self, record_id):
        super().__init__(record_id)
        self.record_id = record_id

    def __str__(self) -> str:
        return f"record {self.record_id!r} not found"


class InvalidRecord(ValueError):
    pass
