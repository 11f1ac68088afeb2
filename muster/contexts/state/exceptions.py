"""Custom exceptions for the state context."""

from typing import Optional


class StoreError(RuntimeError):
    """Raised when the store is used in a way that would break serialized mutation."""

    pass


class StorageError(OSError):
    """Raised by a persistence medium when a key cannot be read or written."""

    pass


class ImportPayloadError(ValueError):
    """
    Exception raised when an import payload cannot be merged into the store.

    Attributes:
        message: Error description
        collection: Collection that failed validation (e.g., 'applicants')
        index: Position of the offending record within that collection
    """

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        index: Optional[int] = None,
    ):
        self.message = message
        self.collection = collection
        self.index = index

        parts = [message]
        if collection is not None:
            location = collection if index is None else f"{collection}[{index}]"
            parts.append(f"Location: {location}")

        super().__init__("\n".join(parts))


class RecordNotFoundError(KeyError):
    """Raised when an operation targets an id that is not in the store."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} '{record_id}' not found")

    def __str__(self) -> str:
        return self.args[0]
