class JsxTaggerError(Exception):
    """Base class for errors raised by the transform engine."""


class ParseError(JsxTaggerError):
    """The source text does not conform to the grammar used for the file."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"{path}: {detail}")
        self.path = path
        self.detail = detail


class SnapshotSerializationError(JsxTaggerError):
    """A props snapshot for a single element could not be serialized."""

    def __init__(self, identity: str, cause: Exception) -> None:
        super().__init__(f"Failed to serialize props for {identity}: {cause}")
        self.identity = identity
        self.cause = cause
