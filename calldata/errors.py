"""Error kinds raised by the calldata subsystem.

I/O failures are plain OSError and propagate unchanged. Nothing here is
retried: every transform is deterministic over file contents.
"""


class CalldataError(Exception):
    """Base class for all calldata errors."""


class ParseError(CalldataError, ValueError):
    """Malformed proof text or non-conforming witness encoding."""

    def __init__(self, message: str, fragment: str = "") -> None:
        super().__init__(f"{message}: {fragment!r}" if fragment else message)
        self.fragment = fragment


class FieldElementEncodingError(CalldataError, ValueError):
    """A scalar could not be encoded as a field element."""

    def __init__(self, message: str, value: object = None) -> None:
        super().__init__(message)
        self.value = value


class VerificationFailed(CalldataError):
    """The replay verifier rejected the proof. Fatal; never retried."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"verification failed: {reason}")
        self.reason = reason


class UnsupportedLayout(CalldataError, ValueError):
    """The requested layout is unknown or not supported by the verifier."""

    def __init__(self, layout: str) -> None:
        super().__init__(f"unsupported layout: {layout}")
        self.layout = layout


class MissingAnnotationFile(CalldataError):
    """An annotation input required for recursive verification was not supplied."""

    def __init__(self, name: str) -> None:
        super().__init__(f"missing annotation file: {name}")
        self.name = name


class OutputDirectoryNotEmpty(CalldataError, FileExistsError):
    """Split output directory already holds files."""

    def __init__(self, path: str) -> None:
        super().__init__(f"output directory is not empty: {path}")
        self.path = path
