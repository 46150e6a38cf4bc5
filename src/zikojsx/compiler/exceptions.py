"""zikojsx compiler exceptions."""

from typing import Optional


class ZikoJsxError(Exception):
    """Base class for compile errors; carries the source location."""

    def __init__(
        self,
        message: str,
        file_path: str = "",
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.message = message
        self.file_path = file_path
        self.line = line
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        location = self.file_path or "<source>"
        if self.line:
            location += f":{self.line}"
            if self.column is not None:
                location += f":{self.column}"
        return f"{location}: {self.message}"


class MalformedSource(ZikoJsxError):
    """The source could not be parsed as JavaScript with markup."""


class UnsupportedNameKind(ZikoJsxError):
    """A markup tag name is not a plain identifier (``a.b`` or ``ns:tag``)."""
