"""Source-to-source entry points: parse, transform, generate."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from zikojsx.compiler.codegen.generator import generate
from zikojsx.compiler.exceptions import ZikoJsxError
from zikojsx.compiler.parser import JsxParser, dialect_for_path
from zikojsx.compiler.transformer import transform
from zikojsx.config import CompilerOptions

log = logging.getLogger(__name__)


def compile(
    source: Union[str, bytes],
    options: Optional[CompilerOptions] = None,
    *,
    dialect: str = "jsx",
    file_path: str = "",
) -> str:
    """Compile markup in ``source`` to plain calls and return the new source.

    Raises ``MalformedSource`` for unparsable input and
    ``UnsupportedNameKind`` for tag names that cannot become a call; in both
    cases nothing is produced.
    """
    program = JsxParser(dialect).parse(source, file_path)
    try:
        transform(program, options)
    except ZikoJsxError as e:
        if e.file_path or not file_path:
            raise
        # Lowering works on detached nodes and does not know the file.
        raise type(e)(e.message, file_path=file_path, line=e.line, column=e.column) from e
    return generate(program)


def compile_file(path: Path, options: Optional[CompilerOptions] = None) -> str:
    """Compile one file, choosing the grammar from its suffix."""
    log.debug("Compiling %s", path)
    content = path.read_text(encoding="utf-8")
    return compile(content, options, dialect=dialect_for_path(path), file_path=str(path))
