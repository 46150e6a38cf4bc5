try:
    from ._version import __version__
except ImportError:
    from importlib.metadata import version, PackageNotFoundError

    try:
        __version__ = version("zikojsx")
    except PackageNotFoundError:
        __version__ = "unknown"

from zikojsx.compiler.codegen.generator import generate
from zikojsx.compiler.exceptions import (
    MalformedSource,
    UnsupportedNameKind,
    ZikoJsxError,
)
from zikojsx.compiler.parser import parse
from zikojsx.compiler.pipeline import compile, compile_file
from zikojsx.compiler.transformer import transform
from zikojsx.config import CompilerOptions

__all__ = [
    "compile",
    "compile_file",
    "parse",
    "transform",
    "generate",
    "CompilerOptions",
    "ZikoJsxError",
    "MalformedSource",
    "UnsupportedNameKind",
]
