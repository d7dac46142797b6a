# internals/errors.py
"""Error catalog for derivation failures.

Every failure the engine can report has a code in the registry below. Generation
time failures are raised as `DeriveError` subclasses via `raise_derive_error`;
they abort the request and are never recovered inside the engine. Runtime codes
(DG2xxx) are not raised here: their text is rendered into the generated code as
panic/assert messages.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, NoReturn, Optional, Type

from derivegen.internals.report import Span, Reporter


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    TYPE        = "type"
    GENERICS    = "generics"
    BOUND       = "bound"
    DECLARATION = "declaration"
    INVOCATION  = "invocation"
    SYNTAX      = "syntax"
    TOOLCHAIN   = "toolchain"
    RUNTIME     = "runtime"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    severity: Severity
    text: str
    category: Category
    doc: str = ""


class DeriveError(Exception):
    """Base class of every generation-time failure."""

    def __init__(self, code: str, message: str, span: Optional[Span] = None):
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message
        self.span = span

    def with_span(self, span: Optional[Span]) -> "DeriveError":
        if self.span is None and span is not None:
            self.span = span
        return self


class UnsupportedTypeForm(DeriveError):
    """A type, expression or literal shape outside the accepted grammar."""


class UnsupportedGenericConstParam(DeriveError):
    pass


class UnimplementedForm(DeriveError):
    """A bound form the accepted grammar excludes (`?Sized`, `for<'a>`)."""


class WrongDeclarationKind(DeriveError):
    pass


class MalformedInvocation(DeriveError):
    pass


class DeclarationSyntaxError(DeriveError):
    pass


class ToolchainError(DeriveError):
    pass


_EXCEPTIONS: Dict[Category, Type[DeriveError]] = {
    Category.TYPE: UnsupportedTypeForm,
    Category.GENERICS: UnsupportedGenericConstParam,
    Category.BOUND: UnimplementedForm,
    Category.DECLARATION: WrongDeclarationKind,
    Category.INVOCATION: MalformedInvocation,
    Category.SYNTAX: DeclarationSyntaxError,
    Category.TOOLCHAIN: ToolchainError,
}


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]


ERR = _ErrorCatalog(REGISTRY)

def emit(r: Reporter, em: ErrorMessage, span: Optional[Span], **kwargs) -> None:
    text = _fmt(em.code, **kwargs)
    if em.severity == Severity.ERROR:
        r.error(em.code, text, span)
    else:
        r.warn(em.code, text, span)

def report_exception(r: Reporter, exc: DeriveError) -> None:
    """Turn a raised DeriveError into a reporter diagnostic."""
    r.error(exc.code, exc.message, exc.span)

def raise_derive_error(code: str, span: Optional[Span] = None, **kwargs) -> NoReturn:
    """Raise the exception registered for `code`.

    Args:
        code: Error code (e.g., "DG1001")
        span: Optional source location of the offending construct
        **kwargs: Format parameters for the error message

    Raises:
        DeriveError: Always, as the subclass mapped from the code's category
    """
    msg = _get(code)
    exc_class = _EXCEPTIONS.get(msg.category)
    if exc_class is None:
        raise ValueError(f"{code} is a runtime message and cannot be raised at generation time")
    raise exc_class(code, _fmt(code, **kwargs), span)

def runtime_message(code: str, **kwargs) -> str:
    """Text of a runtime (DG2xxx) message, for embedding in generated code."""
    msg = _get(code)
    if msg.category != Category.RUNTIME:
        raise ValueError(f"{code} is not a runtime message")
    return _fmt(code, **kwargs)


#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")

def _fmt(code: str, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None

#
# --- Registry population
#

# Type expressions - DG10xx
_add(ErrorMessage("DG1001", Severity.ERROR,
    "type_to_string: unexpected type: {form}",
    Category.TYPE, "The field type cannot be named in generated code (function pointer, trait object, ...)."))

_add(ErrorMessage("DG1002", Severity.ERROR,
    "unsupported literal kind '{kind}'",
    Category.TYPE, "Only string, byte, char, integer, float and bool literals can be rendered."))

_add(ErrorMessage("DG1003", Severity.ERROR,
    "unsupported expression form '{form}': only literals are accepted",
    Category.TYPE, "Array lengths and const generic arguments must be literals."))

_add(ErrorMessage("DG1004", Severity.ERROR,
    "qualified self types are not supported: '<{qself} as ...>'",
    Category.TYPE, "Paths of the form <T as Trait>::Name cannot be rendered."))

_add(ErrorMessage("DG1005", Severity.ERROR,
    "parenthesized generic arguments are not supported on path segment '{segment}'",
    Category.TYPE, "Fn(A) -> B style path arguments cannot be rendered."))

# Generic parameters and bounds - DG11xx
_add(ErrorMessage("DG1101", Severity.ERROR,
    "const generic parameter '{name}' is not supported",
    Category.GENERICS, "Only type and lifetime parameters are accepted."))

_add(ErrorMessage("DG1102", Severity.ERROR,
    "trait bound modifier '{modifier}' on '{bound}' is not supported",
    Category.BOUND, "Relaxed bounds such as ?Sized are excluded from the accepted grammar."))

_add(ErrorMessage("DG1103", Severity.ERROR,
    "higher-ranked lifetimes 'for<{lifetimes}>' are not supported on '{subject}'",
    Category.BOUND, "Bounds and where predicates cannot bind their own lifetimes."))

# Declarations - DG12xx
_add(ErrorMessage("DG1201", Severity.ERROR,
    "{derive} macro can not be called on {kind}s",
    Category.DECLARATION, "Method derivations only apply to enums."))

_add(ErrorMessage("DG1202", Severity.WARNING,
    "enum '{name}' has no variants: {derive} generates nothing",
    Category.DECLARATION, "An empty enum yields empty output for every method derivation."))

# Invocations - DG13xx
_add(ErrorMessage("DG1301", Severity.ERROR,
    "generate_index_type: invalid parameters: should receive exactly one identifier (got {got})",
    Category.INVOCATION, "The index type generator takes a single bare identifier."))

# Declaration front end - DG14xx
_add(ErrorMessage("DG1401", Severity.ERROR,
    "syntax error: {detail}",
    Category.SYNTAX, "The declaration text does not match the accepted declaration grammar."))

_add(ErrorMessage("DG1402", Severity.ERROR,
    "unknown derive kind '{name}' (expected one of: {known})",
    Category.SYNTAX, "Requested derivation name is not one of the supported kinds."))

# Toolchain lookup - DG15xx
_add(ErrorMessage("DG1501", Severity.ERROR,
    "cannot read toolchain file '{path}': {reason}",
    Category.TOOLCHAIN, "The rust-toolchain file is missing or has no [toolchain] channel."))

# Runtime faults of generated code - DG20xx
_add(ErrorMessage("DG2001", Severity.ERROR,
    "{adt}::as_{variant}: Not the proper variant",
    Category.RUNTIME, "A generated accessor was called on an instance of another variant."))

_add(ErrorMessage("DG2002", Severity.ERROR,
    "{module}::Id: index overflow",
    Category.RUNTIME, "Incrementing a generated handle overflowed its integer range."))

_add(ErrorMessage("DG2003", Severity.ERROR,
    "{module}::Id: index does not fit in 32 bits",
    Category.RUNTIME, "A generated handle exceeded the 32-bit serialization bound."))
