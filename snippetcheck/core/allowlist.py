"""Ambient identifiers that never need an import.

A name in the allowlist is exempt from ``missing-import`` reporting. The set
is case-sensitive and frozen; configuration may only produce a *new* set via
:func:`build_allowlist` at startup.
"""

from typing import FrozenSet, Iterable, Optional

from ..utils.logging_setup import get_logger

logger = get_logger(__name__)


# ECMAScript built-ins and intrinsic values
LANGUAGE_GLOBALS = frozenset({
    "Array", "ArrayBuffer", "Atomics", "BigInt", "BigInt64Array", "BigUint64Array",
    "Boolean", "DataView", "Date", "Error", "EvalError", "Float32Array",
    "Float64Array", "Function", "Infinity", "Int8Array", "Int16Array",
    "Int32Array", "Intl", "JSON", "Map", "Math", "NaN", "Number", "Object",
    "Promise", "Proxy", "RangeError", "ReferenceError", "Reflect", "RegExp",
    "Set", "SharedArrayBuffer", "String", "Symbol", "SyntaxError", "TypeError",
    "URIError", "Uint8Array", "Uint8ClampedArray", "Uint16Array", "Uint32Array",
    "WeakMap", "WeakRef", "WeakSet", "globalThis", "undefined", "null",
    "isNaN", "isFinite", "parseInt", "parseFloat", "encodeURIComponent",
    "decodeURIComponent", "encodeURI", "decodeURI",
})

# Browser and Node.js runtime globals
RUNTIME_GLOBALS = frozenset({
    "console", "window", "document", "localStorage", "sessionStorage",
    "navigator", "fetch", "setTimeout", "clearTimeout", "setInterval",
    "clearInterval", "setImmediate", "clearImmediate", "queueMicrotask",
    "structuredClone", "requestAnimationFrame", "cancelAnimationFrame",
    "URL", "URLSearchParams", "Request", "Response", "Headers",
    "AbortController", "Event", "CustomEvent", "TextEncoder", "TextDecoder",
    "crypto", "performance", "alert", "process", "require", "module",
    "exports", "global", "__dirname", "__filename", "Buffer",
})

# Test framework globals (jest, vitest, mocha)
TEST_GLOBALS = frozenset({
    "describe", "it", "test", "expect", "beforeEach", "afterEach",
    "beforeAll", "afterAll", "jest", "vi",
})

# TypeScript utility and primitive type names
TYPE_GLOBALS = frozenset({
    "PromiseLike", "MapLike", "SetLike", "ReadonlyArray", "ReadonlyMap",
    "ReadonlySet", "Record", "Partial", "Required", "Readonly", "Pick", "Omit",
    "Exclude", "Extract", "NonNullable", "Parameters", "ConstructorParameters",
    "ReturnType", "InstanceType", "ThisType", "Awaited", "TemplateStringsArray",
    "string", "number", "boolean", "any", "never", "unknown", "void", "bigint",
    "symbol", "object",
})

# UI framework names assumed in scope on every page
FRAMEWORK_GLOBALS = frozenset({
    "React", "Fragment",
})

DEFAULT_GLOBALS: FrozenSet[str] = (
    LANGUAGE_GLOBALS | RUNTIME_GLOBALS | TEST_GLOBALS | TYPE_GLOBALS | FRAMEWORK_GLOBALS
)


def build_allowlist(extra: Optional[Iterable[str]] = None) -> FrozenSet[str]:
    """Return the allowlist extended with ``extra`` names.

    The default set is returned untouched when there is nothing to add.
    """
    names = {str(name).strip() for name in (extra or ()) if str(name).strip()}
    if not names:
        return DEFAULT_GLOBALS
    logger.debug(f"Extending allowlist with {len(names)} configured names")
    return DEFAULT_GLOBALS | frozenset(names)


def is_allowlisted(name: str, allowlist: FrozenSet[str] = DEFAULT_GLOBALS) -> bool:
    """Check whether ``name`` is an ambient identifier."""
    return name in allowlist
