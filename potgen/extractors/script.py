"""JavaScript extraction using tree-sitter.

Marker calls are ``gettext("text")`` and ``ngettext("one", "many", n)``
where the callee is a bare identifier.
"""

import re
from collections.abc import Iterable

import tree_sitter_javascript as ts_javascript
from tree_sitter import Language, Node, Parser

from potgen.exceptions import CallValidationError, ParseError
from potgen.extractors.base import (
    EMPTY_CALL,
    NON_LITERAL,
    UNKNOWN_MARKER,
    Extractor,
    join_surrogates,
)
from potgen.models import Location, StringRecord

SINGULAR_MARKER = "gettext"
PLURAL_MARKER = "ngettext"
MARKERS = frozenset({SINGULAR_MARKER, PLURAL_MARKER})

# singular, plural; the count argument is not required here
PLURAL_MIN_ARGS = 2

SCRIPT_EXTENSIONS = frozenset({".js", ".mjs", ".cjs", ".jsx"})

_LANGUAGE: Language | None = None


def _get_language() -> Language:
    """Lazily load the tree-sitter JavaScript grammar."""
    global _LANGUAGE
    if _LANGUAGE is None:
        _LANGUAGE = Language(ts_javascript.language())
    return _LANGUAGE


# =============================================================================
# Tree-sitter Helper Functions
# =============================================================================


def _find_nodes(node: Node, types: set[str]) -> list[Node]:
    """Find all nodes of given types, in pre-order."""
    results = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type in types:
            results.append(current)
        stack.extend(reversed(current.children))
    return results


def _find_first_error(node: Node) -> Node | None:
    """Find the first ERROR or missing node in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        stack.extend(
            child
            for child in reversed(current.children)
            if child.has_error or child.is_missing
        )
    return None


def _line(node: Node) -> int:
    # tree-sitter is 0-indexed
    return node.start_point[0] + 1


_JS_ESCAPE = re.compile(
    r"\\(?:x([0-9a-fA-F]{2})|u\{([0-9a-fA-F]+)\}|u([0-9a-fA-F]{4})"
    r"|(\r\n|[\n\r\u2028\u2029])|([0-7]{1,3})|(.))",
    re.DOTALL,
)

MAX_CODE_POINT = 0x10FFFF

INVALID_ESCAPE = "Invalid code point escape"

_SINGLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v"}


def _unescape_match(match: re.Match[str]) -> str:
    hex2, code_point, hex4, continuation, octal, char = match.groups()
    if hex2 is not None:
        return chr(int(hex2, 16))
    if code_point is not None:
        value = int(code_point, 16)
        if value > MAX_CODE_POINT:
            raise ValueError(f"code point escape out of range: {code_point}")
        return chr(value)
    if hex4 is not None:
        return chr(int(hex4, 16))
    if continuation is not None:
        return ""
    if octal is not None:
        return chr(int(octal, 8))
    return _SINGLE_ESCAPES.get(char, char)


def decode_string_literal(node: Node) -> str:
    """Return the runtime value of a JavaScript string literal node.

    Raises:
        CallValidationError: The literal holds a code point escape above
            U+10FFFF or an unpaired surrogate.
    """
    body = node.text.decode("utf-8")[1:-1]
    try:
        value = _JS_ESCAPE.sub(_unescape_match, body)
    except ValueError as e:
        raise CallValidationError(INVALID_ESCAPE, line=_line(node)) from e
    # Join surrogate pairs written as two \\uXXXX escapes
    return join_surrogates(value, line=_line(node))


# =============================================================================
# Extractor
# =============================================================================


def parse_script(text: str) -> Node:
    """Parse JavaScript source and return the root node.

    tree-sitter recovers from syntax errors, so a tree containing error
    nodes is rejected here.

    Raises:
        ParseError: The source is not valid JavaScript.
    """
    parser = Parser(_get_language())
    tree = parser.parse(text.encode("utf-8"))
    root = tree.root_node

    if root.has_error:
        bad = _find_first_error(root) or root
        if bad.is_missing:
            message = f"Missing {bad.type}"
        else:
            snippet = bad.text.decode("utf-8", errors="replace").split("\n", 1)[0][:20]
            message = f"Unexpected token {snippet!r}" if snippet else "Unexpected token"
        raise ParseError(message, line=_line(bad), column=bad.start_point[1] + 1)

    return root


def find_script_calls(tree: Node) -> Iterable[Node]:
    """All call expressions in the program, in document order."""
    return _find_nodes(tree, {"call_expression"})


def _call_arguments(node: Node) -> list[Node]:
    args = node.child_by_field_name("arguments")
    if args is None:
        return []
    # Tagged template: gettext`text`
    if args.type == "template_string":
        return [args]
    return [child for child in args.named_children if child.type != "comment"]


def make_script_record(node: Node, filepath: str) -> StringRecord | None:
    """Convert a marker call into a StringRecord.

    Returns None for calls that are not ``gettext``/``ngettext`` on a bare
    identifier.

    Raises:
        CallValidationError: Wrong arity or non-literal message arguments.
    """
    callee = node.child_by_field_name("function")
    if callee is None or callee.type != "identifier":
        return None
    name = callee.text.decode("utf-8")
    if name not in MARKERS:
        return None

    lineno = _line(node)
    args = _call_arguments(node)
    location = Location(filepath=filepath, lineno=lineno)

    if name == SINGULAR_MARKER:
        if len(args) < 1:
            raise CallValidationError(EMPTY_CALL, line=lineno)
        if args[0].type != "string":
            raise CallValidationError(NON_LITERAL, line=lineno)
        return StringRecord(msgid=decode_string_literal(args[0]), locations=[location])

    if name == PLURAL_MARKER:
        if len(args) < PLURAL_MIN_ARGS:
            raise CallValidationError("Incomplete ngettext call", line=lineno)
        singular, plural = args[0], args[1]
        if singular.type != "string" or plural.type != "string":
            raise CallValidationError(NON_LITERAL, line=lineno)
        return StringRecord(
            msgid=decode_string_literal(singular),
            msgid_plural=decode_string_literal(plural),
            locations=[location],
        )

    raise CallValidationError(UNKNOWN_MARKER, line=lineno)


SCRIPT_EXTRACTOR = Extractor(
    name="script",
    extensions=SCRIPT_EXTENSIONS,
    parse=parse_script,
    find_calls=find_script_calls,
    make_record=make_script_record,
)
