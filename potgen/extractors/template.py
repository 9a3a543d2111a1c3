"""Template (Jinja/Nunjucks-style) extraction.

Marker calls are ``_("text")`` for singular messages and
``_plural("one", "many", count)`` for plural ones, anywhere an expression is
allowed (``{{ ... }}``, ``{% set %}``, filter arguments, macro calls...).
"""

import re
from collections.abc import Iterable, Sequence
from functools import partial

from jinja2 import Environment, TemplateSyntaxError, nodes

from potgen.exceptions import CallValidationError, ConfigurationError, ParseError
from potgen.extractors.base import (
    EMPTY_CALL,
    NON_LITERAL,
    UNKNOWN_MARKER,
    Extractor,
    join_surrogates,
)
from potgen.models import Location, StringRecord

SINGULAR_MARKER = "_"
PLURAL_MARKER = "_plural"
MARKERS = frozenset({SINGULAR_MARKER, PLURAL_MARKER})

# singular, plural, count
PLURAL_MIN_ARGS = 3

TEMPLATE_EXTENSIONS = frozenset({".html", ".htm", ".njk", ".jinja", ".jinja2", ".j2"})

# Line breaks as counted by the Jinja lexer
_NEWLINE = re.compile(r"\r\n|\r|\n")


def make_environment(extensions: Sequence[str] = ()) -> Environment:
    """Create the Jinja environment used to parse templates.

    Args:
        extensions: Import paths of Jinja extensions providing extra tags.

    Raises:
        ConfigurationError: An extension cannot be imported.
    """
    try:
        return Environment(extensions=list(extensions))
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Cannot load template extension: {e}") from e


def _tag_column(text: str, lineno: int | None) -> int | None:
    # Jinja reports no column; use the first tag or expression opener on the line
    if lineno is None:
        return None
    lines = _NEWLINE.split(text)
    if not 1 <= lineno <= len(lines):
        return None
    line = lines[lineno - 1]
    openers = [index for index in (line.find("{{"), line.find("{%")) if index >= 0]
    return min(openers) + 1 if openers else None


def parse_template(text: str, env: Environment | None = None) -> nodes.Template:
    """Parse template text into a Jinja AST.

    Raises:
        ParseError: The template is not syntactically valid.
    """
    if env is None:
        env = make_environment()
    try:
        return env.parse(text)
    except TemplateSyntaxError as e:
        raise ParseError(
            e.message or str(e), line=e.lineno, column=_tag_column(text, e.lineno)
        ) from e


def find_template_calls(tree: nodes.Template) -> Iterable[nodes.Call]:
    """All call expressions in the template, in document order."""
    calls = []
    stack = list(reversed(list(tree.iter_child_nodes())))
    while stack:
        node = stack.pop()
        if isinstance(node, nodes.Call):
            calls.append(node)
        stack.extend(reversed(list(node.iter_child_nodes())))
    return calls


def _is_literal(node: nodes.Node) -> bool:
    return isinstance(node, nodes.Const) and isinstance(node.value, str)


def make_template_record(node: nodes.Call, filepath: str) -> StringRecord | None:
    """Convert a marker call into a StringRecord.

    Returns None for calls that are not ``_``/``_plural`` on a bare name.

    Raises:
        CallValidationError: Wrong arity, non-literal message arguments or
            an unpaired surrogate escape.
    """
    callee = node.node
    if not isinstance(callee, nodes.Name) or callee.name not in MARKERS:
        return None

    lineno = node.lineno
    args = node.args
    location = Location(filepath=filepath, lineno=lineno)

    if callee.name == SINGULAR_MARKER:
        if len(args) < 1:
            raise CallValidationError(EMPTY_CALL, line=lineno)
        if not _is_literal(args[0]):
            raise CallValidationError(NON_LITERAL, line=lineno)
        return StringRecord(
            msgid=join_surrogates(args[0].value, line=lineno), locations=[location]
        )

    if callee.name == PLURAL_MARKER:
        if len(args) < PLURAL_MIN_ARGS:
            raise CallValidationError("Incomplete plural gettext call", line=lineno)
        singular, plural = args[0], args[1]
        if not (_is_literal(singular) and _is_literal(plural)):
            raise CallValidationError(NON_LITERAL, line=lineno)
        return StringRecord(
            msgid=join_surrogates(singular.value, line=lineno),
            msgid_plural=join_surrogates(plural.value, line=lineno),
            locations=[location],
        )

    raise CallValidationError(UNKNOWN_MARKER, line=lineno)


def make_template_extractor(extensions: Sequence[str] = ()) -> Extractor:
    """Build the template extractor, optionally with extra Jinja extensions.

    Raises:
        ConfigurationError: An extension cannot be imported.
    """
    return Extractor(
        name="template",
        extensions=TEMPLATE_EXTENSIONS,
        parse=partial(parse_template, env=make_environment(extensions)),
        find_calls=find_template_calls,
        make_record=make_template_record,
    )
