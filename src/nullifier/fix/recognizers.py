"""Narrow recognizers for C# source and compiler-message fragments.

These are plain-text approximations, not a parser. Each one recognizes a
single shape (a typed local declaration, a null check, a member declaration,
...) and exposes the span of the type token that a fix would mark nullable.
A type that already ends in ``?`` never satisfies a ``TYPE`` followed by
whitespace, which is what keeps the fixes idempotent.
"""

from __future__ import annotations

import re

# A simple or generic type name: Foo, List<Foo>, Dictionary<string, Foo>
TYPE = r"\w+(?:<.+?>)?"

# Statement keywords that look like a type when followed by an identifier.
_NOT_A_TYPE = r"(?!(?:return|new|await|else|throw|yield|case|goto|using|in|is|as|out|ref)\b)"

_MODIFIERS = (
    "public", "private", "protected", "internal", "static", "partial",
    "override", "virtual", "abstract", "sealed", "async", "extern", "unsafe", "new",
)

# "Type variable = ..." where the initializer produces null: a null literal,
# either side of a ternary, an "as" cast or an XxxOrDefault() LINQ call.
NULL_ASSIGNMENT_RE = re.compile(
    r"(?:^|,|\()\s*(?P<type>" + TYPE + r")\s+\w+\s*=\s*"
    r"(?:null|.*\?\s*null\s*:.*|.*\?.*:\s*null\s*|.*\s+as\s+.*|.*.(?:First|Single|Last)OrDefault\(.*\))"
    r"(?:;$|,|\))"
)

VARIABLE_ASSIGNMENT_RE = re.compile(
    r"^\s*(?P<type>" + TYPE + r")\s+(?P<variable>\w+)\s*=\s*.+;$"
)

NULLABLE_DECLARATION_RE = re.compile(
    r"^\s*(?P<type>" + TYPE + r")\?\s+(?P<variable>\w+)\s*(?:=\s*.+)?;$"
)

IF_NULL_CHECK_RE = re.compile(
    r"^\s*if\s*\(\s*(?:"
    r"(?P<left>\w+)\s*(?:==|!=|is|is\s+not)\s*null"
    r"|null\s*[!=]=\s*(?P<right>\w+)"
    r"|(?:\s*!\s*)?string\.IsNullOr(?:Empty|WhiteSpace)\((?P<call>\w+)\)"
    r")\s*\)"
)

TRY_GET_OUT_RE = re.compile(
    r"\.TryGet\w*\(.*,\s*out\s+(?P<type>" + TYPE + r")\s+.+?\)"
)

RETURN_NAME_RE = re.compile(r"^\s*return\s*(?P<name>\w+)\s*;")

# Member declarations with at least one modifier (methods and properties), or
# a bare "Type Name(" method declaration.
METHOD_OR_PROPERTY_RE = re.compile(
    r"^\s*(?:"
    r"(?:(?:" + "|".join(_MODIFIERS) + r")\s+)+(?P<type>" + TYPE + r"\??)\s+(?P<member>\w+)(?:\(|$|\s)"
    r"|" + _NOT_A_TYPE + r"(?P<bare_type>" + TYPE + r"\??)\s+(?P<bare_member>\w+)\("
    r")"
)

EVENT_MEMBER_RE = re.compile(
    r"(?:^|\s+)event\s+(?P<type>" + TYPE + r")\s+(?P<member>\w+)(?:;|$|\s)"
)

DATA_MEMBER_RE = re.compile(
    r"^\s*(?:(?:public|private|protected|internal|static|readonly|volatile|required|new)\s+)+"
    r"(?P<type>" + TYPE + r")\s+(?P<member>\w+)(?:;|$|\s)"
)

FUNCTION_CALL_WITH_NULL_RE = re.compile(
    r"(?P<function>\b\w+)(?:<.+>)?(?P<open>\().*?(?P<null>\bnull\b).*?(?P<close>\))"
)

# A parameter in a declaration: optional modifier, type, name.
PARAMETER_RE = re.compile(
    r"(?:\b(?:ref|out|in|params|this|scoped)\s+)?(?P<type>" + TYPE + r"\??)\s+(?P<variable>\w+)"
)

# Compiler message fragments.
QUOTED_NAME_RE = re.compile(r"\s'(?P<name>\w+)'\s")

CONSTRUCTOR_EXIT_RE = re.compile(
    r"^Non-nullable (?P<kind>event|field|property) '(?P<member>\w+)' must contain a "
    r"non-null value when exiting constructor\. Consider "
    r"(?:adding the 'required' modifier or )?declaring the (?P=kind) as nullable\.$"
)

EVENT_SENDER_RE = re.compile(
    r"^\s*Nullability of reference types in type of parameter 'sender' of "
    r"'void\s+(?P<type>\w+)\.(?P<method>\w+\(object\s+sender,\s+\w+\s+\w+\))' "
    r"doesn't match the target delegate"
)


def declaration_of(name: str) -> re.Pattern[str]:
    """Pattern for "Type name" followed by a parameter delimiter."""
    return re.compile(r"(?P<type>" + TYPE + r")\s+" + re.escape(name) + r"(?:[,)\s=]|$)")


def null_checked_name(line: str) -> str | None:
    """Name of the variable tested against null by an ``if`` on this line."""
    match = IF_NULL_CHECK_RE.search(line)
    if not match:
        return None
    return match.group("left") or match.group("right") or match.group("call")


def method_declaration(line: str) -> tuple[re.Match[str], str] | None:
    """Match a method or property declaration.

    Returns the match and the name of its type group, since modifier-led and
    bare declarations capture into different groups.
    """
    match = METHOD_OR_PROPERTY_RE.search(line)
    if not match:
        return None
    if match.group("type") is not None:
        return match, "type"
    return match, "bare_type"


def declared_member(match: re.Match[str]) -> str:
    return match.group("member") or match.group("bare_member")


def split_arguments(text: str) -> list[str]:
    """Split an argument list on commas.

    This is a flat split: nested calls or generic arguments containing
    commas produce extra pieces.
    """
    return [arg.strip() for arg in text.split(",")]
