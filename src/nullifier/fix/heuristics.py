"""Heuristic fixers: one pattern-match-and-mark routine per class of diagnostic.

Every heuristic is a strategy object whose ``apply`` takes the diagnostic and
the current file buffer and returns a FixOutcome holding the edited lines, or
None when it has no confident fix. Heuristics never touch the buffer
themselves; the engine applies their edits.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from pathlib import PureWindowsPath

from nullifier.core.models import Diagnostic, FixOutcome, LineEdit
from nullifier.fix import recognizers as rx
from nullifier.fix.buffer import FileBuffer

logger = logging.getLogger(__name__)

NULLABLE_MARKER = "?"

DEFAULT_MAX_LOOKBACK_LINES = 120


def insert_marker(text: str, index: int) -> str:
    return text[:index] + NULLABLE_MARKER + text[index:]


def mark_nullable(line: str, match: re.Match[str], group: str, line_index: int) -> LineEdit:
    """Insert the nullable marker right after a matched type token."""
    end = match.end(group)
    fragment = insert_marker(match.group(0), end - match.start())
    return LineEdit(line_index=line_index, text=insert_marker(line, end), change=fragment.strip())


def mark_nullable_many(line: str, matches: list[re.Match[str]], group: str, line_index: int) -> LineEdit:
    """Mark several type tokens on one line nullable."""
    text = line
    for match in sorted(matches, key=lambda m: m.end(group), reverse=True):
        text = insert_marker(text, match.end(group))
    change = ", ".join(
        insert_marker(m.group(0), m.end(group) - m.start()).strip() for m in matches
    )
    return LineEdit(line_index=line_index, text=text, change=change)


def _is_implicit(type_name: str) -> bool:
    return type_name == "var"


class Heuristic(ABC):
    """Base class for all heuristic fixers."""

    name: str = ""

    @abstractmethod
    def apply(self, diagnostic: Diagnostic, buffer: FileBuffer) -> FixOutcome | None:
        """Return the edits that fix the diagnostic, or None."""
        ...

    def _outcome(self, *edits: LineEdit) -> FixOutcome:
        return FixOutcome(heuristic=self.name, edits=list(edits))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class AssignNullHeuristic(Heuristic):
    """``Foo x = null;`` becomes ``Foo? x = null;``."""

    name = "assign-null"

    def apply(self, diagnostic: Diagnostic, buffer: FileBuffer) -> FixOutcome | None:
        line = buffer.get_line(diagnostic.line)
        if line is None:
            return None

        match = rx.NULL_ASSIGNMENT_RE.search(line)
        if not match or _is_implicit(match.group("type")):
            return None

        return self._outcome(mark_nullable(line, match, "type", diagnostic.line))


class NullCheckedNextLineHeuristic(Heuristic):
    """A declaration whose variable is tested against null on the next line."""

    name = "null-checked-next-line"

    def apply(self, diagnostic: Diagnostic, buffer: FileBuffer) -> FixOutcome | None:
        line = buffer.get_line(diagnostic.line)
        next_line = buffer.get_line(diagnostic.line + 1)
        if line is None or next_line is None:
            return None

        match = rx.VARIABLE_ASSIGNMENT_RE.search(line)
        if not match or _is_implicit(match.group("type")):
            return None

        if rx.null_checked_name(next_line) != match.group("variable"):
            return None

        return self._outcome(mark_nullable(line, match, "type", diagnostic.line))


class TryGetOutHeuristic(Heuristic):
    """``dict.TryGetValue(key, out Bar value)`` gets ``out Bar? value``."""

    name = "try-get-out"

    def apply(self, diagnostic: Diagnostic, buffer: FileBuffer) -> FixOutcome | None:
        line = buffer.get_line(diagnostic.line)
        if line is None:
            return None

        match = rx.TRY_GET_OUT_RE.search(line)
        if not match or _is_implicit(match.group("type")):
            return None

        return self._outcome(mark_nullable(line, match, "type", diagnostic.line))


class OverriddenParameterHeuristic(Heuristic):
    """Mark the parameter named in the message, searching from the diagnostic column.

    Example message: Nullability of type of parameter 'context' doesn't match
    overridden member (possibly because of nullability attributes).
    """

    name = "overridden-parameter"

    def apply(self, diagnostic: Diagnostic, buffer: FileBuffer) -> FixOutcome | None:
        name_match = rx.QUOTED_NAME_RE.search(diagnostic.message)
        line = buffer.get_line(diagnostic.line)
        if not name_match or line is None:
            return None

        declaration = rx.declaration_of(name_match.group("name"))
        match = declaration.search(line, max(diagnostic.column, 0))
        if not match:
            return None

        return self._outcome(mark_nullable(line, match, "type", diagnostic.line))


class EventSenderHeuristic(Heuristic):
    """Make ``object sender`` nullable in an event handler named by the message.

    The message carries a declaration like ``void FormSaver.OnFormLoad(object
    sender, EventArgs e)``. The type name must match the file's base name,
    since that is the only way to tell the method lives in this file.
    """

    name = "event-sender"

    def apply(self, diagnostic: Diagnostic, buffer: FileBuffer) -> FixOutcome | None:
        match = rx.EVENT_SENDER_RE.search(diagnostic.message)
        if not match:
            return None

        if match.group("type") != PureWindowsPath(diagnostic.file).stem:
            return None

        signature = "void " + match.group("method")
        for index, line in enumerate(buffer.lines):
            if signature in line:
                fixed = line.replace("object sender", "object? sender")
                if fixed == line:
                    return None
                return self._outcome(LineEdit(index, fixed, fixed.strip()))

        return None


class NullableReturnHeuristic(Heuristic):
    """Trace ``return name;`` back to ``T? name`` and then to a method returning ``T``.

    Both anchors must be found within ``max_lookback_lines`` lines above the
    return statement.
    """

    name = "nullable-return"

    def __init__(self, max_lookback_lines: int = DEFAULT_MAX_LOOKBACK_LINES):
        self.max_lookback_lines = max_lookback_lines

    def apply(self, diagnostic: Diagnostic, buffer: FileBuffer) -> FixOutcome | None:
        line = buffer.get_line(diagnostic.line)
        if line is None:
            return None

        return_match = rx.RETURN_NAME_RE.search(line)
        if not return_match:
            return None

        returned_name = return_match.group("name")
        start = diagnostic.line - 1
        earliest = max(0, start - self.max_lookback_lines)
        local_type: str | None = None
        # Declarations between the return and a nullable member declared
        # above them, nearest first.
        passed: list[tuple[int, re.Match[str], str]] = []

        for index in range(start, earliest - 1, -1):
            candidate = buffer.lines[index]
            if local_type is None:
                match = rx.NULLABLE_DECLARATION_RE.search(candidate)
                if match and match.group("variable") == returned_name:
                    local_type = match.group("type")
                    # The nearest member passed on the way up encloses the return.
                    for passed_index, passed_match, group in passed:
                        if passed_match.group(group) == local_type:
                            return self._outcome(
                                mark_nullable(buffer.lines[passed_index], passed_match, group, passed_index)
                            )
                    continue
                found = rx.method_declaration(candidate)
                if found:
                    passed.append((index, *found))
                continue

            found = rx.method_declaration(candidate)
            if found:
                match, group = found
                if match.group(group) == local_type:
                    return self._outcome(mark_nullable(candidate, match, group, index))

        logger.debug("No nullable declaration chain for '%s' in %s", returned_name, diagnostic)
        return None

    def __repr__(self) -> str:
        return f"NullableReturnHeuristic(max_lookback_lines={self.max_lookback_lines})"


class MemberDeclarationHeuristic(Heuristic):
    """Mark a member named in a "must contain a non-null value when exiting
    constructor" message nullable, wherever it is declared in the file."""

    kinds: tuple[str, ...] = ()
    pattern: re.Pattern[str] = rx.DATA_MEMBER_RE

    def apply(self, diagnostic: Diagnostic, buffer: FileBuffer) -> FixOutcome | None:
        message = rx.CONSTRUCTOR_EXIT_RE.search(diagnostic.message)
        if not message or message.group("kind") not in self.kinds:
            return None

        member = message.group("member")
        for index, line in enumerate(buffer.lines):
            match = self.pattern.search(line)
            if match and match.group("member") == member:
                return self._outcome(mark_nullable(line, match, "type", index))

        return None


class EventMemberHeuristic(MemberDeclarationHeuristic):
    name = "event-member"
    kinds = ("event",)
    pattern = rx.EVENT_MEMBER_RE


class DataMemberHeuristic(MemberDeclarationHeuristic):
    """Fields and properties.

    Off unless enabled: a constructor that initializes members through a
    helper method still triggers the diagnostic.
    """

    name = "data-member"
    kinds = ("field", "property")
    pattern = rx.DATA_MEMBER_RE

    def __init__(self, enabled: bool = False):
        self.enabled = enabled

    def apply(self, diagnostic: Diagnostic, buffer: FileBuffer) -> FixOutcome | None:
        if not self.enabled:
            return None
        return super().apply(diagnostic, buffer)

    def __repr__(self) -> str:
        return f"DataMemberHeuristic(enabled={self.enabled})"


class NullArgumentHeuristic(Heuristic):
    """``Process(a, null, c)`` marks the second parameter of every local
    single-line ``Process`` declaration with at least three parameters."""

    name = "null-argument"

    def apply(self, diagnostic: Diagnostic, buffer: FileBuffer) -> FixOutcome | None:
        line = buffer.get_line(diagnostic.line)
        if line is None:
            return None

        call = self._find_call(line, diagnostic.column)
        if call is None:
            return None

        args = rx.split_arguments(line[call.end("open"):call.start("close")])
        null_positions = {i for i, arg in enumerate(args) if arg == "null"}
        if not null_positions:
            return None

        function = call.group("function")
        edits = []
        for index, declaration_line in enumerate(buffer.lines):
            found = rx.method_declaration(declaration_line)
            if not found:
                continue
            match, _ = found
            if (
                rx.declared_member(match) != function
                or not match.group(0).endswith("(")
                or not _is_single_line_signature(declaration_line)
            ):
                continue

            member_start = match.end(0) - len(function) - 1
            parameters = list(rx.PARAMETER_RE.finditer(declaration_line, member_start))
            if len(parameters) < len(args):
                continue

            targets = [
                parameters[i] for i in sorted(null_positions)
                if not parameters[i].group("type").endswith(NULLABLE_MARKER)
            ]
            if targets:
                edits.append(mark_nullable_many(declaration_line, targets, "type", index))

        if not edits:
            return None
        return self._outcome(*edits)

    @staticmethod
    def _find_call(line: str, column: int) -> re.Match[str] | None:
        """Find the innermost call whose null argument sits at the column.

        The column may be one short if a marker was already inserted earlier
        on the same line.
        """
        found = None
        pos = 0
        while True:
            match = rx.FUNCTION_CALL_WITH_NULL_RE.search(line, pos)
            if match is None:
                break
            if match.start("null") in (column, column + 1) and _still_open(
                line[match.end("open"):match.start("null")]
            ):
                found = match
            pos = match.start() + 1
        return found


def _still_open(segment: str) -> bool:
    """True if no parenthesis in segment closes the enclosing call."""
    depth = 0
    for ch in segment:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                return False
    return True


_SIGNATURE_END_RE = re.compile(r"\)\s*(?:\{\s*)?$")


def _is_single_line_signature(line: str) -> bool:
    return bool(_SIGNATURE_END_RE.search(line))
