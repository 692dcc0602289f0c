"""Maps diagnostic codes to ordered chains of heuristic fixers."""

from __future__ import annotations

import enum
import logging

from nullifier.core.config import FixConfig
from nullifier.core.models import Diagnostic, FixOutcome
from nullifier.fix.buffer import FileBuffer
from nullifier.fix.heuristics import (
    DEFAULT_MAX_LOOKBACK_LINES,
    AssignNullHeuristic,
    DataMemberHeuristic,
    EventMemberHeuristic,
    EventSenderHeuristic,
    Heuristic,
    NullArgumentHeuristic,
    NullableReturnHeuristic,
    NullCheckedNextLineHeuristic,
    OverriddenParameterHeuristic,
    TryGetOutHeuristic,
)

logger = logging.getLogger(__name__)


class DiagnosticClass(enum.Enum):
    NULL_TO_NON_NULLABLE = "null_to_non_nullable"
    POSSIBLE_NULL_RETURN = "possible_null_return"
    NULL_LITERAL_ARGUMENT = "null_literal_argument"
    DELEGATE_PARAMETER_MISMATCH = "delegate_parameter_mismatch"
    OVERRIDE_PARAMETER_MISMATCH = "override_parameter_mismatch"
    MEMBER_EXITING_CONSTRUCTOR = "member_exiting_constructor"


CODE_CLASSES: dict[str, DiagnosticClass] = {
    # Converting null literal or possible null value to non-nullable type.
    "CS8600": DiagnosticClass.NULL_TO_NON_NULLABLE,
    # Possible null reference return.
    "CS8603": DiagnosticClass.POSSIBLE_NULL_RETURN,
    # Cannot convert null literal to non-nullable reference type.
    "CS8625": DiagnosticClass.NULL_LITERAL_ARGUMENT,
    # Nullability of reference types in type of parameter doesn't match the target delegate.
    "CS8622": DiagnosticClass.DELEGATE_PARAMETER_MISMATCH,
    # Nullability of type of parameter doesn't match overridden/implemented member.
    "CS8765": DiagnosticClass.OVERRIDE_PARAMETER_MISMATCH,
    "CS8767": DiagnosticClass.OVERRIDE_PARAMETER_MISMATCH,
    # Non-nullable member must contain a non-null value when exiting constructor.
    "CS8618": DiagnosticClass.MEMBER_EXITING_CONSTRUCTOR,
}


class DispatchTable:
    """Runs the heuristic chain registered for a diagnostic's code.

    Example:
        >>> table = DispatchTable(fix_data_members=True)
        >>> outcome = table.dispatch(diagnostic, buffer)
        >>> if outcome:
        ...     apply(outcome.edits)
    """

    def __init__(
        self,
        fix_data_members: bool = False,
        max_lookback_lines: int = DEFAULT_MAX_LOOKBACK_LINES,
    ) -> None:
        assign_null = AssignNullHeuristic()
        overridden_parameter = OverriddenParameterHeuristic()

        self._chains: dict[DiagnosticClass, tuple[Heuristic, ...]] = {
            DiagnosticClass.NULL_TO_NON_NULLABLE: (
                assign_null,
                NullCheckedNextLineHeuristic(),
                TryGetOutHeuristic(),
            ),
            DiagnosticClass.POSSIBLE_NULL_RETURN: (
                NullableReturnHeuristic(max_lookback_lines),
            ),
            DiagnosticClass.NULL_LITERAL_ARGUMENT: (
                assign_null,
                NullArgumentHeuristic(),
            ),
            DiagnosticClass.DELEGATE_PARAMETER_MISMATCH: (
                overridden_parameter,
                EventSenderHeuristic(),
            ),
            DiagnosticClass.OVERRIDE_PARAMETER_MISMATCH: (
                overridden_parameter,
            ),
            DiagnosticClass.MEMBER_EXITING_CONSTRUCTOR: (
                EventMemberHeuristic(),
                DataMemberHeuristic(enabled=fix_data_members),
            ),
        }

    @classmethod
    def from_config(cls, config: FixConfig) -> DispatchTable:
        return cls(
            fix_data_members=config.fix_data_members,
            max_lookback_lines=config.max_lookback_lines,
        )

    @staticmethod
    def classify(code: str) -> DiagnosticClass | None:
        return CODE_CLASSES.get(code)

    def chain_for(self, code: str) -> tuple[Heuristic, ...]:
        """Heuristics tried for a code, in order. Empty for unknown codes."""
        diagnostic_class = self.classify(code)
        if diagnostic_class is None:
            return ()
        return self._chains[diagnostic_class]

    def has_chain(self, code: str) -> bool:
        return code in CODE_CLASSES

    def dispatch(self, diagnostic: Diagnostic, buffer: FileBuffer) -> FixOutcome | None:
        """Try each heuristic in the chain; return the first success."""
        for heuristic in self.chain_for(diagnostic.code):
            outcome = heuristic.apply(diagnostic, buffer)
            if outcome is not None and outcome.success:
                logger.debug("%s fixed %s", heuristic.name, diagnostic)
                return outcome
        return None
