"""Rule engine for per-cell corrections of instrument exports.

Corrections are expressed as an ordered table of rules. Each rule pairs a
match condition with a transform, and the engine runs the whole table over
a single cell value. Later rules see the output of earlier ones, so the
table order is part of the contract:

1. Literal term substitutions (any cell)
2. Targeted header correction (one fixed cell)
3. Anchor-gated sentinel rewrite (rows >= 4)
4. Bracketed-content removal with highlight (rows >= 3)

A substitution may introduce or remove parenthesized text, and the bracket
rule acts on whatever the substitutions left behind. The result is always
whitespace-trimmed.

Key entry points:
- RuleEngine.transform: run the table over one cell
- DEFAULT_RULES: the correction table for VOCs/NMHC monitor exports
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import ClassVar

SENTINEL = "-999"

BRACKET_PATTERN = re.compile(r"\([^)]*\)")


@dataclass(frozen=True)
class CellContext:
    """Position and lookup context of the cell being transformed."""

    row: int
    column: int
    anchors: Mapping[str, str]


@dataclass(frozen=True)
class CellResult:
    """Outcome of running the rule table over one cell."""

    new_value: str
    changed: bool
    highlight: bool = False


class Rule(ABC):
    """A single ``(match condition, transform)`` pair."""

    highlight: ClassVar[bool] = False

    @abstractmethod
    def matches(self, cell: CellContext, value: str) -> bool:
        """Return True when the rule applies to ``value``."""

    @abstractmethod
    def apply(self, cell: CellContext, value: str) -> str:
        """Return the transformed value. Only called after ``matches``."""


@dataclass(frozen=True)
class LiteralSubstitution(Rule):
    """Replace every occurrence of ``find`` with ``replace``."""

    find: str
    replace: str

    def matches(self, cell: CellContext, value: str) -> bool:
        return self.find in value

    def apply(self, cell: CellContext, value: str) -> str:
        return value.replace(self.find, self.replace)


@dataclass(frozen=True)
class ExactCellCorrection(Rule):
    """Replace the value of one fixed cell when it equals ``expected``.

    Used where a general substring rule would be unsafe elsewhere in the
    sheet.
    """

    row: int
    column: int
    expected: str
    replacement: str

    def matches(self, cell: CellContext, value: str) -> bool:
        return cell.row == self.row and cell.column == self.column and value == self.expected

    def apply(self, cell: CellContext, value: str) -> str:
        return self.replacement


@dataclass(frozen=True)
class AnchoredSentinelRewrite(Rule):
    """Suffix the sentinel with a calibration code for one column.

    Fires only when the anchor cell carries the station's expected factor
    code. On a mismatch the sentinel is left untouched.
    """

    column: int
    anchor: str
    expected_code: str
    replacement_code: str
    sentinel: str = SENTINEL
    min_row: int = 4

    def matches(self, cell: CellContext, value: str) -> bool:
        return (
            cell.row >= self.min_row
            and cell.column == self.column
            and self.sentinel in value
            and cell.anchors.get(self.anchor, "") == self.expected_code
        )

    def apply(self, cell: CellContext, value: str) -> str:
        return f"{self.sentinel}#{self.replacement_code}"


@dataclass(frozen=True)
class BracketStrip(Rule):
    """Remove every parenthesized span and flag the cell for review."""

    highlight: ClassVar[bool] = True

    min_row: int = 3
    pattern: re.Pattern[str] = field(default=BRACKET_PATTERN)

    def matches(self, cell: CellContext, value: str) -> bool:
        return cell.row >= self.min_row and self.pattern.search(value) is not None

    def apply(self, cell: CellContext, value: str) -> str:
        return self.pattern.sub("", value)


TERM_SUBSTITUTIONS: tuple[LiteralSubstitution, ...] = (
    LiteralSubstitution("甲烷非甲烷分析仪", "NMHC监测仪"),
    LiteralSubstitution("VOCs在线监测仪", "VOCs监测仪"),
    LiteralSubstitution("总烃(ppbvC)", "总烃(ppbC)"),
    LiteralSubstitution("总烃(ppbv)", "总烃(ppbC)"),
    LiteralSubstitution("间、对-二甲苯", "间/对-二甲苯"),
    LiteralSubstitution("邻二甲苯", "邻-二甲苯"),
)

# D1 on the NMHC monitor sheet
HEADER_CORRECTIONS: tuple[ExactCellCorrection, ...] = (
    ExactCellCorrection(row=1, column=4, expected="总烃(ppbvC)", replacement="总烃(ppbC)"),
)

SENTINEL_REWRITES: tuple[AnchoredSentinelRewrite, ...] = (
    AnchoredSentinelRewrite(column=9, anchor="I3", expected_code="a24514", replacement_code="a24041"),
    AnchoredSentinelRewrite(column=11, anchor="K3", expected_code="a24011", replacement_code="a24537"),
    AnchoredSentinelRewrite(column=17, anchor="Q3", expected_code="a24510", replacement_code="a24504"),
    AnchoredSentinelRewrite(column=51, anchor="AY3", expected_code="a25014", replacement_code="a25501"),
)

DEFAULT_RULES: tuple[Rule, ...] = (
    *TERM_SUBSTITUTIONS,
    *HEADER_CORRECTIONS,
    *SENTINEL_REWRITES,
    BracketStrip(),
)


class RuleEngine:
    """Runs an ordered rule table over individual cell values.

    The engine holds no per-run state; ``transform`` is a pure function of
    its arguments and the table.
    """

    def __init__(self, rules: Sequence[Rule] = DEFAULT_RULES):
        self.rules: tuple[Rule, ...] = tuple(rules)

    def transform(
        self,
        row: int,
        column: int,
        original: str,
        anchors: Mapping[str, str] | None = None,
    ) -> CellResult:
        """Apply the rule table to one cell.

        Args:
            row: 1-based row of the cell
            column: 1-based column of the cell
            original: Cell text before any rule runs
            anchors: Anchor context (address name -> text)

        Returns:
            CellResult with the trimmed value. ``changed`` is False when no
            rule altered the text.
        """
        cell = CellContext(row=row, column=column, anchors=anchors or {})
        value = original
        highlight = False

        for rule in self.rules:
            if rule.matches(cell, value):
                value = rule.apply(cell, value)
                highlight = highlight or rule.highlight

        return CellResult(
            new_value=value.strip(),
            changed=value != original,
            highlight=highlight,
        )
