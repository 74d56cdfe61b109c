"""
APX-to-Argumentation Bridge

Converts the line-based APX text format into an
ArgumentationFramework:

    # comment             (also '%' comments)
    arg(a).
    arg(b).
    att(a,b).

Argument indices follow first-seen declaration order. Attacks may only
reference declared arguments.

Malformed lines and attacks on undeclared arguments are dropped and
reported in lenient mode (the default); in strict mode the first one
raises ApxParseError.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from .models import ArgumentationFramework

logger = logging.getLogger("afsat.argumentation.bridge")

_STATEMENT = re.compile(r"^(?P<pred>[A-Za-z_]\w*)\s*\((?P<body>[^()]*)\)\s*\.?$")
_COMMENT_PREFIXES = ("#", "%")
_RESERVED = set(",()\r\n")


class ApxParseError(ValueError):
    """A line of APX input could not be turned into an argument or attack."""

    def __init__(self, line_no: int, line: str, reason: str):
        self.line_no = line_no
        self.line = line
        self.reason = reason
        super().__init__(f"line {line_no}: {reason}: {line!r}")


@dataclass
class SkippedLine:
    line_no: int
    text: str
    reason: str


@dataclass
class ParseReport:
    framework: ArgumentationFramework
    skipped: list[SkippedLine] = field(default_factory=list)


class ApxBridge:
    """Builds argumentation frameworks from APX text."""

    def __init__(self, strict: bool = False):
        self.strict = strict

    def parse(self, text: str) -> ParseReport:
        """
        Parse APX text into a framework and a report of dropped lines.

        Raises:
            ApxParseError: in strict mode, on the first bad line
        """
        names: list[str] = []
        declared: set[str] = set()
        pending: list[tuple[int, str, str, str]] = []  # (line_no, line, origin, target)
        skipped: list[SkippedLine] = []

        def reject(line_no: int, line: str, reason: str) -> None:
            if self.strict:
                raise ApxParseError(line_no, line, reason)
            logger.warning(f"Skipping APX line {line_no} ({reason}): {line!r}")
            skipped.append(SkippedLine(line_no=line_no, text=line, reason=reason))

        for line_no, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith(_COMMENT_PREFIXES):
                continue

            match = _STATEMENT.match(line)
            if not match:
                reject(line_no, line, "not a statement")
                continue

            pred = match.group("pred")
            parts = [p.strip() for p in match.group("body").split(",")]

            if pred == "arg":
                if len(parts) != 1 or not parts[0]:
                    reject(line_no, line, "arg takes exactly one name")
                    continue
                if parts[0] not in declared:
                    declared.add(parts[0])
                    names.append(parts[0])
            elif pred == "att":
                if len(parts) != 2 or not all(parts):
                    reject(line_no, line, "att takes exactly two names")
                    continue
                pending.append((line_no, line, parts[0], parts[1]))
            else:
                reject(line_no, line, f"unknown predicate '{pred}'")

        # Attacks are resolved after all declarations, so order of lines
        # does not matter.
        attacks: list[tuple[str, str]] = []
        for line_no, line, origin, target in pending:
            missing = [n for n in (origin, target) if n not in declared]
            if missing:
                reject(line_no, line, f"undeclared argument {', '.join(missing)}")
                continue
            attacks.append((origin, target))

        af = ArgumentationFramework.from_names(names, attacks)
        logger.debug(
            f"Parsed APX: {af.num_args} args, {len(af.attacks)} attacks, "
            f"{len(skipped)} skipped lines"
        )
        return ParseReport(framework=af, skipped=skipped)

    def build_framework(self, text: str) -> ArgumentationFramework:
        return self.parse(text).framework

    @staticmethod
    def to_apx(af: ArgumentationFramework) -> str:
        """
        Render a framework back to APX text.

        Raises:
            ValueError: if a name would not parse back to itself
        """
        names = af.display_names()
        for name in names:
            if name != name.strip() or len(name.splitlines()) != 1 or _RESERVED & set(name):
                raise ValueError(f"Argument name {name!r} cannot be written as APX")
        lines = [f"arg({name})." for name in names]
        lines += [f"att({names[a.origin]},{names[a.target]})." for a in af.attacks]
        return "\n".join(lines) + "\n"
