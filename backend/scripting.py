"""Lua syntax checker for stored scripts."""
# Heuristic only - counts delimiters and keywords, never parses or runs the script
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

# Whitespace as JavaScript's trim() and \s see it, BOM included
WHITESPACE = (
    '\t\n\x0b\x0c\r \u00a0\u1680'
    + ''.join(chr(c) for c in range(0x2000, 0x200b))
    + '\u2028\u2029\u202f\u205f\u3000\ufeff'
)

# Word characters are ASCII only
FUNCTION_PATTERN = re.compile(r'function[' + re.escape(WHITESPACE) + r']+(\w+)', re.ASCII)
END_PATTERN = re.compile(r'\bend\b', re.ASCII)
COMMENT_MARKER = '--'

# (kind, opener, closer) in the order balances are judged
DELIMITERS = (
    ('brackets', '[', ']'),
    ('parentheses', '(', ')'),
    ('curly braces', '{', '}'),
)


class CheckFailure(Enum):
    """Why a script failed the check."""
    EMPTY_INPUT = 'empty_input'
    UNBALANCED_BRACKETS = 'unbalanced_brackets'
    UNBALANCED_PARENS = 'unbalanced_parens'
    UNBALANCED_BRACES = 'unbalanced_braces'
    MISMATCHED_BLOCKS = 'mismatched_blocks'
    INTERNAL = 'internal'


_UNBALANCED = {
    'brackets': CheckFailure.UNBALANCED_BRACKETS,
    'parentheses': CheckFailure.UNBALANCED_PARENS,
    'curly braces': CheckFailure.UNBALANCED_BRACES,
}


@dataclass(frozen=True)
class CheckResult:
    """Verdict of a single syntax check.

    Attributes:
        valid: Whether the script passed
        error: First fatal problem, set iff the script failed
        warnings: Advisory messages in scan order
        failure: Kind of failure, None for a valid script
    """

    valid: bool
    error: Optional[str] = None
    warnings: Tuple[str, ...] = ()
    failure: Optional[CheckFailure] = None

    def __post_init__(self):
        if self.valid and self.error is not None:
            raise ValueError("A valid result cannot carry an error")
        if not self.valid and not self.error:
            raise ValueError("An invalid result needs an error message")
        object.__setattr__(self, 'warnings', tuple(self.warnings))

    @classmethod
    def ok(cls, warnings=()):
        return cls(True, warnings=tuple(warnings))

    @classmethod
    def fail(cls, failure, error, warnings=()):
        return cls(False, error=error, warnings=tuple(warnings), failure=failure)

    @property
    def status(self):
        """Status stored on a script record."""
        return 'valid' if self.valid else 'error'

    def to_dict(self):
        """Convert to dictionary."""
        data = {'valid': self.valid, 'warnings': list(self.warnings)}
        if self.error is not None:
            data['error'] = self.error
        return data


def _line_warnings(line_number, line):
    warnings = []
    if '===' in line or '!==' in line:
        warnings.append(f"Line {line_number}: Use '==' and '~=' for equality checks in Lua")
    if '++' in line or '--' in line:
        warnings.append(f"Line {line_number}: Lua doesn't support increment/decrement operators")
    if ';' in line and not line.strip(WHITESPACE).startswith(COMMENT_MARKER):
        warnings.append(f"Line {line_number}: Semicolons are optional in Lua")
    return warnings


def _check(content):
    if not content.strip(WHITESPACE):
        return CheckResult.fail(CheckFailure.EMPTY_INPUT, 'Empty script')

    warnings = []
    balances = {kind: 0 for kind, _, _ in DELIMITERS}

    for line_number, line in enumerate(content.split('\n'), start=1):
        for kind, opener, closer in DELIMITERS:
            balances[kind] += line.count(opener) - line.count(closer)
        warnings.extend(_line_warnings(line_number, line))

    for kind, _, closer in DELIMITERS:
        balance = balances[kind]
        if balance != 0:
            problem = f"missing {closer}" if balance > 0 else f"extra {closer}"
            return CheckResult.fail(_UNBALANCED[kind], f"Unbalanced {kind}: {problem}", warnings)

    functions = len(FUNCTION_PATTERN.findall(content))
    ends = len(END_PATTERN.findall(content))
    if functions != ends:
        return CheckResult.fail(
            CheckFailure.MISMATCHED_BLOCKS,
            "Mismatched function definitions and 'end' statements",
            warnings,
        )

    return CheckResult.ok(warnings)


def check_script(content):
    """Check Lua script text and return a CheckResult.

    Never raises: anything unexpected during the scan is reported as an
    invalid result with error "Failed to check syntax".
    """
    try:
        return _check(content)
    except Exception:
        logger.exception("Syntax check error")
        return CheckResult.fail(CheckFailure.INTERNAL, 'Failed to check syntax')
