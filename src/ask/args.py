"""Argument classification: tool flags, passthrough flags, prompt words."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

SEPARATOR = "--"
FLAG_PREFIX = "-"


class Arity(str, Enum):
    BOOLEAN = "boolean"
    VALUE = "value"


@dataclass(frozen=True)
class ToolFlag:
    """A flag understood by ask itself."""

    name: str
    spellings: tuple[str, ...]
    arity: Arity = Arity.BOOLEAN

    @property
    def takes_value(self) -> bool:
        return self.arity is Arity.VALUE


MODEL = ToolFlag("model", ("-m", "--model"), Arity.VALUE)
RAW = ToolFlag("raw", ("--raw",))
DRY_RUN = ToolFlag("dry-run", ("--dry-run",))

TOOL_FLAGS: tuple[ToolFlag, ...] = (MODEL, RAW, DRY_RUN)

_BY_SPELLING = {spelling: flag for flag in TOOL_FLAGS for spelling in flag.spellings}


@dataclass(frozen=True)
class FlagUse:
    """One occurrence of a tool flag, with the spelling the user typed."""

    flag: ToolFlag
    spelling: str
    value: str | None = None


@dataclass
class ClassifiedArgs:
    """Result of :func:`classify`. Every input token lands in exactly one bucket."""

    tool_flags: list[FlagUse] = field(default_factory=list)
    passthrough: list[str] = field(default_factory=list)
    positional: list[str] = field(default_factory=list)

    def rebuild(self) -> list[str]:
        """Tool flags in encounter order, then ``--`` and the prompt words."""
        out: list[str] = []
        for use in self.tool_flags:
            out.append(use.spelling)
            if use.flag.takes_value:
                out.append(use.value or "")
        if self.positional:
            out.append(SEPARATOR)
            out.extend(self.positional)
        return out

    def value_of(self, flag: ToolFlag) -> str | None:
        """Last value given for ``flag``, or None if it never appeared."""
        value = None
        for use in self.tool_flags:
            if use.flag is flag:
                value = use.value if flag.takes_value else ""
        return value

    def has(self, flag: ToolFlag) -> bool:
        return any(use.flag is flag for use in self.tool_flags)

    @property
    def model(self) -> str:
        return self.value_of(MODEL) or ""

    @property
    def raw(self) -> bool:
        return self.has(RAW)

    @property
    def dry_run(self) -> bool:
        return self.has(DRY_RUN)

    @property
    def prompt_text(self) -> str:
        return " ".join(self.positional)


def is_flag(token: str) -> bool:
    """A lone ``-`` is the usual stdin placeholder, not a flag."""
    return token.startswith(FLAG_PREFIX) and token != FLAG_PREFIX


def classify(args: list[str]) -> ClassifiedArgs:
    """Split ``args`` into tool flags, passthrough flags and positional words.

    Single left-to-right pass:

    - a token spelled exactly like a tool flag is recorded; a value-taking
      one consumes the next token as its value (empty when there is none)
    - any other ``--flag=value`` is one passthrough entry, ``--model=x``
      included
    - an unknown ``--flag`` takes the next token as its value unless that
      token is itself flag-shaped or absent, in which case it is boolean
    - a literal ``--`` ends flag processing; the rest is positional
    - anything else is a positional word
    """
    result = ClassifiedArgs()
    i = 0
    n = len(args)
    while i < n:
        token = args[i]

        if token == SEPARATOR:
            result.positional.extend(args[i + 1:])
            break

        flag = _BY_SPELLING.get(token)
        if flag is not None:
            value = None
            if flag.takes_value:
                if i + 1 < n:
                    value = args[i + 1]
                    i += 1
                else:
                    value = ""
            result.tool_flags.append(FlagUse(flag, token, value))
        elif is_flag(token):
            result.passthrough.append(token)
            if "=" not in token and i + 1 < n and not is_flag(args[i + 1]):
                result.passthrough.append(args[i + 1])
                i += 1
        else:
            result.positional.append(token)
        i += 1

    logger.debug(
        "classified args: flags=%s passthrough=%s positional=%d",
        [u.spelling for u in result.tool_flags], result.passthrough, len(result.positional),
    )
    return result


def reorder_args(args: list[str]) -> tuple[list[str], list[str]]:
    """Return ``(rebuilt argv, passthrough)`` for ``args``."""
    classified = classify(args)
    return classified.rebuild(), list(classified.passthrough)


def first_positional(args: list[str]) -> str:
    """First prompt word in ``args``, or ``""`` when there is none."""
    positional = classify(args).positional
    return positional[0] if positional else ""
