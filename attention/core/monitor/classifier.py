"""
Command-line classifier deciding whether a new process should start playback.

Pure and stateless: the result depends only on the command line and the
rule tables handed in at construction.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Optional, Sequence

from .rules import DEFAULT_RULES, TriggerRules


DecidingRule = Literal[
    "ALWAYS_TRIGGER",
    "RUN_SCRIPT",
    "EXCLUDED",
    "ALLOW_LIST",
    "TRIGGER_VERB",
    "NO_SUBCOMMAND",
    "UNMATCHED",
]

_VERSION_SUFFIX = re.compile(r"-?\d+(\.\d+)*$")


@dataclass(frozen=True)
class Classification:
    trigger: bool
    rule: DecidingRule
    tool: Optional[str] = None
    subcommand: Optional[str] = None

    def __bool__(self) -> bool:
        return self.trigger


NO_TRIGGER = Classification(trigger=False, rule="UNMATCHED")


def basename(token: str) -> str:
    return token.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]


class CommandClassifier:
    def __init__(self, rules: TriggerRules = DEFAULT_RULES) -> None:
        self._rules = rules

    @property
    def rules(self) -> TriggerRules:
        return self._rules

    def classify(self, command_line: str) -> Classification:
        tokens = command_line.lower().split()
        if not tokens:
            return NO_TRIGGER

        names = [basename(t) for t in tokens]

        for name in names:
            if name in self._rules.always_trigger:
                return Classification(trigger=True, rule="ALWAYS_TRIGGER", tool=name)

        for idx, name in enumerate(names):
            if name in self._rules.package_managers:
                return self._evaluate(name, tokens, idx)

        # Wrappers: npm-cli.js, gradlew, pip3.12, cargo.exe ...
        for idx, name in enumerate(names):
            tool = self._resolve_wrapper(name)
            if tool is None:
                continue
            if tool in self._rules.always_trigger:
                return Classification(trigger=True, rule="ALWAYS_TRIGGER", tool=tool)
            return self._evaluate(tool, tokens, idx)

        return NO_TRIGGER

    def _resolve_wrapper(self, name: str) -> Optional[str]:
        stripped = name
        for suffix in self._rules.wrapper_suffixes:
            if stripped.endswith(suffix) and len(stripped) > len(suffix):
                stripped = stripped[: -len(suffix)]
                break

        for candidate in (stripped, _VERSION_SUFFIX.sub("", stripped)):
            if not candidate:
                continue
            candidate = self._rules.aliases.get(candidate, candidate)
            if self._rules.is_known(candidate):
                return candidate
        return None

    def _evaluate(self, tool: str, tokens: Sequence[str], idx: int) -> Classification:
        rules = self._rules
        policy = rules.policy_for(tool)
        if policy is None or idx + 1 >= len(tokens):
            return Classification(trigger=False, rule="NO_SUBCOMMAND", tool=tool)

        sub = tokens[idx + 1]

        # An explicit script name overrides the generic "run" exclusion
        if not policy.is_specialised and sub in rules.run_verbs and idx + 2 < len(tokens):
            script = tokens[idx + 2]
            if script in rules.exclude_verbs:
                return Classification(trigger=False, rule="RUN_SCRIPT", tool=tool, subcommand=sub)
            return Classification(
                trigger=script in rules.trigger_verbs, rule="RUN_SCRIPT", tool=tool, subcommand=sub
            )

        if sub in policy.exclude:
            return Classification(trigger=False, rule="EXCLUDED", tool=tool, subcommand=sub)

        if policy.allow is not None:
            return Classification(trigger=sub in policy.allow, rule="ALLOW_LIST", tool=tool, subcommand=sub)

        return Classification(
            trigger=sub in rules.trigger_verbs, rule="TRIGGER_VERB", tool=tool, subcommand=sub
        )
