"""
Static trigger rule tables for the command classifier.

The tables are layered:
  * always-trigger tools fire on sight (compilers, build drivers);
  * specialised package managers carry their own subcommand allow-list;
  * generic package managers/task runners use the shared trigger and
    exclude verb sets, with special handling for ``run <script>``.

Adding a tool means adding a table entry; the classifier itself never
changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True)
class SubcommandPolicy:
    """Subcommand gating for one package manager.

    ``allow`` of None means the tool falls back to the generic verb sets.
    """
    allow: Optional[frozenset[str]] = None
    exclude: frozenset[str] = frozenset()

    @property
    def is_specialised(self) -> bool:
        return self.allow is not None


def _policy(allow: Optional[str] = None, exclude: str = "") -> SubcommandPolicy:
    return SubcommandPolicy(
        allow=frozenset(allow.split()) if allow is not None else None,
        exclude=frozenset(exclude.split()),
    )


@dataclass(frozen=True)
class TriggerRules:
    always_trigger: frozenset[str]
    package_managers: Mapping[str, SubcommandPolicy]
    trigger_verbs: frozenset[str]
    exclude_verbs: frozenset[str]
    run_verbs: frozenset[str] = frozenset({"run", "run-script"})
    aliases: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    wrapper_suffixes: tuple[str, ...] = ()

    def policy_for(self, tool: str) -> Optional[SubcommandPolicy]:
        return self.package_managers.get(tool)

    def is_known(self, tool: str) -> bool:
        return tool in self.always_trigger or tool in self.package_managers


GENERIC_TRIGGER_VERBS = frozenset("""
    install i add ci
    update upgrade up
    remove uninstall rm un
    build compile rebuild prepare
    lint eslint prettier
    test jest vitest mocha
    clean clear cache
    audit outdated
    publish pack
    init create
    dedupe prune
    link unlink
    exec dlx npx
""".split())

GENERIC_EXCLUDE_VERBS = frozenset("""
    start dev serve watch run preview storybook
""".split())

_GENERIC = SubcommandPolicy(exclude=GENERIC_EXCLUDE_VERBS)

_PACKAGE_MANAGERS: dict[str, SubcommandPolicy] = {
    # generic JavaScript package managers and script runners
    "npm": _GENERIC,
    "pnpm": _GENERIC,
    "yarn": _GENERIC,
    "bun": _GENERIC,
    "npx": _GENERIC,
    "pnpx": _GENERIC,
    "bunx": _GENERIC,
    # specialised ecosystems
    "cargo": _policy(
        allow="build b test t check c clippy install update fetch bench doc publish clean fmt add remove rustc",
        exclude="run r watch login logout owner yank search",
    ),
    "go": _policy(
        allow="build test install get generate vet",
        exclude="run env version doc",
    ),
    "pip": _policy(allow="install uninstall download wheel", exclude="list show freeze"),
    "poetry": _policy(allow="install add remove update build lock publish", exclude="run shell show"),
    "uv": _policy(allow="sync add remove lock build pip publish", exclude="run venv"),
    "gradle": _policy(allow="build test assemble clean check jar publish", exclude="run bootrun"),
    "mvn": _policy(allow="compile package install test verify clean deploy", exclude="exec:java spring-boot:run"),
    "dotnet": _policy(allow="build test restore publish pack clean", exclude="run watch"),
    "swift": _policy(allow="build test package", exclude="run repl"),
    "brew": _policy(allow="install upgrade update reinstall uninstall", exclude="services info list"),
    "composer": _policy(allow="install update require remove dump-autoload", exclude="run-script serve"),
    "bundle": _policy(allow="install update add", exclude="exec open"),
    "gem": _policy(allow="install update uninstall build", exclude="list"),
    "pod": _policy(allow="install update", exclude="search"),
    "flutter": _policy(allow="build test pub clean create", exclude="run attach"),
}

_ALWAYS_TRIGGER = frozenset("""
    make gmake cmake ninja meson scons
    gcc g++ cc c++ clang clang++ rustc swiftc javac kotlinc
    tsc esbuild xcodebuild msbuild
""".split())

_ALIASES = {
    "npm-cli": "npm",
    "npx-cli": "npx",
    "yarnpkg": "yarn",
    "gradlew": "gradle",
    "mvnw": "mvn",
}

DEFAULT_RULES = TriggerRules(
    always_trigger=_ALWAYS_TRIGGER,
    package_managers=MappingProxyType(_PACKAGE_MANAGERS),
    trigger_verbs=GENERIC_TRIGGER_VERBS,
    exclude_verbs=GENERIC_EXCLUDE_VERBS,
    aliases=MappingProxyType(_ALIASES),
    wrapper_suffixes=(".exe", ".cmd", ".bat", ".ps1", ".js", ".cjs", ".mjs"),
)
