"""Catalogue of the operations exposed to callers.

Each operation has a typed argument model. Command operations translate
their arguments into a nix argument list with a pure ``to_argv`` method;
the two retrieval operations are answered from the log store instead.
The JSON schema of each argument model is the operation's input schema.
"""

from abc import abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class OperationName(StrEnum):
    BUILD = "build"
    DEVELOP = "develop"
    RUN = "run"
    SEARCH = "search"
    FLAKE_INIT = "flake_init"
    FLAKE_NEW = "flake_new"
    FLAKE_SHOW = "flake_show"
    FLAKE_METADATA = "flake_metadata"
    FLAKE_UPDATE = "flake_update"
    FLAKE_CHECK = "flake_check"
    FLAKE_LOCK = "flake_lock"
    EVAL = "eval"
    PROFILE_LIST = "profile_list"
    PROFILE_INSTALL = "profile_install"
    PROFILE_REMOVE = "profile_remove"
    PROFILE_UPGRADE = "profile_upgrade"
    STORE_GC = "store_gc"
    STORE_PATH_INFO = "store_path_info"
    FMT = "fmt"
    LOG = "log"
    WHY_DEPENDS = "why_depends"
    DERIVATION_SHOW = "derivation_show"
    HASH_PATH = "hash_path"
    REGISTRY_LIST = "registry_list"
    PRINT_DEV_ENV = "print_dev_env"
    GET_LOG = "get_log"
    LIST_LOGS = "list_logs"


_WORKING_DIRECTORY = "Directory to run the command in"


class OperationArgs(BaseModel):
    """Base for all argument models; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")


class CommandArgs(OperationArgs):
    """Arguments of an operation that runs nix."""

    @abstractmethod
    def to_argv(self) -> list[str]:
        """Translate the arguments into a nix argument list."""

    @property
    def cwd(self) -> str | None:
        return None


class LocatedCommandArgs(CommandArgs):
    """Command arguments that accept a working directory."""

    working_directory: str | None = Field(None, description=_WORKING_DIRECTORY)

    @property
    def cwd(self) -> str | None:
        return self.working_directory or None


def _flag(enabled: bool, *flag: str) -> list[str]:
    return list(flag) if enabled else []


def _option(name: str, value: str | None) -> list[str]:
    return [name, value] if value else []


def _positional(value: str | None) -> list[str]:
    return [value] if value else []


# Build commands


class BuildArgs(LocatedCommandArgs):
    installable: str | None = Field(
        None,
        description=(
            "The flake reference or path to build (e.g., '.', '.#package', "
            "'nixpkgs#hello'). Defaults to current directory."
        ),
    )
    out_link: str | None = Field(
        None, description="Path for the result symlink. Use empty string to disable."
    )
    rebuild: bool = Field(
        False, description="Rebuild even if already built (--rebuild flag)"
    )

    def to_argv(self) -> list[str]:
        argv = ["build", *_positional(self.installable)]
        if self.out_link == "":
            argv.append("--no-link")
        elif self.out_link:
            argv += ["-o", self.out_link]
        return argv + _flag(self.rebuild, "--rebuild")


class DevelopArgs(LocatedCommandArgs):
    installable: str | None = Field(
        None, description="The flake reference (e.g., '.', '.#devShell')"
    )
    command: str | None = Field(
        None, description="Command to run in the development shell (uses -c flag)"
    )

    def to_argv(self) -> list[str]:
        argv = ["develop", *_positional(self.installable)]
        if self.command:
            argv += ["-c", "sh", "-c", self.command]
        return argv


class RunArgs(LocatedCommandArgs):
    installable: str = Field(
        description="The flake reference to run (e.g., 'nixpkgs#hello', '.#myapp')"
    )
    args: list[str] | None = Field(
        None, description="Arguments to pass to the application"
    )

    def to_argv(self) -> list[str]:
        argv = ["run", self.installable]
        if self.args is not None:
            argv += ["--", *self.args]
        return argv


class SearchArgs(LocatedCommandArgs):
    installable: str | None = Field(
        None,
        description="The flake to search (defaults to 'nixpkgs'). Can also be a path like '.'",
    )
    regex: str = Field(description="Search term or regex pattern")
    json_output: bool = Field(
        False, alias="json", description="Output in JSON format for easier parsing"
    )

    def to_argv(self) -> list[str]:
        return [
            "search",
            self.installable or "nixpkgs",
            self.regex,
            *_flag(self.json_output, "--json"),
        ]


# Flake commands


class FlakeInitArgs(LocatedCommandArgs):
    template: str | None = Field(
        None,
        description=(
            "Template to use (e.g., 'templates#rust', "
            "'github:nix-community/templates#rust')"
        ),
    )

    def to_argv(self) -> list[str]:
        return ["flake", "init", *_option("-t", self.template)]


class FlakeNewArgs(CommandArgs):
    path: str = Field(description="Path for the new flake directory")
    template: str | None = Field(None, description="Template to use")

    def to_argv(self) -> list[str]:
        return ["flake", "new", self.path, *_option("-t", self.template)]


class FlakeShowArgs(LocatedCommandArgs):
    flake_ref: str | None = Field(
        None,
        description=(
            "Flake reference (defaults to current directory). "
            "Can be '.', 'nixpkgs', 'github:owner/repo'"
        ),
    )
    json_output: bool = Field(False, alias="json", description="Output in JSON format")

    def to_argv(self) -> list[str]:
        return [
            "flake",
            "show",
            *_positional(self.flake_ref),
            *_flag(self.json_output, "--json"),
        ]


class FlakeMetadataArgs(LocatedCommandArgs):
    flake_ref: str | None = Field(
        None, description="Flake reference (defaults to current directory)"
    )
    json_output: bool = Field(False, alias="json", description="Output in JSON format")

    def to_argv(self) -> list[str]:
        return [
            "flake",
            "metadata",
            *_positional(self.flake_ref),
            *_flag(self.json_output, "--json"),
        ]


class FlakeUpdateArgs(LocatedCommandArgs):
    inputs: list[str] | None = Field(
        None, description="Specific inputs to update (updates all if not specified)"
    )

    def to_argv(self) -> list[str]:
        return ["flake", "update", *(self.inputs or [])]


class FlakeCheckArgs(LocatedCommandArgs):
    flake_ref: str | None = Field(
        None, description="Flake reference (defaults to current directory)"
    )

    def to_argv(self) -> list[str]:
        return ["flake", "check", *_positional(self.flake_ref)]


class FlakeLockArgs(LocatedCommandArgs):
    flake_ref: str | None = Field(
        None, description="Flake reference (defaults to current directory)"
    )
    update_input: list[str] | None = Field(
        None, description="Specific inputs to update"
    )

    def to_argv(self) -> list[str]:
        argv = ["flake", "lock", *_positional(self.flake_ref)]
        for name in self.update_input or []:
            argv += ["--update-input", name]
        return argv


# Evaluation commands


class EvalArgs(LocatedCommandArgs):
    installable: str | None = Field(
        None,
        description=(
            "Installable to evaluate "
            "(e.g., '.#packages.x86_64-linux.default.meta')"
        ),
    )
    expr: str | None = Field(
        None, description="Nix expression to evaluate (--expr flag)"
    )
    json_output: bool = Field(False, alias="json", description="Output as JSON")
    raw: bool = Field(False, description="Output raw strings without quoting")

    def to_argv(self) -> list[str]:
        return [
            "eval",
            *_positional(self.installable),
            *_option("--expr", self.expr),
            *_flag(self.json_output, "--json"),
            *_flag(self.raw, "--raw"),
        ]


# Profile commands


class ProfileListArgs(CommandArgs):
    profile: str | None = Field(
        None, description="Profile path (defaults to user profile)"
    )
    json_output: bool = Field(False, alias="json", description="Output in JSON format")

    def to_argv(self) -> list[str]:
        return [
            "profile",
            "list",
            *_option("--profile", self.profile),
            *_flag(self.json_output, "--json"),
        ]


class ProfileInstallArgs(CommandArgs):
    installables: list[str] = Field(
        description="Packages to install (e.g., ['nixpkgs#hello'])"
    )
    profile: str | None = Field(
        None, description="Profile path (defaults to user profile)"
    )

    def to_argv(self) -> list[str]:
        return [
            "profile",
            "install",
            *_option("--profile", self.profile),
            *self.installables,
        ]


class ProfileRemoveArgs(CommandArgs):
    packages: list[str] = Field(description="Package names or indices to remove")
    profile: str | None = Field(None, description="Profile path")

    def to_argv(self) -> list[str]:
        return [
            "profile",
            "remove",
            *_option("--profile", self.profile),
            *self.packages,
        ]


class ProfileUpgradeArgs(CommandArgs):
    packages: list[str] = Field(
        description="Package names or indices to upgrade (or '.*' for all)"
    )
    profile: str | None = Field(None, description="Profile path")

    def to_argv(self) -> list[str]:
        return [
            "profile",
            "upgrade",
            *_option("--profile", self.profile),
            *self.packages,
        ]


# Store commands


class StoreGcArgs(CommandArgs):
    dry_run: bool = Field(
        False, description="Show what would be deleted without actually deleting"
    )

    def to_argv(self) -> list[str]:
        return ["store", "gc", *_flag(self.dry_run, "--dry-run")]


class StorePathInfoArgs(CommandArgs):
    paths: list[str] = Field(description="Store paths to query")
    json_output: bool = Field(False, alias="json", description="Output in JSON format")
    closure_size: bool = Field(False, description="Print closure size")

    def to_argv(self) -> list[str]:
        return [
            "path-info",
            *self.paths,
            *_flag(self.json_output, "--json"),
            *_flag(self.closure_size, "-S"),
        ]


# Utility commands


class FmtArgs(LocatedCommandArgs):
    working_directory: str | None = Field(
        None, description="Directory to run the formatter in"
    )

    def to_argv(self) -> list[str]:
        return ["fmt"]


class LogArgs(LocatedCommandArgs):
    installable: str = Field(description="The installable to show logs for")

    def to_argv(self) -> list[str]:
        return ["log", self.installable]


class WhyDependsArgs(LocatedCommandArgs):
    package: str = Field(description="The package to analyze")
    dependency: str = Field(description="The dependency to look for")

    def to_argv(self) -> list[str]:
        return ["why-depends", self.package, self.dependency]


class DerivationShowArgs(LocatedCommandArgs):
    installable: str = Field(description="The installable to show derivation for")

    def to_argv(self) -> list[str]:
        return ["derivation", "show", self.installable]


class HashPathArgs(CommandArgs):
    path: str = Field(description="Path to hash")
    hash_type: Literal["sha256", "sha512", "sha1", "md5"] | None = Field(
        None, alias="type", description="Hash algorithm (default: sha256)"
    )
    sri: bool = Field(False, description="Output in SRI format")

    def to_argv(self) -> list[str]:
        return [
            "hash",
            "path",
            self.path,
            *_option("--type", self.hash_type),
            *_flag(self.sri, "--sri"),
        ]


class RegistryListArgs(CommandArgs):
    def to_argv(self) -> list[str]:
        return ["registry", "list"]


class PrintDevEnvArgs(LocatedCommandArgs):
    installable: str | None = Field(
        None, description="The installable (defaults to current directory)"
    )
    json_output: bool = Field(False, alias="json", description="Output in JSON format")

    def to_argv(self) -> list[str]:
        return [
            "print-dev-env",
            *_positional(self.installable),
            *_flag(self.json_output, "--json"),
        ]


# Log retrieval


class GetLogArgs(OperationArgs):
    log_id: str = Field(
        description="The log ID from a previous command (shown in output footer)"
    )
    grep: str | None = Field(
        None, description="Optional: filter log lines matching this pattern"
    )
    tail: int | None = Field(
        None, ge=0, description="Optional: only show last N lines"
    )
    head: int | None = Field(
        None, ge=0, description="Optional: only show first N lines"
    )


class ListLogsArgs(OperationArgs):
    pass


@dataclass(frozen=True)
class Operation:
    """An operation callers can invoke by name."""

    name: OperationName
    description: str
    args_model: type[OperationArgs]

    def parse(self, arguments: dict[str, Any] | None) -> OperationArgs:
        """Validate a raw argument bag into the typed argument model."""
        return self.args_model.model_validate(arguments or {})

    def input_schema(self) -> dict[str, Any]:
        return self.args_model.model_json_schema(by_alias=True)


_OPERATIONS = [
    Operation(
        OperationName.BUILD,
        "Build a derivation or fetch a store path. This is the primary command "
        "for building packages with Nix. Use this instead of make, cargo build, "
        "npm build, etc.",
        BuildArgs,
    ),
    Operation(
        OperationName.DEVELOP,
        "Enter or get information about a development shell that provides the "
        "build environment of a derivation. Use this instead of manual "
        "environment setup.",
        DevelopArgs,
    ),
    Operation(
        OperationName.RUN,
        "Run a Nix application directly without installing it. Great for trying "
        "out packages.",
        RunArgs,
    ),
    Operation(
        OperationName.SEARCH,
        "Search for packages in nixpkgs or flakes. Use this to find available "
        "packages.",
        SearchArgs,
    ),
    Operation(
        OperationName.FLAKE_INIT,
        "Initialize a new flake in the current directory from a template. Use "
        "this to start new Nix projects.",
        FlakeInitArgs,
    ),
    Operation(
        OperationName.FLAKE_NEW,
        "Create a new flake in a new directory from a template.",
        FlakeNewArgs,
    ),
    Operation(
        OperationName.FLAKE_SHOW,
        "Show the outputs of a flake. Useful for understanding what a flake "
        "provides.",
        FlakeShowArgs,
    ),
    Operation(
        OperationName.FLAKE_METADATA,
        "Show metadata about a flake including inputs, revision, and last "
        "modified time.",
        FlakeMetadataArgs,
    ),
    Operation(
        OperationName.FLAKE_UPDATE,
        "Update flake lock file inputs to their latest versions.",
        FlakeUpdateArgs,
    ),
    Operation(
        OperationName.FLAKE_CHECK,
        "Check a flake for issues. Validates the flake outputs and runs checks "
        "defined in the flake.",
        FlakeCheckArgs,
    ),
    Operation(
        OperationName.FLAKE_LOCK,
        "Create or update a flake lock file without building.",
        FlakeLockArgs,
    ),
    Operation(
        OperationName.EVAL,
        "Evaluate a Nix expression and print the result. Useful for inspecting "
        "values and debugging.",
        EvalArgs,
    ),
    Operation(
        OperationName.PROFILE_LIST,
        "List packages installed in the current profile.",
        ProfileListArgs,
    ),
    Operation(
        OperationName.PROFILE_INSTALL,
        "Install a package into a profile. Use this for persistent "
        "installations.",
        ProfileInstallArgs,
    ),
    Operation(
        OperationName.PROFILE_REMOVE,
        "Remove packages from a profile.",
        ProfileRemoveArgs,
    ),
    Operation(
        OperationName.PROFILE_UPGRADE,
        "Upgrade packages in a profile to their latest versions.",
        ProfileUpgradeArgs,
    ),
    Operation(
        OperationName.STORE_GC,
        "Run garbage collection on the Nix store to free up disk space.",
        StoreGcArgs,
    ),
    Operation(
        OperationName.STORE_PATH_INFO,
        "Query information about store paths.",
        StorePathInfoArgs,
    ),
    Operation(
        OperationName.FMT,
        "Format Nix files using the formatter specified in the flake.",
        FmtArgs,
    ),
    Operation(
        OperationName.LOG,
        "Show the build log for a derivation.",
        LogArgs,
    ),
    Operation(
        OperationName.WHY_DEPENDS,
        "Show why one package depends on another. Useful for debugging "
        "closures.",
        WhyDependsArgs,
    ),
    Operation(
        OperationName.DERIVATION_SHOW,
        "Show the derivation(s) for an installable. Useful for debugging build "
        "issues.",
        DerivationShowArgs,
    ),
    Operation(
        OperationName.HASH_PATH,
        "Compute the hash of a path.",
        HashPathArgs,
    ),
    Operation(
        OperationName.REGISTRY_LIST,
        "List flake registries and their entries.",
        RegistryListArgs,
    ),
    Operation(
        OperationName.PRINT_DEV_ENV,
        "Print shell code that can be sourced to reproduce the build "
        "environment. Useful for IDE integration.",
        PrintDevEnvArgs,
    ),
    Operation(
        OperationName.GET_LOG,
        "Retrieve the full output of a previous nix command. Use this when "
        "output was truncated and you need to see the full log.",
        GetLogArgs,
    ),
    Operation(
        OperationName.LIST_LOGS,
        "List available logs from previous nix commands.",
        ListLogsArgs,
    ),
]

OPERATIONS: dict[OperationName, Operation] = {op.name: op for op in _OPERATIONS}


def get_operation(name: str) -> Operation | None:
    """Look up an operation by its external name."""
    try:
        return OPERATIONS[OperationName(name)]
    except ValueError:
        return None
