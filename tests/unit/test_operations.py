"""Tests for the operation catalogue and argv translation."""

import pytest
from pydantic import ValidationError

from nixmcp.core.operations import (
    OPERATIONS,
    CommandArgs,
    GetLogArgs,
    ListLogsArgs,
    OperationName,
    get_operation,
)


def _argv(name: str, arguments: dict) -> list[str]:
    operation = get_operation(name)
    assert operation is not None
    args = operation.parse(arguments)
    assert isinstance(args, CommandArgs)
    return args.to_argv()


class TestCatalogue:
    @pytest.mark.core
    def test_every_name_has_an_operation(self) -> None:
        assert set(OPERATIONS) == set(OperationName)
        assert len(OPERATIONS) == 27

    @pytest.mark.core
    def test_unknown_name(self) -> None:
        assert get_operation("nix_build") is None
        assert get_operation("") is None

    @pytest.mark.core
    def test_retrieval_operations_do_not_run_commands(self) -> None:
        assert OPERATIONS[OperationName.GET_LOG].args_model is GetLogArgs
        assert OPERATIONS[OperationName.LIST_LOGS].args_model is ListLogsArgs
        command_ops = [
            op for op in OPERATIONS.values() if issubclass(op.args_model, CommandArgs)
        ]
        assert len(command_ops) == 25

    @pytest.mark.core
    def test_every_operation_has_description(self) -> None:
        assert all(op.description for op in OPERATIONS.values())

    @pytest.mark.core
    def test_command_args_without_argv_cannot_be_created(self) -> None:
        class Incomplete(CommandArgs):
            pass

        with pytest.raises(TypeError, match="to_argv"):
            CommandArgs()
        with pytest.raises(TypeError, match="to_argv"):
            Incomplete()


class TestInputSchema:
    @pytest.mark.core
    def test_required_fields(self) -> None:
        schema = OPERATIONS[OperationName.WHY_DEPENDS].input_schema()

        assert schema["type"] == "object"
        assert sorted(schema["required"]) == ["dependency", "package"]

    @pytest.mark.core
    def test_aliases_are_exposed(self) -> None:
        search = OPERATIONS[OperationName.SEARCH].input_schema()
        hash_path = OPERATIONS[OperationName.HASH_PATH].input_schema()

        assert "json" in search["properties"]
        assert "json_output" not in search["properties"]
        assert "type" in hash_path["properties"]

    @pytest.mark.core
    def test_optional_only_operation_has_no_required(self) -> None:
        schema = OPERATIONS[OperationName.BUILD].input_schema()
        assert "required" not in schema


class TestParsing:
    @pytest.mark.core
    def test_missing_required_field(self) -> None:
        with pytest.raises(ValidationError):
            OPERATIONS[OperationName.RUN].parse({})

    @pytest.mark.core
    def test_unknown_fields_are_ignored(self) -> None:
        args = OPERATIONS[OperationName.FMT].parse({"bogus": 1})
        assert isinstance(args, CommandArgs)
        assert args.to_argv() == ["fmt"]

    @pytest.mark.core
    def test_none_arguments(self) -> None:
        args = OPERATIONS[OperationName.REGISTRY_LIST].parse(None)
        assert isinstance(args, CommandArgs)

    @pytest.mark.core
    def test_hash_type_is_restricted(self) -> None:
        with pytest.raises(ValidationError):
            OPERATIONS[OperationName.HASH_PATH].parse({"path": ".", "type": "crc32"})

    @pytest.mark.core
    def test_negative_tail_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            OPERATIONS[OperationName.GET_LOG].parse({"log_id": "log-1", "tail": -1})

    @pytest.mark.core
    def test_working_directory_becomes_cwd(self) -> None:
        args = OPERATIONS[OperationName.BUILD].parse({"working_directory": "/tmp/p"})
        assert isinstance(args, CommandArgs)
        assert args.cwd == "/tmp/p"

    @pytest.mark.core
    def test_empty_working_directory_means_inherit(self) -> None:
        args = OPERATIONS[OperationName.BUILD].parse({"working_directory": ""})
        assert isinstance(args, CommandArgs)
        assert args.cwd is None

    @pytest.mark.core
    def test_operations_without_working_directory(self) -> None:
        args = OPERATIONS[OperationName.STORE_GC].parse({"working_directory": "/x"})
        assert isinstance(args, CommandArgs)
        assert args.cwd is None


ARGV_CASES = [
    ("build", {}, ["build"]),
    (
        "build",
        {"installable": ".#pkg", "out_link": "res", "rebuild": True},
        ["build", ".#pkg", "-o", "res", "--rebuild"],
    ),
    ("build", {"out_link": ""}, ["build", "--no-link"]),
    ("develop", {}, ["develop"]),
    (
        "develop",
        {"installable": ".", "command": "cargo test"},
        ["develop", ".", "-c", "sh", "-c", "cargo test"],
    ),
    ("run", {"installable": "nixpkgs#hello"}, ["run", "nixpkgs#hello"]),
    (
        "run",
        {"installable": ".#app", "args": ["--help", "x"]},
        ["run", ".#app", "--", "--help", "x"],
    ),
    ("run", {"installable": ".#app", "args": []}, ["run", ".#app", "--"]),
    ("search", {"regex": "hello"}, ["search", "nixpkgs", "hello"]),
    (
        "search",
        {"installable": ".", "regex": "^py", "json": True},
        ["search", ".", "^py", "--json"],
    ),
    ("flake_init", {}, ["flake", "init"]),
    (
        "flake_init",
        {"template": "templates#rust"},
        ["flake", "init", "-t", "templates#rust"],
    ),
    ("flake_new", {"path": "proj"}, ["flake", "new", "proj"]),
    (
        "flake_new",
        {"path": "proj", "template": "templates#go"},
        ["flake", "new", "proj", "-t", "templates#go"],
    ),
    ("flake_show", {"flake_ref": "nixpkgs", "json": True}, ["flake", "show", "nixpkgs", "--json"]),
    ("flake_metadata", {}, ["flake", "metadata"]),
    ("flake_metadata", {"json": True}, ["flake", "metadata", "--json"]),
    ("flake_update", {}, ["flake", "update"]),
    ("flake_update", {"inputs": ["nixpkgs", "utils"]}, ["flake", "update", "nixpkgs", "utils"]),
    ("flake_check", {"flake_ref": "."}, ["flake", "check", "."]),
    (
        "flake_lock",
        {"update_input": ["a", "b"]},
        ["flake", "lock", "--update-input", "a", "--update-input", "b"],
    ),
    (
        "eval",
        {"expr": "1 + 1", "json": True, "raw": True},
        ["eval", "--expr", "1 + 1", "--json", "--raw"],
    ),
    ("eval", {"installable": ".#x.meta"}, ["eval", ".#x.meta"]),
    ("profile_list", {}, ["profile", "list"]),
    (
        "profile_list",
        {"profile": "/p", "json": True},
        ["profile", "list", "--profile", "/p", "--json"],
    ),
    (
        "profile_install",
        {"installables": ["nixpkgs#hello", "nixpkgs#jq"]},
        ["profile", "install", "nixpkgs#hello", "nixpkgs#jq"],
    ),
    (
        "profile_remove",
        {"packages": ["hello"], "profile": "/p"},
        ["profile", "remove", "--profile", "/p", "hello"],
    ),
    ("profile_upgrade", {"packages": [".*"]}, ["profile", "upgrade", ".*"]),
    ("store_gc", {}, ["store", "gc"]),
    ("store_gc", {"dry_run": True}, ["store", "gc", "--dry-run"]),
    (
        "store_path_info",
        {"paths": ["/nix/store/a"], "json": True, "closure_size": True},
        ["path-info", "/nix/store/a", "--json", "-S"],
    ),
    ("fmt", {"working_directory": "/src"}, ["fmt"]),
    ("log", {"installable": ".#pkg"}, ["log", ".#pkg"]),
    (
        "why_depends",
        {"package": ".#app", "dependency": "nixpkgs#glibc"},
        ["why-depends", ".#app", "nixpkgs#glibc"],
    ),
    ("derivation_show", {"installable": ".#x"}, ["derivation", "show", ".#x"]),
    ("hash_path", {"path": "./src"}, ["hash", "path", "./src"]),
    (
        "hash_path",
        {"path": "./src", "type": "sha512", "sri": True},
        ["hash", "path", "./src", "--type", "sha512", "--sri"],
    ),
    ("registry_list", {}, ["registry", "list"]),
    ("print_dev_env", {}, ["print-dev-env"]),
    ("print_dev_env", {"installable": ".", "json": True}, ["print-dev-env", ".", "--json"]),
]


class TestToArgv:
    @pytest.mark.core
    @pytest.mark.parametrize(("name", "arguments", "expected"), ARGV_CASES)
    def test_argv(self, name: str, arguments: dict, expected: list[str]) -> None:
        assert _argv(name, arguments) == expected

    @pytest.mark.core
    def test_every_command_operation_is_covered(self) -> None:
        covered = {name for name, _, _ in ARGV_CASES}
        command_names = {
            str(op.name)
            for op in OPERATIONS.values()
            if issubclass(op.args_model, CommandArgs)
        }
        assert covered == command_names
