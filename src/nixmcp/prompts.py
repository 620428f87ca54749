"""Static prompts guiding assistants through a flake-based workflow."""

from dataclasses import dataclass, field

from nixmcp.core.errors import UnknownPromptError


@dataclass(frozen=True)
class PromptArgument:
    name: str
    description: str
    required: bool = False


@dataclass(frozen=True)
class Prompt:
    name: str
    description: str
    arguments: list[PromptArgument] = field(default_factory=list)


NIX_WORKFLOW = "nix-workflow"
FLAKE_TEMPLATE = "flake-template"

PROMPTS = [
    Prompt(
        name=NIX_WORKFLOW,
        description=(
            "Instructions for using Nix flakes for development. "
            "Read this first when working with Nix projects."
        ),
    ),
    Prompt(
        name=FLAKE_TEMPLATE,
        description="Template for creating a new flake.nix file",
        arguments=[
            PromptArgument(
                name="language",
                description="Programming language (rust, python, go, nodejs, etc.)",
            )
        ],
    ),
]

NIX_WORKFLOW_TEXT = """\
# Nix Flake-Based Development Workflow

This project uses Nix flakes for reproducible builds and development environments.
Always use the modern `nix` command (NOT legacy nix-shell, nix-build, nix-env).

## Key Principles

1. **Flakes are the standard** - Every Nix project should have a `flake.nix` at its root
2. **Use nix develop** - Enter dev shells with `nix develop`, run commands with `nix develop -c <cmd>`
3. **Use nix build** - Build projects with `nix build`, not language-specific build tools directly
4. **Use nix flake check** - Validate flakes and run tests with `nix flake check`

## Common Workflow

### Starting a new project
1. `nix flake init -t templates#<language>` or create flake.nix manually
2. `nix flake lock` to create lock file
3. Add flake.nix and flake.lock to git

### Development
1. `nix develop` - Enter the dev shell with all dependencies
2. `nix develop -c <command>` - Run a single command in the dev shell
3. `nix build` - Build the project
4. `nix run` - Run the default app

### Checking/Testing
1. `nix flake check` - Run all checks defined in the flake
2. `nix flake show` - See what outputs the flake provides

### Updating dependencies
1. `nix flake update` - Update all inputs
2. `nix flake update <input>` - Update specific input

## Important Notes

- Always check for existing flake.nix before suggesting other build methods
- Use `nix develop -c` to run build commands within the flake's environment
- Prefer `nix build` over direct invocation of cargo/npm/make etc.
- The dev shell provides all necessary tools - don't install them globally
"""

_FLAKE_HEADER = """\
  inputs = {
    nixpkgs.url = "github:NixOS/nixpkgs/nixos-unstable";
    flake-utils.url = "github:numtide/flake-utils";
  };
"""

FLAKE_TEMPLATES: dict[str, str] = {
    "rust": """\
{
  description = "Rust project";

  inputs = {
    nixpkgs.url = "github:NixOS/nixpkgs/nixos-unstable";
    flake-utils.url = "github:numtide/flake-utils";
    rust-overlay = {
      url = "github:oxalica/rust-overlay";
      inputs.nixpkgs.follows = "nixpkgs";
    };
  };

  outputs = { self, nixpkgs, flake-utils, rust-overlay }:
    flake-utils.lib.eachDefaultSystem (system:
      let
        overlays = [ (import rust-overlay) ];
        pkgs = import nixpkgs { inherit system overlays; };
        rustToolchain = pkgs.rust-bin.stable.latest.default;
      in {
        devShells.default = pkgs.mkShell {
          buildInputs = with pkgs; [
            rustToolchain
            rust-analyzer
            pkg-config
          ];
        };

        packages.default = pkgs.rustPlatform.buildRustPackage {
          pname = "myproject";
          version = "0.1.0";
          src = ./.;
          cargoLock.lockFile = ./Cargo.lock;
        };
      });
}""",
    "python": """\
{
  description = "Python project";

"""
    + _FLAKE_HEADER
    + """
  outputs = { self, nixpkgs, flake-utils }:
    flake-utils.lib.eachDefaultSystem (system:
      let
        pkgs = import nixpkgs { inherit system; };
        python = pkgs.python312;
      in {
        devShells.default = pkgs.mkShell {
          buildInputs = [
            python
            python.pkgs.pip
            python.pkgs.virtualenv
          ];
        };
      });
}""",
    "go": """\
{
  description = "Go project";

"""
    + _FLAKE_HEADER
    + """
  outputs = { self, nixpkgs, flake-utils }:
    flake-utils.lib.eachDefaultSystem (system:
      let
        pkgs = import nixpkgs { inherit system; };
      in {
        devShells.default = pkgs.mkShell {
          buildInputs = with pkgs; [
            go
            gopls
            gotools
          ];
        };

        packages.default = pkgs.buildGoModule {
          pname = "myproject";
          version = "0.1.0";
          src = ./.;
          vendorHash = null; # Update after first build
        };
      });
}""",
    "nodejs": """\
{
  description = "Node.js project";

"""
    + _FLAKE_HEADER
    + """
  outputs = { self, nixpkgs, flake-utils }:
    flake-utils.lib.eachDefaultSystem (system:
      let
        pkgs = import nixpkgs { inherit system; };
      in {
        devShells.default = pkgs.mkShell {
          buildInputs = with pkgs; [
            nodejs_22
            nodePackages.typescript
            nodePackages.typescript-language-server
          ];
        };
      });
}""",
    "default": """\
{
  description = "A Nix flake";

"""
    + _FLAKE_HEADER
    + """
  outputs = { self, nixpkgs, flake-utils }:
    flake-utils.lib.eachDefaultSystem (system:
      let
        pkgs = import nixpkgs { inherit system; };
      in {
        devShells.default = pkgs.mkShell {
          buildInputs = with pkgs; [
            # Add your dependencies here
          ];
        };

        packages.default = pkgs.stdenv.mkDerivation {
          pname = "myproject";
          version = "0.1.0";
          src = ./.;
          # Add build instructions
        };
      });
}""",
}


def flake_template(language: str | None = None) -> str:
    """Render the flake template prompt for a language.

    Unknown or missing languages fall back to the generic template.
    """
    key = language.lower() if language else "default"
    template = FLAKE_TEMPLATES.get(key, FLAKE_TEMPLATES["default"])
    return f"""\
# Flake Template for {language or "generic"} project

```nix
{template}
```

## Usage

1. Save this as `flake.nix` in your project root
2. Run `nix flake lock` to generate the lock file
3. Run `nix develop` to enter the development shell
4. Run `nix build` to build the project
"""


def render_prompt(name: str, arguments: dict[str, str] | None = None) -> str:
    """Return the text of a named prompt.

    Raises:
        UnknownPromptError: If no prompt has this name.
    """
    arguments = arguments or {}
    if name == NIX_WORKFLOW:
        return NIX_WORKFLOW_TEXT
    if name == FLAKE_TEMPLATE:
        return flake_template(arguments.get("language"))
    raise UnknownPromptError(name)
