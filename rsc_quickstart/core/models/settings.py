"""
Quickstart settings: every tunable constant of a bootstrap run.

Defaults reproduce the stock RedwoodJS RSC quickstart.  A YAML file
passed with ``--config`` may override any field (see
``rsc_quickstart.core.config.loader``).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from rsc_quickstart.core.models.toolchain import VersionConstraint

DEFAULT_TEMPLATE_URL = "https://github.com/redwoodjs/redwood/archive/refs/heads/main.zip"
DEFAULT_TEMPLATE_PATH = "__fixtures__/test-project-rsc-kitchen-sink"
DEFAULT_REGISTRY_URL = "https://registry.npmjs.org/"


def _node_constraint() -> VersionConstraint:
    return VersionConstraint(
        tool="node",
        minimum_major=20,
        message="Your Node version is too old. Please install Node v20 or newer",
    )


def _yarn_constraint() -> VersionConstraint:
    return VersionConstraint(
        tool="yarn",
        minimum_major=4,
        message=(
            "Something is wrong with your yarn installation. It should have "
            "picked up on the `packageManager` field in `package.json` and "
            "upgraded itself to the required version"
        ),
    )


class QuickstartSettings(BaseModel):
    """Validated settings for one bootstrap run."""

    model_config = ConfigDict(extra="forbid")

    # Template
    template_url: str = DEFAULT_TEMPLATE_URL
    template_path: str = DEFAULT_TEMPLATE_PATH
    temp_prefix: str = "rwjs-rsc-quickstart-"

    # Registry
    registry_url: str = DEFAULT_REGISTRY_URL
    framework_package: str = "@redwoodjs/core"
    dist_tag: str = "canary"

    # Manifests
    dependency_prefix: str = Field(default="@redwoodjs/", min_length=1)
    manifest_name: str = "package.json"
    ignore_dirs: list[str] = Field(default_factory=lambda: ["node_modules", ".git"])
    continue_on_error: bool = False

    # Toolchain
    package_manager: str = "yarn"
    managed_segment: str = "corepack"
    node: VersionConstraint = Field(default_factory=_node_constraint)
    yarn: VersionConstraint = Field(default_factory=_yarn_constraint)

    # Execution
    http_timeout: float = Field(default=60.0, gt=0)
    command_timeout: float | None = None
    commit_message: str = "Initial commit"
