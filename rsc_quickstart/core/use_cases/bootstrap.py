"""
Bootstrap use case: create a project from the template, end to end.

This is the top-level orchestrator: it gates on the toolchain, fetches
the template, pins framework dependencies to the latest canary, and
hands off to yarn and git.  Every step is sequential and every failure
is a ``QuickstartError`` that ends the run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from rsc_quickstart.adapters.base import CommandAdapter
from rsc_quickstart.core.errors import VersionTooOldError
from rsc_quickstart.core.models.settings import QuickstartSettings
from rsc_quickstart.core.models.toolchain import RewriteTarget, VersionConstraint
from rsc_quickstart.core.services.manifest_rewriter import ManifestRewriter, RewriteReport
from rsc_quickstart.core.services.npm_registry import NpmRegistryClient
from rsc_quickstart.core.services.template_fetch import TemplateSource
from rsc_quickstart.core.services.toolchain_resolver import ToolchainResolver
from rsc_quickstart.core.services.version_oracle import VersionOracle

logger = logging.getLogger(__name__)

Progress = Callable[[str], None]


@dataclass
class BootstrapResult:
    """Result of a bootstrap run."""

    installation_dir: Path
    template_fetched: bool = False
    canary_version: str = ""
    node_version: str = ""
    package_manager_path: Path | None = None
    package_manager_version: str = ""
    rewrite: RewriteReport = field(default_factory=RewriteReport)
    commands: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "installation_dir": str(self.installation_dir),
            "template_fetched": self.template_fetched,
            "canary_version": self.canary_version,
            "node_version": self.node_version,
            "package_manager": {
                "path": str(self.package_manager_path) if self.package_manager_path else None,
                "version": self.package_manager_version,
            },
            "manifests": self.rewrite.to_dict(),
            "commands": list(self.commands),
        }


class Bootstrapper:
    """Runs the quickstart sequence against injected collaborators.

    Args:
        settings: Validated settings.
        runner: Command adapter for node, yarn and git.
        template: Template source; built from settings when omitted.
        registry: Registry client; built from settings when omitted.
        resolver: Package-manager resolver; built from settings when omitted.
        progress: Called with each user-facing progress line.
        verbose: Passed to every collaborator built here.
    """

    def __init__(
        self,
        settings: QuickstartSettings,
        runner: CommandAdapter,
        *,
        template: TemplateSource | None = None,
        registry: NpmRegistryClient | None = None,
        resolver: ToolchainResolver | None = None,
        progress: Progress | None = None,
        verbose: bool = False,
    ) -> None:
        self.settings = settings
        self._runner = runner
        self._verbose = verbose
        self._progress = progress or (lambda message: None)
        self._oracle = VersionOracle(runner, verbose=verbose)
        self._template = template or TemplateSource(
            settings.template_url,
            settings.template_path,
            timeout=settings.http_timeout,
            temp_prefix=settings.temp_prefix,
            verbose=verbose,
        )
        self._registry = registry or NpmRegistryClient(
            settings.registry_url,
            timeout=settings.http_timeout,
        )
        self._resolver = resolver or ToolchainResolver(
            settings.package_manager,
            managed_segment=settings.managed_segment,
            verbose=verbose,
        )

    # ── Gates ───────────────────────────────────────────────────

    def require(self, constraint: VersionConstraint, cwd: Path | None = None) -> str:
        """Check a version floor; raise VersionTooOldError if it isn't met."""
        ok, reported = self._oracle.satisfies(constraint, cwd=cwd)
        if not ok:
            raise VersionTooOldError(
                constraint.message
                or f"{constraint.tool} {reported} is too old, "
                f"{constraint.minimum_major} or newer is required",
                hints=[f"Found {constraint.tool} {reported}"],
            )
        return reported

    # ── Run ─────────────────────────────────────────────────────

    def run(self, installation_dir: Path) -> BootstrapResult:
        settings = self.settings
        result = BootstrapResult(installation_dir=installation_dir)

        result.node_version = self.require(settings.node)
        result.package_manager_path = self._resolver.resolve().path

        if not installation_dir.exists():
            self._template.materialize(installation_dir)
            result.template_fetched = True
        else:
            logger.info("%s already exists, skipping template download", installation_dir)

        result.canary_version = self._registry.dist_tag(
            settings.framework_package, settings.dist_tag
        )
        logger.log(
            logging.INFO if self._verbose else logging.DEBUG,
            "Latest %s: %s",
            settings.dist_tag,
            result.canary_version,
        )

        rewriter = ManifestRewriter(
            RewriteTarget(
                name_prefix=settings.dependency_prefix,
                replacement_version=result.canary_version,
            ),
            manifest_name=settings.manifest_name,
            ignore_dirs=settings.ignore_dirs,
            continue_on_error=settings.continue_on_error,
            verbose=self._verbose,
        )
        result.rewrite = rewriter.rewrite_all(installation_dir)

        pm = settings.package_manager
        self._progress(f"Checking your {pm} version")
        result.package_manager_version = self.require(settings.yarn, cwd=installation_dir)

        self._progress(f"Running `{pm} install`. This might take a while...")
        self._exec([pm, "install"], installation_dir, result)

        self._progress("Initializing git")
        self._exec(["git", "init", "."], installation_dir, result)
        self._exec(["git", "add", "."], installation_dir, result)
        self._exec(["git", "commit", "-am", settings.commit_message], installation_dir, result)

        return result

    def _exec(self, args: list[str], cwd: Path, result: BootstrapResult) -> None:
        self._runner.run(args, cwd=cwd)
        result.commands.append(" ".join(args))


def run_bootstrap(
    installation_dir: Path,
    settings: QuickstartSettings | None = None,
    runner: CommandAdapter | None = None,
    *,
    progress: Progress | None = None,
    verbose: bool = False,
) -> BootstrapResult:
    """Bootstrap a project into ``installation_dir`` with default collaborators."""
    from rsc_quickstart.adapters.shell.command import ShellCommandAdapter

    settings = settings or QuickstartSettings()
    runner = runner or ShellCommandAdapter(timeout=settings.command_timeout, verbose=verbose)
    return Bootstrapper(settings, runner, progress=progress, verbose=verbose).run(
        installation_dir
    )
