"""Build-tool detection for a freshly replicated ``trunk``.

Two ecosystems are recognised by their manifest files:

COMPOSER : ``composer.json`` -> ``composer install``
NPM      : ``package.json``  -> ``npm install --production`` then
           ``npm run build`` (optional script; its failure is routine)

Both may apply to the same tree.  Nothing here can fail the pipeline;
failures come back as warning strings.
"""
from __future__ import annotations

import logging
from pathlib import Path

from plugin_mirror.config.loader import ToolPaths
from plugin_mirror.process.runner import ProcessResult, ProcessRunner, best_effort

logger = logging.getLogger(__name__)

COMPOSER_MANIFEST = "composer.json"
NPM_MANIFEST = "package.json"
NPM_BUILD_SCRIPT = "build"


class BuildToolRunner:
    """Run whichever build tools a tree asks for.

    Parameters
    ----------
    runner:
        Process runner for the tool invocations.
    tools:
        Executable names for composer and npm.
    """

    def __init__(self, runner: ProcessRunner, tools: ToolPaths | None = None) -> None:
        self._runner = runner
        self._tools = tools or ToolPaths()

    def detect(self, tree: Path) -> list[str]:
        """Return the manifest files present in *tree*."""
        return [m for m in (COMPOSER_MANIFEST, NPM_MANIFEST) if (tree / m).is_file()]

    def run(self, tree: Path, project: str = "") -> list[str]:
        """Run the detected build steps inside *tree*.

        Returns
        -------
        list[str]
            One warning per failed install step.  The ``build`` script is
            not reported when it fails.
        """
        warnings: list[str] = []
        manifests = self.detect(tree)

        if COMPOSER_MANIFEST in manifests:
            logger.info(
                "A %s file is present for %s. Running composer install...",
                COMPOSER_MANIFEST,
                project,
            )
            result = self._runner.run([self._tools.composer, "install"], cwd=tree)
            self._collect(result, "composer install", warnings)

        if NPM_MANIFEST in manifests:
            logger.info(
                "A %s file is present for %s. Running npm install --production...",
                NPM_MANIFEST,
                project,
            )
            result = self._runner.run([self._tools.npm, "install", "--production"], cwd=tree)
            self._collect(result, "npm install --production", warnings)

            logger.info("Checking for npm script '%s' to run...", NPM_BUILD_SCRIPT)
            build = self._runner.run([self._tools.npm, "run", NPM_BUILD_SCRIPT], cwd=tree)
            best_effort(build, f"npm run {NPM_BUILD_SCRIPT}", quiet=True)

        return warnings

    @staticmethod
    def _collect(result: ProcessResult, what: str, warnings: list[str]) -> None:
        best_effort(result, what)
        if not result.ok:
            warnings.append(f"{what} exited with status {result.exit_code}")


__all__ = [
    "BuildToolRunner",
    "COMPOSER_MANIFEST",
    "NPM_BUILD_SCRIPT",
    "NPM_MANIFEST",
]
