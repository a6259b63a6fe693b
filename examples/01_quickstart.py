#!/usr/bin/env python3
"""Example: Quickstart — plugin-mirror

Minimal working example: parse a configuration, inspect where each project
will be stored, and synchronize everything into its svn repository.

Usage:
    python examples/01_quickstart.py /srv/mirror

Requirements:
    pip install plugin-mirror
    git, svn (and composer/npm for projects that need them) on PATH
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import plugin_mirror
from plugin_mirror import ProcessRunner, SyncOrchestrator, load_config


def main() -> None:
    root = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(".")
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    print(f"plugin-mirror version: {plugin_mirror.__version__}")

    # Step 1: Load <root>/config.yml
    config = load_config(root / "config.yml")
    print(f"{len(config.projects)} project(s) configured in {config.source}")

    # Step 2: Show the storage layout
    orchestrator = SyncOrchestrator(root, runner=ProcessRunner(timeout=600), tools=config.tools)
    for name in config.projects:
        print(f"  {name}: git -> {orchestrator.mirror_path(name)}")
        print(f"  {name}: svn -> {orchestrator.working_copy_path(name)}")

    # Step 3: Synchronize
    summary = orchestrator.sync_all(config.projects)
    for result in summary.results:
        status = "updated" if result.succeeded else result.outcome.value
        release = f" (release {result.release})" if result.release else ""
        print(f"{result.name}: {status}{release}")
        for warning in result.warnings:
            print(f"    warning: {warning}")

    print(f"\n{summary.succeeded} updated, {summary.skipped} skipped.")


if __name__ == "__main__":
    main()
