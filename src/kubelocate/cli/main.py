#!/usr/bin/env python3
"""
KUBELOCATE CLI
--------------
Command-line front end for the endpoint resolver.

  kubelocate resolve LOCATOR [--snapshot PATH] [--context NAME] [--explain] [--json]
  kubelocate parse LOCATOR [--json]

Exit codes: 0 resolved, 1 unresolved, 2 invalid locator, 3 cluster query failed.

Author: KubeLocate Team
Date: 2026-10-19
"""

import sys
import argparse
import logging
from typing import List, Optional

from rich.logging import RichHandler

from kubelocate.cli.formatter import (
    LocateFormatter,
    console,
    locator_to_dict,
    log_console,
    resolution_to_dict,
)
from kubelocate.core.config import ResolverSettings
from kubelocate.core.engine import EndpointResolver
from kubelocate.core.errors import LocatorParseError, ProviderError
from kubelocate.parsing.locator import parse_locator
from kubelocate.providers.base import ResourceProvider

VERSION = "kubelocate v1.0.0"

EXIT_RESOLVED = 0
EXIT_UNRESOLVED = 1
EXIT_PARSE_ERROR = 2
EXIT_PROVIDER_ERROR = 3


class KubeLocateCLI:
    """
    Translates user commands into resolver calls and renders the outcome.
    """

    def __init__(self, formatter: Optional[LocateFormatter] = None):
        self.formatter = formatter or LocateFormatter()
        self.parser = argparse.ArgumentParser(
            prog="kubelocate",
            description="KubeLocate - Resolve Kubernetes workload locators to endpoints",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="Locator format: <scheme>:<apiVersion>/<kind>/<namespace>/<name>[?port-name=<name>]"
        )
        self._setup_args()

    def _setup_args(self):
        self.parser.add_argument("-v", "--version", action="version", version=VERSION)
        self.parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        resolve_parser = subparsers.add_parser("resolve", help="🔎 Resolve a locator to an endpoint")
        resolve_parser.add_argument("locator", help="e.g. kubernetes:apps/v1/deployment/my-ns/my-app")
        resolve_parser.add_argument("--snapshot", help="Resolve against YAML manifests (file or directory) instead of a live cluster")
        resolve_parser.add_argument("--context", help="kubeconfig context for live resolution")
        resolve_parser.add_argument("--explain", action="store_true", help="Show how the endpoint was found")
        resolve_parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON")

        parse_parser = subparsers.add_parser("parse", help="🧩 Show the parsed form of a locator")
        parse_parser.add_argument("locator", help="Locator text")
        parse_parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON")

    def _configure_logging(self, verbose: bool):
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=log_console, show_path=False)],
            force=True,
        )

    def _build_provider(self, args: argparse.Namespace) -> ResourceProvider:
        if args.snapshot:
            from kubelocate.providers.snapshot import SnapshotProvider
            return SnapshotProvider.from_path(args.snapshot)

        from kubelocate.providers.kubernetes import KubernetesProvider
        return KubernetesProvider.connect(context=args.context)

    def _run_parse(self, args: argparse.Namespace) -> int:
        try:
            locator = parse_locator(args.locator)
        except LocatorParseError as e:
            self.formatter.show_error("Invalid locator", e.reason)
            return EXIT_PARSE_ERROR

        if args.json:
            self.formatter.print_json(locator_to_dict(locator))
        else:
            self.formatter.show_locator(locator)
        return EXIT_RESOLVED

    def _run_resolve(self, args: argparse.Namespace) -> int:
        try:
            locator = parse_locator(args.locator)
        except LocatorParseError as e:
            self.formatter.show_error("Invalid locator", e.reason)
            return EXIT_PARSE_ERROR

        try:
            provider = self._build_provider(args)
            resolver = EndpointResolver(provider, ResolverSettings.from_env())
            resolution = resolver.resolve_detailed(locator)
        except ProviderError as e:
            self.formatter.show_error("Cluster query failed", str(e))
            return EXIT_PROVIDER_ERROR

        if args.json:
            self.formatter.print_json(resolution_to_dict(locator, resolution))
        else:
            self.formatter.show_resolution(locator, resolution, explain=args.explain)
        return EXIT_RESOLVED if resolution else EXIT_UNRESOLVED

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point."""
        args = self.parser.parse_args(argv)
        self._configure_logging(args.verbose)

        if args.command == "resolve":
            return self._run_resolve(args)
        if args.command == "parse":
            return self._run_parse(args)

        self.parser.print_help()
        return EXIT_RESOLVED


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(KubeLocateCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(130)


if __name__ == "__main__":
    main()
