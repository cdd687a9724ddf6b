"""
KatalonKit CLI argument parser.

This module implements the command-line interface for KatalonKit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from katalonkit.core.exceptions import KatalonKitError

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("katalonkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """KatalonKit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="katalonkit",
            description="KatalonKit - fetch, cache and run Katalon Studio in builds",
            epilog='Use "katalonkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"KatalonKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_run_command(subparsers)
        self._add_install_command(subparsers)
        self._add_resolve_command(subparsers)
        self._add_platform_command(subparsers)

        return parser

    def _add_run_command(self, subparsers):
        """Add 'run' subcommand."""
        parser = subparsers.add_parser(
            "run",
            help="Run a Katalon project in console mode",
            description="Install Katalon Studio if needed and run a project in console mode",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="YAML file with step settings (flags override its values)",
        )
        parser.add_argument(
            "--version-number",
            "-V",
            dest="version",
            metavar="VERSION",
            help="Katalon Studio version to download (e.g., 7.0.0)",
        )
        parser.add_argument(
            "--location",
            metavar="DIR",
            help="Use a pre-installed Katalon Studio instead of downloading",
        )
        parser.add_argument(
            "--project-path",
            metavar="PATH",
            help="Katalon project to run (default: current directory)",
        )
        parser.add_argument(
            "--execute-args",
            metavar="ARGS",
            help='Extra Katalon arguments, passed verbatim (e.g., "-retry=0 -testSuitePath=...")',
        )
        parser.add_argument(
            "--x11-display",
            metavar="DISPLAY",
            help="X display to use on Linux (e.g., :99)",
        )
        parser.add_argument(
            "--xvfb-configuration",
            metavar="OPTIONS",
            help='Run under xvfb-run with these options (e.g., "-a -s \'-screen 0 1024x768x24\'")',
        )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install Katalon Studio into the cache",
            description="Download and extract a Katalon Studio version into ~/.katalon",
        )
        parser.add_argument("version", metavar="VERSION", help="Katalon Studio version")

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Show the release manifest entry for a version",
            description="Look up a version in the Katalon Studio release manifest",
        )
        parser.add_argument("version", metavar="VERSION", help="Katalon Studio version")
        parser.add_argument(
            "--os",
            dest="os_name",
            metavar="LABEL",
            help='Manifest OS label (default: detected, e.g., "linux", "windows 64")',
        )

    def _add_platform_command(self, subparsers):
        """Add 'platform' subcommand."""
        subparsers.add_parser(
            "platform",
            help="Show the detected OS label",
            description="Print the OS label used to select packages from the manifest",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except KatalonKitError as e:
            from katalonkit.cli.utils import print_error

            print_error(str(e))
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "run": "katalonkit.cli.commands.run",
            "install": "katalonkit.cli.commands.install",
            "resolve": "katalonkit.cli.commands.resolve",
            "platform": "katalonkit.cli.commands.platform",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
