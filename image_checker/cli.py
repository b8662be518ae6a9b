"""
Command-line interface for the Image Checker.

Reads a JSON request body (a list of {"imageUrl": ...} records) from a file
or stdin, validates every image URL and prints the response.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, TextIO

from rich.console import Console
from rich.table import Table

from image_checker import __version__
from image_checker.config.configuration import CheckerConfig, load_config
from image_checker.core.engine import ImageCheckEngine
from image_checker.handlers import HandlerResponse, check_images, get_cache_stats
from image_checker.utils.error_handler import ConfigurationError
from image_checker.utils.logging_setup import setup_logging


class CLIInterface:
    """Command line interface for batch image validation."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.parser = self._create_parser()
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create argument parser."""
        parser = argparse.ArgumentParser(
            prog="image-checker",
            description="Validate that a batch of image URLs can be fetched",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  image-checker images.json
  cat images.json | image-checker --table
  image-checker images.json --output results.json --config image_checker.toml

Input format:
  [{"imageUrl": "https://example.com/a.png"}, {"imageUrl": "..."}]

Configuration:
  Settings are read from image_checker.toml / image_checker.json in the
  current directory, or from --config. IMAGE_CHECKER_* environment
  variables override file values, e.g. IMAGE_CHECKER_CONCURRENCY=5.
            """,
        )

        parser.add_argument(
            "--version", "-V", action="version", version=f"%(prog)s {__version__}"
        )
        parser.add_argument(
            "input",
            nargs="?",
            default="-",
            help="JSON file with image records (default: read stdin)",
        )
        parser.add_argument(
            "--output",
            "-o",
            help="Write the JSON response to this file instead of stdout",
        )
        parser.add_argument(
            "--config",
            "-c",
            help="Configuration file path (TOML or JSON format)",
        )
        parser.add_argument(
            "--table",
            action="store_true",
            help="Print results as a table instead of JSON",
        )
        parser.add_argument(
            "--cache-stats",
            action="store_true",
            help="Print result cache statistics after validation",
        )
        parser.add_argument(
            "--log-file",
            help="Also write logs to this file",
        )
        parser.add_argument(
            "--verbose",
            "-v",
            action="store_true",
            help="Enable debug logging",
        )

        return parser

    def parse_args(self, args=None) -> argparse.Namespace:
        """Parse command line arguments."""
        return self.parser.parse_args(args)

    def read_body(self, source: str) -> Any:
        """
        Load the JSON request body.

        Raises:
            ValueError: If the input cannot be read or is not valid JSON
        """
        try:
            if source == "-":
                text = self.stdin.read()
            else:
                text = Path(source).read_text(encoding="utf-8")
        except OSError as e:
            raise ValueError(f"Cannot read input {source}: {e}") from e

        if not text.strip():
            return None

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Input is not valid JSON: {e}") from e

    async def _check(self, body: Any, config: CheckerConfig, cache_stats: bool):
        async with ImageCheckEngine(config=config) as engine:
            response = await check_images(body, engine)
            stats = get_cache_stats(engine) if cache_stats else None
        return response, stats

    def write_response(
        self,
        response: HandlerResponse,
        output: Optional[str],
        as_table: bool,
    ) -> None:
        if output:
            Path(output).write_text(
                json.dumps(response.body, indent=2) + "\n", encoding="utf-8"
            )
            return

        if as_table and isinstance(response.body, list):
            self.print_table(response.body)
        else:
            self.stdout.write(json.dumps(response.body, indent=2) + "\n")

    def print_table(self, results) -> None:
        """Render results as a rich table."""
        console = Console(file=self.stdout)
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Image URL", overflow="fold")
        table.add_column("Valid")
        table.add_column("Message", overflow="fold")

        for record in results:
            valid = "[green]yes[/green]" if record["valid"] else "[red]no[/red]"
            table.add_row(record["imageUrl"], valid, record["message"])

        console.print(table)

    def run(self, args=None) -> int:
        """Execute CLI interface."""
        parsed_args = self.parse_args(args)

        try:
            config = load_config(Path(parsed_args.config) if parsed_args.config else None)
        except ConfigurationError as e:
            print(f"Configuration Error: {e}", file=sys.stderr)
            return 1

        setup_logging(
            config.logging, log_file=parsed_args.log_file, verbose=parsed_args.verbose
        )
        logger = logging.getLogger(__name__)

        try:
            body = self.read_body(parsed_args.input)
            response, stats = asyncio.run(
                self._check(body, config, parsed_args.cache_stats)
            )
            self.write_response(response, parsed_args.output, parsed_args.table)
            if stats is not None:
                print(json.dumps(stats.body), file=sys.stderr)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            logger.exception("Unexpected error in CLI")
            return 1

        return 0 if response.ok else 1


def main(args=None):
    """Main entry point for the CLI."""
    cli = CLIInterface()
    return cli.run(args)


if __name__ == "__main__":
    sys.exit(main())
