"""
Collect CLI implementation - can be imported and executed directly.
"""
import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from codecollector import __version__
from codecollector.collector_core.collector import CodeCollector
from codecollector.collector_core.config import resolve_config
from codecollector.collector_core.errors import CollectorError, WalkError
from codecollector.collector_core.exporters import EXPORTERS, export_output
from codecollector.collector_core.parallel_config import ParallelConfig, get_optimal_config
from codecollector.collector_core.repository import DEFAULT_BRANCH, clone_repository, remove_clone
from codecollector.utils import configure_logging, get_logger

logger = get_logger("cli-collect")


class CodeCollectorCLI:
    """Command-line front end for a single collection run"""

    def parse_args(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command line arguments"""
        parser = argparse.ArgumentParser(
            prog='codecollector',
            description='Code Collector - gather a source tree into one document',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self.get_usage_examples()
        )
        parser.add_argument('-v', '--version', action='store_true',
            help='Print the version number of Code Collector')

        source = parser.add_mutually_exclusive_group()
        source.add_argument('-d', '--directory', default='.',
            help='Path of the folder to traverse (default: current directory)')
        source.add_argument('--github', metavar='URL',
            help='GitHub repository URL to clone and process')
        parser.add_argument('--branch', default=DEFAULT_BRANCH,
            help=f'Branch to clone from GitHub repo (default: {DEFAULT_BRANCH})')

        parser.add_argument('-o', '--output', default='collected_code',
            help='Output file name without extension (default: collected_code)')
        parser.add_argument('--output-format', default='json', choices=sorted(EXPORTERS),
            help='Output format (default: json)')
        parser.add_argument('--config', metavar='FILE',
            help='Path to configuration file (YAML), laid over ./config.yaml')

        parser.add_argument('--max-workers', type=int, metavar='N',
            help='Number of concurrent file readers (default: auto)')
        parser.add_argument('--progress', action='store_true',
            help='Show a progress bar while reading files')
        parser.add_argument('--no-default-ignores', action='store_true',
            help='Do not ignore .git and .gitignore by default')
        parser.add_argument('--tree-included-only', action='store_true',
            help='List only files that pass the extension filter in the tree')

        parser.add_argument('--log-level', metavar='LEVEL',
            help='TRACE, DEBUG, INFO, WARNING or ERROR (default: WARNING)')
        parser.add_argument('--log-file', metavar='FILE',
            help='Also write logs to FILE')

        return parser.parse_args(argv)

    def get_usage_examples(self) -> str:
        """Get usage examples for help text"""
        return """
Examples:
  codecollector -d .                               # Collect current directory to collected_code.json
  codecollector -d src --output-format markdown    # Markdown report of src/
  codecollector --github https://github.com/org/repo --branch dev -o repo
  codecollector --config collector.yaml --progress

Configuration file (YAML):
  include_extensions: [".go", ".py"]
  ignore_patterns: ["vendor/", "*.min.js"]

Environment Variables:
  CODECOLLECTOR_MAX_WORKERS   Number of concurrent file readers
  CODECOLLECTOR_LOG_LEVEL     Log level (overridden by --log-level)
  CODECOLLECTOR_LOG_FORMAT    Set to 'json' for JSON log lines
"""

    def build_parallel_config(self, args: argparse.Namespace) -> ParallelConfig:
        if args.max_workers:
            return ParallelConfig(max_workers=args.max_workers, show_progress=args.progress)
        return replace(get_optimal_config(), show_progress=args.progress)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Main entry point"""
        args = self.parse_args(argv)

        if args.version:
            print(f"Code Collector version {__version__}")
            return 0

        configure_logging(log_level=args.log_level, log_file=args.log_file)

        clone_dir = None
        try:
            config = resolve_config(args.config)

            if args.github:
                clone_dir = clone_repository(args.github, args.branch)
                root_dir = clone_dir
            else:
                root_dir = Path(args.directory)

            collector = CodeCollector(
                config,
                parallel_config=self.build_parallel_config(args),
                use_defaults=not args.no_default_ignores,
                tree_included_only=args.tree_included_only,
            )

            try:
                result = collector.collect(root_dir)
            except WalkError as e:
                logger.error(f"Collection stopped early: {e}")
                if e.partial_result is not None:
                    output_path = export_output(e.partial_result, args.output, args.output_format)
                    print(f"Partial output written to {output_path}", file=sys.stderr)
                print(f"Error: {e}", file=sys.stderr)
                return 1

            output_path = export_output(result, args.output, args.output_format)
            stats = collector.stats
            print(f"Collected {stats.collected} files into {output_path}")
            if stats.failed:
                print(f"{stats.failed} files could not be read (see log)", file=sys.stderr)
            return 0

        except CollectorError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        finally:
            if clone_dir is not None:
                remove_clone(clone_dir)


def main():
    """Main entry point"""
    cli = CodeCollectorCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
