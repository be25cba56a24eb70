#!/usr/bin/env python3
"""
Google Docs to Notion Converter - Main CLI Entry Point

This script provides the command-line interface for converting a Google Doc
(or every Google Doc in a Drive folder) into Notion-ready Markdown files,
one file per heading-delimited section, packaged as a zip workspace.
"""

import argparse
import logging
import os
import sys

import yaml

from config_loader import ConfigLoader, CONVERSION_MODES, get_nested
from fetchers import FeatureNotProvisionedError, FetcherError, PolicyViolationError
from logger import log_config, log_section, setup_logging
from models import ConversionResult
from orchestrator import ConversionOrchestrator, ConversionReport, NoContentError

__version__ = "1.0.0"

DEFAULT_CONFIG_PATH = 'config.yaml'


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="Convert Google Docs into a Notion-ready Markdown workspace",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert a published document without credentials
  docs-to-notion --doc-url https://docs.google.com/document/d/<id>/edit

  # Convert through the Docs API (keeps headings, tabs, lists and tables)
  docs-to-notion --doc-url <url> --access-token "$GOOGLE_ACCESS_TOKEN"

  # Convert every document of a Drive folder
  docs-to-notion --folder-url https://drive.google.com/drive/folders/<id> --config config.yaml

  # Preview the section outline without writing files
  docs-to-notion --doc-url <url> --dry-run -v
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        '--doc-url',
        type=str,
        help='Google Docs URL (or document ID) to convert'
    )
    source.add_argument(
        '--folder-url',
        type=str,
        help='Google Drive folder URL (or folder ID) whose documents are converted'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help=f'Path to configuration YAML file (default: {DEFAULT_CONFIG_PATH} if present)'
    )

    parser.add_argument(
        '--mode',
        choices=list(CONVERSION_MODES),
        default=None,
        help="Acquisition mode: 'api' (Docs API), 'export' (public export) or 'auto' (default)"
    )

    parser.add_argument(
        '--access-token',
        type=str,
        help='OAuth bearer token for the Google Docs and Drive APIs'
    )

    parser.add_argument(
        '--output-dir',
        type=str,
        help='Directory receiving the archive or the Markdown files'
    )

    parser.add_argument(
        '--no-archive',
        action='store_true',
        help='Write loose Markdown files instead of a zip archive'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Print the section outline without writing any files'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v for INFO, -vv for DEBUG)'
    )

    return parser


def load_configuration(args: argparse.Namespace) -> dict:
    """Load the config file (explicit path or an existing default) and apply CLI overrides."""
    if args.config:
        config = ConfigLoader.load(args.config)
    elif os.path.exists(DEFAULT_CONFIG_PATH):
        config = ConfigLoader.load(DEFAULT_CONFIG_PATH)
    else:
        config = ConfigLoader.with_defaults({})

    config = ConfigLoader.merge_with_args(config, args)
    ConfigLoader.validate(config)

    if not get_nested(config, 'conversion.document_url') and not get_nested(config, 'conversion.folder_url'):
        raise ValueError("Provide --doc-url or --folder-url (or conversion.document_url / conversion.folder_url)")

    return config


def run_conversion(config: dict, args: argparse.Namespace, logger: logging.Logger) -> int:
    """Execute the conversion pipeline and write its output."""
    orchestrator = ConversionOrchestrator(config, logger=logger)

    folder_url = get_nested(config, 'conversion.folder_url')
    document_url = get_nested(config, 'conversion.document_url')

    if folder_url and not args.doc_url:
        result = orchestrator.convert_collection(folder_url)
    else:
        result = orchestrator.convert_document(document_url)

    print("\n" + ConversionReport(logger).format_console_report(result.report))

    if args.dry_run:
        _print_outline(result)
        return 0

    paths = orchestrator.write_output(result)
    if get_nested(config, 'export.create_archive', True):
        print(f"\nWorkspace written to {paths[0]}")
    else:
        print(f"\n{len(paths)} Markdown file(s) written to {get_nested(config, 'export.output_directory')}")

    return 0


def _print_outline(result: ConversionResult) -> None:
    """Print the sections and file names a conversion would produce."""
    print("\n" + "=" * 60)
    print("CONVERSION PREVIEW (DRY RUN)")
    print("=" * 60)

    for section in result.sections:
        indent = "  " * (max(section.level, 1) - 1)
        marker = " [error]" if section.is_error else ""
        print(f"{indent}- {section.title}{marker}")

    print("\nFiles:")
    print("-" * 60)
    for output_file in result.files:
        print(f"  {output_file.name}")

    print("\n" + "=" * 60)


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args()

    try:
        setup_logging(verbosity=args.verbose)
        logger = logging.getLogger('docs_to_notion.cli')

        log_section("Google Docs to Notion Converter")
        logger.info(f"Version: {__version__}")

        config = load_configuration(args)

        # Reconfigure logging with config file settings
        setup_logging(
            verbosity=args.verbose,
            log_file=get_nested(config, 'logging.file'),
            level=get_nested(config, 'logging.level')
        )
        log_config(config)

        return run_conversion(config, args, logger)

    except FileNotFoundError as e:
        print(f"ERROR: File not found: {e}", file=sys.stderr)
        return 2
    except PolicyViolationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except (ValueError, yaml.YAMLError) as e:
        print(f"ERROR: Configuration error: {e}", file=sys.stderr)
        return 2
    except FeatureNotProvisionedError as e:
        print(f"ERROR: A required Google API is not enabled: {e}", file=sys.stderr)
        print(e.remediation, file=sys.stderr)
        return 1
    except (FetcherError, NoContentError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nConversion interrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        logging.getLogger('docs_to_notion.cli').error(f"Unexpected error: {e}", exc_info=True)
        print(f"ERROR: Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
