"""
Command Line Interface for preview generation.
"""

import argparse
import logging
import os
import sys
from datetime import date
from typing import List, Optional

import urllib3

from .batch_progress import BatchProgress
from .content_store import ContentStoreClient
from .exceptions import ContentStoreError
from .image_transform import ImageTransformer
from .pipeline import PreviewPipeline
from .preview_config import PreviewConfig
from .rasterizer import PopplerRasterizer
from .staging import StagingArea
from .type_classifier import TypeClassifier


def setup_logging(verbose: bool, log_dir: Optional[str] = None) -> logging.Logger:
    """
    Configure logging to the console and, if log_dir is set, to a dated file.
    """
    level = logging.DEBUG if verbose else logging.INFO
    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logger = logging.getLogger('previewgen')
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(log_dir, f"{date.today().isoformat()}.log"))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('sh').setLevel(logging.WARNING)

    return logger


def get_config(args: argparse.Namespace) -> PreviewConfig:
    """Get configuration from environment and CLI overrides."""
    config = PreviewConfig.from_env()

    if getattr(args, 'server', None):
        config.server_url = args.server
    if getattr(args, 'username', None):
        config.username = args.username
    if getattr(args, 'password', None):
        config.password = args.password
    if getattr(args, 'work_dir', None):
        config.work_dir = args.work_dir
    if getattr(args, 'log_dir', None):
        config.log_dir = args.log_dir
    if getattr(args, 'no_log_file', False):
        config.log_dir = None
    if getattr(args, 'mime_types', None):
        config.mime_types_path = args.mime_types
    if getattr(args, 'ignore_types', None):
        config.ignore_types_path = args.ignore_types
    if getattr(args, 'no_verify_ssl', False):
        config.verify_ssl = False

    return config


def build_classifier(config: PreviewConfig, logger: logging.Logger) -> TypeClassifier:
    return TypeClassifier.from_files(
        mime_types_path=config.mime_types_path,
        ignore_types_path=config.ignore_types_path,
        image_extensions=config.image_extensions,
        logger=logger,
    )


def cmd_run(args: argparse.Namespace) -> int:
    """Execute run command: process one batch of pending items."""
    config = get_config(args)
    logger = setup_logging(args.verbose, config.log_dir)

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return 1

    if not config.verify_ssl:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    logger.info(f"Server: {config.server_url}")
    logger.info(f"Staging: {os.path.abspath(config.work_dir)}")
    if args.limit is not None:
        logger.info(f"Test mode: limiting to {args.limit} items")

    pipeline = PreviewPipeline(
        store=ContentStoreClient(config, logger),
        classifier=build_classifier(config, logger),
        transformer=ImageTransformer(quality=config.jpeg_quality, logger=logger),
        rasterizer=PopplerRasterizer(logger=logger),
        staging=StagingArea(config.work_dir, logger),
        sizes=config.sizes,
        cadence=args.cadence,
        logger=logger,
    )

    progress = None
    if not args.quiet:
        progress = BatchProgress(show_files=args.show_files, logger=logger)

    try:
        stats = pipeline.run(progress=progress, limit=args.limit)
    except ContentStoreError as e:
        logger.error(f"Failed to retrieve list to process: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    if not args.quiet:
        print()
        print(f"Published: {stats.succeeded}")
        print(f"Skipped: {stats.skipped}")
        print(f"Failed: {stats.failed}")
        print(f"Time: {stats.elapsed_seconds:.1f}s")

    return 0 if stats.failed == 0 else 1


def cmd_classify(args: argparse.Namespace) -> int:
    """Execute classify command: show how a mime type would be handled."""
    config = get_config(args)
    logger = setup_logging(args.verbose)

    try:
        classifier = build_classifier(config, logger)
    except OSError as e:
        logger.error(f"Failed to load type tables: {e}")
        return 1

    result = classifier.classify(args.mime_type, args.extension)
    if not result.supported:
        print(f"{args.mime_type}: skipped ({result.reason})")
        return 1

    kind = 'image' if classifier.is_image(result.extension) else 'document'
    print(f"{args.mime_type}: {result.extension} ({kind})")
    return 0


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def add_table_arguments(parser: argparse.ArgumentParser) -> None:
    """Add mime table arguments to a parser."""
    group = parser.add_argument_group('Type tables')
    group.add_argument('--mime-types', metavar='PATH', help='mime.types file (overrides PREVIEW_MIME_TYPES)')
    group.add_argument('--ignore-types', metavar='PATH', help='ignore.types file (overrides PREVIEW_IGNORE_TYPES)')


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='previewgen',
        description='Generate page previews and thumbnails for pending content items',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m previewgen run --server http://localhost:8080 --password secret
  python -m previewgen classify application/pdf
  python -m previewgen classify image/jpeg --extension .jpeg

Connection settings can also come from PREVIEW_SERVER_URL, PREVIEW_USERNAME
and PREVIEW_PASSWORD.
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Run command
    run_parser = subparsers.add_parser('run', help='Process one batch of pending items')
    run_parser.add_argument('--server', help='Content store URL (overrides PREVIEW_SERVER_URL)')
    run_parser.add_argument('-u', '--username', help='Account name (default: admin)')
    run_parser.add_argument('-p', '--password', help='Account password (default: admin)')
    run_parser.add_argument('--work-dir', metavar='PATH', help='Staging root directory')
    run_parser.add_argument('--log-dir', metavar='PATH', help='Directory for dated log files')
    run_parser.add_argument('--no-log-file', action='store_true', help='Log to the console only')
    run_parser.add_argument('--no-verify-ssl', action='store_true', help='Skip TLS verification')
    run_parser.add_argument('-c', '--cadence', type=float, default=0.0, help='Seconds between items')
    run_parser.add_argument('--limit', type=positive_int, metavar='N', help='Limit to N items (for testing)')
    run_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress output')
    run_parser.add_argument('--show-files', action='store_true',
                            help='Print each item as processed with result')
    run_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_table_arguments(run_parser)

    # Classify command
    classify_parser = subparsers.add_parser('classify', help='Show how a mime type would be processed')
    classify_parser.add_argument('mime_type', help='Mime type, e.g. application/pdf')
    classify_parser.add_argument('-e', '--extension', help='Extension hint, e.g. .docx')
    classify_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_table_arguments(classify_parser)

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'run':
        return cmd_run(parsed_args)
    elif parsed_args.command == 'classify':
        return cmd_classify(parsed_args)

    return 1
