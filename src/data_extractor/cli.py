"""
CLI module for data_extractor.

Provides command-line interface and orchestration logic.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from .config import Config, FetchConfig, load_config, load_schema
from .document import QueryScope
from .extractor import DataExtractor
from .fetch import PageFetcher, fetch_document, fetch_static_html
from .soup import SoupScope

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def write_result(result: Dict[str, Any], output: Optional[str]) -> None:
    """
    Write an extraction result as JSON.

    Args:
        result: Extracted data
        output: File path, or None to print to stdout
    """
    text = json.dumps(result, indent=2, ensure_ascii=False)

    if output is None:
        print(text)
        return

    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + "\n", encoding='utf-8')
    logger.info(f"Saved result -> {path}")


def read_document(path: str) -> SoupScope:
    return SoupScope.from_html(Path(path).read_text(encoding='utf-8'))


async def run_extract(
    schema_path: str,
    source: str,
    output: Optional[str] = None,
    static: bool = False,
    verbose: bool = False
) -> None:
    """
    Extract one page with one schema.

    Args:
        schema_path: Path to JSON schema file
        source: Local HTML file or http(s) URL
        output: Output JSON file; stdout when omitted
        static: Download URLs with requests instead of rendering them
        verbose: Enable verbose logging
    """
    setup_logging(verbose)

    try:
        extractor = DataExtractor(load_schema(schema_path))

        if is_url(source):
            document = await fetch_document(source, FetchConfig(render=not static))
        else:
            document = read_document(source)

        result = await extractor.extract_from(document)
        write_result(result, output)

    except Exception as e:
        logger.error(f"Extraction failed: {e}")
        sys.exit(1)


async def run_jobs(config_path: str, verbose: bool = False) -> None:
    """
    Run every job of a configuration file.

    Rendered URL jobs share one crawler. A failing job is logged and the
    remaining jobs still run; the exit status is 1 if any job failed.

    Args:
        config_path: Path to JSON configuration file
        verbose: Enable verbose logging
    """
    setup_logging(verbose)

    try:
        config: Config = load_config(config_path)
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        sys.exit(1)

    failed = 0
    render = config.defaults.render and any(job.url for job in config.jobs)

    async def load(job, fetcher: Optional[PageFetcher]) -> QueryScope:
        if job.file:
            return read_document(job.file)
        if fetcher is not None:
            return await fetcher.fetch(job.url)
        html = await asyncio.to_thread(fetch_static_html, job.url, config.defaults.timeout)
        return SoupScope.from_html(html)

    async def run_all(fetcher: Optional[PageFetcher]) -> None:
        nonlocal failed
        for job in config.jobs:
            logger.info(f"Extracting: {job.source}")
            try:
                extractor = DataExtractor(job.schema_def, config.extractor)
                result = await extractor.extract_from(await load(job, fetcher))
                write_result(result, job.output)
            except Exception as e:
                logger.error(f"Job failed for {job.source}: {e}")
                failed += 1

    if render:
        async with PageFetcher(config.defaults) as fetcher:
            await run_all(fetcher)
    else:
        await run_all(None)

    logger.info(f"Completed {len(config.jobs) - failed} of {len(config.jobs)} jobs")
    if failed:
        sys.exit(1)


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Extract structured JSON from HTML pages using a declarative schema",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  data-extractor extract schema.json page.html
  data-extractor extract schema.json https://example.com --output result.json
  data-extractor run jobs.json --verbose
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Extract command
    extract_parser = subparsers.add_parser('extract', help='Extract a single page')
    extract_parser.add_argument('schema_file', help='Path to JSON schema file')
    extract_parser.add_argument('source', help='HTML file or http(s) URL')
    extract_parser.add_argument('--output', '-o', help='Write JSON result to this file')
    extract_parser.add_argument('--static', action='store_true',
                                help='Download URLs without rendering them in a browser')
    extract_parser.add_argument('--verbose', '-v', action='store_true',
                                help='Enable verbose logging')

    # Run command
    run_parser = subparsers.add_parser('run', help='Run the jobs of a configuration file')
    run_parser.add_argument('config_file', help='Path to JSON configuration file')
    run_parser.add_argument('--verbose', '-v', action='store_true',
                            help='Enable verbose logging')

    args = parser.parse_args()

    if args.command == 'extract':
        asyncio.run(run_extract(
            schema_path=args.schema_file,
            source=args.source,
            output=args.output,
            static=args.static,
            verbose=args.verbose
        ))
    elif args.command == 'run':
        asyncio.run(run_jobs(
            config_path=args.config_file,
            verbose=args.verbose
        ))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == '__main__':
    main()
