"""
Command line entry point for the spam/ham corpus classifier.

Usage:
    spam-pipeline [--workdir DIR] [--keep-workdir] [--skip-download] [--force]
                  [--index-url URL] [--seed N] [--split-seed N] [--model-seed N]
                  [--sparsity X] [--test-size X] [--log-level LEVEL]

Options:
    --workdir         Directory to download and extract the corpus into
                      (default: a temporary directory removed afterwards)
    --keep-workdir    Keep the temporary working directory
    --skip-download   Reuse a corpus already extracted in --workdir
    --force           Download archives again even if present
"""
import sys
import logging
import argparse
from typing import List, Optional

from pydantic import ValidationError

from spam_pipeline.config import PipelineConfig
from spam_pipeline.logging_setup import configure_logging
from spam_pipeline.pipeline import run_pipeline

logger = logging.getLogger("spam_pipeline")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Train and evaluate a spam/ham classifier on the SpamAssassin corpus")
    parser.add_argument('--workdir', help='Directory to download and extract the corpus into')
    parser.add_argument('--keep-workdir', action='store_true', default=None, help='Keep the temporary working directory')
    parser.add_argument('--skip-download', action='store_true', help='Use the corpus already extracted in --workdir')
    parser.add_argument('--force', action='store_true', default=None, dest='force_download',
                        help='Force redownload of existing archives')
    parser.add_argument('--index-url', help='Corpus index page to scrape for archive links')
    parser.add_argument('--seed', type=int, dest='shuffle_seed', help='Seed for shuffling the balanced dataset')
    parser.add_argument('--split-seed', type=int, help='Seed for the stratified train/test split')
    parser.add_argument('--model-seed', type=int, help='Seed for the random forest')
    parser.add_argument('--sparsity', type=float, help='Drop terms missing from more than this share of documents')
    parser.add_argument('--test-size', type=float, help='Share of rows held out for evaluation')
    parser.add_argument('--log-level', default=None, help='Logging level (default: LOG_LEVEL or INFO)')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.skip_download and not args.workdir:
        parser.error("--skip-download requires --workdir")

    overrides = vars(args).copy()
    skip_download = overrides.pop('skip_download')
    overrides.pop('log_level')

    try:
        config = PipelineConfig.from_env(**overrides)
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    try:
        run_pipeline(config, skip_download=skip_download)
    except Exception:
        logger.exception("Pipeline run failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
