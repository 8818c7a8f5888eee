"""
Runs the corpus -> dataset -> features -> classifier stages in order.
"""
import shutil
import logging
import tempfile
from pathlib import Path
from typing import Optional

import httpx

from spam_pipeline.config import PipelineConfig
from spam_pipeline.corpus_fetcher import fetch_corpus
from spam_pipeline.dataset_builder import balance_dataset, build_frames, discover_corpus_folders
from spam_pipeline.models import HAM, SPAM, EvaluationResult, PipelineError
from spam_pipeline.text_cleaner import clean_documents
from spam_pipeline.trainer import train_and_evaluate
from spam_pipeline.vectorizer import vectorize

logger = logging.getLogger(__name__)


def run_pipeline(
    config: PipelineConfig,
    client: Optional[httpx.Client] = None,
    skip_download: bool = False,
) -> EvaluationResult:
    """
    Fetch the corpus, build the balanced dataset, vectorize it and report
    hold-out accuracy of a random forest.
    """
    owns_workdir = config.workdir is None
    workdir = Path(tempfile.mkdtemp(prefix="spam_corpus_")) if owns_workdir else Path(config.workdir)
    logger.info(f"Working directory: {workdir}")

    try:
        if skip_download:
            logger.info("Skipping download, using corpus already in the working directory")
        else:
            entries = fetch_corpus(config, workdir, client=client)
            logger.info(f"Working directory entries: {', '.join(entries)}")

        folders = discover_corpus_folders(workdir)
        if not folders:
            raise PipelineError(f"No corpus folders found in {workdir}")

        frames = build_frames(folders)
        ham, spam = frames[HAM], frames[SPAM]
        print(f"ham: {len(ham)}  spam: {len(spam)}")

        dataset = balance_dataset(ham, spam, seed=config.shuffle_seed)
        dataset = clean_documents(dataset)
        table = vectorize(dataset["cleaned"].tolist(), dataset["label"].tolist(), config)

        _, result = train_and_evaluate(table, config)
        print(f"Accuracy: {result.accuracy_percent:.2f}%")
        return result
    finally:
        if owns_workdir and not config.keep_workdir:
            shutil.rmtree(workdir, ignore_errors=True)
        elif owns_workdir:
            logger.info(f"Keeping working directory {workdir}")
