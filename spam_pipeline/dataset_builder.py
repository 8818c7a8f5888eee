"""
Builds the labelled email table from extracted corpus folders.
"""
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Tuple, Union

import pandas as pd
from tqdm import tqdm

from spam_pipeline.email_parser import parse_email, read_email
from spam_pipeline.models import HAM, SPAM, PipelineError

logger = logging.getLogger(__name__)

COLUMNS = ["headers", "body", "label"]


def empty_frame() -> pd.DataFrame:
    return pd.DataFrame({column: pd.Series(dtype=object) for column in COLUMNS})


def makedf(folder: Union[str, Path], label: str) -> pd.DataFrame:
    """
    Parse every file in a folder into a (headers, body, label) table.

    The folder is not searched recursively and file names are not filtered.
    A folder that does not exist contributes no rows.
    """
    folder = Path(folder)
    if not folder.is_dir():
        logger.warning(f"Folder {folder} not found. It contributes no {label} emails.")
        return empty_frame()

    headers = []
    bodies = []
    labels = []
    files = sorted(p for p in folder.iterdir() if p.is_file())
    for path in tqdm(files, desc=f"Parsing {folder.name}", leave=False):
        parsed = parse_email(read_email(path, label).content, label)
        headers.append(parsed.headers)
        bodies.append(parsed.body)
        labels.append(parsed.label)

    logger.info(f"Parsed {len(files)} {label} emails from {folder}")
    return pd.DataFrame({"headers": headers, "body": bodies, "label": labels}, columns=COLUMNS)


def concat_frames(frames: Iterable[pd.DataFrame]) -> pd.DataFrame:
    frames = [frame for frame in frames if not frame.empty]
    if not frames:
        return empty_frame()
    return pd.concat(frames, ignore_index=True)


def build_frames(folders: Iterable[Tuple[Union[str, Path], str]]) -> Dict[str, pd.DataFrame]:
    """Parse each (folder, label) pair and concatenate the tables per label."""
    per_label: Dict[str, List[pd.DataFrame]] = {HAM: [], SPAM: []}
    for folder, label in folders:
        per_label.setdefault(label, []).append(makedf(folder, label))
    return {label: concat_frames(frames) for label, frames in per_label.items()}


def discover_corpus_folders(workdir: Union[str, Path]) -> List[Tuple[Path, str]]:
    """
    Find the email folders inside each extracted archive.

    Archives unpack to workdir/<archive>/<folder>/; folders whose name
    contains "spam" are labelled spam, everything else ham.
    """
    workdir = Path(workdir)
    folders = []
    for archive_dir in sorted(p for p in workdir.iterdir() if p.is_dir()):
        for folder in sorted(p for p in archive_dir.iterdir() if p.is_dir()):
            label = SPAM if SPAM in folder.name.lower() else HAM
            folders.append((folder, label))
    logger.info(f"Discovered {len(folders)} corpus folders in {workdir}")
    return folders


def balance_dataset(ham: pd.DataFrame, spam: pd.DataFrame, seed: int) -> pd.DataFrame:
    """
    Keep the first S rows of each class, S being the smaller class size, and
    shuffle the result with a fixed seed.

    Truncation keeps the leading rows in folder listing order, not a sample.
    """
    size = min(len(ham), len(spam))
    if size == 0:
        raise PipelineError(f"Cannot balance dataset: {len(ham)} ham and {len(spam)} spam emails")

    logger.info(f"Balancing to {size} ham and {size} spam emails")
    combined = pd.concat([ham.head(size), spam.head(size)], ignore_index=True)
    return combined.sample(frac=1, random_state=seed).reset_index(drop=True)

