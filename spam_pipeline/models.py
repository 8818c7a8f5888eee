from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pandas as pd

HAM = "ham"
SPAM = "spam"
LABELS = (HAM, SPAM)

HEADER_BODY_SEPARATOR = "\n\n"


class PipelineError(Exception):
    """Raised when a pipeline stage cannot produce usable output"""


@dataclass
class CorpusArchive:
    url: str
    archive_path: Path
    extract_dir: Optional[Path] = None


@dataclass
class RawEmail:
    path: Path
    content: bytes
    label: str


@dataclass
class ParsedEmail:
    headers: str
    body: Optional[str]
    label: str

    @property
    def combined_text(self) -> str:
        return f"{self.headers}{HEADER_BODY_SEPARATOR}{self.body or ''}"


@dataclass
class EvaluationResult:
    accuracy: float
    confusion: pd.DataFrame
    n_train: int
    n_test: int

    @property
    def accuracy_percent(self) -> float:
        return self.accuracy * 100.0
