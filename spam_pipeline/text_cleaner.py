"""
Text normalization applied to every email before vectorizing.

The six transforms always run in the order listed in CLEANING_STEPS; changing
the order changes the vocabulary.
"""
import re
import string
import logging
from typing import Callable, List, Optional

import pandas as pd
from nltk.stem.snowball import SnowballStemmer
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS
from tqdm import tqdm

from spam_pipeline.models import HEADER_BODY_SEPARATOR

logger = logging.getLogger(__name__)

PUNCTUATION_RE = re.compile(f"[{re.escape(string.punctuation)}]")
DIGITS_RE = re.compile(r"[0-9]")
WHITESPACE_RE = re.compile(r"\s+")
STOPWORDS_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(word) for word in sorted(ENGLISH_STOP_WORDS, key=len, reverse=True)) + r")\b"
)

_stemmer = SnowballStemmer("english")


def combine_text(headers: str, body: Optional[str]) -> str:
    if not isinstance(body, str):
        body = ""
    return f"{headers}{HEADER_BODY_SEPARATOR}{body}"


def to_lower(text: str) -> str:
    return text.lower()


def remove_punctuation(text: str) -> str:
    return PUNCTUATION_RE.sub("", text)


def remove_stopwords(text: str) -> str:
    return STOPWORDS_RE.sub("", text)


def remove_numbers(text: str) -> str:
    return DIGITS_RE.sub("", text)


def stem_words(text: str) -> str:
    return " ".join(_stemmer.stem(word) for word in text.split())


def strip_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub(" ", text).strip()


CLEANING_STEPS: List[Callable[[str], str]] = [
    to_lower,
    remove_punctuation,
    remove_stopwords,
    remove_numbers,
    stem_words,
    strip_whitespace,
]


def clean_text(text: str) -> str:
    for step in CLEANING_STEPS:
        text = step(text)
    return text


def clean_documents(frame: pd.DataFrame) -> pd.DataFrame:
    """
    Add the combined `email` text and its `cleaned` form to a dataset frame.
    """
    frame = frame.copy()
    frame["email"] = [combine_text(h, b) for h, b in zip(frame["headers"], frame["body"])]
    frame["cleaned"] = [clean_text(text) for text in tqdm(frame["email"], desc="Cleaning emails", leave=False)]
    logger.info(f"Cleaned {len(frame)} documents")
    return frame
