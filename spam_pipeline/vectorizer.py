"""
Document-term matrix construction and sparse term pruning.
"""
import re
import logging
from typing import Iterable, List, Sequence, Tuple

import pandas as pd
from scipy import sparse
from sklearn.feature_extraction.text import CountVectorizer

from spam_pipeline.config import PipelineConfig

logger = logging.getLogger(__name__)

INVALID_NAME_CHARS_RE = re.compile(r"[^0-9A-Za-z_]")


def build_document_term_matrix(documents: Sequence[str], sparsity: float) -> Tuple[sparse.csr_matrix, List[str]]:
    """
    Count whitespace tokens per document and drop rare terms.

    A term survives when it appears in at least (1 - sparsity) of the
    documents, so sparsity=0.995 keeps terms present in 0.5% of documents.
    """
    min_df = round(1.0 - sparsity, 10)
    vectorizer = CountVectorizer(
        lowercase=False,
        token_pattern=r"\S+",
        min_df=min_df,
    )
    matrix = vectorizer.fit_transform(documents)
    terms = list(vectorizer.get_feature_names_out())
    logger.info(f"Document-term matrix: {matrix.shape[0]} documents x {len(terms)} terms (min_df={min_df})")
    return matrix.tocsr(), terms


def sanitize_column_name(term: str) -> str:
    name = INVALID_NAME_CHARS_RE.sub("_", term)
    if not name or not (name[0].isalpha() or name[0] == "_"):
        name = f"X{name}"
    return name


def sanitize_column_names(terms: Iterable[str], reserved: Iterable[str] = ()) -> List[str]:
    """Turn terms into unique column identifiers that avoid the reserved names."""
    taken = set(reserved)
    names = []
    for term in terms:
        base = sanitize_column_name(term)
        name = base
        suffix = 1
        while name in taken:
            name = f"{base}_{suffix}"
            suffix += 1
        taken.add(name)
        names.append(name)
    return names


def to_feature_table(
    matrix: sparse.spmatrix,
    terms: Sequence[str],
    labels: Sequence[str],
    label_column: str = "label",
) -> pd.DataFrame:
    """Dense term-count table with the label column appended, row-aligned."""
    if matrix.shape[0] != len(labels):
        raise ValueError(f"{matrix.shape[0]} document rows but {len(labels)} labels")

    columns = sanitize_column_names(terms, reserved=[label_column])
    table = pd.DataFrame(matrix.toarray(), columns=columns)
    table[label_column] = list(labels)
    return table


def vectorize(documents: Sequence[str], labels: Sequence[str], config: PipelineConfig) -> pd.DataFrame:
    matrix, terms = build_document_term_matrix(documents, config.sparsity)
    return to_feature_table(matrix, terms, labels, config.label_column)
