import pytest

from spam_pipeline.config import PipelineConfig
from spam_pipeline.vectorizer import (
    build_document_term_matrix,
    sanitize_column_name,
    sanitize_column_names,
    to_feature_table,
    vectorize,
)


def corpus(n_docs, rare_docs):
    """n_docs documents sharing "common", the first rare_docs of them also containing "rare"."""
    return [("common rare" if i < rare_docs else "common other") for i in range(n_docs)]


def test_counts_every_term_occurrence():
    matrix, terms = build_document_term_matrix(["spam spam ham", "ham eggs"], sparsity=0.5)

    table = dict(zip(terms, matrix.toarray().T.tolist()))
    assert table == {"eggs": [0, 1], "ham": [1, 1], "spam": [2, 0]}


def test_tokens_split_on_whitespace_only():
    _, terms = build_document_term_matrix(["a b x_y", "a"], sparsity=0.9)

    assert terms == ["a", "b", "x_y"]


def test_term_at_threshold_survives():
    # 1 of 200 documents is exactly 0.5%
    _, terms = build_document_term_matrix(corpus(200, 1), sparsity=0.995)

    assert "rare" in terms


def test_term_below_threshold_is_dropped():
    # 1 of 201 documents is below 0.5%
    _, terms = build_document_term_matrix(corpus(201, 1), sparsity=0.995)

    assert "rare" not in terms
    assert "common" in terms


@pytest.mark.parametrize("term, expected", [
    ("offer", "offer"),
    ("x-mailer", "x_mailer"),
    ("3com", "X3com"),
    ("_id", "_id"),
    ("café", "caf_"),
])
def test_sanitize_column_name(term, expected):
    assert sanitize_column_name(term) == expected


def test_sanitized_names_are_unique_and_avoid_label():
    names = sanitize_column_names(["a-b", "a_b", "label"], reserved=["label"])

    assert names == ["a_b", "a_b_1", "label_1"]


def test_feature_table_has_no_missing_cells():
    config = PipelineConfig(sparsity=0.5)
    documents = ["win cash now", "meet now", "win big", "cash meet"]
    labels = ["spam", "ham", "spam", "ham"]

    table = vectorize(documents, labels, config)

    assert table.columns[-1] == "label"
    assert list(table["label"]) == labels
    assert not table.isna().any().any()
    assert table.drop(columns=["label"]).sum().sum() == 8


def test_feature_table_rejects_misaligned_labels():
    matrix, terms = build_document_term_matrix(["a b", "b c"], sparsity=0.5)

    with pytest.raises(ValueError):
        to_feature_table(matrix, terms, ["ham"])
