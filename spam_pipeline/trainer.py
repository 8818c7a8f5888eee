"""
Random forest training and hold-out evaluation.
"""
import logging
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestClassifier
from sklearn.metrics import confusion_matrix
from sklearn.model_selection import train_test_split

from spam_pipeline.config import PipelineConfig
from spam_pipeline.models import EvaluationResult

logger = logging.getLogger(__name__)


def split_features(table: pd.DataFrame, label_column: str = "label") -> Tuple[pd.DataFrame, pd.Series]:
    """Separate predictors from labels; labels become an ordered-alphabetically categorical."""
    X = table.drop(columns=[label_column])
    labels = table[label_column].astype(str)
    y = pd.Series(
        pd.Categorical(labels, categories=sorted(labels.unique())),
        index=table.index,
        name=label_column,
    )
    return X, y


def train_test_partition(
    table: pd.DataFrame,
    label_column: str = "label",
    test_size: float = 0.3,
    seed: Optional[int] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame, pd.Series, pd.Series]:
    """Stratified split that keeps the class proportions in both partitions."""
    X, y = split_features(table, label_column)
    return train_test_split(X, y, test_size=test_size, stratify=y, random_state=seed)


def train_classifier(X_train: pd.DataFrame, y_train: pd.Series, seed: Optional[int] = None) -> RandomForestClassifier:
    model = RandomForestClassifier(random_state=seed)
    model.fit(X_train, np.asarray(y_train))
    logger.info(f"Trained random forest on {len(X_train)} rows x {X_train.shape[1]} features")
    return model


def confusion_table(actual: Sequence[str], predicted: Sequence[str], categories: Sequence[str]) -> pd.DataFrame:
    matrix = confusion_matrix(actual, predicted, labels=list(categories))
    return pd.DataFrame(
        matrix,
        index=pd.Index(categories, name="actual"),
        columns=pd.Index(categories, name="predicted"),
    )


def accuracy_from_confusion(confusion: pd.DataFrame) -> float:
    total = confusion.to_numpy().sum()
    if total == 0:
        return 0.0
    return float(np.trace(confusion.to_numpy()) / total)


def train_and_evaluate(table: pd.DataFrame, config: PipelineConfig) -> Tuple[RandomForestClassifier, EvaluationResult]:
    """Fit on 70% of the rows and score the held-out 30%."""
    X_train, X_test, y_train, y_test = train_test_partition(
        table,
        label_column=config.label_column,
        test_size=config.test_size,
        seed=config.split_seed,
    )
    model = train_classifier(X_train, y_train, seed=config.model_seed)
    predicted = model.predict(X_test)

    categories = list(y_test.cat.categories)
    confusion = confusion_table(np.asarray(y_test), predicted, categories)
    result = EvaluationResult(
        accuracy=accuracy_from_confusion(confusion),
        confusion=confusion,
        n_train=len(X_train),
        n_test=len(X_test),
    )
    logger.info(f"Confusion matrix:\n{confusion}")
    return model, result
