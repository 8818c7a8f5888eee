"""
Spam/ham classifier built from the Apache SpamAssassin public corpus.
"""
from spam_pipeline.config import PipelineConfig
from spam_pipeline.models import EvaluationResult, ParsedEmail, PipelineError
from spam_pipeline.pipeline import run_pipeline

__version__ = "1.0.0"

__all__ = [
    "EvaluationResult",
    "ParsedEmail",
    "PipelineConfig",
    "PipelineError",
    "run_pipeline",
]
