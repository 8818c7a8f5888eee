import os
import logging
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

DEFAULT_INDEX_URL = "https://spamassassin.apache.org/old/publiccorpus/"
ENV_PREFIX = "SPAM_PIPELINE_"


class PipelineConfig(BaseModel):
    """
    Run parameters for the corpus -> classifier pipeline
    """
    index_url: str = DEFAULT_INDEX_URL
    # Anchors 6-14 of the Apache directory listing are the corpus archives
    link_start: int = Field(default=5, ge=0)
    link_stop: int = Field(default=14, ge=0)
    workdir: Optional[str] = None
    keep_workdir: bool = False
    force_download: bool = False
    request_timeout_seconds: float = Field(default=60.0, gt=0)
    shuffle_seed: int = 123
    sparsity: float = 0.995
    test_size: float = 0.3
    split_seed: Optional[int] = None
    model_seed: Optional[int] = None
    label_column: str = "label"

    @field_validator("sparsity", "test_size")
    @classmethod
    def _open_unit_interval(cls, value: float) -> float:
        if not 0.0 < value < 1.0:
            raise ValueError("must be strictly between 0 and 1")
        return value

    @model_validator(mode="after")
    def _check_link_window(self) -> "PipelineConfig":
        if self.link_stop <= self.link_start:
            raise ValueError("link_stop must be greater than link_start")
        return self

    @property
    def min_document_frequency(self) -> float:
        """Smallest share of documents a term must appear in to be kept"""
        return round(1.0 - self.sparsity, 10)

    @classmethod
    def from_env(cls, **overrides) -> "PipelineConfig":
        """
        Build a config from SPAM_PIPELINE_* environment variables.
        Keyword overrides that are not None win over the environment.
        """
        values = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        config = cls(**values)
        logger.debug(f"Pipeline configuration: {config.model_dump()}")
        return config
