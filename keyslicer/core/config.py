"""Partitioner configuration model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from ..keyspace.alphabets import SymbolAlphabet, get_key_array
from .enums import IDEncoding
from .exceptions import ConfigurationError


class PartitionerConfig(BaseModel):
    """Settings for partitioning a keyspace across parallel workers.

    Attributes:
        encoding: Identifier encoding of the keyspace
        parallelism: Number of partitions (workers) to produce
        key_range: Optional subset of top-level symbols to partition instead
            of the whole alphabet
        max_concurrency: Upper bound on concurrent count requests
        count_retries: Extra attempts for each failing count request
        retry_delay: Seconds before the first retry, doubled on each retry
    """

    encoding: IDEncoding
    parallelism: int = Field(..., ge=1)
    key_range: tuple[str, ...] | None = None
    max_concurrency: int = Field(default=8, ge=1)
    count_retries: int = Field(default=0, ge=0)
    retry_delay: float = Field(default=0.5, ge=0)

    model_config = ConfigDict(frozen=True)

    @field_validator("encoding", mode="before")
    @classmethod
    def validate_encoding(cls, v: Any) -> IDEncoding:
        """Accept canonical values and legacy aliases."""
        try:
            return IDEncoding.from_value(v)
        except ConfigurationError as e:
            raise ValueError(str(e)) from e

    @field_validator("key_range")
    @classmethod
    def validate_key_range(
        cls, v: tuple[str, ...] | None, info: ValidationInfo
    ) -> tuple[str, ...] | None:
        """Validate key_range against the encoding and sort it into alphabet order."""
        if v is None:
            return v
        if "encoding" not in info.data:
            # encoding already failed validation
            return v

        encoding = info.data["encoding"]
        alphabet = get_key_array(encoding)
        if not v:
            raise ValueError("key_range must not be empty")
        unknown = [key for key in v if key not in alphabet]
        if unknown:
            raise ValueError(
                f"key_range symbols {unknown} are not part of the {encoding.value} alphabet"
            )
        if len(set(v)) != len(v):
            raise ValueError("key_range contains duplicate symbols")

        return tuple(sorted(v, key=alphabet.index))

    @classmethod
    def create(cls, **kwargs: Any) -> PartitionerConfig:
        """Build a config, surfacing validation failures as ConfigurationError.

        Raises:
            ConfigurationError: If any setting is invalid
        """
        try:
            return cls(**kwargs)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid partitioner configuration: {e}") from e

    def top_level_keys(self) -> SymbolAlphabet:
        """Ordered symbols that get distributed across partitions."""
        if self.key_range is not None:
            return self.key_range
        return get_key_array(self.encoding)
