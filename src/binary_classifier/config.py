"""Pydantic frozen configuration models for binary_classifier."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from binary_classifier.types import INPUT_DIM


class DatasetConfig(BaseModel, frozen=True):
    """Configuration for building a Dataset from a label-directory tree.

    ``class_dirs[0]`` holds CLASS_A images, ``class_dirs[1]`` holds CLASS_B.
    All fields are validated at construction time. Frozen — no mutation after
    creation.
    """

    root: str
    class_dirs: tuple[str, str] = ("ants", "bees")
    extensions: tuple[str, ...] | None = None
    num_threads: int | None = Field(default=None, ge=1)
    on_decode_error: Literal["raise", "skip"] = "raise"
    seed: int | None = None

    @field_validator("extensions")
    @classmethod
    def _normalize_extensions(
        cls, value: tuple[str, ...] | None
    ) -> tuple[str, ...] | None:
        """Lowercase and dot-prefix every suffix (``"JPG"`` -> ``".jpg"``)."""
        if value is None:
            return None
        return tuple(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in value
        )

    @model_validator(mode="after")
    def _class_dirs_distinct(self) -> "DatasetConfig":
        if self.class_dirs[0] == self.class_dirs[1]:
            msg = f"class_dirs must name two different directories, got {self.class_dirs}"
            raise ValueError(msg)
        return self


class ClassifierConfig(BaseModel, frozen=True):
    """Hyperparameters of the logistic classifier."""

    input_dim: int = Field(default=INPUT_DIM, ge=1)
    learning_rate: float = Field(default=0.001, gt=0.0)
    weight_init: Literal["uniform", "zeros"] = "uniform"
    seed: int | None = None


class TrainerConfig(BaseModel, frozen=True):
    """Epoch count and reporting cadence for the training loop."""

    epochs: int = Field(default=100, ge=0)
    eval_every: int = Field(default=10, ge=1)
