"""Training entrypoint for binary_classifier.

Usage:
    binary-classifier-train                             # defaults
    binary-classifier-train data.root=/data/hymenoptera # dataset location
    binary-classifier-train trainer.epochs=300 seed=0   # longer, reproducible
    binary-classifier-train model.learning_rate=0.01    # override step size
    binary-classifier-train model.seed=5                # fixed initial weights
    binary-classifier-train ~callbacks.history          # disable a callback
"""

import sys
from pathlib import Path
from typing import Any

import hydra
import numpy as np
from hydra.utils import to_absolute_path
from loguru import logger
from omegaconf import DictConfig, OmegaConf

# CRITICAL: import models to trigger @register decorators BEFORE Hydra parses config
import binary_classifier.models  # noqa: F401
from binary_classifier.callbacks import Callback
from binary_classifier.config import DatasetConfig, TrainerConfig
from binary_classifier.data.dataset import Dataset
from binary_classifier.models.classifier import LogisticClassifier
from binary_classifier.trainer import Trainer


def build_dataset(
    data_cfg: DictConfig, split: str, rng: np.random.Generator
) -> Dataset:
    """Build the Dataset of ``<data.root>/<split>`` from the ``data`` config node.

    ``rng`` shuffles the split unless ``data.seed`` is set, in which case the
    split gets its own generator seeded from it.
    """
    options: dict[str, Any] = OmegaConf.to_container(data_cfg, resolve=True)  # type: ignore[assignment]
    root = Path(to_absolute_path(options.pop("root")))
    options.pop("train_split", None)
    options.pop("val_split", None)
    config = DatasetConfig(root=str(root / split), **options)
    return Dataset.from_directory(config, rng=rng if config.seed is None else None)


def build_callbacks(cfg: DictConfig) -> list[Callback]:
    """Instantiate every ``callbacks`` node that carries a ``_target_``."""
    callbacks: list[Callback] = []
    if cfg.get("callbacks"):
        for v in cfg.callbacks.values():
            if v is not None and "_target_" in v:
                callbacks.append(hydra.utils.instantiate(v))
    return callbacks


def run(cfg: DictConfig) -> float:
    """Build both splits, train, and return accuracy on the held-out split."""
    rng = np.random.default_rng(cfg.get("seed"))

    train_dataset = build_dataset(cfg.data, cfg.data.train_split, rng)
    val_dataset = build_dataset(cfg.data, cfg.data.val_split, rng)

    model_seed = cfg.model.get("seed")
    model_rng = rng if model_seed is None else np.random.default_rng(model_seed)
    classifier: LogisticClassifier = hydra.utils.instantiate(cfg.model, rng=model_rng)
    trainer = Trainer(
        TrainerConfig(**OmegaConf.to_container(cfg.trainer, resolve=True)),  # type: ignore[arg-type]
        callbacks=build_callbacks(cfg),
    )
    trainer.fit(classifier, train_dataset, eval_dataset=val_dataset)

    accuracy = classifier.evaluate(val_dataset)
    logger.info(f"Test accuracy: {accuracy * 100:.2f}%")
    return accuracy


@hydra.main(version_base=None, config_path="conf", config_name="train")
def main(cfg: DictConfig) -> None:
    """Run training with the given Hydra config."""
    logger.remove()
    logger.add(sys.stderr, level=cfg.get("log_level", "INFO"))

    logger.info(f"Configuration:\n{OmegaConf.to_yaml(cfg)}")
    run(cfg)


if __name__ == "__main__":
    main()
