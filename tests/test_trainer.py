"""Unit tests for the Trainer epoch loop."""

from __future__ import annotations

import math

import numpy as np
import pytest
from loguru import logger
from pydantic import ValidationError

from binary_classifier.callbacks.base import Callback
from binary_classifier.config import TrainerConfig
from binary_classifier.data.dataset import Dataset
from binary_classifier.errors import DatasetConfigError
from binary_classifier.models.classifier import LogisticClassifier
from binary_classifier.trainer import EpochResult, Trainer, TrainerState
from binary_classifier.types import Label, LabeledExample


class _RecordingCallback(Callback):
    def __init__(self) -> None:
        self.events: list[str] = []
        self.states: list[TrainerState] = []

    def on_fit_start(self, trainer, classifier, dataset) -> None:  # type: ignore[no-untyped-def]
        self.events.append("start")
        self.states.append(trainer.state)

    def on_epoch_end(self, trainer, result) -> None:  # type: ignore[no-untyped-def]
        self.events.append(f"epoch{result.epoch}")

    def on_fit_end(self, trainer, history) -> None:  # type: ignore[no-untyped-def]
        self.events.append("end")


def _classifier(lr: float = 0.001, seed: int = 0) -> LogisticClassifier:
    return LogisticClassifier(
        input_dim=8, learning_rate=lr, rng=np.random.default_rng(seed)
    )


class TestRunEpoch:
    def test_average_of_pre_update_losses(self) -> None:
        clf = LogisticClassifier(input_dim=2, weight_init="zeros")
        ex = LabeledExample(np.zeros(2, dtype=np.float32), Label.CLASS_B)
        loss = Trainer().run_epoch(clf, Dataset([ex], input_dim=2))
        # Zero model gives p = 0.5 before the update
        assert loss == pytest.approx(math.log(2))

    def test_mutates_classifier(self, tiny_dataset: Dataset) -> None:
        clf = _classifier()
        before = clf.weights.copy()
        Trainer().run_epoch(clf, tiny_dataset)
        assert not np.array_equal(clf.weights, before)

    def test_empty_dataset_raises(self) -> None:
        with pytest.raises(DatasetConfigError):
            Trainer().run_epoch(_classifier(), Dataset([], input_dim=8))


class TestFit:
    def test_history_length_and_reporting_cadence(self, tiny_dataset: Dataset) -> None:
        trainer = Trainer(epochs=25, eval_every=10)
        history = trainer.fit(_classifier(), tiny_dataset)

        assert [r.epoch for r in history] == list(range(25))
        evaluated = [r.epoch for r in history if r.accuracy is not None]
        assert evaluated == [0, 10, 20]
        assert all(0.0 <= r.accuracy <= 1.0 for r in history if r.accuracy is not None)

    def test_zero_epochs(self, tiny_dataset: Dataset) -> None:
        assert Trainer(epochs=0).fit(_classifier(), tiny_dataset) == []

    def test_loss_decreases_over_long_run(self, tiny_dataset: Dataset) -> None:
        history = Trainer(epochs=101).fit(_classifier(), tiny_dataset)
        assert history[100].loss < history[0].loss

    def test_loss_decreases_with_default_learning_rate(self) -> None:
        """Full-size vectors: the default step size must make visible progress."""
        rng = np.random.default_rng(11)
        plane = 28 * 28
        examples = []
        for i in range(6):
            label = Label.CLASS_A if i % 2 == 0 else Label.CLASS_B
            # Reddish CLASS_A, bluish CLASS_B
            base = np.full(3 * plane, 0.2)
            if label is Label.CLASS_A:
                base[:plane] = 0.8
            else:
                base[2 * plane :] = 0.8
            noisy = base + rng.normal(0, 0.05, base.shape)
            feats = np.clip(noisy, 0, 1).astype(np.float32)
            examples.append(LabeledExample(feats, label))
        dataset = Dataset(examples)
        clf = LogisticClassifier(rng=np.random.default_rng(1))

        history = Trainer(epochs=100).fit(clf, dataset)

        assert history[-1].loss < history[0].loss
        assert clf.evaluate(dataset) == 1.0

    def test_separable_data_reaches_full_accuracy(self, tiny_dataset: Dataset) -> None:
        clf = _classifier(lr=0.5)
        Trainer(epochs=100).fit(clf, tiny_dataset)
        assert clf.evaluate(tiny_dataset) == 1.0

    def test_uses_eval_dataset_for_accuracy(self, tiny_dataset: Dataset) -> None:
        clf = LogisticClassifier(input_dim=8, weight_init="zeros")
        only_b = Dataset(
            [LabeledExample(np.zeros(8, dtype=np.float32), Label.CLASS_B)], input_dim=8
        )
        # One epoch: the recorded accuracy must be measured on only_b
        history = Trainer(epochs=1).fit(clf, tiny_dataset, eval_dataset=only_b)
        expected = clf.evaluate(only_b)
        assert history[0].accuracy == expected

    def test_same_seed_same_loss_curve(self, tiny_dataset: Dataset) -> None:
        a = Trainer(epochs=5).fit(_classifier(seed=9), tiny_dataset)
        b = Trainer(epochs=5).fit(_classifier(seed=9), tiny_dataset)
        assert [r.loss for r in a] == [r.loss for r in b]

    def test_empty_dataset_raises(self) -> None:
        with pytest.raises(DatasetConfigError):
            Trainer().fit(_classifier(), Dataset([], input_dim=8))

    def test_empty_eval_dataset_raises_before_training(
        self, tiny_dataset: Dataset
    ) -> None:
        cb = _RecordingCallback()
        clf = _classifier()
        before = clf.weights.copy()
        trainer = Trainer(epochs=3, callbacks=[cb])
        with pytest.raises(DatasetConfigError, match="evaluate"):
            trainer.fit(clf, tiny_dataset, eval_dataset=Dataset([], input_dim=8))
        np.testing.assert_array_equal(clf.weights, before)
        assert cb.events == []
        assert trainer.state is TrainerState.IDLE

    def test_reports_through_logger(self, tiny_dataset: Dataset) -> None:
        messages: list[str] = []
        sink_id = logger.add(messages.append, format="{message}", level="INFO")
        try:
            Trainer(epochs=11).fit(_classifier(), tiny_dataset)
        finally:
            logger.remove(sink_id)
        reports = [m for m in messages if m.startswith("Epoch")]
        assert len(reports) == 2
        assert reports[0].startswith("Epoch 0: loss=")
        # 4 decimal places for loss, 2 for accuracy percentage
        loss_part = reports[0].split("loss=")[1].split(",")[0]
        assert len(loss_part.split(".")[1]) == 4
        assert reports[0].rstrip().endswith("%")


class TestStateAndCallbacks:
    def test_state_transitions(self, tiny_dataset: Dataset) -> None:
        cb = _RecordingCallback()
        trainer = Trainer(epochs=2, callbacks=[cb])
        assert trainer.state is TrainerState.IDLE
        trainer.fit(_classifier(), tiny_dataset)
        assert cb.states == [TrainerState.TRAINING]
        assert trainer.state is TrainerState.IDLE

    def test_callback_order(self, tiny_dataset: Dataset) -> None:
        cb = _RecordingCallback()
        Trainer(epochs=3, callbacks=[cb]).fit(_classifier(), tiny_dataset)
        assert cb.events == ["start", "epoch0", "epoch1", "epoch2", "end"]

    def test_state_reset_after_failure(self) -> None:
        class _Boom(Callback):
            def on_epoch_end(self, trainer, result) -> None:  # type: ignore[no-untyped-def]
                raise RuntimeError("boom")

        ex = LabeledExample(np.zeros(8, dtype=np.float32), Label.CLASS_A)
        trainer = Trainer(epochs=1, callbacks=[_Boom()])
        with pytest.raises(RuntimeError):
            trainer.fit(_classifier(), Dataset([ex], input_dim=8))
        assert trainer.state is TrainerState.IDLE

    def test_config_object(self) -> None:
        trainer = Trainer(TrainerConfig(epochs=3, eval_every=2), epochs=50)
        assert trainer.config.epochs == 3
        assert trainer.config.eval_every == 2


class TestEpochResult:
    def test_frozen(self) -> None:
        r = EpochResult(epoch=0, loss=0.5)
        assert r.accuracy is None
        with pytest.raises(ValidationError):
            r.loss = 0.1  # type: ignore[misc]
