"""Co-training of two views over a training set shared by both views."""

from __future__ import annotations

import sys
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import IO, Any, Protocol

from .constants import (
    DEFAULT_CO_TRAINING_CONVERGENCE_SENTENCE_COUNT,
    FEATURE_VIEW_COUNT,
    LOG_POOL_SELECTION_FILE_NAME,
    CommonLabelSelection,
    View,
)
from .params import CoTrainingConfig
from .selection import add_to_training, move_to_training


class Classifier(Protocol):
    """A classifier that labels and is trained on sentences for one view."""

    def train(self, sentences: list[Any], view: int, label_view: int,
              use_gold: bool, cutoff: int, iterations: int, method: str,
              gaussian: float, save_model: bool, model_file: str) -> None:
        """Train on the sentences' labels of label_view (gold if use_gold)."""

    def classify(self, sentences: list[Any], view: int,
                 global_opt: bool) -> None:
        """Label the sentences' samples with the predictions of this view."""


class PropsSaver(Protocol):
    """Writes the labeling of sentences into a CoNLL props file."""

    def save(self, sentences: list[Any], view: int, path: str) -> None:
        """Write the labels of the given view (0: common) to path.

        Raises OSError when the file cannot be written.
        """


@dataclass
class EvaluationSet:
    """A data set labeled after every training round and saved for scoring."""

    name: str
    sentences: list[Any]
    output_base: str
    title: str = ""

    def __post_init__(self) -> None:
        if not self.title:
            self.title = self.name


class Reporter:
    """Sends progress messages to the console and to a run log."""

    def __init__(self, log_stream: IO[str] | None = None,
                 console: IO[str] | None = None,
                 errors: IO[str] | None = None) -> None:
        self.log_stream = log_stream
        self.console = console if console is not None else sys.stdout
        self.errors = errors if errors is not None else sys.stderr

    @staticmethod
    def _write(stream: IO[str] | None, message: str) -> None:
        if stream is not None:
            stream.write(message)
            stream.flush()

    def say(self, message: str) -> None:
        """Write the message to the console and the log."""
        self._write(self.console, message)
        self._write(self.log_stream, message)

    def log(self, message: str) -> None:
        """Write the message to the log only."""
        self._write(self.log_stream, message)

    def warn(self, message: str) -> None:
        """Write the message to the error stream and the log."""
        self._write(self.errors, message)
        self._write(self.log_stream, message)


def _views() -> range:
    return range(1, FEATURE_VIEW_COUNT + 1)


def set_selected_prd_labeling(sentences: Sequence[Any], method: int,
                              preferred_view: int, reporter: Reporter) -> int:
    """Give every sentence a labeling common to all views.

    Returns the number of sentences processed.
    """
    for sentence in sentences:
        sentence.set_selected_prd_labels(method, preferred_view)
    reporter.log(f"{len(sentences)} sentences processed")
    return len(sentences)


def order_pool(sentences: list[Any], quality: int,
               keys: Mapping[int, Callable[[Any], Any]]) -> None:
    """Sort unlabeled sentences in place by the pool quality criterion.

    Quality 1 puts shorter sentences first, 2 mediate lengths first and 3
    simpler sentences first, using the sort key given for it in keys; any
    other quality leaves the order unchanged.
    """
    if quality not in (1, 2, 3):
        return
    try:
        key = keys[quality]
    except KeyError:
        raise ValueError(f"no sort key for pool quality {quality}") from None
    sentences.sort(key=key)


def _save(saver: PropsSaver, sentences: list[Any], view: int, path: str,
          reporter: Reporter) -> bool:
    start = time.perf_counter()
    try:
        saver.save(sentences, view, path)
    except OSError:
        reporter.log(f"{len(sentences)} sentences processed")
        reporter.warn("\nSaving labeled props was not successful!\n")
        return False
    reporter.log(f"{len(sentences)} sentences processed")
    reporter.say(f"\nSaving labeled props is done! "
                 f"({time.perf_counter() - start:g} sec)\n")
    return True


def _classify(classifier: Classifier, sentences: list[Any], view: int,
              global_opt: bool) -> float:
    start = time.perf_counter()
    classifier.classify(sentences, view, global_opt)
    return time.perf_counter() - start


def evaluate_iteration(classifiers: Sequence[Classifier],
                       eval_sets: Sequence[EvaluationSet], saver: PropsSaver,
                       iteration: int, global_opt: bool, preferred_view: int,
                       reporter: Reporter) -> list[str]:
    """Label every evaluation set with each view and with common labels.

    Files are named '<base>.<view>.<iteration>', view 0 being the common
    labeling. Returns the paths written; failures are reported and skipped.
    """
    written: list[str] = []
    for view in _views():
        classifier = classifiers[view - 1]
        for eval_set in eval_sets:
            reporter.say(f"\nLabeling {eval_set.title} data with {iteration}th "
                         f"classifier of view {view} ...\n")
            elapsed = _classify(classifier, eval_set.sentences, view, global_opt)
            reporter.say(f"Labeling {eval_set.title} data is done! "
                         f"({elapsed:g} sec)\n")
            reporter.say(f"\nSaving labeled {eval_set.title} props into "
                         "CoNLL file ...\n")
            path = f"{eval_set.output_base}.{view}.{iteration}"
            if _save(saver, eval_set.sentences, view, path, reporter):
                written.append(path)

    for eval_set in eval_sets:
        reporter.say(f"\nLabeling {eval_set.title} data with selected "
                     "common labels ...\n")
        set_selected_prd_labeling(eval_set.sentences,
                                  CommonLabelSelection.CONFIDENCE_ONLY,
                                  preferred_view, reporter)
        reporter.say(f"\nLabeling {eval_set.title} data is done!\n")
        reporter.say(f"\nSaving labeled {eval_set.title} props into "
                     "CoNLL file ...\n")
        path = f"{eval_set.output_base}.{int(View.COMMON)}.{iteration}"
        if _save(saver, eval_set.sentences, int(View.COMMON), path, reporter):
            written.append(path)
    return written


def data_used_so_far(seed_size: int, all_unlabeled: int, remaining: int,
                     pool_size: int, remove_labeled: bool,
                     pool_usage: int) -> int:
    """Return how many sentences have fed training so far.

    With removal this is the seed plus the unlabeled data taken out so far;
    otherwise the seed plus the current pool, or plus the remaining
    unlabeled data when no pool is used.
    """
    if remove_labeled:
        return seed_size + all_unlabeled - remaining - pool_size
    if pool_usage > 0:
        return seed_size + pool_size
    return seed_size + remaining


def _report_settings(reporter: Reporter, seed_size: int, unlabeled_size: int,
                     pool_size: int, pool_usage: int,
                     config: CoTrainingConfig, with_agreement: bool) -> None:
    reporter.say("\n")
    reporter.say(f"Seed Size: {seed_size}\n")
    reporter.say(f"Unlabeled Size: {unlabeled_size}\n")
    reporter.say(f"Pool Size: {pool_size}\n")
    reporter.say(f"Selection Criterion: {config.selection}\n")
    reporter.say(f"Common Label Selection Method: {config.cl_selection}\n")
    reporter.say(f"Pool Usage: {pool_usage}\n")
    if with_agreement:
        reporter.say(f"Agreement Threshold for Selection: "
                     f"{config.agree_threshold:g}\n")
    reporter.say(f"Probability Threshold for Selection: "
                 f"{config.prob_threshold:g}\n")
    reporter.say(f"Number of Labeled Data for Selection: "
                 f"{config.number_threshold}\n")
    reporter.say(f"Remove Once Labeled: {int(config.remove_labeled)}\n")
    reporter.say(f"Co-training Explicit Iteration number: "
                 f"{config.st_iterations}\n")
    reporter.say(f"Pool Quality: {config.pool_quality}\n")


@dataclass
class _Settings:
    pool_size: int
    pool_usage: int
    extras: dict[str, Any] = field(default_factory=dict)


def co_train_common(classifiers: Sequence[Classifier], training: list[Any],
                    unlabeled: list[Any], eval_sets: Sequence[EvaluationSet],
                    saver: PropsSaver, config: CoTrainingConfig,
                    reporter: Reporter,
                    quality_keys: Mapping[int, Callable[[Any], Any]] | None = None
                    ) -> int:
    """Co-train all views on one training set labeled with common labels.

    The training and unlabeled lists are changed in place. Returns the
    number of iterations run.
    """
    seed_size = len(training)
    all_unlabeled = len(unlabeled)
    settings = _Settings(pool_size=config.pool_size,
                         pool_usage=0 if config.pool_size == 0 else config.pool_usage)

    _report_settings(reporter, seed_size, len(unlabeled), settings.pool_size,
                     settings.pool_usage, config, with_agreement=True)

    if settings.pool_usage > 0:
        order_pool(unlabeled, config.pool_quality, quality_keys or {})

    if settings.pool_usage == 0:
        settings.pool_size = len(unlabeled)

    iteration = 1
    pool_number = 1
    pool: list[Any] = []

    while unlabeled:
        if len(unlabeled) < settings.pool_size:
            settings.pool_size = len(unlabeled)
        pool.extend(unlabeled[:settings.pool_size])
        del unlabeled[:settings.pool_size]

        while True:
            reporter.say(f"\nIteration {iteration} (Pool {pool_number}):\n")

            for view in _views():
                reporter.say("\nLabeling unlabeled samples with classifier "
                             f"of view {view} ...\n")
                elapsed = _classify(classifiers[view - 1], pool, view,
                                    config.global_opt)
                reporter.say(f"Labeling unlabeled samples is done! "
                             f"({elapsed:g} sec)\n")

            reporter.say("\nLabeling unlabeled samples with selected common "
                         "labels ...\n")
            set_selected_prd_labeling(pool, config.cl_selection,
                                      config.preferred_view, reporter)
            reporter.say("\nLabeling unlabeled samples is done!\n")

            reporter.say("\nAdding newly labeled data to training set ...\n")
            if config.remove_labeled:
                added = move_to_training(
                    training, unlabeled, pool, 1, config.selection, 0,
                    settings.pool_usage, config.prob_threshold,
                    config.agree_threshold, config.number_threshold,
                    DEFAULT_CO_TRAINING_CONVERGENCE_SENTENCE_COUNT,
                    config.log_selection,
                    f"{LOG_POOL_SELECTION_FILE_NAME}{iteration}.log",
                    reporter.say)
            else:
                added = add_to_training(training, pool, seed_size)
            reporter.say(f"Adding labeled data is done! ({added} sentences)\n")

            if added:
                for view in _views():
                    reporter.say(f"\nTraining {iteration}th classifier of view "
                                 f"{view} ({time.strftime('%c')}) ...\n")
                    start = time.perf_counter()
                    classifiers[view - 1].train(
                        training, view, int(View.COMMON), False, 0,
                        config.me_iterations, config.me_method,
                        config.gaussian, False, "")
                    reporter.say(f"\nTraining the {iteration}th classifier of "
                                 f"view {view} is done! "
                                 f"({time.perf_counter() - start:g} sec)\n")
                evaluate_iteration(classifiers, eval_sets, saver, iteration,
                                   config.global_opt, config.preferred_view,
                                   reporter)

            iteration += 1

            used = data_used_so_far(seed_size, all_unlabeled, len(unlabeled),
                                    len(pool), config.remove_labeled,
                                    settings.pool_usage)
            for view in _views():
                reporter.say(f"\nData used so far: {used} sentences for "
                             f"training view {view}")
            reporter.say("\n")

            if not pool:
                break
            if config.st_iterations and config.st_iterations < iteration:
                break
            if settings.pool_usage > 0 and not config.remove_labeled:
                break

        pool_number += 1

    return iteration - 1