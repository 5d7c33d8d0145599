"""Co-training of two views, each trained on data labeled by the other view."""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from .constants import (
    DEFAULT_CO_TRAINING_CONVERGENCE_SENTENCE_COUNT,
    LOG_POOL_SELECTION_FILE_NAME,
    View,
)
from .cotraining import (
    Classifier,
    EvaluationSet,
    PropsSaver,
    Reporter,
    _classify,
    _report_settings,
    data_used_so_far,
    evaluate_iteration,
    order_pool,
)
from .params import CoTrainingConfig
from .selection import add_to_training, move_to_training


def _fill_pool(pool: list[Any], unlabeled: list[Any], size: int) -> None:
    pool.extend(unlabeled[:size])
    del unlabeled[:size]


def _transfer(training: list[Any], unlabeled: list[Any], pool: list[Any],
              labeling_view: int, seed_size: int, pool_usage: int,
              iteration: int, config: CoTrainingConfig,
              reporter: Reporter) -> int:
    """Add the pool labeled by one view to the other view's training set."""
    if config.remove_labeled:
        return move_to_training(
            training, unlabeled, pool, 2, config.selection, labeling_view,
            pool_usage, config.prob_threshold, 0, config.number_threshold,
            DEFAULT_CO_TRAINING_CONVERGENCE_SENTENCE_COUNT,
            config.log_selection,
            f"{LOG_POOL_SELECTION_FILE_NAME}.{labeling_view}.{iteration}.log",
            reporter.say)
    return add_to_training(training, pool, seed_size)


def _train(classifier: Classifier, training: list[Any], view: int,
           label_view: int, iteration: int, config: CoTrainingConfig,
           reporter: Reporter) -> None:
    reporter.say(f"\nTraining {iteration}th classifier of view {view} "
                 f"({time.strftime('%c')}) ...\n")
    start = time.perf_counter()
    classifier.train(training, view, label_view, False, 0,
                     config.me_iterations, config.me_method, config.gaussian,
                     False, "")
    reporter.say(f"\nTraining the {iteration}th classifier of view {view} "
                 f"is done! ({time.perf_counter() - start:g} sec)\n")


def co_train_separate(classifiers: Sequence[Classifier], training: list[Any],
                      unlabeled: list[Any], eval_sets: Sequence[EvaluationSet],
                      saver: PropsSaver, config: CoTrainingConfig,
                      reporter: Reporter,
                      quality_keys: Mapping[int, Callable[[Any], Any]] | None = None
                      ) -> int:
    """Co-train two views, each on sentences labeled by the other view.

    Each view keeps its own copy of the training and unlabeled data; the
    given lists are emptied. Co-training stops as soon as the unlabeled
    data of either view runs out. Returns the number of iterations run.
    """
    seed_size = len(training)
    all_unlabeled = len(unlabeled)
    pool_size = config.pool_size
    pool_usage = 0 if pool_size == 0 else config.pool_usage

    _report_settings(reporter, seed_size, len(unlabeled), pool_size,
                     pool_usage, config, with_agreement=False)

    if pool_usage > 0:
        order_pool(unlabeled, config.pool_quality, quality_keys or {})

    if pool_usage == 0:
        pool_size = len(unlabeled)

    iteration = 1
    pool_number1 = 1
    pool_number2 = 1

    training1 = list(training)
    training2 = list(training)
    unlabeled1 = list(unlabeled)
    unlabeled2 = list(unlabeled)
    training.clear()
    unlabeled.clear()

    pool1: list[Any] = []
    pool2: list[Any] = []
    pool_size1 = pool_size
    pool_size2 = pool_size

    view1, view2 = int(View.VIEW_1), int(View.VIEW_2)

    while unlabeled1 and unlabeled2:
        if len(unlabeled1) < pool_size:
            pool_size1 = len(unlabeled1)
        _fill_pool(pool1, unlabeled1, pool_size1)

        if len(unlabeled2) < pool_size:
            pool_size2 = len(unlabeled2)
        _fill_pool(pool2, unlabeled2, pool_size2)

        while True:
            reporter.say(f"\nIteration {iteration} (Pool {pool_number1} of "
                         f"view 1 and Pool {pool_number2} of view 2):\n")

            for view, pool in ((view1, pool1), (view2, pool2)):
                reporter.say("\nLabeling unlabeled samples with classifier "
                             f"of view {view} ...\n")
                elapsed = _classify(classifiers[view - 1], pool, view,
                                    config.global_opt)
                reporter.say(f"Labeling unlabeled samples is done! "
                             f"({elapsed:g} sec)\n")

            reporter.say("\nAdding newly labeled data by view 1 to training "
                         "set of view 2 ...\n")
            added2 = _transfer(training2, unlabeled1, pool1, view1, seed_size,
                               pool_usage, iteration, config, reporter)
            reporter.say(f"Adding labeled data is done! ({added2} sentences)\n")

            reporter.say("\nAdding newly labeled data by view 2 to training "
                         "set of view 1 ...\n")
            added1 = _transfer(training1, unlabeled2, pool2, view2, seed_size,
                               pool_usage, iteration, config, reporter)
            reporter.say(f"Adding labeled data is done! ({added1} sentences)\n")

            if added1 and added2:
                _train(classifiers[0], training1, view1, view2, iteration,
                       config, reporter)
                _train(classifiers[1], training2, view2, view1, iteration,
                       config, reporter)
                evaluate_iteration(classifiers, eval_sets, saver, iteration,
                                   config.global_opt, config.preferred_view,
                                   reporter)

            iteration += 1

            used1 = data_used_so_far(seed_size, all_unlabeled, len(unlabeled),
                                     len(pool2), config.remove_labeled,
                                     pool_usage)
            reporter.say(f"\nData used so far: {used1} sentences for "
                         "training view 1\n")
            used2 = data_used_so_far(seed_size, all_unlabeled, len(unlabeled),
                                     len(pool1), config.remove_labeled,
                                     pool_usage)
            reporter.say(f"Data used so far: {used2} sentences for "
                         "training view 2\n")

            if not pool1 or not pool2:
                pool1.clear()
                pool2.clear()
                break
            if config.st_iterations and config.st_iterations < iteration:
                break
            if pool_usage > 0 and not config.remove_labeled:
                break

        pool_number1 += 1
        pool_number2 += 1

    return iteration - 1