"""Running a whole co-training experiment: loading, base training, co-training."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol, TypeVar

from .constants import (
    FEATURE_VIEW_COUNT,
    ZME_TRAINING_MODEL_FILE,
    CommonLabelSelection,
    View,
)
from .cotraining import (
    Classifier,
    EvaluationSet,
    PropsSaver,
    Reporter,
    _classify,
    _save,
    co_train_common,
    set_selected_prd_labeling,
)
from .params import CoTrainingConfig, CorpusFiles
from .separate import co_train_separate

T = TypeVar("T")


class StageError(Exception):
    """Raised when a stage of the run (loading, sample generation, saving) fails."""


class Workbench(Protocol):
    """Loads corpora, generates samples and supplies classifiers and savers.

    Methods signal failure by raising OSError or ValueError.
    """

    def load_conll(self, files: CorpusFiles, max_sentences: int) -> list[Any]:
        """Load up to max_sentences labeled sentences (0: all)."""

    def load_unlabeled(self, data_file: str, dependency_file: str,
                       max_sentences: int) -> list[Any]:
        """Load up to max_sentences unlabeled sentences (0: all)."""

    def generate_labeled_samples(self, sentences: list[Any], max_positive: int,
                                 max_negative: int, feature_sets: Sequence[int],
                                 dataset_id: str, write_to_file: bool) -> int:
        """Generate training samples; return how many were made."""

    def generate_test_samples(self, sentences: list[Any],
                              feature_sets: Sequence[int], dataset_id: str,
                              write_to_file: bool) -> int:
        """Generate test samples; return how many were made."""

    def generate_unlabeled_samples(self, sentences: list[Any],
                                   feature_sets: Sequence[int], dataset_id: str,
                                   write_to_file: bool) -> int:
        """Generate samples for unlabeled sentences; return how many were made."""

    def new_classifier(self) -> Classifier:
        """Return a fresh, untrained classifier."""

    def props_saver(self) -> PropsSaver:
        """Return the writer of CoNLL props files."""


# evaluation set name -> (title when loading and generating, title when labeling)
_TITLES = {
    "dev": ("WSJ development", "development"),
    "wsj": ("WSJ test", "WSJ test"),
    "brown": ("Brown test", "Brown test"),
}


def log_file_name(prefix: str, stamp: str | datetime) -> str:
    """Return the run log name for a prefix and a time stamp."""
    if isinstance(stamp, datetime):
        stamp = stamp.strftime("%Y-%m-%d-%H-%M")
    return f"{prefix}.1.[{stamp}].log"


def write_sample_log(samples: Iterable[Any], path: str | Path,
                     with_gold: bool) -> int:
    """Write one line per sample: predicate lemma, words, gold label, context.

    The gold label is written only when with_gold is set. Returns the
    number of samples written.
    """
    count = 0
    with open(path, "w", encoding="utf-8") as stream:
        for sample in samples:
            parts = [f"{sample.pred_lemma}:", f"[{sample.words}]"]
            if with_gold:
                parts.append(f"[{sample.gold_label}]")
            parts.append(f"[{sample.context(1)}]")
            stream.write(" ".join(parts) + "\n")
            count += 1
    return count


def _timed(func: Callable[..., T], *args: Any) -> tuple[T, float]:
    start = time.perf_counter()
    result = func(*args)
    return result, time.perf_counter() - start


def _views() -> range:
    return range(1, FEATURE_VIEW_COUNT + 1)


def train_base_classifiers(classifiers: Sequence[Classifier], training: list[Any],
                           config: CoTrainingConfig,
                           reporter: Reporter) -> list[float]:
    """Train each view's classifier on the gold labels of the seed data.

    Returns the training time of each view in seconds.
    """
    times: list[float] = []
    for view in _views():
        reporter.say(f"\nTraining base classifier {view} "
                     f"({time.strftime('%c')}) ...\n")
        _, elapsed = _timed(
            classifiers[view - 1].train, training, view, view, True, 1,
            config.me_iterations, config.me_method, config.gaussian, True,
            ZME_TRAINING_MODEL_FILE)
        reporter.say(f"\nTraining the base classifier {view} is done! "
                     f"({elapsed:g} sec)\n")
        times.append(elapsed)
    return times


def _save_or_fail(saver: PropsSaver, sentences: list[Any], view: int,
                  path: str, reporter: Reporter) -> str:
    if not _save(saver, sentences, view, path, reporter):
        raise StageError(f"cannot save labeled props to {path}")
    return path


def label_base(classifiers: Sequence[Classifier],
               eval_sets: Sequence[EvaluationSet], saver: PropsSaver,
               config: CoTrainingConfig, reporter: Reporter) -> list[str]:
    """Label the evaluation sets with the base classifiers and save them.

    Files are named '<base>.<view>.0', view 0 being the common labeling.
    Returns the paths written; raises StageError when saving fails.
    """
    written: list[str] = []
    for view in _views():
        for eval_set in eval_sets:
            reporter.say(f"\nLabeling {eval_set.title} data with base "
                         f"classifier {view} ...\n")
            elapsed = _classify(classifiers[view - 1], eval_set.sentences,
                                view, config.global_opt)
            reporter.say(f"Labeling {eval_set.title} data is done! "
                         f"({elapsed:g} sec)\n")
            reporter.say(f"\nSaving labeled {eval_set.title} props into "
                         "CoNLL file ...\n")
            written.append(_save_or_fail(
                saver, eval_set.sentences, view,
                f"{eval_set.output_base}.{view}.0", reporter))

    common = int(View.COMMON)
    for eval_set in eval_sets:
        reporter.say(f"\nLabeling {eval_set.title} data with selected common "
                     "labels ...\n")
        set_selected_prd_labeling(eval_set.sentences,
                                  CommonLabelSelection.CONFIDENCE_ONLY,
                                  config.preferred_view, reporter)
        reporter.say(f"\nLabeling {eval_set.title} data is done!\n")
        reporter.say(f"\nSaving labeled {eval_set.title} props into CoNLL "
                     "file ...\n")
        written.append(_save_or_fail(
            saver, eval_set.sentences, common,
            f"{eval_set.output_base}.{common}.0", reporter))
    return written


def _load(reporter: Reporter, done_message: str,
          func: Callable[..., list[Any]], *args: Any) -> list[Any]:
    try:
        sentences, elapsed = _timed(func, *args)
    except (OSError, ValueError) as exc:
        reporter.warn("\nLoading data was not successful\n")
        raise StageError(f"loading data failed: {exc}") from exc
    reporter.log(f"{len(sentences)} sentences loaded")
    reporter.say(f"\n{done_message} ({elapsed:g} sec)\n")
    return sentences


def _generate(reporter: Reporter, sentences: list[Any], done_message: str,
              failure_message: str, func: Callable[..., int],
              *args: Any) -> int:
    try:
        count, elapsed = _timed(func, sentences, *args)
    except (OSError, ValueError) as exc:
        reporter.log(f"{len(sentences)} sentences processed")
        reporter.warn(f"\n{failure_message}\n")
        raise StageError(f"sample generation failed: {exc}") from exc
    reporter.log(f"{len(sentences)} sentences processed ({count} samples)")
    reporter.say(f"\n{done_message} ({elapsed:g} sec)\n")
    return count


def run(config: CoTrainingConfig, workbench: Workbench, reporter: Reporter,
        quality_keys: Mapping[int, Callable[[Any], Any]] | None = None) -> int:
    """Run base training, base labeling and, if asked for, co-training.

    Returns the number of co-training iterations run (0 when the unlabeled
    size is 0). Raises StageError when a stage fails.
    """
    for line in config.source_lines:
        reporter.log(line + "\n")

    reporter.say("\nLoading CoNLL labeled training data ...\n")
    training = _load(reporter, "Loading CoNLL data is done!",
                     workbench.load_conll, config.labeled, config.seed_size)

    test_sets = config.test_sets()
    eval_sets: list[EvaluationSet] = []
    for name, files in test_sets:
        reporter.say(f"\nLoading CoNLL {_TITLES[name][0]} data ...\n")
        sentences = _load(reporter, "Loading CoNLL data is done!",
                          workbench.load_conll, files, 0)
        eval_sets.append(EvaluationSet(name, sentences,
                                       config.output_base(name),
                                       _TITLES[name][1]))

    reporter.say("\nGenerating labeled training samples ...\n")
    _generate(reporter, training,
              "Generating labeled training samples is done!",
              "Generating training samples was not successful!",
              workbench.generate_labeled_samples, config.max_positive,
              config.max_negative, config.feature_sets, config.labeled.words,
              True)

    for eval_set, (name, files) in zip(eval_sets, test_sets):
        reporter.say(f"\nGenerating {_TITLES[name][0]} samples ...\n")
        _generate(reporter, eval_set.sentences, "Generating samples is done!",
                  "Generating test samples was not successful!",
                  workbench.generate_test_samples, config.feature_sets,
                  files.words, True)

    classifiers = [workbench.new_classifier() for _ in _views()]
    saver = workbench.props_saver()

    train_base_classifiers(classifiers, training, config, reporter)
    label_base(classifiers, eval_sets, saver, config, reporter)

    if config.unlabeled_size == 0:
        return 0

    reporter.say("\nLoading unlabeled training data ...\n")
    unlabeled = _load(reporter, "Loading unlabeled training data is done!",
                      workbench.load_unlabeled, config.unlabeled_data,
                      config.unlabeled_dependency, config.unlabeled_size)

    reporter.say("\nGenerating unlabeled samples ...\n")
    _generate(reporter, unlabeled, "Generating unlabeled samples is done!",
              "Generating unlabeled samples was not successful!",
              workbench.generate_unlabeled_samples, config.feature_sets,
              config.unlabeled_data, False)

    cpu_start = time.process_time()
    wall_start = time.time()
    reporter.say(f"\nCo-training started at {time.strftime('%c')} ...\n")

    iterations = 0
    if config.method == 1:
        iterations = co_train_common(classifiers, training, unlabeled,
                                     eval_sets, saver, config, reporter,
                                     quality_keys)
    elif config.method == 2:
        iterations = co_train_separate(classifiers, training, unlabeled,
                                       eval_sets, saver, config, reporter,
                                       quality_keys)

    reporter.say(f"\nCo-training is done at {time.strftime('%c')}! ")
    cpu_minutes = (time.process_time() - cpu_start) / 60
    wall_minutes = (time.time() - wall_start) / 60
    reporter.say(f"({cpu_minutes:g} min/{wall_minutes:g} min)\n")
    return iterations