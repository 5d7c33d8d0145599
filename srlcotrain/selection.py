"""Selecting newly labeled sentences from a pool and moving them to training."""

from __future__ import annotations

import contextlib
from collections.abc import Callable, Iterator
from enum import IntEnum
from pathlib import Path
from typing import IO, Protocol, TypeVar, runtime_checkable

from .constants import FEATURE_VIEW_COUNT, View

Report = Callable[[str], None]


@runtime_checkable
class PoolSentence(Protocol):
    """What selection needs from a sentence labeled by the classifiers."""

    def labeling_agreement(self) -> float:
        """Share of samples on whose labels all views agree."""

    def labeling_probability(self, view: int) -> float:
        """Average label probability of the samples under a view (0: common)."""

    def format_labelings(self, view_count: int) -> str:
        """Text describing the labeling of every view, for selection logs."""

    def format_labeling(self, view: int) -> str:
        """Text describing the labeling of one view, for selection logs."""


S = TypeVar("S", bound=PoolSentence)


class SelectionCriterion(IntEnum):
    """How newly labeled sentences are chosen for training."""

    NONE = 0
    AGREEMENT = 1
    CONFIDENCE = 2


class PoolUsage(IntEnum):
    """What happens to a pool's unselected sentences after selection."""

    NONE = 0
    ITERATE_WHOLE = 1
    REMOVE_UNSELECTED = 2
    RETURN_TO_FRONT = 3
    RETURN_TO_END = 4


def _say(report: Report | None, message: str) -> None:
    if report is not None:
        report(message)


@contextlib.contextmanager
def _selection_log(log_selection: int, log_path: str | Path | None) -> Iterator[IO[str] | None]:
    if log_selection > 0 and log_path is not None:
        with open(log_path, "w", encoding="utf-8") as stream:
            yield stream
    else:
        yield None


def _write_entries(stream: IO[str], title: str, sentences: list[S],
                   describe: Callable[[S], str]) -> None:
    stream.write(f"{title}:\n")
    for number, sentence in enumerate(sentences, start=1):
        text = describe(sentence)
        if not text.endswith("\n"):
            text += "\n"
        stream.write(f"{number}- {text}")


def _select(pool: list[S], training: list[S], score: Callable[[S], float],
            accept: Callable[[S], bool], number_threshold: int,
            too_few: Callable[[int], bool], log_selection: int,
            log_path: str | Path | None, report: Report | None,
            describe: Callable[[S], str]) -> int:
    pool.sort(key=score, reverse=True)

    if number_threshold == 0 or len(pool) < number_threshold:
        boundary = len(pool)
    else:
        boundary = number_threshold
    while boundary > 0 and not accept(pool[boundary - 1]):
        boundary -= 1

    selected = 0 if too_few(boundary) else boundary

    with _selection_log(log_selection, log_path) as stream:
        if selected:
            chosen = pool[:selected]
            training.extend(chosen)
            lowest, highest = score(chosen[-1]), score(chosen[0])
            if stream is not None:
                _write_entries(stream, "Selected", chosen, describe)
            del pool[:selected]
            _say(report, f"From {lowest} to {highest}\n")
        else:
            _say(report, f"No more room to improve ({len(pool)} remaining "
                         "sentences in pool discarded)\n")

        if log_selection > 1 and stream is not None:
            _write_entries(stream, "Filtered", pool, describe)

    return selected


def add_to_training(training: list[S], pool: list[S], seed_size: int) -> int:
    """Replace everything after the seed in training with the whole pool.

    Returns the number of sentences added.
    """
    del training[seed_size:]
    training.extend(pool)
    return len(pool)


def select_and_move_agreed(pool: list[S], training: list[S],
                           agree_threshold: float, number_threshold: int,
                           convergence_threshold: int, log_selection: int,
                           log_path: str | Path | None,
                           report: Report | None) -> int:
    """Move the most agreed-upon sentences meeting the threshold to training.

    At most number_threshold sentences are taken (0 means no limit); fewer
    than convergence_threshold counts as convergence and selects nothing.
    """
    return _select(
        pool, training,
        score=lambda s: s.labeling_agreement(),
        accept=lambda s: s.labeling_agreement() >= agree_threshold,
        number_threshold=number_threshold,
        too_few=lambda count: count < convergence_threshold,
        log_selection=log_selection, log_path=log_path, report=report,
        describe=lambda s: s.format_labelings(FEATURE_VIEW_COUNT),
    )


def select_and_move_confident(pool: list[S], training: list[S],
                              prob_threshold: float, number_threshold: int,
                              convergence_threshold: int, log_selection: int,
                              log_path: str | Path | None,
                              report: Report | None) -> int:
    """Move the most probable common labelings meeting the threshold.

    Sentences with a probability of zero are never selected; a count not
    above convergence_threshold counts as convergence.
    """
    view = int(View.COMMON)

    def accept(sentence: S) -> bool:
        probability = sentence.labeling_probability(view)
        return probability >= prob_threshold and probability != 0

    return _select(
        pool, training,
        score=lambda s: s.labeling_probability(view),
        accept=accept,
        number_threshold=number_threshold,
        too_few=lambda count: count <= convergence_threshold,
        log_selection=log_selection, log_path=log_path, report=report,
        describe=lambda s: s.format_labelings(FEATURE_VIEW_COUNT),
    )


def select_and_move(pool: list[S], training: list[S], selection_view: int,
                    prob_threshold: float, number_threshold: int,
                    convergence_threshold: int, log_selection: int,
                    log_path: str | Path | None,
                    report: Report | None) -> int:
    """Move the sentences most probably labeled by one view to training.

    Sentences with a probability of zero are never selected; fewer than
    convergence_threshold counts as convergence.
    """

    def accept(sentence: S) -> bool:
        probability = sentence.labeling_probability(selection_view)
        return probability >= prob_threshold and probability != 0

    return _select(
        pool, training,
        score=lambda s: s.labeling_probability(selection_view),
        accept=accept,
        number_threshold=number_threshold,
        too_few=lambda count: count < convergence_threshold,
        log_selection=log_selection, log_path=log_path, report=report,
        describe=lambda s: s.format_labeling(selection_view),
    )


def move_to_training(training: list[S], unlabeled: list[S], pool: list[S],
                     method: int, selection: int, selection_view: int,
                     pool_usage: int, prob_threshold: float,
                     agree_threshold: float, number_threshold: int,
                     convergence_threshold: int, log_selection: int,
                     log_path: str | Path | None,
                     report: Report | None) -> int:
    """Move labeled sentences from the pool to training and tidy the pool.

    Without selection the whole pool moves. With selection, the chosen
    sentences move and the rest are handled according to pool_usage.
    Returns the number of sentences moved.
    """
    selected = 0

    if selection == SelectionCriterion.NONE:
        training.extend(pool)
        selected = len(pool)
        pool.clear()
    elif selection == SelectionCriterion.AGREEMENT:
        selected = select_and_move_agreed(
            pool, training, agree_threshold, number_threshold,
            convergence_threshold, log_selection, log_path, report)
    elif selection == SelectionCriterion.CONFIDENCE:
        if method == 1:
            selected = select_and_move_confident(
                pool, training, prob_threshold, number_threshold,
                convergence_threshold, log_selection, log_path, report)
        elif method == 2:
            selected = select_and_move(
                pool, training, selection_view, prob_threshold,
                number_threshold, convergence_threshold, log_selection,
                log_path, report)

    if selection == SelectionCriterion.NONE:
        return selected

    if pool_usage in (PoolUsage.NONE, PoolUsage.ITERATE_WHOLE):
        if selected == 0:
            pool.clear()
    elif pool_usage == PoolUsage.REMOVE_UNSELECTED:
        pool.clear()
    elif pool_usage == PoolUsage.RETURN_TO_FRONT:
        if selected == 0:
            if len(unlabeled) >= len(pool) // 2:
                unlabeled.extend(pool)
        else:
            unlabeled[:0] = pool
        pool.clear()
    elif pool_usage == PoolUsage.RETURN_TO_END:
        if selected == 0:
            if len(unlabeled) >= len(pool) // 2:
                unlabeled.extend(pool)
        else:
            unlabeled.extend(pool)
        pool.clear()

    return selected