import io

import pytest

from srlcotrain.constants import CommonLabelSelection, View
from srlcotrain.cotraining import (
    EvaluationSet,
    Reporter,
    co_train_common,
    data_used_so_far,
    evaluate_iteration,
    order_pool,
    set_selected_prd_labeling,
)
from srlcotrain.params import CoTrainingConfig


class FakeSentence:
    def __init__(self, name, length=1, probability=0.0, agreement=0.0):
        self.name = name
        self.length = length
        self.probability = probability
        self.agreement = agreement
        self.selected = []

    def set_selected_prd_labels(self, method, preferred_view):
        self.selected.append((method, preferred_view))

    def labeling_agreement(self):
        return self.agreement

    def labeling_probability(self, view):
        return self.probability

    def format_labelings(self, view_count):
        return self.name

    def format_labeling(self, view):
        return self.name


class FakeClassifier:
    def __init__(self):
        self.classified = []
        self.trained = []

    def classify(self, sentences, view, global_opt):
        self.classified.append((len(sentences), view, global_opt))

    def train(self, sentences, view, label_view, use_gold, cutoff, iterations,
              method, gaussian, save_model, model_file):
        self.trained.append((list(sentences), view, label_view, use_gold))


class FakeSaver:
    def __init__(self, failing=()):
        self.saved = []
        self.failing = set(failing)

    def save(self, sentences, view, path):
        if path in self.failing:
            raise OSError("cannot write")
        self.saved.append((path, view))


def quiet():
    return Reporter(log_stream=io.StringIO(), console=io.StringIO(),
                    errors=io.StringIO())


def test_reporter_say_and_log():
    log, console = io.StringIO(), io.StringIO()
    reporter = Reporter(log_stream=log, console=console)
    reporter.say("hello\n")
    reporter.log("only log\n")
    assert console.getvalue() == "hello\n"
    assert log.getvalue() == "hello\nonly log\n"


def test_reporter_warn_goes_to_errors():
    log, errors = io.StringIO(), io.StringIO()
    reporter = Reporter(log_stream=log, console=io.StringIO(), errors=errors)
    reporter.warn("bad\n")
    assert errors.getvalue() == "bad\n"
    assert log.getvalue() == "bad\n"


def test_set_selected_prd_labeling():
    sentences = [FakeSentence(str(i)) for i in range(3)]
    reporter = quiet()
    count = set_selected_prd_labeling(sentences, 2, 1, reporter)
    assert count == 3
    assert all(s.selected == [(2, 1)] for s in sentences)
    assert "3 sentences processed" in reporter.log_stream.getvalue()


def test_order_pool_uses_key():
    sentences = [FakeSentence("a", 5), FakeSentence("b", 2), FakeSentence("c", 9)]
    order_pool(sentences, 1, {1: lambda s: s.length})
    assert [s.name for s in sentences] == ["b", "a", "c"]


def test_order_pool_quality_zero_keeps_order():
    sentences = [FakeSentence("a", 5), FakeSentence("b", 2)]
    order_pool(sentences, 0, {1: lambda s: s.length})
    assert [s.name for s in sentences] == ["a", "b"]


def test_order_pool_missing_key():
    with pytest.raises(ValueError):
        order_pool([FakeSentence("a")], 2, {})


def test_data_used_without_pool_counts_remaining():
    assert data_used_so_far(10, 50, 50, 7, False, 0) == 10 + 50


def test_data_used_with_pool_counts_pool():
    assert data_used_so_far(10, 50, 40, 7, False, 1) == 10 + 7


def test_data_used_with_removal_counts_taken():
    all_removed = data_used_so_far(10, 50, 0, 0, True, 0)
    none_removed = data_used_so_far(10, 50, 50, 0, True, 0)
    assert all_removed == 60
    assert none_removed == 10


def test_evaluate_iteration_paths_and_common_labels():
    dev = EvaluationSet("dev", [FakeSentence("x")], "out/devel.24.props",
                        "development")
    wsj = EvaluationSet("wsj", [FakeSentence("y")], "out/test.wsj.props")
    classifiers = [FakeClassifier(), FakeClassifier()]
    saver = FakeSaver()
    written = evaluate_iteration(classifiers, [dev, wsj], saver, 3, True, 1,
                                 quiet())
    assert written == [
        "out/devel.24.props.1.3", "out/test.wsj.props.1.3",
        "out/devel.24.props.2.3", "out/test.wsj.props.2.3",
        "out/devel.24.props.0.3", "out/test.wsj.props.0.3",
    ]
    assert classifiers[0].classified == [(1, 1, True), (1, 1, True)]
    assert classifiers[1].classified == [(1, 2, True), (1, 2, True)]
    assert dev.sentences[0].selected == [(CommonLabelSelection.CONFIDENCE_ONLY, 1)]
    assert wsj.title == "wsj"


def test_evaluate_iteration_failed_save_is_skipped():
    dev = EvaluationSet("dev", [FakeSentence("x")], "o")
    saver = FakeSaver(failing={"o.1.0"})
    reporter = quiet()
    written = evaluate_iteration([FakeClassifier(), FakeClassifier()], [dev],
                                 saver, 0, False, 1, reporter)
    assert written == ["o.2.0", "o.0.0"]
    assert "not successful" in reporter.errors.getvalue()


def test_co_train_common_without_removal_runs_explicit_iterations():
    seed = [FakeSentence("s1"), FakeSentence("s2")]
    unlabeled = [FakeSentence(f"u{i}") for i in range(4)]
    originals = list(unlabeled)
    config = CoTrainingConfig(st_iterations=2)
    classifiers = [FakeClassifier(), FakeClassifier()]
    dev = EvaluationSet("dev", [FakeSentence("d")], "dev")
    saver = FakeSaver()

    iterations = co_train_common(classifiers, seed, unlabeled, [dev], saver,
                                 config, quiet())

    assert iterations == 2
    assert seed[:2] == [s for s in seed[:2]]
    assert seed[2:] == originals
    assert len(seed) == 6
    assert unlabeled == []
    assert len(classifiers[0].trained) == 2
    assert all(t[2] == View.COMMON and t[3] is False
               for t in classifiers[0].trained)
    paths = [p for p, _ in saver.saved]
    assert "dev.0.1" in paths and "dev.0.2" in paths


def test_co_train_common_removal_without_selection_moves_all():
    seed = [FakeSentence("s")]
    unlabeled = [FakeSentence(f"u{i}") for i in range(3)]
    originals = list(unlabeled)
    config = CoTrainingConfig(remove_labeled=True, selection=0)
    classifiers = [FakeClassifier(), FakeClassifier()]

    iterations = co_train_common(classifiers, seed, unlabeled, [], FakeSaver(),
                                 config, quiet())

    assert iterations == 1
    assert seed[1:] == originals
    assert unlabeled == []
    assert classifiers[1].trained[0][1] == 2


def test_co_train_common_converged_pools_train_nothing():
    seed = [FakeSentence("s")]
    unlabeled = [FakeSentence(f"u{i}", probability=0.9) for i in range(7)]
    config = CoTrainingConfig(remove_labeled=True, selection=2, pool_size=3,
                              pool_usage=2)
    classifiers = [FakeClassifier(), FakeClassifier()]

    iterations = co_train_common(classifiers, seed, unlabeled, [], FakeSaver(),
                                 config, quiet())

    assert iterations == 3
    assert classifiers[0].trained == []
    assert len(seed) == 1
    assert unlabeled == []