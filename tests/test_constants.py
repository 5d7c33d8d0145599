import pytest

from srlcotrain.constants import (
    CommonLabelSelection,
    Feature,
    FEATURE_VIEW_COUNT,
    View,
    WordSpan,
    feature_set,
    is_aux_verb,
    is_core_arg,
    is_wh_word,
)


def test_word_span_length_is_inclusive():
    span = WordSpan(3, 7)
    assert len(span) == 5
    assert len(WordSpan(4, 4)) == 1


def test_word_span_membership():
    span = WordSpan(2, 5)
    assert 2 in span
    assert 5 in span
    assert 1 not in span
    assert 6 not in span
    assert "3" not in span


def test_word_span_rejects_reversed_bounds():
    with pytest.raises(ValueError):
        WordSpan(5, 2)


@pytest.mark.parametrize(
    "number, size",
    [(1, 16), (2, 10), (3, 17), (4, 23), (6, 12), (7, 21), (8, 20)],
)
def test_feature_set_sizes(number, size):
    assert len(feature_set(number)) == size


def test_complete_set_joins_constituent_and_dependency_sets():
    assert feature_set(5) == feature_set(2) + feature_set(3)


def test_extended_sets_start_with_their_base_sets():
    assert feature_set(1)[: len(feature_set(2))] == feature_set(2)
    assert feature_set(4)[: len(feature_set(3))] == feature_set(3)
    assert feature_set(7)[: len(feature_set(3))] == feature_set(3)


def test_feature_sets_have_no_duplicates():
    for number in range(1, 9):
        features = feature_set(number)
        assert len(set(features)) == len(features)


@pytest.mark.parametrize("number", [0, 9, -1])
def test_unknown_feature_set_raises(number):
    with pytest.raises(ValueError):
        feature_set(number)


def test_feature_set_codes_fixed_by_source():
    constituent = feature_set(1)
    assert constituent[0] == 1
    assert constituent[0] == Feature.PT
    assert constituent[10] == 101
    assert constituent[10] == Feature.PL
    dependency = feature_set(3)
    assert dependency[0] == 52
    assert dependency[0] == Feature.AWR
    assert Feature.AWF not in dependency
    assert Feature.POSITION not in feature_set(5)


def test_views_and_selection_codes():
    assert View.COMMON == 0
    assert FEATURE_VIEW_COUNT == len([v for v in View if v != View.COMMON])
    assert CommonLabelSelection.CONFIDENCE_ONLY == 4
    assert CommonLabelSelection(2) is CommonLabelSelection.AGREEMENT_CONFIDENCE


def test_word_lists():
    assert is_aux_verb("been")
    assert is_aux_verb("gets")
    assert not is_aux_verb("run")
    assert not is_aux_verb("")
    assert is_core_arg("A0")
    assert is_core_arg("AA")
    assert not is_core_arg("AM-TMP")
    assert is_wh_word("whom")
    assert not is_wh_word("that")