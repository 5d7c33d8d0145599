import pytest

from srlcotrain.constants import CommonLabelSelection
from srlcotrain.params import (
    ConfigError,
    CoTrainingConfig,
    CorpusFiles,
    load_config,
    parse_config,
    usage,
)


def test_defaults_follow_program():
    config = parse_config([])
    assert config.method == 1
    assert config.me_iterations == 350
    assert config.me_method == "lbfgs"
    assert config.pool_usage == 3
    assert config.cl_selection == CommonLabelSelection.AGREEMENT_CONFIDENCE
    assert config.agree_threshold == 1.0
    assert config.testing == 1
    assert config.labeled.words == "../../corpus/labeled/train.words.random"
    assert config.unlabeled_data == (
        "../../corpus/unlabeled/unlabeled.wsj.cha.random.reverse")


def test_numeric_and_flag_options():
    config = parse_config([
        "-s 100", "-u 500", "-p 50", "-sc 2", "-pt 0.75",
        "-nt 20", "-r 1", "-go 0", "-mp gis", "-g 2.5",
    ])
    assert config.seed_size == 100
    assert config.unlabeled_size == 500
    assert config.pool_size == 50
    assert config.selection == 2
    assert config.prob_threshold == 0.75
    assert config.number_threshold == 20
    assert config.remove_labeled is True
    assert config.global_opt is False
    assert config.me_method == "gis"
    assert config.gaussian == 2.5


def test_feature_sets_split_on_comma():
    assert parse_config(["-fs 2,4"]).feature_sets == (2, 4)


def test_comments_and_blank_lines_skipped():
    config = parse_config(["# -s 9", "", "   ", "-s 7\n"])
    assert config.seed_size == 7
    assert config.source_lines == ("-s 7",)


def test_unknown_option_ignored_but_echoed():
    config = parse_config(["-zz 4", "-mi 10"])
    assert config.me_iterations == 10
    assert config.source_lines == ("-zz 4", "-mi 10")


def test_separate_method_overrides_agreement_selection():
    assert parse_config(["-c 2", "-sc 1"]).selection == 2
    assert parse_config(["-c 1", "-sc 1"]).selection == 1


def test_file_options_join_base_directories():
    config = parse_config(["-ltw mine.words", "-utds u.dep",
                           "-dwsjp d.props", "-tbrww b.words"])
    assert config.labeled.words == "../../corpus/labeled/mine.words"
    assert config.unlabeled_dependency == "../../corpus/unlabeled/u.dep"
    assert config.dev.props == "../../corpus/test/d.props"
    assert config.test_brown.words == "../../corpus/test/b.words"


def test_missing_value_raises():
    with pytest.raises(ConfigError):
        parse_config(["-s"])


def test_bad_integer_raises():
    with pytest.raises(ConfigError):
        parse_config(["-p many"])


def test_bad_float_raises():
    with pytest.raises(ConfigError):
        parse_config(["-pt high"])


@pytest.mark.parametrize("level,names", [
    (0, []),
    (1, ["dev"]),
    (2, ["dev", "wsj"]),
    (3, ["dev", "wsj", "brown"]),
])
def test_test_sets_follow_level(level, names):
    config = CoTrainingConfig(testing=level)
    assert [name for name, _ in config.test_sets()] == names


def test_test_sets_hold_corpus_files():
    config = CoTrainingConfig(testing=3)
    sets = dict(config.test_sets())
    assert sets["wsj"] is config.test_wsj
    assert sets["brown"] is config.test_brown


def test_output_base():
    config = CoTrainingConfig()
    assert config.output_base("dev") == "../../output/devel.24.props"
    assert config.output_base("wsj") == "../../output/test.wsj.props"
    assert config.output_base("brown") == "../../output/test.brown.props"
    with pytest.raises(ValueError):
        config.output_base("other")


def test_corpus_paths_order():
    files = CorpusFiles("w", "s", "d", "p")
    assert files.paths() == ("w", "s", "d", "p")


def test_load_config_round_trip(tmp_path):
    path = tmp_path / "params.txt"
    path.write_text("# run\n-c 2\n-u 300\n-tst 2\n", encoding="utf-8")
    config = load_config(path)
    assert config == parse_config(["-c 2", "-u 300", "-tst 2"])
    assert config.unlabeled_size == 300


def test_load_config_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.txt")


def test_usage_lists_options():
    text = usage("cotrain")
    assert "cotrain" in text
    for option in ("-c[", "-fs[", "-pu[", "-tbrwp["):
        assert option in text