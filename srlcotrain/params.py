"""Reading the co-training parameter file into a configuration."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .constants import (
    DEFAULT_CONLL_DEV_WSJ_PROPS_NAME,
    DEFAULT_CONLL_DEV_WSJ_SYNT_CHA_NAME,
    DEFAULT_CONLL_DEV_WSJ_SYNT_DEP_NAME,
    DEFAULT_CONLL_DEV_WSJ_WORDS_NAME,
    DEFAULT_CONLL_LABELED_PATH,
    DEFAULT_CONLL_TEST_BROWN_PROPS_NAME,
    DEFAULT_CONLL_TEST_BROWN_SYNT_CHA_NAME,
    DEFAULT_CONLL_TEST_BROWN_SYNT_DEP_NAME,
    DEFAULT_CONLL_TEST_BROWN_WORDS_NAME,
    DEFAULT_CONLL_TEST_DATA_PATH,
    DEFAULT_CONLL_TEST_OUTPUT_PATH,
    DEFAULT_CONLL_TEST_WSJ_PROPS_NAME,
    DEFAULT_CONLL_TEST_WSJ_SYNT_CHA_NAME,
    DEFAULT_CONLL_TEST_WSJ_SYNT_DEP_NAME,
    DEFAULT_CONLL_TEST_WSJ_WORDS_NAME,
    DEFAULT_CONLL_TRAIN_PROPS_NAME,
    DEFAULT_CONLL_TRAIN_SYNT_CHA_NAME,
    DEFAULT_CONLL_TRAIN_SYNT_DEP_NAME,
    DEFAULT_CONLL_TRAIN_WORDS_NAME,
    DEFAULT_CONLL_UNLABELED_DATA_NAME,
    DEFAULT_CONLL_UNLABELED_PATH,
    DEFAULT_CONLL_UNLABELED_SYNT_DEP_NAME,
    MAX_TRAIN_NEGATIVE,
    MAX_TRAIN_POSITIVE,
    CommonLabelSelection,
)


class ConfigError(Exception):
    """Raised when the parameter file cannot be read or holds a bad value."""


def _join(base: str, name: str) -> str:
    return f"{base}/{name}"


@dataclass
class CorpusFiles:
    """The four files that make up one CoNLL data set."""

    words: str
    syntax: str
    dependency: str
    props: str

    @classmethod
    def under(cls, base: str, words: str, syntax: str, dependency: str,
              props: str) -> CorpusFiles:
        return cls(_join(base, words), _join(base, syntax),
                   _join(base, dependency), _join(base, props))

    def paths(self) -> tuple[str, str, str, str]:
        """Return the words, syntax, dependency and props paths in order."""
        return (self.words, self.syntax, self.dependency, self.props)


_OUTPUT_NAMES = {
    "dev": DEFAULT_CONLL_DEV_WSJ_PROPS_NAME,
    "wsj": DEFAULT_CONLL_TEST_WSJ_PROPS_NAME,
    "brown": DEFAULT_CONLL_TEST_BROWN_PROPS_NAME,
}


@dataclass
class CoTrainingConfig:
    """All settings of a co-training run, with the program's defaults."""

    method: int = 1
    seed_size: int = 0
    unlabeled_size: int = 0
    max_positive: int = MAX_TRAIN_POSITIVE
    max_negative: int = MAX_TRAIN_NEGATIVE
    feature_sets: tuple[int, ...] = (1, 3)
    global_opt: bool = False
    me_iterations: int = 350
    me_method: str = "lbfgs"
    gaussian: float = 1.0
    pool_size: int = 0
    selection: int = 0
    cl_selection: int = int(CommonLabelSelection.AGREEMENT_CONFIDENCE)
    preferred_view: int = 1
    pool_usage: int = 3
    prob_threshold: float = 0.0
    agree_threshold: float = 1.0
    number_threshold: int = 0
    remove_labeled: bool = False
    st_iterations: int = 0
    pool_quality: int = 0
    log_selection: int = 0
    testing: int = 1

    labeled: CorpusFiles = field(default_factory=lambda: CorpusFiles.under(
        DEFAULT_CONLL_LABELED_PATH, DEFAULT_CONLL_TRAIN_WORDS_NAME,
        DEFAULT_CONLL_TRAIN_SYNT_CHA_NAME, DEFAULT_CONLL_TRAIN_SYNT_DEP_NAME,
        DEFAULT_CONLL_TRAIN_PROPS_NAME))
    unlabeled_data: str = _join(DEFAULT_CONLL_UNLABELED_PATH,
                                DEFAULT_CONLL_UNLABELED_DATA_NAME)
    unlabeled_dependency: str = _join(DEFAULT_CONLL_UNLABELED_PATH,
                                      DEFAULT_CONLL_UNLABELED_SYNT_DEP_NAME)
    dev: CorpusFiles = field(default_factory=lambda: CorpusFiles.under(
        DEFAULT_CONLL_TEST_DATA_PATH, DEFAULT_CONLL_DEV_WSJ_WORDS_NAME,
        DEFAULT_CONLL_DEV_WSJ_SYNT_CHA_NAME, DEFAULT_CONLL_DEV_WSJ_SYNT_DEP_NAME,
        DEFAULT_CONLL_DEV_WSJ_PROPS_NAME))
    test_wsj: CorpusFiles = field(default_factory=lambda: CorpusFiles.under(
        DEFAULT_CONLL_TEST_DATA_PATH, DEFAULT_CONLL_TEST_WSJ_WORDS_NAME,
        DEFAULT_CONLL_TEST_WSJ_SYNT_CHA_NAME, DEFAULT_CONLL_TEST_WSJ_SYNT_DEP_NAME,
        DEFAULT_CONLL_TEST_WSJ_PROPS_NAME))
    test_brown: CorpusFiles = field(default_factory=lambda: CorpusFiles.under(
        DEFAULT_CONLL_TEST_DATA_PATH, DEFAULT_CONLL_TEST_BROWN_WORDS_NAME,
        DEFAULT_CONLL_TEST_BROWN_SYNT_CHA_NAME,
        DEFAULT_CONLL_TEST_BROWN_SYNT_DEP_NAME,
        DEFAULT_CONLL_TEST_BROWN_PROPS_NAME))
    output_path: str = DEFAULT_CONLL_TEST_OUTPUT_PATH

    # parameter lines as read, for echoing into the run log
    source_lines: tuple[str, ...] = field(default=(), compare=False)

    def test_sets(self) -> list[tuple[str, CorpusFiles]]:
        """Return the evaluation sets enabled by the testing level, in order."""
        sets = [("dev", self.dev), ("wsj", self.test_wsj),
                ("brown", self.test_brown)]
        return sets[:max(0, min(self.testing, len(sets)))]

    def output_base(self, name: str) -> str:
        """Return the base path of labeled props written for an evaluation set."""
        try:
            return _join(self.output_path, _OUTPUT_NAMES[name])
        except KeyError:
            raise ValueError(f"unknown evaluation set {name!r}") from None


def _to_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise ConfigError(f"not an integer: {text!r}") from None


def _to_float(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise ConfigError(f"not a number: {text!r}") from None


def _to_bool(text: str) -> bool:
    return _to_int(text) != 0


def _to_feature_sets(text: str) -> tuple[int, ...]:
    parts = [p for p in text.replace(" ", ",").split(",") if p]
    return tuple(_to_int(p) for p in parts)


_VALUE_OPTIONS: dict[str, tuple[str, Callable[[str], Any]]] = {
    "-c": ("method", _to_int),
    "-s": ("seed_size", _to_int),
    "-u": ("unlabeled_size", _to_int),
    "-mxp": ("max_positive", _to_int),
    "-mxn": ("max_negative", _to_int),
    "-go": ("global_opt", _to_bool),
    "-fs": ("feature_sets", _to_feature_sets),
    "-mi": ("me_iterations", _to_int),
    "-mp": ("me_method", str),
    "-g": ("gaussian", _to_float),
    "-p": ("pool_size", _to_int),
    "-sc": ("selection", _to_int),
    "-cl": ("cl_selection", _to_int),
    "-pv": ("preferred_view", _to_int),
    "-pu": ("pool_usage", _to_int),
    "-pt": ("prob_threshold", _to_float),
    "-at": ("agree_threshold", _to_float),
    "-nt": ("number_threshold", _to_int),
    "-r": ("remove_labeled", _to_bool),
    "-si": ("st_iterations", _to_int),
    "-pq": ("pool_quality", _to_int),
    "-ls": ("log_selection", _to_int),
    "-tst": ("testing", _to_int),
}

# option -> (corpus set attribute or None, file attribute, base directory)
_FILE_OPTIONS: dict[str, tuple[str | None, str, str]] = {
    "-ltw": ("labeled", "words", DEFAULT_CONLL_LABELED_PATH),
    "-lts": ("labeled", "syntax", DEFAULT_CONLL_LABELED_PATH),
    "-ltd": ("labeled", "dependency", DEFAULT_CONLL_LABELED_PATH),
    "-ltp": ("labeled", "props", DEFAULT_CONLL_LABELED_PATH),
    "-utd": (None, "unlabeled_data", DEFAULT_CONLL_UNLABELED_PATH),
    "-utds": (None, "unlabeled_dependency", DEFAULT_CONLL_UNLABELED_PATH),
    "-twsjw": ("test_wsj", "words", DEFAULT_CONLL_TEST_DATA_PATH),
    "-twsjs": ("test_wsj", "syntax", DEFAULT_CONLL_TEST_DATA_PATH),
    "-twsjd": ("test_wsj", "dependency", DEFAULT_CONLL_TEST_DATA_PATH),
    "-twsjp": ("test_wsj", "props", DEFAULT_CONLL_TEST_DATA_PATH),
    "-dwsjw": ("dev", "words", DEFAULT_CONLL_TEST_DATA_PATH),
    "-dwsjs": ("dev", "syntax", DEFAULT_CONLL_TEST_DATA_PATH),
    "-dwsjd": ("dev", "dependency", DEFAULT_CONLL_TEST_DATA_PATH),
    "-dwsjp": ("dev", "props", DEFAULT_CONLL_TEST_DATA_PATH),
    "-tbrww": ("test_brown", "words", DEFAULT_CONLL_TEST_DATA_PATH),
    "-tbrws": ("test_brown", "syntax", DEFAULT_CONLL_TEST_DATA_PATH),
    "-tbrwd": ("test_brown", "dependency", DEFAULT_CONLL_TEST_DATA_PATH),
    "-tbrwp": ("test_brown", "props", DEFAULT_CONLL_TEST_DATA_PATH),
}


def parse_config(lines: Iterable[str]) -> CoTrainingConfig:
    """Build a configuration from parameter lines of the form '-opt value'.

    Lines starting with '#' are comments; unknown options are ignored.
    """
    config = CoTrainingConfig()
    echoed: list[str] = []
    for raw in lines:
        line = raw.rstrip("\r\n")
        if line.startswith("#"):
            continue
        tokens = line.split()
        if not tokens:
            continue
        echoed.append(line)
        option = tokens[0]
        if option not in _VALUE_OPTIONS and option not in _FILE_OPTIONS:
            continue
        if len(tokens) < 2:
            raise ConfigError(f"option {option} has no value")
        value = tokens[1]
        if option in _VALUE_OPTIONS:
            name, convert = _VALUE_OPTIONS[option]
            setattr(config, name, convert(value))
        else:
            group, name, base = _FILE_OPTIONS[option]
            target = config if group is None else getattr(config, group)
            setattr(target, name, _join(base, value))

    # Separate training sets cannot use agreement-based selection.
    if config.method == 2 and config.selection == 1:
        config.selection = 2
    config.source_lines = tuple(echoed)
    return config


def load_config(path: str | Path) -> CoTrainingConfig:
    """Read and parse a parameter file."""
    try:
        with open(path, encoding="utf-8") as stream:
            return parse_config(stream)
    except OSError as exc:
        raise ConfigError(f"Can't open file: {path}") from exc


def usage(prog: str) -> str:
    """Return the help text describing the parameter file."""
    return f"""Usage: {prog} [the file containing input parameters]
(some options cannot meet each other; e.g. pool size and explicit iteration number cannot both be non-zero)

possible parameters: (each in a new line in the parameter file)

 <-c[Co-training method (1: Common training set; 2: Separate training set)]>
 <-s[Seed size]>
 <-u[Unlabeled size (0: only base classifier)]>
 <-mxp[Maximum positive samples to be generated and used]>
 <-mxn[Maximum negative samples to be generated and used]>
 <-fs[Feature sets for each view (e.g. -fs 1,3: 1 for view 1 and 3 for view 2)]>
 <-go[Global optimization (0: no; 1: yes)]>
 <-mi[ME iteration number]>
 <-mp[ME parameter estimation method (lbfgs or gis)]>
 <-g[Gaussian parameter]>
 <-sc[Selection criterion(0: no selection;
                          1: agreement-based;
                          2: confidence-based)]>
 <-cl[Common label selection method (0: no common label selection;
                                     1: agreement-only (NULL for non-agreed);
                                     2: agreement-confidence;
                                     3: agreement-prefered-view;
                                     4: confidenc-only)]>
 <-pv[Pereferred view when -cl is set to agreement-prefered-view]>
 <-p[Pool size (0 if not used)]>
 <-pu[Pool usage when selection is used (0: no pool used;
                                         1: iterate to select whole;
                                         2: iterate once and remove unselected;
                                         3: iterate once and return unselected to the begining of unlabeled data;
                                         4: iterate once and return unselected to the end of unlabeled data)>
 <-pq[Quality selection for pool (0: not used; 1: shorters first; 2: mediate lengths first; 3: simplers first)]>
 <-pt[Selection probability threshold (0 if no threshold)]>
 <-at[Agreement level threshold (1 for full agreement)]>
 <-nt[Selection number threshold (0 if no threshold)]>
 <-r[Remove/Not Remove once labeled (1/0)]>
 <-si[Explicit iteration number when p0, c0, r0 (0 if not used)]>
 <-ls[Log labeling selection (0: don't log; 1: only selected; 2: selected and filtered)]>
 <-tst[Testing frameworks (1: development; 2: development & wsj; 3: development, wsj, brown]>
 <-ltw[CoNLL training words file name]>
 <-lts[CoNLL training cfg syntax file name]>
 <-ltd[CoNLL training dependency syntax file name]>
 <-ltp[CoNLL training propositions file name]>
 <-utd[Unlabeled training data file name]>
 <-utds[Unlabeled training dependency syntax file name]>
 <-twsjw[CoNLL wsj test words file name]>
 <-twsjs[CoNLL wsj test cfg syntax file name]>
 <-twsjd[CoNLL wsj test dependency syntax file name]>
 <-twsjp[CoNLL wsj test propositions file name]>
 <-dwsjw[CoNLL development words file name]>
 <-dwsjs[CoNLL development cfg syntax file name]>
 <-dwsjd[CoNLL development dependency syntax file name]>
 <-dwsjp[CoNLL development propositions file name]>
 <-tbrww[CoNLL Brown test words file name]>
 <-tbrws[CoNLL Brown test cfg syntax file name]>
 <-tbrwd[CoNLL Brown test dependency syntax file name]>
 <-tbrwp[CoNLL Brown test propositions file name]>
"""