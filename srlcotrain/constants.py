"""Corpus locations, feature sets, label-selection strategies and word lists."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

# Default corpus locations
DEFAULT_CONLL_LABELED_PATH = "../../corpus/labeled"
DEFAULT_CONLL_TRAIN_WORDS_NAME = "train.words.random"
DEFAULT_CONLL_TRAIN_SYNT_CHA_NAME = "train.synt.cha.random"
DEFAULT_CONLL_TRAIN_SYNT_DEP_NAME = "train.synt.dep.random"
DEFAULT_CONLL_TRAIN_PROPS_NAME = "train.props.random"

DEFAULT_CONLL_UNLABELED_PATH = "../../corpus/unlabeled"
DEFAULT_CONLL_UNLABELED_DATA_NAME = "unlabeled.wsj.cha.random.reverse"
DEFAULT_CONLL_UNLABELED_SYNT_DEP_NAME = "unlabeled.wsj.synt.dep.random.reverse"

DEFAULT_CONLL_TEST_DATA_PATH = "../../corpus/test"
DEFAULT_CONLL_TEST_WSJ_WORDS_NAME = "test.wsj.words"
DEFAULT_CONLL_TEST_WSJ_SYNT_CHA_NAME = "test.wsj.synt.cha"
DEFAULT_CONLL_TEST_WSJ_SYNT_DEP_NAME = "test.wsj.synt.dep"
DEFAULT_CONLL_TEST_WSJ_PROPS_NAME = "test.wsj.props"
DEFAULT_CONLL_TEST_BROWN_WORDS_NAME = "test.brown.words"
DEFAULT_CONLL_TEST_BROWN_SYNT_CHA_NAME = "test.brown.synt.cha"
DEFAULT_CONLL_TEST_BROWN_SYNT_DEP_NAME = "test.brown.synt.dep"
DEFAULT_CONLL_TEST_BROWN_PROPS_NAME = "test.brown.props"
DEFAULT_CONLL_DEV_WSJ_WORDS_NAME = "devel.24.words"
DEFAULT_CONLL_DEV_WSJ_SYNT_CHA_NAME = "devel.24.synt.cha"
DEFAULT_CONLL_DEV_WSJ_SYNT_DEP_NAME = "devel.24.synt.dep"
DEFAULT_CONLL_DEV_WSJ_PROPS_NAME = "devel.24.props"

DEFAULT_CONLL_TEST_OUTPUT_PATH = "../../output"

# 0 means no limit
MAX_TRAIN_POSITIVE = 0
MAX_TRAIN_NEGATIVE = 0

# Log and model locations
DEFAULT_LOG_PATH = "../../log"
LOG_LABELED_SAMPLE_GENERATION_ANALYSIS_FILE = "../../log/LabeledSGAnalysis.log"
LOG_UNLABELED_SAMPLE_GENERATION_ANALYSIS_FILE = "../../log/UnlabeledSGAnalysis.log"
LOG_NEGATIVE_SAMPLES_FILE = "../../log/Negatives.log"
LOG_POSITIVE_SAMPLES_FILE = "../../log/Positives.log"
LOG_TEST_SAMPLE_GENERATION_ANALYSIS_FILE = "../../log/TestSGAnalysis.log"
LOG_TEST_SAMPLES_FILE = "../../log/TestSamples.log"
LOG_POOL_SELECTION_FILE_NAME = "../../log/PoolSelection.log"
LOG_SELFTRAINING_OUTPUT_FILE_PREFIX = "../../log/SelfTraining"
LOG_COTRAINING_OUTPUT_FILE_PREFIX = "../../log/CoTraining"
LOG_LEARNING_CURVE_OUTPUT_FILE_PREFIX = "../../log/LCurve"

ZME_TRAINING_SAMPLES_FILE = "../../learning/ZMETrain"
ZME_TRAINING_MODEL_FILE = "../../learning/ZMEModel"
ZME_TEST_SAMPLES_FILE = "../../learning/ZMETest"

# Minimum number of sentences a selection must yield to count as progress
DEFAULT_SELF_TRAINING_CONVERGENCE_SENTENCE_COUNT = 5
DEFAULT_CO_TRAINING_CONVERGENCE_SENTENCE_COUNT = 5
# Minimum number of samples a selection must yield to count as progress
DEFAULT_SELF_TRAINING_CONVERGENCE_SAMPLE_COUNT = 200
DEFAULT_CO_TRAINING_CONVERGENCE_SAMPLE_COUNT = 200

# Number of views used for co-training
FEATURE_VIEW_COUNT = 2


@dataclass(frozen=True)
class WordSpan:
    """An inclusive span of word indices within a sentence, counted from 1."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"span end {self.end} precedes start {self.start}")

    def __len__(self) -> int:
        return self.end - self.start + 1

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and self.start <= index <= self.end


class SpanRelation(IntEnum):
    """Relation of one span of elements to another within a sequence."""

    BEFORE = 0
    AFTER = 1
    EMBEDDED = 2
    INCLUDE = 3
    ALIGNED = 4
    OVERLAPPED = 5


class Family(IntEnum):
    """Family relationships between nodes of a tree."""

    CHILD = 1
    PARENT = 2
    GRANDCHILD = 3
    GRANDPARENT = 4
    SIBLING = 5
    COUSIN = 6
    DESCENDANT = 7
    ANCESTOR = 8


class CommonLabelSelection(IntEnum):
    """Strategy for choosing a label common to all views."""

    AGREEMENT_ONLY = 1
    AGREEMENT_CONFIDENCE = 2
    AGREEMENT_PREFERRED_VIEW = 3
    CONFIDENCE_ONLY = 4


class View(IntEnum):
    """Co-training views; COMMON stands for the selected common labeling."""

    COMMON = 0
    VIEW_1 = 1
    VIEW_2 = 2


class Feature(IntEnum):
    """Feature types used to describe argument candidates."""

    # constituent-based
    PT = 1          # phrase type
    PATH = 2        # path
    CW = 3          # content word
    CWL = 4         # content word lemma
    CWP = 5         # content word POS
    GC = 6          # governing category
    PS = 7          # predicate subcategorization
    CS = 8          # constituent subcategorization
    CVNCP = 9       # count of clauses + NP + VP in path
    CPD = 10        # constituent-predicate distance
    HLC = 11        # head word location in constituent
    PTHLEN = 12     # path length
    POSITION = 23   # position
    PV = 14         # predicate voice
    PF = 15         # predicate surface form

    # dependency-based
    AWF = 51        # argument word form
    AWR = 52        # argument word relation with its head
    PR = 53         # predicate relation with its head
    AWHF = 54       # form of head of argument word
    AWHL = 55       # lemma of head of argument word
    AWHP = 56       # POS of head of argument word
    PCRP = 57       # relation pattern of predicate's children
    AWCRP = 58      # relation pattern of argument word's children
    PCPP = 59       # POS pattern of predicate's children
    AWCPP = 60      # POS pattern of argument word's children
    RPATH = 61      # relation path argument word -> predicate
    ARPATH = 62     # relation path with left/right direction
    PPATH = 63      # POS path argument word -> predicate
    APPATH = 64     # POS path with left/right direction
    FAMREL = 65     # family relationship argument word / predicate
    PSRP = 66       # relation pattern of predicate's siblings
    PSPP = 67       # POS pattern of predicate's siblings
    PPSRP = 68      # relation pattern of predicate's parent's siblings
    PPSPP = 69      # POS pattern of predicate's parent's siblings
    AWSRP = 70      # relation pattern of argument word's siblings
    AWSPP = 71      # POS pattern of argument word's siblings
    AWPSRP = 72     # relation pattern of argument word's parent's siblings
    AWPSPP = 73     # POS pattern of argument word's parent's siblings
    AWLRF = 74      # forms of leftmost and rightmost dependents
    AWLSF = 75      # form of left sibling of argument word
    LCAPOS = 76     # POS of least common ancestor
    AWLCRPATH = 77  # relation path to least common ancestor
    AWLCPPATH = 78  # POS path to least common ancestor
    DPTHLEN = 79    # dependency path length
    LPATH = 80      # lemma path argument word -> predicate
    AWLCLPATH = 81  # lemma path to least common ancestor
    LCRRPATH = 82   # relation path least common ancestor -> root
    LCRPPATH = 83   # POS path least common ancestor -> root
    DDPTHLEN = 84   # up and down dependency path lengths
    ISCAP = 85      # argument word capitalised
    ISWH = 86       # argument word is a WH word

    # general
    PL = 101        # predicate lemma
    PP = 102        # predicate POS
    PVP = 103       # predicate voice + position
    HW = 104        # head word
    HWL = 105       # head word lemma
    HWP = 106       # head word POS
    CPI = 107       # compound predicate identifier

    TRIAL = 200     # slot for trying out a new feature


_F = Feature

_CONSTITUENT = (_F.PT, _F.PATH, _F.CWL, _F.CWP, _F.GC, _F.PS, _F.CS,
                _F.CVNCP, _F.CPD, _F.HLC)
_DEPENDENCY = (_F.AWR, _F.PR, _F.AWHL, _F.AWHP, _F.PCRP, _F.AWCRP, _F.PCPP,
               _F.AWCPP, _F.ARPATH, _F.APPATH, _F.FAMREL, _F.LCAPOS,
               _F.AWLCPPATH, _F.DPTHLEN, _F.LPATH, _F.ISCAP, _F.ISWH)

_FEATURE_SETS: dict[int, tuple[Feature, ...]] = {
    1: _CONSTITUENT + (_F.PL, _F.PP, _F.PVP, _F.HWL, _F.HWP, _F.CPI),
    2: _CONSTITUENT,
    3: _DEPENDENCY,
    4: _DEPENDENCY + (_F.PL, _F.PP, _F.PVP, _F.HWL, _F.HWP, _F.CPI),
    5: _CONSTITUENT + _DEPENDENCY,
    6: _CONSTITUENT + (_F.PP, _F.HWP),
    7: _DEPENDENCY + (_F.PL, _F.PVP, _F.HWL, _F.CPI),
    8: _DEPENDENCY + (_F.PVP, _F.HWL, _F.CPI),
}


def feature_set(number: int) -> tuple[Feature, ...]:
    """Return the features of the numbered feature set (1 to 8)."""
    try:
        return _FEATURE_SETS[number]
    except KeyError:
        raise ValueError(
            f"unknown feature set {number}; expected 1 to {len(_FEATURE_SETS)}"
        ) from None


AUX_VERBS = frozenset({"be", "am", "is", "was", "are", "were", "been", "being",
                       "get", "got", "gotten", "getting", "geting", "gets"})

CORE_ARGS = frozenset({"A0", "A1", "A2", "A3", "A4", "A5", "AA"})

WH_WORDS = frozenset({"what", "which", "who", "how", "whose", "whom",
                      "when", "where", "why"})


def is_aux_verb(word: str) -> bool:
    """Tell whether the word is one of the auxiliary verb forms."""
    return word in AUX_VERBS


def is_core_arg(label: str) -> bool:
    """Tell whether the label names a core argument."""
    return label in CORE_ARGS


def is_wh_word(word: str) -> bool:
    """Tell whether the word is a WH word."""
    return word in WH_WORDS