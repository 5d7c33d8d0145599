# srlcotrain

Co-training for semantic role labelling. Two classifiers, each working on a
different view (feature set) of the same sentences, label a pool of unlabeled
sentences; the whole pool, or its most agreed-upon or most confident
labelings, is moved into the training data and the classifiers are
retrained. After every round the evaluation sets are labelled by each view
and by a common labeling chosen between the views, and each labeling is
written out as a CoNLL props file.

Two co-training methods are supported:

- **common training set** (`srlcotrain.cotraining.co_train_common`) – both
  views are retrained on one shared training set labelled with the common
  label chosen between the views;
- **separate training sets** (`srlcotrain.separate.co_train_separate`) – each
  view keeps its own training and unlabeled data and is retrained on
  sentences labelled by the other view. It stops as soon as either view runs
  out of unlabeled data.

The package has no third-party dependencies.

## Modules

| module | contents |
| ------ | -------- |
| `srlcotrain.constants` | default corpus and log locations, `Feature`, `feature_set`, `CommonLabelSelection`, `View`, `SpanRelation`, `Family`, `WordSpan`, word lists with `is_aux_verb`, `is_core_arg`, `is_wh_word` |
| `srlcotrain.params` | `CoTrainingConfig`, `CorpusFiles`, `parse_config`, `load_config`, `usage`, `ConfigError` |
| `srlcotrain.selection` | `add_to_training`, `move_to_training`, `select_and_move_agreed`, `select_and_move_confident`, `select_and_move`, `SelectionCriterion`, `PoolUsage`, the `PoolSentence` protocol |
| `srlcotrain.cotraining` | `co_train_common`, `evaluate_iteration`, `set_selected_prd_labeling`, `order_pool`, `data_used_so_far`, `Reporter`, `EvaluationSet`, the `Classifier` and `PropsSaver` protocols |
| `srlcotrain.separate` | `co_train_separate` |
| `srlcotrain.runner` | `run`, `train_base_classifiers`, `label_base`, `log_file_name`, `write_sample_log`, the `Workbench` protocol, `StageError` |

## Parameter files

A run is described by a plain text parameter file, one option and its value
per line. Lines starting with `#` are comments and unknown options are
ignored.

```
# co-training with a common training set
-c 1
-s 1000
-u 10000
-fs 1,3
-sc 2
-cl 2
-p 300
-pu 3
-pt 0.9
-nt 100
-r 1
-tst 2
```

The most important options:

| option | meaning |
| ------ | ------- |
| `-c`   | co-training method (1: common training set, 2: separate training sets) |
| `-s`   | seed size (0 loads every labeled sentence) |
| `-u`   | unlabeled size (0 trains and evaluates the base classifiers only) |
| `-fs`  | feature set of each view, e.g. `1,3` |
| `-sc`  | selection criterion (0: none, 1: agreement-based, 2: confidence-based) |
| `-cl`  | common label selection (1: agreement only, 2: agreement then confidence, 3: agreement then preferred view, 4: confidence only) |
| `-p`   | pool size (0: the whole unlabeled set is one pool) |
| `-pu`  | pool usage when selection is used (0–4, see `PoolUsage`) |
| `-pq`  | pool ordering (1: shorter first, 2: mediate lengths first, 3: simpler first) |
| `-pt`, `-at`, `-nt` | probability, agreement and number thresholds for selection |
| `-r`   | remove sentences from the pool once they are labeled (1/0) |
| `-si`  | explicit number of iterations |
| `-ls`  | selection logging (0: none, 1: selected, 2: selected and filtered) |
| `-tst` | evaluation sets (1: development, 2: + WSJ test, 3: + Brown test) |

The full list, including the corpus file options, is returned as text by
`srlcotrain.params.usage`. Corpus file options take a file name that is
joined to the default directory of its corpus.

When the separate-training-sets method is chosen together with
agreement-based selection, selection falls back to confidence-based.

## Reading a configuration

```python
from srlcotrain.params import load_config, parse_config, usage

config = load_config("cotrain.params")
print(config.test_sets())          # [("dev", CorpusFiles(...)), ...]
print(config.output_base("dev"))   # ../../output/devel.24.props

config = parse_config(["-c 2", "-sc 1", "-p 300"])
assert config.selection == 2

print(usage("cotrain"))
```

A file that cannot be opened, an option without a value or a value that is
not a number raises `srlcotrain.params.ConfigError`.

## Feature sets

The eight predefined feature sets can be looked up by number:

```python
from srlcotrain.constants import feature_set

print(feature_set(3))
```

An unknown number raises `ValueError`.

## Running an experiment

`srlcotrain.runner.run(config, workbench, reporter, quality_keys=None)`
loads the seed and evaluation corpora, generates samples, trains the base
classifier of each view, labels the evaluation sets with them (files named
`<base>.<view>.0`, view 0 being the common labeling) and, when an unlabeled
size is given, loads the unlabeled data and runs the chosen co-training
method, writing `<base>.<view>.<iteration>` after every round. It returns the
number of co-training iterations. A stage that fails raises
`srlcotrain.runner.StageError`.

`Reporter(log_stream, console, errors)` writes progress messages to the
console (standard output by default) and to a log stream; `log_file_name`
builds a run log name such as `../../log/CoTraining.1.[2024-01-31-12-00].log`.

`quality_keys` maps pool ordering 1, 2 and 3 to sort keys for sentences; it
is needed only when `-pq` asks for an ordering and a pool is used.

## What you supply

The package holds the co-training procedure, not the language processing.
It does not read CoNLL corpora, extract features, train or apply a
maximum-entropy model, or write props files itself. These come from objects
you provide:

- a `Workbench` that loads labeled and unlabeled corpora, generates samples,
  creates classifiers and returns a props saver;
- `Classifier` objects with `train(...)` and `classify(sentences, view,
  global_opt)`;
- a `PropsSaver` with `save(sentences, view, path)`;
- sentences with `set_selected_prd_labels(method, preferred_view)` and, for
  selection, the `PoolSentence` methods `labeling_agreement`,
  `labeling_probability`, `format_labelings` and `format_labeling`.

There is no command-line program; runs are started from Python with
`srlcotrain.runner.run`.