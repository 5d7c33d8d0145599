[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "srlcotrain"
version = "1.0.0"
description = "Co-training of two-view semantic role labelling classifiers over a pool of unlabeled sentences"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "semantic role labelling",
    "co-training",
    "semi-supervised learning",
    "conll",
    "nlp",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Natural Language :: English",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: Text Processing :: Linguistic",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["srlcotrain"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
