"""Co-training of two-view semantic role labelling classifiers.

Configuration parsing, pool selection, the common and separate co-training
procedures and a runner that drives a whole experiment.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]