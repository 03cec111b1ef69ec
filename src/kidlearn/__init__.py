"""KidLearn: adaptive difficulty for a children's English-learning app."""

__version__ = "0.1.0"
