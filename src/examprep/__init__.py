"""ExamPrep: multiple-choice certification exam practice API."""

__version__ = "0.1.0"
