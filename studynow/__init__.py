"""StudyNow - exam-aware spaced repetition study planning"""

__version__ = "1.0.0"
