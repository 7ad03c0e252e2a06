"""
trainingcal: recurring training-session calendar engine.

Turns raw group/session records from the training-center API into concrete,
dated calendar occurrences for month-grid and list views.
"""

__version__ = "0.1.0"
