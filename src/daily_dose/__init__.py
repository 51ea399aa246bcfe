"""Daily Dose - pet nutrition planner."""

__version__ = "0.1.0"
