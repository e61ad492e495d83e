"""Real-time employee check-in/check-out tracker."""

__version__ = "0.1.0"
