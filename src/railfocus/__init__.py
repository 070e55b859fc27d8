"""RailFocus - focus sessions themed as train journeys."""

__version__ = "0.1.0"
