"""
Magnetophon: level-gated audio activity monitor with an adaptive,
time-of-day aware notification trigger.
"""

__version__ = "0.3.0"
