"""
simbook - booking rules for golf-simulator businesses.
"""

__version__ = "0.1.0"
