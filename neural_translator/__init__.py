"""
Translation orchestration core for the NeuraL desktop translator.
"""

__version__ = "0.1.0"
