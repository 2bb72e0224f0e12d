"""
codechat: chat client core for a coding agent, with inline A2UI surfaces.
"""

__version__ = "0.1.0"
