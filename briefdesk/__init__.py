"""
BriefDesk - creative brief workspace.
"""

__version__ = "1.0.0"
