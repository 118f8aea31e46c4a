"""
LearnHub - AI-assisted e-learning content backend.
"""

__version__ = "0.1.0"
