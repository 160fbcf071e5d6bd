# wordsy/__init__.py
"""
Wordsy - vocabulary learning backend with adaptive mastery tracking
"""

__version__ = "1.0.0"
