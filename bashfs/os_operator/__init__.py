"""
Operator modules for bashfs.

Provides file, directory and process operations with structured outcomes.
"""

from .file_ops import FileOperator
from .process_ops import ProcessOperator

__all__ = ['FileOperator', 'ProcessOperator']
