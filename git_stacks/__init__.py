"""
git-stacks - Visualize a git repository as stacks of branches
"""

from .__version__ import __version__
from .core import StackKeeper
from .cli.main import main

__all__ = ["StackKeeper", "main", "__version__"]
