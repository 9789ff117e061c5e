"""Git merged-branch cleaner.

Features:
- Show local branches already merged into the current branch
- Delete them all after a two-step confirmation
- Pick which ones to delete interactively
- Protected branch names and patterns, per repository or per run
"""

__version__ = "0.1.0"
