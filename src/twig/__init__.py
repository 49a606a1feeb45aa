"""Interactive git branch deletion.

Features:
- Numbered menu of local branches
- Safe deletion of merged branches
- Confirmation before force-deleting unmerged branches
- Fresh branch list after every deletion
"""

__version__ = "0.1.0"
