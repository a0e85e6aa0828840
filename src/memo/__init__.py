"""
Memo: personal notes from the command line.

Short text memos kept in a local SQLite file:
- add, list, delete
- keyword search
"""

__version__ = "0.1.0"
