"""
Expense Tracker - Source Package

A command-line expense recording system backed by a single relational
table.

DESIGN PRINCIPLES:
1. One command per process
2. User input only reaches the database as bound parameters
3. Destructive bulk actions require an explicit keystroke confirmation
4. Every change is audited
"""

__version__ = "1.0.0"
