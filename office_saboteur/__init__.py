"""
Office Saboteur: room server for a social-deduction party game.
"""

__version__ = "0.1.0"
