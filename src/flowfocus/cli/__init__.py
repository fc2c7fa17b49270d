"""
FlowFocus CLI Commands

This package contains the command-line interface for FlowFocus: notes, tasks,
habits, the Pomodoro timer, flashcard decks, study plans and the AI
generation commands.
"""

__all__ = []
