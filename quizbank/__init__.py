"""QuizBank: question bank and quiz result service."""

__version__ = "1.0.0"
