"""QuizDesk - quiz authoring, quiz taking and results service."""

__version__ = "0.1.0"
