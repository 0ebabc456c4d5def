"""TutorDesk: desktop administration for a small tutoring academy."""

__version__ = "1.0.0"
