from reportcard.models.student import Student

__all__ = ["Student"]
