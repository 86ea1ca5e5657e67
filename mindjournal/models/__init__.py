from mindjournal.models.models import Base, JournalEntry, User

__all__ = ["Base", "JournalEntry", "User"]
