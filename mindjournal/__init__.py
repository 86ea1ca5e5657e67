"""Mind Journal: journaling API with emotion tagging and coping suggestions."""

__version__ = "1.0.0"
