"""Host adapters for smart_fold."""
