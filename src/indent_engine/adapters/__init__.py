"""Host adapters embedding the indentation engine in UI frameworks."""
