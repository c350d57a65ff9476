"""Host adapters that embed the engine in a UI toolkit."""
