"""Text views and Textual widgets for the LazyArchon TUI."""
