"""Domain models and use cases for quest planning."""
