"""Template registration, inclusion and execution."""
