"""Configuration, errors and time handling shared by the engine."""
