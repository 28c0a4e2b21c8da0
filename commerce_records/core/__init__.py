"""Configuration, exceptions and logging shared by every adapter."""
