"""Core components - configuration, logging, exceptions and the config store."""
