"""Persistent application state: settings, config file, preferences."""
