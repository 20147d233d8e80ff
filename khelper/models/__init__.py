"""Data models for khelper."""
