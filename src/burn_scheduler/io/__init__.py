"""Serialization, file-backed storage, and write-through sync."""
