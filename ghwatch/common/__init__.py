"""Shared helpers with no dependency on the notification pipeline."""
