"""Encoders for archived log entries."""
