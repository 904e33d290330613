"""Planline platform - configuration and logging."""
