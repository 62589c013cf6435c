"""Frontends - User interfaces for rmctl."""
