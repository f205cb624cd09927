"""Renderer configuration."""
