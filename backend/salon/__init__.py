"""Salon booking backend."""
