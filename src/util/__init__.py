"""Shared helpers for Gemini access and artifact locators."""
