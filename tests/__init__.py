"""Tests for the café order core."""
