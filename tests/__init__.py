"""Tests for the CGA gateway client."""
