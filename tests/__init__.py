"""Tests for appinstaller."""
