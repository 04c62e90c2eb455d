"""Tests for OpenSense Network integration."""
