"""Test suite for the AIO chat application."""
