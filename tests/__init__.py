"""Test suite for the docx_merger package."""
