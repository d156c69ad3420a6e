"""
Integration tests that make real provider API calls.
"""
