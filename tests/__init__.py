"""
Test suite for the Kromium Health API and client.

Shared fixtures live in conftest.py.
"""
