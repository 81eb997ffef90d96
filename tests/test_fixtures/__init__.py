"""
Test Fixtures Package

Shared constants and helpers for building test topologies.
"""
