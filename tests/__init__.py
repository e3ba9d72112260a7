"""
Test Suite for the portfolio signals toolkit

Includes:
- CLI command tests with mocked pipelines
"""
