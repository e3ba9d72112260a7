"""
Tests for the isolated thread pool helper.
"""

import pytest

from pipeline.workers import run_isolated, default_max_workers


class TestRunIsolated:
    """Tests for run_isolated function."""

    def test_results_in_submission_order(self):
        outcomes = run_isolated(lambda x: x * 2, [3, 1, 2], max_workers=3)

        assert outcomes == [(3, 6, None), (1, 2, None), (2, 4, None)]

    def test_failure_isolated(self):
        """One failing task does not affect the others."""
        def work(x):
            if x == 2:
                raise RuntimeError("boom")
            return x

        outcomes = run_isolated(work, [1, 2, 3], max_workers=2)

        assert outcomes[0] == (1, 1, None)
        assert outcomes[2] == (3, 3, None)
        item, result, error = outcomes[1]
        assert item == 2 and result is None
        assert isinstance(error, RuntimeError)

    def test_empty_items(self):
        assert run_isolated(lambda x: x, []) == []


class TestDefaultMaxWorkers:
    """Tests for default_max_workers function."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('SIGNALS_MAX_WORKERS', '3')
        assert default_max_workers() == 3

    def test_default(self, monkeypatch):
        monkeypatch.delenv('SIGNALS_MAX_WORKERS', raising=False)
        assert default_max_workers() == 6
