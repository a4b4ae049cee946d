from __future__ import annotations

from unittest.mock import Mock, patch

import pytest

from people_import.services.progress import ImportProgressTracker, is_tty_enabled, percent_complete


def test_is_tty_enabled_returns_stdout_isatty():
    with patch('sys.stdout.isatty', return_value=True):
        assert is_tty_enabled() is True
    with patch('sys.stdout.isatty', return_value=False):
        assert is_tty_enabled() is False


@pytest.mark.parametrize(
    "processed, total, expected",
    [(0, 0, 100), (50, 120, 42), (100, 120, 83), (150, 120, 100), (0, 10, 0)],
)
def test_percent_complete(processed, total, expected):
    assert percent_complete(processed, total) == expected


class TestImportProgressTracker:

    def test_init_with_tty_enabled(self):
        with patch('people_import.services.progress.is_tty_enabled', return_value=True), \
             patch('people_import.services.progress.tqdm') as mock_tqdm:
            tracker = ImportProgressTracker(120)
            assert tracker.enabled is True
            mock_tqdm.assert_called_once_with(
                total=120,
                desc="Importing people",
                unit="person",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )

    def test_disabled_without_tty(self):
        with patch('people_import.services.progress.is_tty_enabled', return_value=False):
            tracker = ImportProgressTracker(10)
            assert tracker.pbar is None
            tracker.advance(5)
            tracker.set_postfix(ok=5)
            tracker.close()
            assert tracker.processed == 5

    def test_advance_and_close_update_bar(self):
        mock_pbar = Mock()
        with patch('people_import.services.progress.is_tty_enabled', return_value=True), \
             patch('people_import.services.progress.tqdm', return_value=mock_pbar):
            with ImportProgressTracker(100) as tracker:
                tracker.advance(50)
                tracker.set_postfix(ok=50, failed=0)
            mock_pbar.update.assert_called_once_with(50)
            mock_pbar.set_postfix.assert_called_once_with(ok=50, failed=0)
            mock_pbar.close.assert_called_once()
            assert tracker.pbar is None
