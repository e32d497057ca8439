"""Tests for BatchProgress class."""

import pytest
from previewgen.batch_progress import BatchProgress
from previewgen.batch_stats import BatchStats
from previewgen.processing_outcome import ProcessingOutcome
from previewgen.work_item import WorkItem


class TestBatchProgress:
    """Tests for BatchProgress class."""

    @pytest.fixture
    def item(self):
        return WorkItem(id='abc123', extension='.pdf')

    def test_init_defaults(self, logger):
        """Test default initialization."""
        progress = BatchProgress(logger=logger)

        assert progress.show_files is False
        assert progress.log_interval == 25

    def test_success_show_files(self, logger, item, capsys):
        """Test show_files output for a published item."""
        progress = BatchProgress(show_files=True, logger=logger)

        progress.on_item_finished(item, ProcessingOutcome.succeeded(3))

        captured = capsys.readouterr()
        assert '[OK] abc123.pdf -> 3 pages published' in captured.out

    def test_skip_show_files(self, logger, capsys):
        """Items without a resolved filename are shown by id."""
        progress = BatchProgress(show_files=True, logger=logger)

        progress.on_item_finished(WorkItem(id='zip1'), ProcessingOutcome.skipped('ignored-type'))

        captured = capsys.readouterr()
        assert '[SKIP] zip1 -> skipped: ignored-type' in captured.out

    def test_error_show_files(self, logger, item, capsys):
        """Test show_files output for a failed item."""
        progress = BatchProgress(show_files=True, logger=logger)

        progress.on_item_finished(item, ProcessingOutcome.failed('rasterize-error', 'exit 1'))

        captured = capsys.readouterr()
        assert 'ERROR' in captured.out
        assert 'rasterize-error (exit 1)' in captured.out

    def test_quiet_without_show_files(self, logger, item, capsys):
        """Nothing is printed per item by default."""
        progress = BatchProgress(logger=logger)

        progress.on_item_finished(item, ProcessingOutcome.succeeded(1))

        assert capsys.readouterr().out == ''

    def test_callable_interface(self, logger):
        """Test using progress as callback."""
        progress = BatchProgress(log_interval=10, logger=logger)
        stats = BatchStats(total_to_process=20)
        stats.succeeded = 12

        progress(stats)

        assert progress.last_logged == 12
