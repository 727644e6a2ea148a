"""Tests for run metadata."""

import pytest

from sast_bench.models.metadata import ParseStatus, RunMetadata, RunStatus


class TestRunMetadata:
    """Tests for RunMetadata."""

    def test_from_dict(self):
        """Test reading runner metadata with a structured duration."""
        metadata = RunMetadata.from_dict(
            {
                "status": "Exited",
                "exit_code": 1,
                "time": {"secs": 12, "nanos": 500_000_000},
                "parsed": "Yes",
                "evaluated": False,
            }
        )

        assert metadata.status == RunStatus.EXITED
        assert metadata.exit_code == 1
        assert metadata.time == 12.5
        assert metadata.ready_for_evaluation
        assert not metadata.failed

    def test_defaults(self):
        """Test that missing fields take defaults."""
        metadata = RunMetadata.from_dict({})

        assert metadata.status == RunStatus.EXITED
        assert metadata.time == 0.0
        assert metadata.parsed == ParseStatus.NO
        assert not metadata.ready_for_evaluation

    def test_plain_seconds(self):
        """Test that a plain number is read as seconds."""
        assert RunMetadata.from_dict({"time": 3.25}).time == 3.25

    def test_unknown_status(self):
        """Test that an unknown status is rejected."""
        with pytest.raises(ValueError):
            RunMetadata.from_dict({"status": "Crashed"})

    @pytest.mark.parametrize(
        "status,parsed,failed,timed_out",
        [
            (RunStatus.EXITED, ParseStatus.YES, False, False),
            (RunStatus.SCRIPT_ERROR, ParseStatus.NO, True, False),
            (RunStatus.EXITED, ParseStatus.FAILED, True, False),
            (RunStatus.TIMEOUT, ParseStatus.NO, False, True),
        ],
    )
    def test_failure_flags(self, status, parsed, failed, timed_out):
        """Test the failed and timed out flags."""
        metadata = RunMetadata(status=status, parsed=parsed)

        assert metadata.failed == failed
        assert metadata.timed_out == timed_out

    def test_to_dict(self):
        """Test that the duration is written as seconds and nanoseconds."""
        metadata = RunMetadata(time=2.25, parsed=ParseStatus.YES, evaluated=True)

        assert metadata.to_dict() == {
            "status": "Exited",
            "exit_code": 0,
            "time": {"secs": 2, "nanos": 250_000_000},
            "parsed": "Yes",
            "evaluated": True,
        }

    @pytest.mark.parametrize(
        "time, written",
        [
            (0.9999999999, {"secs": 1, "nanos": 0}),
            (59.9999999996, {"secs": 60, "nanos": 0}),
            (0.000000001, {"secs": 0, "nanos": 1}),
        ],
    )
    def test_nanos_stay_below_one_second(self, time, written):
        """Test that rounding up to a full second carries into the seconds."""
        assert RunMetadata(time=time).to_dict()["time"] == written
