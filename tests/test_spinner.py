"""Tests for the top-row progress bar."""

from __future__ import annotations

import asyncio
import io

import pytest

from ask.spinner import BAR_GLYPH, HIGHLIGHT, RELEASE_ROW, RESERVE_ROW, RESET, Spinner


class TestAdvance:
    def test_bounces_at_both_ends(self):
        spinner = Spinner(io.StringIO(), enabled=False)
        positions = []
        for _ in range(8):
            spinner.advance(3)
            positions.append(spinner.position)
        assert positions == [1, 2, 3, 2, 1, 0, 1, 2]

    def test_zero_range_stays_put(self):
        spinner = Spinner(io.StringIO(), enabled=False)
        for _ in range(3):
            spinner.advance(0)
            assert spinner.position == 0


class TestFrame:
    def test_segment_highlighted(self):
        spinner = Spinner(io.StringIO(), enabled=False)
        spinner.position = 2
        frame = spinner.frame(10, 3)
        assert frame.count(BAR_GLYPH) == 10
        assert frame.count(HIGHLIGHT) == 3
        assert frame.endswith(RESET)


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_reserves_and_releases_row_once(self):
        stream = io.StringIO()
        spinner = Spinner(stream, interval=0.001, enabled=True).start()
        await asyncio.sleep(0.05)
        assert spinner.running

        await asyncio.gather(spinner.stop(), spinner.stop())

        out = stream.getvalue()
        assert out.startswith(RESERVE_ROW)
        assert out.endswith(RELEASE_ROW)
        assert out.count(RESERVE_ROW) == 1
        assert out.count(RELEASE_ROW) == 1
        assert spinner.frames > 0
        assert not spinner.running

    @pytest.mark.asyncio
    async def test_no_frames_after_stop(self):
        stream = io.StringIO()
        spinner = Spinner(stream, interval=0.001, enabled=True).start()
        await asyncio.sleep(0.02)
        await spinner.stop()
        frames, written = spinner.frames, stream.getvalue()

        await asyncio.sleep(0.02)
        await spinner.stop()
        assert spinner.frames == frames
        assert stream.getvalue() == written

    @pytest.mark.asyncio
    async def test_stop_before_start_is_noop(self):
        stream = io.StringIO()
        await Spinner(stream, enabled=True).stop()
        assert stream.getvalue() == ""

    @pytest.mark.asyncio
    async def test_disabled_spinner_draws_nothing(self):
        stream = io.StringIO()
        async with Spinner(stream, interval=0.001, enabled=False) as spinner:
            await asyncio.sleep(0.01)
            assert spinner.running
        assert stream.getvalue() == ""
        assert spinner.frames == 0

    def test_non_tty_defaults_to_disabled(self):
        assert Spinner(io.StringIO()).enabled is False

    @pytest.mark.asyncio
    async def test_row_released_on_cancel(self):
        stream = io.StringIO()
        spinner = Spinner(stream, interval=0.001, enabled=True).start()
        await asyncio.sleep(0.01)
        spinner._task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await spinner._task
        assert stream.getvalue().endswith(RELEASE_ROW)

    @pytest.mark.asyncio
    async def test_stop_timeout_does_not_hang(self, caplog):
        spinner = Spinner(io.StringIO(), stop_timeout=0.01, enabled=False)
        spinner._task = asyncio.get_running_loop().create_future()
        await spinner.stop()
        assert "did not stop" in caplog.text
        spinner._task.cancel()
