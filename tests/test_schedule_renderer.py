"""
Tests for Schedule Renderer

Ordering (day, then IDA before VOLTA, then time), header insertion and the
exact text layout users see.
"""

from datetime import timezone
from zoneinfo import ZoneInfo

import pytest

from caronas.models.ride import Direction, GroupRides, Ride, RideUser
from caronas.services.schedule_renderer import format_schedule, sort_rides
from caronas.utils.formatting import get_user_emoji
from tests.conftest import at

CHAT_ID = -100123


def make_ride(user, time, direction, description="desc", full=0):
    return Ride(user=user, time=time, description=description, direction=direction, full=full)


class TestSortRides:
    """Tests for the three-level ordering."""

    def test_earlier_day_first_regardless_of_time_of_day(self, ana, bruno):
        late_first_day = make_ride(ana, at(2024, 3, 10, 23, 30), Direction.COMING)
        early_second_day = make_ride(bruno, at(2024, 3, 11, 0, 5), Direction.GOING)

        ordered = sort_rides([early_second_day, late_first_day], timezone.utc)

        assert ordered == [late_first_day, early_second_day]

    def test_going_before_coming_on_same_day(self, ana, bruno):
        coming_early = make_ride(ana, at(2024, 3, 10, 6), Direction.COMING)
        going_late = make_ride(bruno, at(2024, 3, 10, 22), Direction.GOING)

        ordered = sort_rides([coming_early, going_late], timezone.utc)

        assert ordered == [going_late, coming_early]

    def test_time_breaks_ties_within_day_and_direction(self, ana, bruno):
        nine = make_ride(ana, at(2024, 3, 10, 9), Direction.GOING)
        eight = make_ride(bruno, at(2024, 3, 10, 8), Direction.GOING)

        assert sort_rides([nine, eight], timezone.utc) == [eight, nine]

    def test_day_boundary_follows_local_timezone(self, ana, bruno):
        """01:00 UTC is still the previous evening in São Paulo."""
        tz = ZoneInfo("America/Sao_Paulo")
        previous_evening = make_ride(ana, at(2024, 3, 11, 1), Direction.COMING)
        next_morning = make_ride(bruno, at(2024, 3, 11, 10), Direction.GOING)

        ordered = sort_rides([next_morning, previous_evening], tz)

        assert ordered == [previous_evening, next_morning]


class TestFormatSchedule:
    """Tests for the emitted text."""

    def test_empty_rides_render_empty_string(self):
        assert format_schedule([]) == ""

    def test_single_day_example(self, ana, bruno):
        """One day header, IDA block with the open ride, VOLTA block struck through."""
        rides = [
            make_ride(bruno, at(2024, 3, 10, 9), Direction.COMING, "Campus", full=1),
            make_ride(ana, at(2024, 3, 10, 8), Direction.GOING, "Centro"),
        ]

        text = format_schedule(rides)

        assert text == (
            "<b>10/03 - Domingo</b> 😌\n"
            "\n"
            "<b>IDA</b>\n"
            f'{get_user_emoji(1)} <a href="tg://user?id=1">Ana Silva</a> - 08:00 - Centro\n'
            "\n"
            "<b>VOLTA</b>\n"
            "<s>Bruno - 09:00 - Campus</s>\n"
        )

    def test_day_change_adds_separator_and_repeats_direction_header(self, ana, bruno):
        """A new day always re-emits the direction header, even if unchanged."""
        rides = [
            make_ride(ana, at(2024, 3, 11, 7, 5), Direction.GOING, "B"),
            make_ride(bruno, at(2024, 3, 10, 8), Direction.GOING, "A"),
        ]

        lines = format_schedule(rides).split("\n")

        assert lines == [
            "<b>10/03 - Domingo</b> 😌",
            "",
            "<b>IDA</b>",
            f'{get_user_emoji(2)} <a href="tg://user?id=2">Bruno</a> - 08:00 - A',
            "",
            "<b>11/03 - Segunda-feira</b> 😴",
            "",
            "<b>IDA</b>",
            f'{get_user_emoji(1)} <a href="tg://user?id=1">Ana Silva</a> - 07:05 - B',
            "",
        ]

    def test_no_direction_header_between_rides_of_same_block(self, ana, bruno):
        rides = [
            make_ride(ana, at(2024, 3, 10, 8), Direction.GOING),
            make_ride(bruno, at(2024, 3, 10, 9), Direction.GOING),
        ]

        assert format_schedule(rides).count("<b>IDA</b>") == 1

    def test_open_ride_has_link_and_no_strikethrough(self, ana):
        text = format_schedule([make_ride(ana, at(2024, 3, 10, 8), Direction.GOING)])

        assert 'href="tg://user?id=1"' in text
        assert "<s>" not in text

    def test_full_ride_has_strikethrough_and_no_link(self, ana):
        text = format_schedule([make_ride(ana, at(2024, 3, 10, 8), Direction.GOING, full=1)])

        assert "<s>Ana Silva - 08:00 - desc</s>" in text
        assert "href=" not in text

    def test_special_day_emoji_prefixes_header(self, ana):
        text = format_schedule([make_ride(ana, at(2024, 12, 25, 10), Direction.GOING)])

        assert text.startswith("🎄 <b>25/12 - Quarta-feira</b>")

    def test_user_text_is_html_escaped(self):
        user = RideUser(id=5, first_name="<Zé>")
        text = format_schedule(
            [make_ride(user, at(2024, 3, 10, 8), Direction.GOING, "a & b <i>")]
        )

        assert "&lt;Zé&gt;" in text
        assert "a &amp; b &lt;i&gt;" in text

    def test_times_shown_in_local_timezone(self, ana):
        tz = ZoneInfo("America/Sao_Paulo")  # UTC-3 in March 2024
        text = format_schedule([make_ride(ana, at(2024, 3, 10, 11), Direction.GOING)], tz)

        assert " - 08:00 - " in text


class TestScheduleRenderer:
    """Tests for ScheduleRenderer.render against the store."""

    @pytest.mark.asyncio
    async def test_render_missing_group_returns_empty(self, renderer):
        assert await renderer.render(CHAT_ID) == ""

    @pytest.mark.asyncio
    async def test_render_empty_group_returns_empty(self, renderer, repository):
        await repository.create_group(GroupRides(chat_id=CHAT_ID))

        assert await renderer.render(CHAT_ID) == ""

    @pytest.mark.asyncio
    async def test_render_reads_current_rides(self, renderer, ride_manager, ana, bruno):
        await ride_manager.add_ride(CHAT_ID, ana, at(2024, 3, 10, 8), "Centro", Direction.GOING)
        await ride_manager.add_ride(CHAT_ID, bruno, at(2024, 3, 10, 9), "Campus", Direction.COMING)
        await ride_manager.set_ride_full(CHAT_ID, bruno.id, Direction.COMING, 1)

        text = await renderer.render(CHAT_ID)

        assert text == format_schedule(
            [
                make_ride(ana, at(2024, 3, 10, 8), Direction.GOING, "Centro"),
                make_ride(bruno, at(2024, 3, 10, 9), Direction.COMING, "Campus", full=1),
            ]
        )
        assert text.index("<b>IDA</b>") < text.index("<b>VOLTA</b>")
