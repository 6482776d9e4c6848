import unittest
from datetime import date, timedelta

from core.exceptions import InvalidConfiguration
from core.models import GridConfig
from services.time_axis import day_start, generate_time_axis, shift_day


class TestTimeAxis(unittest.TestCase):
    def test_default_axis_has_73_slots_from_8_to_20(self) -> None:
        axis = generate_time_axis(date(2024, 1, 1), GridConfig())
        slots = list(axis)

        self.assertEqual(len(axis), 73)
        self.assertEqual(len(slots), 73)
        self.assertEqual(slots[0].label, "08:00")
        self.assertEqual(slots[72].label, "20:00")
        self.assertEqual(slots[0].time.date(), date(2024, 1, 1))
        self.assertEqual(slots[72].time.date(), date(2024, 1, 1))

    def test_slot_count_and_strict_order_for_valid_configs(self) -> None:
        for start, end in [(8, 20), (0, 23), (9, 9), (6, 18)]:
            for minutes in [1, 5, 10, 15, 20, 30, 60]:
                config = GridConfig(start_hour=start, end_hour=end, interval_minutes=minutes)
                slots = list(generate_time_axis(date(2024, 3, 15), config))

                self.assertEqual(len(slots), ((end - start) * 60 // minutes) + 1)
                self.assertEqual(slots[0].time.hour, start)
                self.assertEqual(slots[0].time.minute, 0)
                self.assertEqual(slots[-1].time.hour, end)
                self.assertEqual(slots[-1].time.minute, 0)
                for earlier, later in zip(slots, slots[1:]):
                    self.assertLess(earlier.time, later.time)

    def test_axis_can_be_iterated_more_than_once(self) -> None:
        axis = generate_time_axis(date(2024, 1, 1), GridConfig())
        first = [slot.label for slot in axis]
        second = [slot.label for slot in axis]
        self.assertEqual(first, second)
        self.assertEqual(axis[-1].label, "20:00")
        self.assertEqual(axis[6].label, "09:00")

    def test_full_hour_flag(self) -> None:
        axis = generate_time_axis(date(2024, 1, 1), GridConfig())
        self.assertTrue(axis[0].is_full_hour)
        self.assertFalse(axis[1].is_full_hour)
        self.assertTrue(axis[6].is_full_hour)

    def test_slicing_returns_slots(self) -> None:
        axis = generate_time_axis(date(2024, 1, 1), GridConfig())
        self.assertEqual([slot.label for slot in axis[:3]], ["08:00", "08:10", "08:20"])
        self.assertEqual([slot.label for slot in axis[-2:]], ["19:50", "20:00"])
        self.assertEqual(len(axis[::6]), 13)
        self.assertEqual(axis[::6][1].label, "09:00")
        self.assertEqual(axis[100:], [])

    def test_index_out_of_range(self) -> None:
        axis = generate_time_axis(date(2024, 1, 1), GridConfig())
        with self.assertRaises(IndexError):
            axis[73]

    def test_interval_that_does_not_divide_60_is_rejected(self) -> None:
        for minutes in [7, 25, 45, 0]:
            with self.assertRaises(InvalidConfiguration):
                generate_time_axis(date(2024, 1, 1), GridConfig(interval_minutes=minutes))

    def test_end_before_start_is_rejected(self) -> None:
        with self.assertRaises(InvalidConfiguration):
            generate_time_axis(date(2024, 1, 1), GridConfig(start_hour=18, end_hour=9))

    def test_day_start_is_localized(self) -> None:
        start = day_start(date(2024, 1, 1), GridConfig())
        self.assertEqual((start.hour, start.minute), (8, 0))
        self.assertIsNotNone(start.tzinfo)
        self.assertEqual(start.utcoffset().total_seconds(), -3 * 3600)

    def test_clock_change_days_stay_strictly_increasing(self) -> None:
        cases = [
            # Nova York adianta o relógio às 02:00
            (date(2024, 3, 10), GridConfig(start_hour=0, end_hour=4, interval_minutes=10, timezone="America/New_York")),
            # São Paulo adiantou à meia-noite em 2018
            (date(2018, 11, 4), GridConfig(start_hour=0, end_hour=2, interval_minutes=30)),
            # São Paulo atrasou à meia-noite em 2019 (23:00 se repete)
            (date(2019, 2, 16), GridConfig(start_hour=22, end_hour=24, interval_minutes=30)),
        ]
        for day, config in cases:
            slots = list(generate_time_axis(day, config))
            self.assertEqual(len(slots), ((config.end_hour - config.start_hour) * 60 // config.interval_minutes) + 1)
            for earlier, later in zip(slots, slots[1:]):
                self.assertEqual(later.time - earlier.time, timedelta(minutes=config.interval_minutes))

    def test_spring_forward_labels_skip_the_missing_hour(self) -> None:
        config = GridConfig(start_hour=0, end_hour=4, interval_minutes=10, timezone="America/New_York")
        axis = generate_time_axis(date(2024, 3, 10), config)
        self.assertEqual(axis[11].label, "01:50")
        self.assertEqual(axis[12].label, "03:00")

    def test_fall_back_labels_repeat(self) -> None:
        config = GridConfig(start_hour=22, end_hour=24, interval_minutes=30)
        labels = [slot.label for slot in generate_time_axis(date(2019, 2, 16), config)]
        self.assertEqual(labels, ["22:00", "22:30", "23:00", "23:30", "23:00"])

    def test_shift_day(self) -> None:
        self.assertEqual(shift_day(date(2024, 1, 1), -1), date(2023, 12, 31))
        self.assertEqual(shift_day(date(2024, 2, 28), 1), date(2024, 2, 29))


if __name__ == "__main__":
    unittest.main()
