import unittest
from datetime import date, datetime

from core.models import (
    Appointment, BlockedTime, GridConfig, GridFilters, LayoutKind, SlotPosition, Technician
)
from services.grid_layout import build_column, layout_column, layout_grid
from services.intervals import slots_to_pixels

DAY = date(2024, 1, 1)
TECHS = [
    Technician(id="t1", name="Ana", color="#f00"),
    Technician(id="t2", name="Bia"),
    Technician(id="t3", name="Caio"),
]


def _app(app_id, tech_id, hour, minute=0, **kwargs):
    return Appointment(
        id=app_id, technician_id=tech_id,
        appointment_start=datetime(2024, 1, 1, hour, minute), **kwargs
    )


def _block(block_id, tech_id, start, end):
    return BlockedTime(id=block_id, technician_id=tech_id, start_time=start, end_time=end)


class TestLayoutColumn(unittest.TestCase):
    def setUp(self) -> None:
        self.filters = GridFilters(selected_date=DAY)
        self.config = GridConfig()

    def test_explicit_end(self) -> None:
        apps = [_app("a1", "t1", 10, appointment_end=datetime(2024, 1, 1, 10, 30))]
        entries = layout_column("t1", apps, [], self.filters, self.config)

        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].kind, LayoutKind.APPOINTMENT)
        self.assertEqual(entries[0].offset_slots, 12)
        self.assertEqual(entries[0].height_slots, 3)

    def test_entry_position_feeds_pixel_helper(self) -> None:
        apps = [_app("a1", "t1", 10, appointment_end=datetime(2024, 1, 1, 10, 30))]
        entry = layout_column("t1", apps, [], self.filters, self.config)[0]

        self.assertIsInstance(entry.position, SlotPosition)
        self.assertEqual(slots_to_pixels(entry.position, self.config.slot_height_px), (300, 75))

    def test_duration_fallbacks(self) -> None:
        apps = [
            _app("a1", "t1", 9, duration_minutes=45),
            _app("a2", "t1", 11),
        ]
        entries = layout_column("t1", apps, [], self.filters, self.config)
        self.assertEqual([e.height_slots for e in entries], [4.5, 6])

    def test_appointments_then_blocked_in_input_order(self) -> None:
        apps = [_app("a2", "t1", 14), _app("a1", "t1", 9)]
        blocks = [
            _block("b2", "t1", datetime(2024, 1, 1, 16), datetime(2024, 1, 1, 17)),
            _block("b1", "t1", datetime(2024, 1, 1, 12), datetime(2024, 1, 1, 13)),
        ]
        entries = layout_column("t1", apps, blocks, self.filters, self.config)
        self.assertEqual([e.entity.id for e in entries], ["a2", "a1", "b2", "b1"])
        self.assertEqual([e.kind for e in entries], [LayoutKind.APPOINTMENT] * 2 + [LayoutKind.BLOCKED] * 2)

    def test_overlapping_entries_are_not_stacked(self) -> None:
        apps = [_app("a1", "t1", 10), _app("a2", "t1", 10)]
        entries = layout_column("t1", apps, [], self.filters, self.config)
        self.assertEqual([e.offset_slots for e in entries], [12, 12])

    def test_blocked_hidden(self) -> None:
        blocks = [_block("b1", "t1", datetime(2024, 1, 1, 12), datetime(2024, 1, 1, 13))]
        filters = GridFilters(selected_date=DAY, hide_blocked_times=True)
        self.assertEqual(layout_column("t1", [], blocks, filters, self.config), [])

    def test_empty_blocked_time_is_skipped_and_rest_is_laid_out(self) -> None:
        apps = [_app("a1", "t1", 10)]
        blocks = [
            _block("b-bad", "t1", datetime(2024, 1, 1, 12), datetime(2024, 1, 1, 12)),
            _block("b-ok", "t1", datetime(2024, 1, 1, 15), datetime(2024, 1, 1, 15, 30)),
        ]
        with self.assertLogs(level="WARNING") as logs:
            column = build_column(TECHS[0], apps, blocks, self.filters, self.config)

        self.assertEqual([e.entity.id for e in column.entries], ["a1", "b-ok"])
        self.assertEqual(len(column.skipped), 1)
        self.assertEqual(column.skipped[0].entity_id, "b-bad")
        self.assertEqual(column.skipped[0].kind, LayoutKind.BLOCKED)
        self.assertTrue(any("b-bad" in line for line in logs.output))

        entries = layout_column("t1", apps, blocks, self.filters, self.config)
        self.assertEqual([e.entity.id for e in entries], ["a1", "b-ok"])

    def test_column_outside_scope_is_empty(self) -> None:
        filters = GridFilters(selected_date=DAY, technician_scope="t2")
        self.assertEqual(layout_column("t1", [_app("a1", "t1", 10)], [], filters, self.config), [])


class TestLayoutGrid(unittest.TestCase):
    def setUp(self) -> None:
        self.apps = [
            _app("a1", "t1", 9),
            _app("a2", "t2", 10),
            _app("a3", "t3", 11),
            _app("a4", "t1", 15),
        ]
        self.blocks = [_block("b1", "t2", datetime(2024, 1, 1, 12), datetime(2024, 1, 1, 13))]

    def test_all_scope_partitions_without_leakage(self) -> None:
        columns = layout_grid(TECHS, self.apps, self.blocks, GridFilters(selected_date=DAY))

        self.assertEqual([c.technician.id for c in columns], ["t1", "t2", "t3"])
        by_tech = {c.technician.id: [e.entity.id for e in c.entries] for c in columns}
        self.assertEqual(by_tech, {"t1": ["a1", "a4"], "t2": ["a2", "b1"], "t3": ["a3"]})
        for column in columns:
            for entry in column.entries:
                self.assertEqual(entry.entity.technician_id, column.technician.id)

    def test_single_scope_returns_one_column(self) -> None:
        columns = layout_grid(TECHS, self.apps, self.blocks, GridFilters(selected_date=DAY, technician_scope="t3"))
        self.assertEqual(len(columns), 1)
        self.assertEqual([e.entity.id for e in columns[0].entries], ["a3"])

    def test_same_input_same_output(self) -> None:
        filters = GridFilters(selected_date=DAY)
        self.assertEqual(
            layout_grid(TECHS, self.apps, self.blocks, filters),
            layout_grid(TECHS, self.apps, self.blocks, filters),
        )

    def test_column_carries_occupancy(self) -> None:
        columns = layout_grid(TECHS, self.apps, self.blocks, GridFilters(selected_date=DAY))
        t1 = columns[0]
        # duas horas (padrão de 60 min) em 12h de expediente
        self.assertEqual(t1.occupancy.booked_minutes, 120)
        self.assertEqual(t1.occupancy.available_minutes, 720)


if __name__ == "__main__":
    unittest.main()
