"""
Unit tests for allocation edit commands and the undo/redo editor.
"""
import unittest

from fairminutes.models import FormationConfig, SlotRangeError, Wave, WaveDurations
from fairminutes.services import (
    AllocationEditor,
    AssignSlotCommand,
    SetSlotWaveCommand,
    SwapSlotsCommand,
    SwapWithSubstituteCommand,
    generate,
)

SQUAD = ["P1", "P2", "P3", "P4", "P5", "P6", "P7", "P8"]


class TestAllocationEditor(unittest.TestCase):
    """Test executing, undoing and redoing edits."""

    def setUp(self):
        """Set up an editor over a generated lineup."""
        self.original = generate(SQUAD)
        self.editor = AllocationEditor(self.original)

    def test_execute_updates_allocation(self):
        result = self.editor.execute_command(SwapSlotsCommand(1, 0, 1))

        self.assertIs(self.editor.allocation, result)
        self.assertEqual(result.get_quarter(1).goalkeeper, "P5")
        self.assertTrue(self.editor.can_undo())
        self.assertFalse(self.editor.can_redo())

    def test_undo_and_redo(self):
        edited = self.editor.execute_command(AssignSlotCommand(1, 1, "P9"))

        self.assertTrue(self.editor.undo())
        self.assertEqual(self.editor.allocation, self.original)
        self.assertTrue(self.editor.can_redo())

        self.assertTrue(self.editor.redo())
        self.assertEqual(self.editor.allocation, edited)

    def test_undo_redo_on_empty_history(self):
        self.assertFalse(self.editor.undo())
        self.assertFalse(self.editor.redo())

    def test_new_command_drops_redo_tail(self):
        self.editor.execute_command(AssignSlotCommand(1, 1, "P9"))
        self.editor.undo()
        self.editor.execute_command(SwapWithSubstituteCommand(2, 3, "P9"))

        self.assertFalse(self.editor.can_redo())
        self.assertEqual(self.editor.get_command_history(), ["Substitute P9 into Q2 slot 3"])

    def test_failed_command_leaves_history(self):
        self.editor.execute_command(SwapSlotsCommand(1, 2, 3))

        with self.assertRaises(SlotRangeError):
            self.editor.execute_command(AssignSlotCommand(1, 99, "P9"))

        self.assertEqual(len(self.editor.get_command_history()), 1)
        self.assertEqual(self.editor.allocation.get_quarter(1).slots[2].player, "P7")

    def test_max_history(self):
        editor = AllocationEditor(self.original, max_history=2)
        editor.execute_command(SwapSlotsCommand(1, 1, 2))
        editor.execute_command(SwapSlotsCommand(2, 1, 2))
        editor.execute_command(SwapSlotsCommand(3, 1, 2))

        self.assertEqual(len(editor.get_command_history()), 2)
        self.assertTrue(editor.undo())
        self.assertTrue(editor.undo())
        self.assertFalse(editor.undo())
        # The first swap fell out of history and stays applied.
        self.assertEqual(editor.allocation, SwapSlotsCommand(1, 1, 2).apply(self.original, editor.config))

    def test_clear_history_keeps_allocation(self):
        edited = self.editor.execute_command(AssignSlotCommand(4, 4, "P9"))
        self.editor.clear_history()

        self.assertFalse(self.editor.can_undo())
        self.assertEqual(self.editor.allocation, edited)

    def test_editor_threads_config(self):
        config = FormationConfig(wave_durations=WaveDurations(first=7, second=3))
        editor = AllocationEditor(generate(SQUAD, config=config), config)
        result = editor.execute_command(SetSlotWaveCommand(1, 1, "second"))

        slot = result.get_quarter(1).slots[1]
        self.assertIs(slot.wave, Wave.SECOND)
        self.assertEqual(slot.minutes, 3)


class TestCommandDescriptions(unittest.TestCase):
    """Test human-readable command descriptions."""

    def test_descriptions(self):
        self.assertEqual(AssignSlotCommand(1, 2, "Alex").description,
                         "Assign Alex to Q1 slot 2")
        self.assertEqual(SwapSlotsCommand(3, 0, 4).description,
                         "Swap Q3 slots 0 and 4")
        self.assertEqual(SwapWithSubstituteCommand(2, 5, "Blake").description,
                         "Substitute Blake into Q2 slot 5")
        self.assertEqual(SetSlotWaveCommand(4, 6, Wave.FIRST).description,
                         "Move Q4 slot 6 to the first wave")


if __name__ == "__main__":
    unittest.main()
