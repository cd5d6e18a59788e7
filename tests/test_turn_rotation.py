"""Tests for turn rotation."""

from __future__ import annotations

import datetime
import unittest

from dayshare.entry.models import EntrySubmission
from dayshare.entry.services import EntryService
from dayshare.errors import GroupNotFound, NotAMember, NotYourTurn
from dayshare.group.services import GroupService
from dayshare.turns import TurnService, current_holder, next_turn_index
from tests.conftest import FirestoreTestCase


class TurnHelpersTestCase(unittest.TestCase):
    """Pure helpers over a group dict."""

    def test_current_holder_follows_pointer(self) -> None:
        group = {"turnOrder": ["a", "b", "c"], "currentTurnIndex": 1}
        self.assertEqual(current_holder(group), "b")

    def test_pointer_out_of_range_is_folded(self) -> None:
        group = {"turnOrder": ["a", "b", "c"], "currentTurnIndex": 4}
        self.assertEqual(current_holder(group), "b")
        self.assertEqual(next_turn_index(group), 2)

    def test_next_index_wraps(self) -> None:
        group = {"turnOrder": ["a", "b", "c"], "currentTurnIndex": 2}
        self.assertEqual(next_turn_index(group), 0)

    def test_empty_turn_order(self) -> None:
        group = {"turnOrder": [], "currentTurnIndex": 0}
        self.assertIsNone(current_holder(group))
        self.assertEqual(next_turn_index(group), 0)

    def test_check_turn_distinguishes_outsiders_from_waiting_members(self) -> None:
        group = {
            "members": ["a", "b"],
            "turnOrder": ["a", "b"],
            "currentTurnIndex": 0,
        }
        with self.assertRaises(NotAMember):
            TurnService.check_turn(group, "z")
        with self.assertRaises(NotYourTurn):
            TurnService.check_turn(group, "b")
        TurnService.check_turn(group, "a")


class TurnRotationTestCase(FirestoreTestCase):
    """Rotation through entries and passes against Firestore."""

    def setUp(self) -> None:
        super().setUp()
        for uid, name in [("a", "Aiko"), ("b", "Ben"), ("c", "Chen")]:
            self.add_user(uid, name)
        self.add_group("g1", ["a", "b", "c"])

    def _write(self, user_id: str, content: str = "Rainy day, good tea."):
        return EntryService.create_entry(
            self.db, user_id, EntrySubmission(group_id="g1", content=content)
        )

    def _entries(self) -> list[dict]:
        return [
            doc.to_dict()
            for doc in self.db.collection("entries").stream()
            if doc.exists
        ]

    def test_full_round(self) -> None:
        """A writes, B writes, C passes, and the journal is back with A."""
        advance = self._write("a")
        self.assertEqual(advance.previous_index, 0)
        self.assertEqual(advance.next_holder, "b")
        self.assertEqual(self.group_data("g1")["currentTurnIndex"], 1)

        self._write("b")
        self.assertEqual(self.group_data("g1")["currentTurnIndex"], 2)

        passed = GroupService.pass_turn(self.db, "g1", "c")
        self.assertEqual(passed.next_holder, "a")
        self.assertEqual(self.group_data("g1")["currentTurnIndex"], 0)

        entries = self._entries()
        self.assertEqual(len(entries), 2)
        self.assertEqual(
            sorted((e["authorId"], e["turnIndex"]) for e in entries),
            [("a", 0), ("b", 1)],
        )

    def test_out_of_turn_write_is_rejected_without_side_effects(self) -> None:
        with self.assertRaises(NotYourTurn):
            self._write("b")
        self.assertEqual(self.group_data("g1")["currentTurnIndex"], 0)
        self.assertEqual(self._entries(), [])
        self.assertEqual(self.notifications_for("a"), [])

    def test_outsider_cannot_write_or_pass(self) -> None:
        self.add_user("z", "Zed")
        with self.assertRaises(NotAMember):
            self._write("z")
        with self.assertRaises(NotAMember):
            TurnService.pass_turn(self.db, "g1", "z")
        self.assertEqual(self.group_data("g1")["currentTurnIndex"], 0)

    def test_pass_out_of_turn_is_rejected(self) -> None:
        with self.assertRaises(NotYourTurn):
            GroupService.pass_turn(self.db, "g1", "c")
        self.assertEqual(self.group_data("g1")["currentTurnIndex"], 0)

    def test_missing_group(self) -> None:
        with self.assertRaises(GroupNotFound):
            TurnService.pass_turn(self.db, "nope", "a")

    def test_entry_notifies_next_holder_and_others(self) -> None:
        self._write("a")

        to_b = self.notifications_for("b")
        self.assertEqual([n["type"] for n in to_b], ["your_turn"])
        self.assertEqual(to_b[0]["message"], "Aiko wrote in Summer Diary and passed it to you")

        to_c = self.notifications_for("c")
        self.assertEqual([n["type"] for n in to_c], ["journal_passed"])
        self.assertEqual(self.notifications_for("a"), [])

    def test_pass_notifies_only_next_holder(self) -> None:
        GroupService.pass_turn(self.db, "g1", "a")
        self.assertEqual([n["type"] for n in self.notifications_for("b")], ["your_turn"])
        self.assertEqual(self.notifications_for("c"), [])

    def test_pointer_after_many_operations(self) -> None:
        for n in range(1, 8):
            holder = current_holder(self.group_data("g1"))
            if n % 2:
                self._write(holder, f"entry {n}")
            else:
                TurnService.pass_turn(self.db, "g1", holder)
            self.assertEqual(self.group_data("g1")["currentTurnIndex"], n % 3)

    def test_pointer_stays_in_range_as_members_join(self) -> None:
        self.db.collection("invitations").document("invite0000d1").set(
            {
                "groupId": "g1",
                "status": "pending",
                "expiresAt": datetime.datetime(2999, 1, 1, tzinfo=datetime.timezone.utc),
            }
        )
        self._write("a")
        self._write("b")
        self.add_user("d", "Dana")
        GroupService.join_group_with_code(self.db, "invite0000d1", "d")

        group = self.group_data("g1")
        self.assertEqual(group["turnOrder"], ["a", "b", "c", "d"])
        self.assertEqual(current_holder(group), "c")

        GroupService.pass_turn(self.db, "g1", "c")
        self.assertEqual(current_holder(self.group_data("g1")), "d")
        self._write("d")
        group = self.group_data("g1")
        self.assertEqual(group["currentTurnIndex"], 0)
        self.assertLess(group["currentTurnIndex"], len(group["turnOrder"]))

    def test_solo_group_keeps_the_turn(self) -> None:
        self.add_group("solo", ["a"])
        advance = EntryService.create_entry(
            self.db, "a", EntrySubmission(group_id="solo", content="Just me.")
        )
        self.assertEqual(advance.next_holder, "a")
        self.assertEqual(self.group_data("solo")["currentTurnIndex"], 0)
        self.assertEqual([n["type"] for n in self.notifications_for("a")], ["your_turn"])


if __name__ == "__main__":
    unittest.main()
