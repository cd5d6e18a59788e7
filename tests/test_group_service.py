"""Tests for GroupService: groups, invitations and joining."""

from __future__ import annotations

import datetime
import unittest
from unittest.mock import patch

from dayshare.errors import (
    AlreadyMember,
    InvitationAlreadyUsed,
    InvitationExpired,
    InvitationNotFound,
    InviteCodeCollision,
    NotGroupCreator,
)
from dayshare.group.services import GroupService
from tests.conftest import FirestoreTestCase

T0 = datetime.datetime(2024, 3, 1, 9, 0, tzinfo=datetime.timezone.utc)


class GroupServiceTestCase(FirestoreTestCase):
    """Group creation and listing."""

    def setUp(self) -> None:
        super().setUp()
        self.add_user("a", "Aiko")
        self.add_user("b", "Ben")

    def test_create_group(self) -> None:
        group_id = GroupService.create_group(self.db, "a", "Summer Diary", "Beach days")
        group = self.group_data(group_id)
        self.assertEqual(group["members"], ["a"])
        self.assertEqual(group["turnOrder"], ["a"])
        self.assertEqual(group["currentTurnIndex"], 0)
        self.assertEqual(group["createdBy"], "a")
        self.assertTrue(group["isActive"])

    def test_get_user_groups(self) -> None:
        mine = GroupService.create_group(self.db, "a", "Summer Diary")
        GroupService.create_group(self.db, "b", "Ben's Notebook")

        groups = GroupService.get_user_groups(self.db, "a")

        self.assertEqual([g["id"] for g in groups], [mine])
        self.assertTrue(groups[0]["isMyTurn"])
        self.assertEqual(groups[0]["currentTurnUser"], {"id": "a", "name": "Aiko"})
        self.assertEqual(groups[0]["members"], [{"id": "a", "name": "Aiko"}])
        self.assertIsNone(groups[0]["latestEntry"])

    def test_get_user_groups_for_stranger(self) -> None:
        GroupService.create_group(self.db, "a", "Summer Diary")
        self.assertEqual(GroupService.get_user_groups(self.db, "z"), [])


class InvitationTestCase(FirestoreTestCase):
    """Invite codes, expiry and redemption."""

    def setUp(self) -> None:
        super().setUp()
        for uid, name in [("a", "Aiko"), ("b", "Ben"), ("c", "Chen")]:
            self.add_user(uid, name)
        self.add_group("g1", ["a", "b"])

    def _invite(self, email: str = "chen@example.com", now=T0) -> str:
        invitation = GroupService.generate_invite_code(
            self.db, "g1", "a", email, now=now
        )
        return invitation["inviteCode"]

    def _invite_doc(self, code: str) -> dict:
        return self.db.collection("invitations").document(code).get().to_dict()

    def test_generate_invite_code(self) -> None:
        invitation = GroupService.generate_invite_code(
            self.db, "g1", "a", " Chen@Example.com ", now=T0
        )
        stored = self._invite_doc(invitation["inviteCode"])

        self.assertEqual(len(invitation["inviteCode"]), 12)
        self.assertEqual(invitation["groupName"], "Summer Diary")
        self.assertEqual(stored["invitedEmail"], "chen@example.com")
        self.assertEqual(stored["status"], "pending")
        self.assertEqual(stored["expiresAt"], T0 + datetime.timedelta(days=7))

    def test_only_creator_can_invite(self) -> None:
        with self.assertRaises(NotGroupCreator):
            GroupService.generate_invite_code(self.db, "g1", "b", "x@example.com")

    def test_invitee_with_account_is_notified(self) -> None:
        self.add_user("d", "Dana", email="dana@example.com")
        self._invite("dana@example.com")
        self.assertEqual(
            [n["type"] for n in self.notifications_for("d")], ["invitation_received"]
        )

    @patch("dayshare.group.services.make_invite_code")
    def test_code_collision_retries(self, mock_make_code) -> None:
        mock_make_code.side_effect = ["dupcode", "dupcode", "freshcode"]
        first = self._invite("one@example.com")
        second = self._invite("two@example.com")

        self.assertEqual(first, "dupcode")
        self.assertEqual(second, "freshcode")
        self.assertEqual(self._invite_doc("dupcode")["invitedEmail"], "one@example.com")

    @patch("dayshare.group.services.make_invite_code", return_value="dupcode")
    def test_code_collision_gives_up(self, mock_make_code) -> None:
        self._invite("one@example.com")
        with self.assertRaises(InviteCodeCollision):
            self._invite("two@example.com")

    def test_join_within_ttl(self) -> None:
        self.add_group("g1", ["a", "b"], current_turn_index=1)
        code = self._invite()

        group_id = GroupService.join_group_with_code(
            self.db, code, "c", now=T0 + datetime.timedelta(days=6)
        )

        group = self.group_data("g1")
        self.assertEqual(group_id, "g1")
        self.assertEqual(group["members"], ["a", "b", "c"])
        self.assertEqual(group["turnOrder"], ["a", "b", "c"])
        self.assertEqual(group["currentTurnIndex"], 1)

        invite = self._invite_doc(code)
        self.assertEqual(invite["status"], "accepted")
        self.assertEqual(invite["acceptedBy"], "c")

    def test_join_notifies_existing_members(self) -> None:
        code = self._invite()
        GroupService.join_group_with_code(self.db, code, "c", now=T0)

        for uid in ("a", "b"):
            notes = self.notifications_for(uid)
            self.assertEqual([n["type"] for n in notes], ["new_member"])
            self.assertEqual(notes[0]["message"], "Chen joined Summer Diary")
        self.assertEqual(self.notifications_for("c"), [])

    def test_join_after_expiry(self) -> None:
        code = self._invite()
        with self.assertRaises(InvitationExpired):
            GroupService.join_group_with_code(
                self.db, code, "c", now=T0 + datetime.timedelta(days=8)
            )
        self.assertEqual(self.group_data("g1")["members"], ["a", "b"])
        self.assertEqual(self._invite_doc(code)["status"], "pending")

    def test_code_is_single_use(self) -> None:
        self.add_user("d", "Dana")
        code = self._invite()
        GroupService.join_group_with_code(self.db, code, "c", now=T0)

        with self.assertRaises(InvitationAlreadyUsed):
            GroupService.join_group_with_code(self.db, code, "d", now=T0)
        self.assertEqual(self.group_data("g1")["members"], ["a", "b", "c"])

    def test_unknown_code(self) -> None:
        with self.assertRaises(InvitationNotFound):
            GroupService.join_group_with_code(self.db, "nosuchcode", "c", now=T0)

    def test_existing_member_cannot_redeem(self) -> None:
        code = self._invite()
        with self.assertRaises(AlreadyMember):
            GroupService.join_group_with_code(self.db, code, "b", now=T0)
        self.assertEqual(self._invite_doc(code)["status"], "pending")
        self.assertEqual(self.group_data("g1")["turnOrder"], ["a", "b"])

    def test_code_lookup_ignores_case(self) -> None:
        code = self._invite()
        group_id = GroupService.join_group_with_code(
            self.db, f" {code.upper()} ", "c", now=T0
        )
        self.assertEqual(group_id, "g1")

    def test_list_pending_invites(self) -> None:
        live = self._invite("live@example.com")
        used = self._invite("chen@example.com")
        self._invite("old@example.com", now=T0 - datetime.timedelta(days=10))
        GroupService.join_group_with_code(self.db, used, "c", now=T0)

        invites = GroupService.list_pending_invites(
            self.db, "g1", "a", now=T0 + datetime.timedelta(hours=1)
        )
        self.assertEqual([i["id"] for i in invites], [live])

        with self.assertRaises(NotGroupCreator):
            GroupService.list_pending_invites(self.db, "g1", "b")


if __name__ == "__main__":
    unittest.main()
