"""Tests for rooms, invites and memberships."""
import pytest
from sqlalchemy.exc import IntegrityError

from quorumboard.database import is_duplicate_key
from quorumboard.models.room import RoomMember, RoomRole
from tests.conftest import (
    create_test_user,
    create_test_room,
    create_test_candidate,
    join_room,
    auth_headers,
    respond,
)


class TestRoomCRUD:
    """Room create / get / list / rename."""

    def test_create_room(self, client):
        owner = create_test_user(client, name="Owner")
        room = create_test_room(client, owner, name="Ikebukuro Table")
        assert room["name"] == "Ikebukuro Table"
        assert room["created_by"] == owner["user_id"]
        assert room["invite_code"]
        assert room["invite_url"].endswith(f"/join/{room['invite_code']}")
        # Creator is auto-added as owner
        assert len(room["members"]) == 1
        assert room["members"][0]["role"] == "owner"
        assert room["members"][0]["display_name"] == "Owner"

    def test_create_room_blank_name(self, client):
        owner = create_test_user(client, name="Owner")
        resp = client.post("/api/rooms/", json={"name": "  "}, headers=auth_headers(owner))
        assert resp.status_code == 422
        assert "Room name is required" in resp.text

    def test_create_room_requires_auth(self, client):
        assert client.post("/api/rooms/", json={"name": "Room"}).status_code == 401

    def test_list_only_my_rooms(self, client):
        owner = create_test_user(client, name="Owner")
        outsider = create_test_user(client, name="Outsider")
        create_test_room(client, owner, name="Room A")
        create_test_room(client, owner, name="Room B")
        create_test_room(client, outsider, name="Elsewhere")

        resp = client.get("/api/rooms/", headers=auth_headers(owner))
        assert resp.status_code == 200
        names = [r["name"] for r in resp.json()]
        assert set(names) == {"Room A", "Room B"}
        assert all(r["my_role"] == "owner" for r in resp.json())

    def test_get_room_not_found(self, client):
        user = create_test_user(client)
        resp = client.get("/api/rooms/00000000-0000-0000-0000-000000000000", headers=auth_headers(user))
        assert resp.status_code == 404

    def test_non_member_cannot_read_room(self, client):
        owner = create_test_user(client, name="Owner")
        outsider = create_test_user(client, name="Outsider")
        room = create_test_room(client, owner)
        resp = client.get(f"/api/rooms/{room['room_id']}", headers=auth_headers(outsider))
        assert resp.status_code == 403

    def test_rename_owner_only(self, client):
        owner = create_test_user(client, name="Owner")
        member = create_test_user(client, name="Member")
        room = create_test_room(client, owner)
        join_room(client, member, room)

        resp = client.patch(f"/api/rooms/{room['room_id']}", json={"name": "Renamed"}, headers=auth_headers(member))
        assert resp.status_code == 403
        resp = client.patch(f"/api/rooms/{room['room_id']}", json={"name": "Renamed"}, headers=auth_headers(owner))
        assert resp.status_code == 200
        assert resp.json()["name"] == "Renamed"


class TestJoin:
    """Invite redemption."""

    def test_join_by_invite(self, client):
        owner = create_test_user(client, name="Owner")
        member = create_test_user(client, name="Member")
        room = create_test_room(client, owner)

        data = join_room(client, member, room)
        assert data == {"room_id": room["room_id"], "already_member": False}

        members = client.get(f"/api/rooms/{room['room_id']}", headers=auth_headers(member)).json()["members"]
        roles = {m["user_id"]: m["role"] for m in members}
        assert roles[member["user_id"]] == "member"

    def test_join_twice_is_success(self, client):
        owner = create_test_user(client, name="Owner")
        member = create_test_user(client, name="Member")
        room = create_test_room(client, owner)
        join_room(client, member, room)

        data = join_room(client, member, room)
        assert data["already_member"] is True
        members = client.get(f"/api/rooms/{room['room_id']}", headers=auth_headers(owner)).json()["members"]
        assert len(members) == 2

    def test_owner_joining_own_room_keeps_owner_role(self, client):
        owner = create_test_user(client, name="Owner")
        room = create_test_room(client, owner)
        assert join_room(client, owner, room)["already_member"] is True
        members = client.get(f"/api/rooms/{room['room_id']}", headers=auth_headers(owner)).json()["members"]
        assert members[0]["role"] == "owner"

    def test_invalid_invite_code(self, client):
        user = create_test_user(client)
        resp = client.post("/api/rooms/join", json={"invite_code": "nope"}, headers=auth_headers(user))
        assert resp.status_code == 404

    def test_duplicate_membership_is_detected(self, client, db):
        owner = create_test_user(client, name="Owner")
        room = create_test_room(client, owner)
        db.add(RoomMember(room_id=room["room_id"], user_id=owner["user_id"], display_name="Again",
                          role=RoomRole.member))
        with pytest.raises(IntegrityError) as exc:
            db.commit()
        db.rollback()
        assert is_duplicate_key(exc.value)


class TestMembers:
    """Display names and member removal."""

    def test_profile_name_propagates_to_rooms(self, client):
        user = create_test_user(client, name="Alice")
        room_a = create_test_room(client, user, name="A")
        room_b = create_test_room(client, user, name="B")

        resp = client.patch("/api/profile", json={"display_name": "Caramaki"}, headers=auth_headers(user))
        assert resp.status_code == 200
        assert resp.json()["display_name"] == "Caramaki"

        for room in (room_a, room_b):
            members = client.get(f"/api/rooms/{room['room_id']}", headers=auth_headers(user)).json()["members"]
            assert members[0]["display_name"] == "Caramaki"

    def test_member_name_in_one_room(self, client):
        owner = create_test_user(client, name="Owner")
        room = create_test_room(client, owner)
        resp = client.patch(
            f"/api/rooms/{room['room_id']}/members/me",
            json={"display_name": "Table Boss"},
            headers=auth_headers(owner),
        )
        assert resp.status_code == 200
        assert resp.json()["display_name"] == "Table Boss"
        profile = client.get("/api/profile", headers=auth_headers(owner)).json()
        assert profile["display_name"] == "Owner"

    def test_remove_member(self, client):
        owner = create_test_user(client, name="Owner")
        member = create_test_user(client, name="Member")
        room = create_test_room(client, owner)
        join_room(client, member, room)
        candidate = create_test_candidate(client, owner, room)
        respond(client, member, candidate, "yes")

        resp = client.delete(f"/api/rooms/{room['room_id']}/members/{member['user_id']}", headers=auth_headers(owner))
        assert resp.status_code == 204

        # Their answer no longer counts and they lose access
        detail = client.get(f"/api/candidates/{candidate['candidate_id']}", headers=auth_headers(owner)).json()
        assert detail["tally"]["yes_members"] == 0
        assert client.get(f"/api/rooms/{room['room_id']}", headers=auth_headers(member)).status_code == 403

    def test_remove_member_owner_only(self, client):
        owner = create_test_user(client, name="Owner")
        member = create_test_user(client, name="Member")
        room = create_test_room(client, owner)
        join_room(client, member, room)
        resp = client.delete(f"/api/rooms/{room['room_id']}/members/{owner['user_id']}", headers=auth_headers(member))
        assert resp.status_code == 403

    def test_owner_cannot_remove_self(self, client):
        owner = create_test_user(client, name="Owner")
        room = create_test_room(client, owner)
        resp = client.delete(f"/api/rooms/{room['room_id']}/members/{owner['user_id']}", headers=auth_headers(owner))
        assert resp.status_code == 400
