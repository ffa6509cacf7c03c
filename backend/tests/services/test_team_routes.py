"""Team, Invitation & Contribution Routes — HTTP surface over the ledger services.

Invariants:
    - Requests without X-User-Id are rejected with 401
    - Typed service errors map to their HTTP status with a structured error body
    - Team details and contribution summaries are visible to members only
"""

from uuid import uuid4

from teampool.config import get_settings

from tests.services.ledger_fixtures import identity_headers

OWNER = identity_headers("owner-1", "Olivia Owner")


async def _create_team(client, name="Trip Fund", headers=OWNER):
    res = await client.post("/api/v1/teams", json={"name": name}, headers=headers)
    assert res.status_code == 201
    return res.json()["id"]


async def _invite_and_join(client, team_id, *user_ids):
    res = await client.post(f"/api/v1/teams/{team_id}/invitations", headers=OWNER)
    assert res.status_code == 201
    token = res.json()["token"]
    for user_id in user_ids:
        joined = await client.post(
            f"/api/v1/invitations/{token}/join", headers=identity_headers(user_id),
        )
        assert joined.status_code == 200
    return token


# -- identity -------------------------------------------------------------------

async def test_missing_identity_is_401(client):
    res = await client.get("/api/v1/teams")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"


# -- teams ----------------------------------------------------------------------

async def test_create_and_list_teams(client):
    team_id = await _create_team(client)

    res = await client.get("/api/v1/teams", headers=OWNER)

    assert res.status_code == 200
    teams = res.json()["teams"]
    assert len(teams) == 1
    assert teams[0]["id"] == team_id
    assert teams[0]["is_creator"] is True
    assert teams[0]["member_count"] == 1


async def test_duplicate_team_name_is_409(client):
    await _create_team(client)
    res = await client.post(
        "/api/v1/teams", json={"name": "Trip Fund"}, headers=identity_headers("u1"),
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_NAME"


async def test_blank_team_name_is_400(client):
    res = await client.post("/api/v1/teams", json={"name": "   "}, headers=OWNER)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_team_details_for_member(client):
    team_id = await _create_team(client)
    await _invite_and_join(client, team_id, "u1")

    res = await client.get(f"/api/v1/teams/{team_id}", headers=identity_headers("u1"))

    assert res.status_code == 200
    body = res.json()
    assert body["name"] == "Trip Fund"
    assert body["total_members"] == 2
    assert [m["user_id"] for m in body["members"]] == ["owner-1", "u1"]
    assert body["members"][0]["name"] == "Olivia Owner"


async def test_team_details_hidden_from_non_member(client):
    team_id = await _create_team(client)
    res = await client.get(f"/api/v1/teams/{team_id}", headers=identity_headers("u9"))
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "NOT_A_MEMBER"


async def test_unknown_team_is_404(client):
    res = await client.get(f"/api/v1/teams/{uuid4()}", headers=OWNER)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_delete_team_owner_only(client):
    team_id = await _create_team(client)
    await _invite_and_join(client, team_id, "u1")

    refused = await client.delete(f"/api/v1/teams/{team_id}", headers=identity_headers("u1"))
    assert refused.status_code == 403
    assert refused.json()["error"]["code"] == "UNAUTHORIZED"

    deleted = await client.delete(f"/api/v1/teams/{team_id}", headers=OWNER)
    assert deleted.status_code == 200
    assert deleted.json() == {"success": True}

    gone = await client.get(f"/api/v1/teams/{team_id}", headers=OWNER)
    assert gone.status_code == 404


async def test_leave_team(client):
    team_id = await _create_team(client)
    await _invite_and_join(client, team_id, "u1")

    res = await client.post(f"/api/v1/teams/{team_id}/leave", headers=identity_headers("u1"))
    assert res.status_code == 200

    listed = await client.get("/api/v1/teams", headers=identity_headers("u1"))
    assert listed.json()["teams"] == []


async def test_owner_cannot_leave_is_400(client):
    team_id = await _create_team(client)
    res = await client.post(f"/api/v1/teams/{team_id}/leave", headers=OWNER)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "OWNER_CANNOT_LEAVE"


# -- invitations ----------------------------------------------------------------

async def test_invite_link_points_at_join_page(client):
    team_id = await _create_team(client)

    res = await client.post(f"/api/v1/teams/{team_id}/invitations", headers=OWNER)

    body = res.json()
    app_url = get_settings().app_url.rstrip("/")
    assert body["team_id"] == team_id
    assert len(body["token"]) == 64
    assert body["invite_link"] == f"{app_url}/join-team/{body['token']}"


async def test_non_owner_cannot_invite(client):
    team_id = await _create_team(client)
    await _invite_and_join(client, team_id, "u1")
    res = await client.post(
        f"/api/v1/teams/{team_id}/invitations", headers=identity_headers("u1"),
    )
    assert res.status_code == 403


async def test_join_is_idempotent(client):
    team_id = await _create_team(client)
    token = await _invite_and_join(client, team_id, "u1")

    again = await client.post(
        f"/api/v1/invitations/{token}/join", headers=identity_headers("u1"),
    )

    assert again.status_code == 200
    assert again.json() == {"team_id": team_id}
    details = await client.get(f"/api/v1/teams/{team_id}", headers=OWNER)
    assert details.json()["total_members"] == 2


async def test_join_with_unknown_token_is_404(client):
    res = await client.post(
        f"/api/v1/invitations/{'a' * 64}/join", headers=identity_headers("u1"),
    )
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "INVALID_OR_EXPIRED_INVITE"


# -- contributions --------------------------------------------------------------

async def test_contribution_summary_flow(client):
    team_id = await _create_team(client)
    await _invite_and_join(client, team_id, "u1", "u2", "u3")

    res = await client.put(
        f"/api/v1/teams/{team_id}/contribution", json={"amount": "10"}, headers=OWNER,
    )
    assert res.status_code == 200
    for user_id in ("u1", "u2"):
        paid = await client.put(
            f"/api/v1/teams/{team_id}/members/{user_id}/payment",
            json={"has_paid": True}, headers=OWNER,
        )
        assert paid.status_code == 200

    summary = await client.get(
        f"/api/v1/teams/{team_id}/contribution", headers=identity_headers("u3"),
    )

    body = summary.json()
    assert body["total_members"] == 4
    assert body["paid_members"] == 2
    assert float(body["total_amount"]) == 40.0
    assert float(body["collected_amount"]) == 20.0


async def test_negative_contribution_is_400(client):
    team_id = await _create_team(client)
    res = await client.put(
        f"/api/v1/teams/{team_id}/contribution", json={"amount": -5}, headers=OWNER,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_AMOUNT"


async def test_non_numeric_contribution_is_400(client):
    team_id = await _create_team(client)
    res = await client.put(
        f"/api/v1/teams/{team_id}/contribution", json={"amount": "abc"}, headers=OWNER,
    )
    assert res.status_code == 400


async def test_non_owner_cannot_set_contribution(client):
    team_id = await _create_team(client)
    await _invite_and_join(client, team_id, "u1")
    res = await client.put(
        f"/api/v1/teams/{team_id}/contribution",
        json={"amount": 10}, headers=identity_headers("u1"),
    )
    assert res.status_code == 403


async def test_payment_status_must_be_boolean(client):
    team_id = await _create_team(client)
    await _invite_and_join(client, team_id, "u1")
    res = await client.put(
        f"/api/v1/teams/{team_id}/members/u1/payment",
        json={"has_paid": "yes"}, headers=OWNER,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
