"""Message routes: validation, membership-gated posting, chronological listing."""

from datetime import datetime, timedelta, timezone

from studyhub.config import get_settings
from studyhub.models.message import GroupMessage
from tests.services.api_helpers import create_group


async def _post(client, headers, group_id, text):
    return await client.post(
        f"/api/groups/{group_id}/messages", headers=headers, json={"message": text},
    )


async def test_member_posts_and_reads_back(client, alice, bob, subjects):
    group_id = await create_group(client, alice["headers"], subjects["Physics"])
    await client.post(f"/api/groups/{group_id}/join", headers=bob["headers"])

    assert (await _post(client, alice["headers"], group_id, "hello")).status_code == 200
    assert (await _post(client, bob["headers"], group_id, "hi alice")).status_code == 200

    res = await client.get(f"/api/groups/{group_id}/messages", headers=bob["headers"])
    assert res.status_code == 200
    assert [(m["display_name"], m["message"]) for m in res.json()] == [
        ("Alice", "hello"), ("Bob", "hi alice"),
    ]


async def test_empty_message_is_400(client, alice, subjects):
    group_id = await create_group(client, alice["headers"], subjects["Physics"])
    for text in ("", "   "):
        res = await _post(client, alice["headers"], group_id, text)
        assert res.status_code == 400
        assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_missing_message_field_is_400(client, alice, subjects):
    group_id = await create_group(client, alice["headers"], subjects["Physics"])
    res = await client.post(f"/api/groups/{group_id}/messages", headers=alice["headers"], json={})
    assert res.status_code == 400


async def test_non_member_cannot_post(client, alice, bob, subjects):
    group_id = await create_group(client, alice["headers"], subjects["Physics"])
    res = await _post(client, bob["headers"], group_id, "let me in")
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "NOT_GROUP_MEMBER"


async def test_non_member_can_post_when_gate_disabled(client, alice, bob, subjects, monkeypatch):
    monkeypatch.setattr(get_settings(), "require_membership_to_post", False)
    group_id = await create_group(client, alice["headers"], subjects["Physics"])
    res = await _post(client, bob["headers"], group_id, "drive-by")
    assert res.status_code == 200


async def test_post_to_unknown_group_is_404(client, alice):
    res = await _post(client, alice["headers"], 8080, "anyone?")
    assert res.status_code == 404


async def test_messages_require_token(client, alice, subjects):
    group_id = await create_group(client, alice["headers"], subjects["Physics"])
    assert (await client.get(f"/api/groups/{group_id}/messages")).status_code == 401


async def test_listing_returns_oldest_200_in_order(client, db_manager, alice, subjects):
    group_id = await create_group(client, alice["headers"], subjects["Physics"])
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    async with db_manager.session() as db:
        # inserted newest-first so id order disagrees with time order
        db.add_all([
            GroupMessage(
                group_id=group_id, user_id=alice["user"]["id"],
                message=f"m{i}", sent_at=start + timedelta(minutes=i),
            )
            for i in reversed(range(205))
        ])
        await db.commit()

    res = await client.get(f"/api/groups/{group_id}/messages", headers=alice["headers"])
    messages = [m["message"] for m in res.json()]
    assert len(messages) == 200
    assert messages[0] == "m0"
    assert messages[-1] == "m199"


async def test_out_of_range_group_id_is_404(client, alice):
    huge = 99999999999999999999
    listed = await client.get(f"/api/groups/{huge}/messages", headers=alice["headers"])
    posted = await _post(client, alice["headers"], huge, "hello?")
    assert listed.status_code == 404
    assert posted.status_code == 404
