"""
Unit tests for match service.
Tests match creation rules, match alerts, and status/score updates.
"""

import pytest
import pytest_asyncio
from datetime import timedelta
from sportsevents.services import alert_service, match_service, team_service
from sportsevents.services.errors import NotFound, ValidationError
from sportsevents.utils.datetime_utils import utcnow


def _start():
    return utcnow() + timedelta(days=8)


@pytest_asyncio.fixture
async def players(db_session, individual_event, make_user, add_participant):
    async def _players():
        p1_user = await make_user("p1", "Paula")
        p2_user = await make_user("p2", "Pedro")
        p1 = await add_participant(individual_event, p1_user)
        p2 = await add_participant(individual_event, p2_user)
        return p1_user, p2_user, p1, p2

    return _players


@pytest.mark.asyncio
async def test_individual_match_alerts_each_player(db_session, individual_event, players):
    p1_user, p2_user, p1, p2 = await players()

    match = await match_service.create_match(
        db_session,
        individual_event["id"],
        title="Quarter-final",
        start_time=_start(),
        player_a_id=p1["id"],
        player_b_id=p2["id"],
    )

    assert match["team_a"] == "Paula"
    assert match["team_b"] == "Pedro"
    assert match["status"] == "scheduled"
    assert match["sport"] == "tennis"
    assert match["end_time"] is None

    p1_alerts = (await alert_service.get_user_alerts(db_session, p1_user["id"]))["alerts"]
    p2_alerts = (await alert_service.get_user_alerts(db_session, p2_user["id"]))["alerts"]
    assert len(p1_alerts) == 1
    assert len(p2_alerts) == 1
    assert p1_alerts[0]["type"] == "match_upcoming"
    assert p1_alerts[0]["title"] == "New Match Scheduled"
    assert p1_alerts[0]["message"] == 'You have a match: "Quarter-final" vs Pedro'
    assert p2_alerts[0]["message"] == 'You have a match: "Quarter-final" vs Paula'
    assert p1_alerts[0]["match_id"] == match["id"]
    assert p1_alerts[0]["link_url"] == f"/events/{individual_event['id']}/matches/{match['id']}"


@pytest.mark.asyncio
async def test_team_match_alerts_every_member(db_session, team_event, make_user, add_participant):
    event_id = team_event["id"]
    users = {name: await make_user(name, name.upper()) for name in ("a", "b", "c")}
    participants = {name: await add_participant(team_event, user) for name, user in users.items()}
    t1 = await team_service.create_team(db_session, event_id, "Tigers")
    t2 = await team_service.create_team(db_session, event_id, "Lions")
    for name, team in (("a", t1), ("b", t1), ("c", t2)):
        await team_service.assign_participant_to_team(
            db_session, event_id, participants[name]["id"], team["id"]
        )

    match = await match_service.create_match(
        db_session, event_id, title="Final", start_time=_start(), team_a_id=t1["id"], team_b_id=t2["id"]
    )

    assert (match["team_a"], match["team_b"]) == ("Tigers", "Lions")
    match_alerts = {}
    for name, user in users.items():
        alerts = (await alert_service.get_user_alerts(db_session, user["id"]))["alerts"]
        match_alerts[name] = [a for a in alerts if a["type"] == "match_upcoming"]

    assert sum(len(a) for a in match_alerts.values()) == 3
    assert match_alerts["a"][0]["title"] == "New Team Match Scheduled"
    assert match_alerts["a"][0]["message"] == 'Your team "Tigers" has a match: "Final" vs Lions'
    assert match_alerts["b"][0]["message"] == 'Your team "Tigers" has a match: "Final" vs Lions'
    assert match_alerts["c"][0]["message"] == 'Your team "Lions" has a match: "Final" vs Tigers'


@pytest.mark.asyncio
async def test_create_match_side_rules(db_session, individual_event, team_event, players):
    _, _, p1, p2 = await players()
    event_id = individual_event["id"]
    red = await team_service.create_team(db_session, team_event["id"], "Red")
    blue = await team_service.create_team(db_session, team_event["id"], "Blue")

    with pytest.raises(ValidationError, match="cannot play against themselves"):
        await match_service.create_match(
            db_session, event_id, "M", _start(), player_a_id=p1["id"], player_b_id=p1["id"]
        )
    with pytest.raises(ValidationError, match="exactly one side pair"):
        await match_service.create_match(db_session, event_id, "M", _start())
    with pytest.raises(ValidationError, match="exactly one side pair"):
        await match_service.create_match(
            db_session, event_id, "M", _start(), player_a_id=p1["id"], team_b_id=red["id"]
        )
    with pytest.raises(ValidationError, match="Both players are required"):
        await match_service.create_match(db_session, event_id, "M", _start(), player_a_id=p1["id"])
    with pytest.raises(ValidationError, match="Individual events take players"):
        await match_service.create_match(
            db_session, event_id, "M", _start(), team_a_id=red["id"], team_b_id=blue["id"]
        )
    with pytest.raises(ValidationError, match="Team events take teams"):
        await match_service.create_match(
            db_session, team_event["id"], "M", _start(), player_a_id=p1["id"], player_b_id=p2["id"]
        )
    with pytest.raises(ValidationError, match="does not belong to this event"):
        await match_service.create_match(
            db_session, event_id, "M", _start(), player_a_id=p1["id"], player_b_id=999
        )


@pytest.mark.asyncio
async def test_create_match_field_rules(db_session, individual_event, players):
    _, _, p1, p2 = await players()
    sides = {"player_a_id": p1["id"], "player_b_id": p2["id"]}

    with pytest.raises(ValidationError, match="title is required"):
        await match_service.create_match(db_session, individual_event["id"], " ", _start(), **sides)
    with pytest.raises(ValidationError, match="scheduled or ongoing"):
        await match_service.create_match(
            db_session, individual_event["id"], "M", _start(), status="completed", **sides
        )
    with pytest.raises(NotFound):
        await match_service.create_match(db_session, 999, "M", _start(), **sides)


@pytest.mark.asyncio
async def test_update_match_status(db_session, individual_event, players):
    _, _, p1, p2 = await players()
    match = await match_service.create_match(
        db_session, individual_event["id"], "M", _start(), player_a_id=p1["id"], player_b_id=p2["id"]
    )

    ongoing = await match_service.update_match_status(db_session, match["id"], "ongoing")
    assert ongoing["status"] == "ongoing"
    assert ongoing["end_time"] is None

    completed = await match_service.update_match_status(
        db_session, match["id"], "completed", score_a=3, score_b="2"
    )
    assert completed["status"] == "completed"
    assert completed["end_time"] is not None
    assert (completed["score_a"], completed["score_b"]) == (3, "2")


@pytest.mark.asyncio
async def test_update_match_status_keeps_unsupplied_scores(db_session, individual_event, players):
    _, _, p1, p2 = await players()
    match = await match_service.create_match(
        db_session, individual_event["id"], "M", _start(), player_a_id=p1["id"], player_b_id=p2["id"]
    )
    await match_service.update_match_status(db_session, match["id"], "ongoing", score_a=1, score_b=0)

    updated = await match_service.update_match_status(db_session, match["id"], "ongoing", score_b=2)

    assert updated["score_a"] == 1
    assert updated["score_b"] == 2


@pytest.mark.asyncio
async def test_update_match_status_any_transition(db_session, individual_event, players):
    _, _, p1, p2 = await players()
    match = await match_service.create_match(
        db_session, individual_event["id"], "M", _start(), player_a_id=p1["id"], player_b_id=p2["id"]
    )

    await match_service.update_match_status(db_session, match["id"], "cancelled")
    reopened = await match_service.update_match_status(db_session, match["id"], "scheduled")

    assert reopened["status"] == "scheduled"
    assert reopened["end_time"] is None


@pytest.mark.asyncio
async def test_update_unknown_match(db_session):
    assert await match_service.update_match_status(db_session, 999, "completed") is None
    with pytest.raises(ValidationError, match="Invalid match status"):
        await match_service.update_match_status(db_session, 999, "paused")


@pytest.mark.asyncio
async def test_detailed_score_validated_for_sport(db_session, individual_event, players):
    _, _, p1, p2 = await players()
    match = await match_service.create_match(
        db_session, individual_event["id"], "M", _start(), player_a_id=p1["id"], player_b_id=p2["id"]
    )

    updated = await match_service.update_match_status(
        db_session,
        match["id"],
        "completed",
        detailed_score={"side_a": {"sets": ["6-4", "6-3"], "games": [6, 6]}},
    )
    assert updated["detailed_score"]["side_a"]["sets"] == ["6-4", "6-3"]
    assert updated["detailed_score"]["side_a"]["current_set"] is None

    with pytest.raises(ValidationError, match="Invalid tennis score"):
        await match_service.update_match_status(
            db_session, match["id"], "completed", detailed_score={"side_a": {"games": "lots"}}
        )
    with pytest.raises(ValidationError, match="side_a/side_b"):
        await match_service.update_match_status(
            db_session, match["id"], "completed", detailed_score={"home": {}}
        )


@pytest.mark.asyncio
async def test_get_matches(db_session, individual_event, players):
    _, _, p1, p2 = await players()
    later = await match_service.create_match(
        db_session, individual_event["id"], "Later", _start() + timedelta(hours=2),
        player_a_id=p1["id"], player_b_id=p2["id"],
    )
    earlier = await match_service.create_match(
        db_session, individual_event["id"], "Earlier", _start(),
        player_a_id=p2["id"], player_b_id=p1["id"],
    )

    by_event = await match_service.get_matches_by_event(db_session, individual_event["id"])
    assert [m["id"] for m in by_event] == [earlier["id"], later["id"]]
    assert [m["id"] for m in await match_service.get_matches(db_session)] == [later["id"], earlier["id"]]
    assert (await match_service.get_match(db_session, later["id"]))["title"] == "Later"
    assert await match_service.get_match(db_session, 999) is None
