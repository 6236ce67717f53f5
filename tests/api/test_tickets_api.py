from ticket_assistant.config import UserRole
from ticket_assistant.infrastructure.database import get_session_context
from ticket_assistant.tickets.infrastructure import SQLAlchemyTicketRepository
from tests.conftest import FailingLLMClient, StaticLLMClient

REACT_TICKET = {
    "title": "React dashboard crashes",
    "description": "The React dashboard crashes when rendering charts."
}
QUIET_TICKET = {
    "title": "Question about invoices",
    "description": "Where can I find last month's invoice?"
}


async def create_ticket(client, headers, payload=None):
    response = await client.post("/tickets", json=payload or REACT_TICKET, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["ticket"]


async def get_ticket(client, headers, ticket_id):
    response = await client.get(f"/tickets/{ticket_id}", headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["ticket"]


async def seed_tickets(creator_id, count):
    async with get_session_context() as session:
        repo = SQLAlchemyTicketRepository(session)
        for i in range(count):
            await repo.create(f"Ticket {i}", "Seeded", creator_id)


async def test_create_returns_bare_ticket_then_triage_enriches_it(client, make_user):
    creator, creator_headers = await make_user("creator@example.com")
    moderator, mod_headers = await make_user("mod@example.com", role=UserRole.MODERATOR, skills=["react"])
    await make_user("admin@example.com", role=UserRole.ADMIN)

    response = await client.post("/tickets", json=REACT_TICKET, headers=creator_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Ticket created and processing started"
    assert body["ticket"]["status"] == "TODO"
    assert body["ticket"]["createdBy"] == {"id": creator.id, "email": creator.email, "role": "user"}

    ticket = await get_ticket(client, mod_headers, body["ticket"]["id"])

    assert ticket["status"] == "TODO"
    assert ticket["priority"] == "high"
    assert ticket["level"] == "L2"
    assert ticket["relatedSkills"] == ["React"]
    assert ticket["helpfulNotes"].startswith("Mock:")
    assert ticket["assignedTo"]["id"] == moderator.id


async def test_unmatched_ticket_goes_to_admin(client, make_user):
    _, creator_headers = await make_user("creator@example.com", skills=["Python"])
    admin, admin_headers = await make_user("admin@example.com", role=UserRole.ADMIN)

    created = await create_ticket(client, creator_headers, QUIET_TICKET)
    ticket = await get_ticket(client, admin_headers, created["id"])

    assert ticket["relatedSkills"] == []
    assert ticket["assignedTo"]["id"] == admin.id


async def test_failed_triage_leaves_ticket_untriaged(client, make_user, use_triage):
    use_triage(FailingLLMClient())
    _, creator_headers = await make_user("creator@example.com")
    await make_user("admin@example.com", role=UserRole.ADMIN)

    created = await create_ticket(client, creator_headers)
    ticket = await get_ticket(client, creator_headers, created["id"])

    assert ticket["status"] == "TODO"
    assert ticket["priority"] is None
    assert ticket["level"] is None
    assert ticket["relatedSkills"] == []
    assert ticket["helpfulNotes"] is None
    assert ticket["assignedTo"] is None


async def test_malformed_triage_answer_leaves_ticket_untriaged(client, make_user, use_triage):
    use_triage(StaticLLMClient("Sorry, I cannot help with that."))
    _, creator_headers = await make_user("creator@example.com")

    created = await create_ticket(client, creator_headers)
    ticket = await get_ticket(client, creator_headers, created["id"])

    assert ticket["priority"] is None
    assert ticket["assignedTo"] is None


async def test_unconfigured_triage_still_creates_ticket(client, make_user, use_triage):
    use_triage(None)
    _, creator_headers = await make_user("creator@example.com")

    created = await create_ticket(client, creator_headers)

    assert (await get_ticket(client, creator_headers, created["id"]))["priority"] is None


async def test_create_requires_auth_and_content(client, make_user):
    _, headers = await make_user("creator@example.com")

    assert (await client.post("/tickets", json=REACT_TICKET)).status_code == 401
    assert (await client.post("/tickets", json={"title": "  ", "description": "x"}, headers=headers)).status_code == 422


async def test_user_list_only_contains_their_assignments(client, make_user):
    _, creator_headers = await make_user("creator@example.com")
    docker_user, docker_headers = await make_user("ops@example.com", skills=["Docker"])
    await make_user("mod@example.com", role=UserRole.MODERATOR, skills=["React"])
    _, admin_headers = await make_user("admin@example.com", role=UserRole.ADMIN)

    await create_ticket(client, creator_headers, REACT_TICKET)
    docker_ticket = await create_ticket(client, creator_headers, {
        "title": "Docker build fails",
        "description": "The image build stops at step 3."
    })

    mine = (await client.get("/tickets", headers=docker_headers)).json()
    assert [t["id"] for t in mine["tickets"]] == [docker_ticket["id"]]
    assert all(t["assignedTo"]["id"] == docker_user.id for t in mine["tickets"])

    creators = (await client.get("/tickets", headers=creator_headers)).json()
    assert creators["tickets"] == []
    assert creators["pagination"]["totalTickets"] == 0

    everything = (await client.get("/tickets", headers=admin_headers)).json()
    assert everything["pagination"]["totalTickets"] == 2
    # newest first
    assert everything["tickets"][0]["id"] == docker_ticket["id"]


async def test_pagination(client, make_user):
    admin, admin_headers = await make_user("admin@example.com", role=UserRole.ADMIN)
    await seed_tickets(admin.id, 25)

    response = await client.get("/tickets", params={"page": 3, "limit": 10}, headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert len(body["tickets"]) == 5
    assert body["pagination"] == {
        "currentPage": 3,
        "totalPages": 3,
        "totalTickets": 25,
        "hasNextPage": False,
        "hasPrevPage": True,
        "limit": 10
    }

    default = (await client.get("/tickets", headers=admin_headers)).json()
    assert len(default["tickets"]) == 10
    assert default["pagination"]["currentPage"] == 1


async def test_pagination_rejects_bad_window(client, make_user):
    _, headers = await make_user("admin@example.com", role=UserRole.ADMIN)

    assert (await client.get("/tickets", params={"page": 0}, headers=headers)).status_code == 400
    assert (await client.get("/tickets", params={"limit": 0}, headers=headers)).status_code == 400


async def test_pagination_rejects_huge_window(client, make_user):
    _, headers = await make_user("admin@example.com", role=UserRole.ADMIN)

    huge_limit = await client.get("/tickets", params={"limit": str(10**20)}, headers=headers)
    huge_page = await client.get("/tickets", params={"page": str(10**19)}, headers=headers)

    assert huge_limit.status_code == 400
    assert huge_limit.json()["error"] == "ValidationException"
    assert huge_page.status_code == 400


async def test_get_ticket_visibility(client, make_user):
    _, creator_headers = await make_user("creator@example.com")
    _, stranger_headers = await make_user("stranger@example.com")
    _, mod_headers = await make_user("mod@example.com", role=UserRole.MODERATOR)

    created = await create_ticket(client, creator_headers, QUIET_TICKET)

    assert (await client.get(f"/tickets/{created['id']}", headers=creator_headers)).status_code == 200
    assert (await client.get(f"/tickets/{created['id']}", headers=mod_headers)).status_code == 200
    assert (await client.get(f"/tickets/{created['id']}", headers=stranger_headers)).status_code == 404
    assert (await client.get("/tickets/not-a-uuid", headers=mod_headers)).status_code == 404


async def test_invalid_status_rejected_and_unchanged(client, make_user):
    _, creator_headers = await make_user("creator@example.com")
    _, mod_headers = await make_user("mod@example.com", role=UserRole.MODERATOR)
    created = await create_ticket(client, creator_headers)

    response = await client.put(f"/tickets/{created['id']}/status", json={"status": "CLOSED"}, headers=mod_headers)

    assert response.status_code == 400
    assert response.json()["details"]["allowed"] == ["TODO", "IN_PROGRESS", "DONE"]
    assert (await get_ticket(client, mod_headers, created["id"]))["status"] == "TODO"


async def test_status_update_permissions(client, make_user):
    _, creator_headers = await make_user("creator@example.com")
    assignee, assignee_headers = await make_user("react@example.com", skills=["React"])
    _, mod_headers = await make_user("mod@example.com", role=UserRole.MODERATOR)
    created = await create_ticket(client, creator_headers, REACT_TICKET)
    ticket_id = created["id"]
    assert (await get_ticket(client, assignee_headers, ticket_id))["assignedTo"]["id"] == assignee.id

    forbidden = await client.put(f"/tickets/{ticket_id}/status", json={"status": "DONE"}, headers=creator_headers)
    assert forbidden.status_code == 403

    started = await client.put(f"/tickets/{ticket_id}/status", json={"status": "IN_PROGRESS"}, headers=assignee_headers)
    assert started.status_code == 200
    assert started.json()["message"] == "Ticket status updated successfully"
    assert started.json()["ticket"]["status"] == "IN_PROGRESS"

    # backward transitions are allowed
    reopened = await client.put(f"/tickets/{ticket_id}/status", json={"status": "TODO"}, headers=mod_headers)
    assert reopened.json()["ticket"]["status"] == "TODO"

    missing = await client.put(
        "/tickets/00000000-0000-4000-8000-000000000000/status",
        json={"status": "DONE"},
        headers=mod_headers
    )
    assert missing.status_code == 404
