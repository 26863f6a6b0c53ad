
async def test_root(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.json() == {"message": "SplitChat Backend is live"}


async def test_parse_needs_no_auth(client):
    res = await client.post("/api/v1/commands/parse", json={"message": "@split Dinner ₹120 @alice @bob"})

    assert res.status_code == 200
    body = res.json()
    assert body["type"] == "split"
    assert body["data"]["amount"] == 120
    assert isinstance(body["data"]["amount"], (int, float))
    assert body["data"]["participants"] == ["alice", "bob"]


async def test_parse_expense_amount_is_a_number(client):
    res = await client.post("/api/v1/commands/parse", json={"message": "@addexpense Coffee $4.50 cat:Food"})

    assert res.status_code == 200
    assert res.json()["data"] == {"description": "Coffee", "amount": 4.5, "category": "Food"}


async def test_split_bills_require_auth(client):
    res = await client.get("/api/v1/split-bills/")
    assert res.status_code == 401


async def test_bad_token(client):
    res = await client.get("/api/v1/split-bills/", headers={"Authorization": "Bearer nope"})
    assert res.status_code == 401


async def test_split_bill_lifecycle(client, auth):
    payload = {
        "description": "Groceries",
        "total_amount": "90",
        "group_id": "g1",
        "participants": [
            {"user_id": "carol", "amount": "30"},
            {"user_id": "alice", "amount": "30"},
            {"user_id": "bob", "amount": "30"},
        ],
    }
    res = await client.post("/api/v1/split-bills/", json=payload, headers=auth("carol"))
    assert res.status_code == 201
    bill = res.json()
    bill_id = bill["id"]
    assert bill["is_settled"] is False
    assert bill["participants"][0]["is_paid"] is True

    res = await client.patch(f"/api/v1/split-bills/{bill_id}/reject", headers=auth("bob"))
    assert res.status_code == 200
    assert res.json()["participants"][2]["is_rejected"] is True

    res = await client.patch(f"/api/v1/split-bills/{bill_id}/mark-paid", headers=auth("alice"))
    assert res.status_code == 200
    assert res.json()["is_settled"] is True

    res = await client.patch(f"/api/v1/split-bills/{bill_id}/mark-paid", headers=auth("alice"))
    assert res.status_code == 200

    res = await client.get(f"/api/v1/split-bills/{bill_id}", headers=auth("mallory"))
    assert res.status_code == 403

    res = await client.patch(f"/api/v1/split-bills/{bill_id}/mark-paid", headers=auth("mallory"))
    assert res.status_code == 404

    res = await client.patch(f"/api/v1/split-bills/{bill_id}/reject", headers=auth("carol"))
    assert res.status_code == 400
    assert res.json()["detail"] == "Cannot reject your own bill"

    res = await client.patch(f"/api/v1/split-bills/{bill_id}/reject", headers=auth("alice"))
    assert res.status_code == 400
    assert res.json()["detail"] == "Bill already settled"


async def test_create_rejects_amount_mismatch(client, auth):
    payload = {
        "description": "Groceries",
        "total_amount": "100",
        "participants": [{"user_id": "alice", "amount": "30"}],
    }
    res = await client.post("/api/v1/split-bills/", json=payload, headers=auth("carol"))

    assert res.status_code == 400
    assert "must equal sum of participant amounts" in res.json()["detail"]


async def test_create_rejects_blank_description(client, auth):
    payload = {
        "description": "  ",
        "total_amount": "30",
        "participants": [{"user_id": "alice", "amount": "30"}],
    }
    res = await client.post("/api/v1/split-bills/", json=payload, headers=auth("carol"))

    assert res.status_code == 400
    assert res.json()["detail"] == "Description is required"


async def test_execute_command_and_stats(client, auth):
    res = await client.post(
        "/api/v1/commands/execute",
        json={"message": "@split Dinner 120 @alice @bob", "group_id": "g1"},
        headers=auth("carol"),
    )
    assert res.status_code == 200
    body = res.json()
    assert body["type"] == "split"
    assert body["executed"] is True
    assert len(body["data"]["split_bill"]["participants"]) == 3

    res = await client.get("/api/v1/split-bills/stats", headers=auth("alice"))
    assert res.status_code == 200
    assert res.json()["overview"]["count"] == 1

    res = await client.get("/api/v1/split-bills/group/g1", headers=auth("bob"))
    assert res.status_code == 200
    assert res.json()["total"] == 1


async def test_execute_command_reports_domain_errors(client, auth):
    res = await client.post(
        "/api/v1/commands/execute",
        json={"message": "@split Trip 200 @alice 70% 70%", "group_id": "g1"},
        headers=auth("carol"),
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "Percentages must add up to 100"


async def test_expenses(client, auth):
    res = await client.post(
        "/api/v1/expense/",
        json={"description": "Coffee", "amount": "4.50", "category": "Food"},
        headers=auth("carol"),
    )
    assert res.status_code == 201
    expense_id = res.json()["id"]

    res = await client.get("/api/v1/expense/categories", headers=auth("carol"))
    assert res.json() == {
        "total_spent": "4.50",
        "categories": [{"category": "Food", "total": "4.50", "count": 1}],
    }

    res = await client.delete(f"/api/v1/expense/{expense_id}", headers=auth("alice"))
    assert res.status_code == 403

    res = await client.delete(f"/api/v1/expense/{expense_id}", headers=auth("carol"))
    assert res.json() == {"status": "deleted"}

    res = await client.get("/api/v1/expense/my-expenses", headers=auth("carol"))
    assert res.json() == []
