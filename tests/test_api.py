def _borrow_payload(world, qty=4):
    return {
        "item_id": world.item,
        "owning_department_id": world.x,
        "quantity_requested": qty,
        "justification": "Site survey",
        "required_date": "2030-01-15",
    }


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}


def test_login_rejects_bad_password(client, world, login):
    resp = login("requester", "wrong")
    assert resp.status_code == 401
    assert "error" in resp.get_json()


def test_login_and_me(client, world, login):
    resp = login("hod_x")
    assert resp.status_code == 200
    assert resp.get_json()["role"] == "HOD"
    me = client.get("/auth/me").get_json()
    assert me["username"] == "hod_x"
    client.post("/auth/logout")
    assert client.get("/auth/me").status_code == 401


def test_api_requires_login(client, world):
    resp = client.get("/api/borrow-requests")
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Not authenticated"}


def test_borrow_flow_over_http(client, world, login):
    login("requester")
    resp = client.post("/api/borrow-requests", json=_borrow_payload(world))
    assert resp.status_code == 201
    req_id = resp.get_json()["id"]
    assert resp.get_json()["requester_department_id"] == world.y

    # requesters cannot approve
    resp = client.patch(
        f"/api/borrow-requests/{req_id}/approve", json={"approval_type": "requester_hod"}
    )
    assert resp.status_code == 403

    login("hod_y")
    resp = client.patch(
        f"/api/borrow-requests/{req_id}/approve", json={"approval_type": "requester_hod"}
    )
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "PENDING"

    login("hod_x")
    resp = client.patch(
        f"/api/borrow-requests/{req_id}/approve", json={"approval_type": "owner_hod"}
    )
    assert resp.get_json()["status"] == "APPROVED"

    resp = client.patch(
        f"/api/borrow-requests/{req_id}/approve", json={"approval_type": "owner_hod"}
    )
    assert resp.status_code == 409

    stock = client.get(f"/api/stock?item_id={world.item}").get_json()
    by_dept = {r["department_id"]: r["quantity_available"] for r in stock}
    assert by_dept == {world.x: 6, world.y: 4}

    detail = client.get(f"/api/borrow-requests/{req_id}").get_json()
    assert detail["owning_department"] == "Operations"


def test_borrow_errors_map_to_status_codes(client, world, login):
    login("requester")
    resp = client.post("/api/borrow-requests", json=_borrow_payload(world, qty=99))
    assert resp.status_code == 400
    assert "Insufficient" in resp.get_json()["error"]

    resp = client.post("/api/borrow-requests", json=[1, 2])
    assert resp.status_code == 400

    assert client.get("/api/borrow-requests/999").status_code == 404
    assert client.get("/api/borrow-requests?department_id=abc").status_code == 400

    login("hod_x")
    resp = client.patch("/api/borrow-requests/999/approve", json={"approval_type": "owner_hod"})
    assert resp.status_code == 404
    resp = client.patch("/api/borrow-requests/1/approve", json={"approval_type": "nope"})
    assert resp.status_code == 400


def test_borrow_reject_over_http(client, world, login):
    login("requester")
    req_id = client.post("/api/borrow-requests", json=_borrow_payload(world)).get_json()["id"]
    login("hod_x")
    resp = client.patch(
        f"/api/borrow-requests/{req_id}/reject",
        json={"approval_type": "owner_hod", "reason": "In use"},
    )
    assert resp.get_json()["status"] == "REJECTED"
    pending = client.get("/api/borrow-requests?pending=true").get_json()
    assert pending == []


def test_purchase_flow_over_http(client, world, login):
    login("requester")
    resp = client.post(
        "/api/purchase-requisitions",
        json={
            "item_name": "Laptop",
            "description": "Dev machine",
            "quantity": 1,
            "estimated_cost": "1500.00",
            "justification": "New hire",
            "required_date": "2030-02-01",
        },
    )
    assert resp.status_code == 201
    pr_id = resp.get_json()["id"]

    for user, gate in (("hod_y", "hod"), ("proc", "procurement"), ("fin", "finance")):
        login(user)
        resp = client.patch(
            f"/api/purchase-requisitions/{pr_id}/approve", json={"approval_type": gate}
        )
        assert resp.status_code == 200
    assert resp.get_json()["status"] == "APPROVED"

    rows = client.get(f"/api/purchase-requisitions?department_id={world.y}").get_json()
    assert [r["id"] for r in rows] == [pr_id]


def test_vendor_creation_is_procurement_only(client, world, login):
    login("hod_x")
    resp = client.post("/api/vendors", json={"name": "Acme", "email": "a@acme.test"})
    assert resp.status_code == 403

    login("proc")
    resp = client.post("/api/vendors", json={"name": "Acme", "email": "a@acme.test"})
    assert resp.status_code == 201
    vendor_id = resp.get_json()["id"]
    resp = client.patch(f"/api/vendors/{vendor_id}", json={"status": "ACTIVE"})
    assert resp.get_json()["status"] == "ACTIVE"
    assert len(client.get("/api/vendors?active=true").get_json()) == 1


def test_audit_log_for_approvers_only(client, world, login):
    login("requester")
    assert client.get("/api/audit-logs").status_code == 403
    login("fin")
    entries = client.get("/api/audit-logs?limit=1").get_json()
    assert len(entries) == 1


def test_gate_must_match_role(client, world, login):
    login("requester")
    req_id = client.post("/api/borrow-requests", json=_borrow_payload(world)).get_json()["id"]
    pr_id = client.post(
        "/api/purchase-requisitions",
        json={
            "item_name": "Chair",
            "description": "Office chair",
            "quantity": 4,
            "estimated_cost": "600",
            "justification": "Worn out",
            "required_date": "2030-02-01",
        },
    ).get_json()["id"]

    login("fin")
    resp = client.patch(
        f"/api/borrow-requests/{req_id}/approve", json={"approval_type": "owner_hod"}
    )
    assert resp.status_code == 409

    login("hod_y")
    resp = client.patch(
        f"/api/purchase-requisitions/{pr_id}/approve", json={"approval_type": "finance"}
    )
    assert resp.status_code == 409
    detail = client.get(f"/api/purchase-requisitions/{pr_id}").get_json()
    assert detail["finance_approval"] == "PENDING"


def test_oversized_quantity_is_a_validation_error(client, world, login):
    login("requester")
    resp = client.post("/api/borrow-requests", json=_borrow_payload(world, qty=10**20))
    assert resp.status_code == 400
    assert "quantity_requested" in resp.get_json()["error"]
    assert client.get("/api/borrow-requests").get_json() == []


def test_item_detail(client, world, login):
    login("requester")
    resp = client.get(f"/api/items/{world.item}")
    assert resp.status_code == 200
    assert resp.get_json()["code"] == "TL-DRILL"
    assert client.get("/api/items/999").status_code == 404


def test_json_keeps_insertion_order(app, client, world, login):
    assert app.json.sort_keys is False
    body = login("hod_x").get_data(as_text=True)
    assert body.index('"username"') < body.index('"email"')
