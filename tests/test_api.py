"""HTTP surface: status codes and error codes the frontend branches on."""


class TestAuthRoutes:
    def test_first_registration_is_admin(self, client):
        res = client.post("/api/auth/register", json={"email": "Boss@School.test", "password": "secret123"})
        assert res.status_code == 201
        token = res.json()["access_token"]
        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"}).json()
        assert me["role"] == "ADMIN"
        assert me["email"] == "boss@school.test"

        res = client.post("/api/auth/register", json={"email": "kid@school.test", "password": "secret123"})
        token = res.json()["access_token"]
        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"}).json()
        assert me["role"] == "USER"

    def test_duplicate_registration(self, client):
        body = {"email": "kid@school.test", "password": "secret123"}
        assert client.post("/api/auth/register", json=body).status_code == 201
        assert client.post("/api/auth/register", json=body).status_code == 409

    def test_login(self, client, student_user):
        res = client.post("/api/auth/login", json={"email": student_user.email, "password": "secret123"})
        assert res.status_code == 200
        assert res.json()["token_type"] == "bearer"
        bad = client.post("/api/auth/login", json={"email": student_user.email, "password": "wrong"})
        assert bad.status_code == 401

    def test_me_requires_token(self, client):
        assert client.get("/api/auth/me").status_code == 401

    def test_check_access(self, client, admin_user, student_user, auth_headers):
        anon = client.get("/api/auth/check-access").json()
        assert anon == {"allowed": False, "redirect_hint": "/sign-in", "role": None}

        res = client.get(
            "/api/auth/check-access",
            params={"required_role": "ADMIN"},
            headers=auth_headers(student_user),
        ).json()
        assert res == {"allowed": False, "redirect_hint": "/", "role": "USER"}

        res = client.get(
            "/api/auth/check-access",
            params={"required_role": "ADMIN"},
            headers=auth_headers(admin_user),
        ).json()
        assert res["allowed"] is True


class TestClassRoutes:
    def test_admin_creates_and_user_lists(self, client, admin_user, student_user, auth_headers):
        res = client.post(
            "/api/classes",
            json={"name": "Biology", "allowed_file_types": ["PDF", ".pptx"]},
            headers=auth_headers(admin_user),
        )
        assert res.status_code == 201
        assert res.json()["allowed_file_types"] == ["pdf", "pptx"]

        listed = client.get("/api/classes", headers=auth_headers(student_user)).json()
        assert [c["name"] for c in listed] == ["Biology"]

    def test_user_cannot_create(self, client, student_user, auth_headers):
        res = client.post(
            "/api/classes",
            json={"name": "Biology", "allowed_file_types": ["pdf"]},
            headers=auth_headers(student_user),
        )
        assert res.status_code == 403
        assert res.json()["detail"]["code"] == "forbidden_role"

    def test_empty_file_types(self, client, admin_user, auth_headers):
        res = client.post(
            "/api/classes",
            json={"name": "Biology", "allowed_file_types": []},
            headers=auth_headers(admin_user),
        )
        assert res.status_code == 422
        assert res.json()["detail"]["code"] == "invalid_file_type_set"

    def test_update_unknown(self, client, admin_user, auth_headers):
        res = client.patch("/api/classes/missing", json={"name": "X"}, headers=auth_headers(admin_user))
        assert res.status_code == 404
        assert res.json()["detail"]["code"] == "class_not_found"

    def test_archived_hidden_from_users(self, client, admin_user, student_user, math_class, auth_headers):
        res = client.post(f"/api/classes/{math_class.id}/archive", headers=auth_headers(admin_user))
        assert res.json()["is_active"] is False
        assert client.get("/api/classes", headers=auth_headers(student_user)).json() == []
        assert client.get(f"/api/classes/{math_class.id}", headers=auth_headers(student_user)).status_code == 404
        admin_view = client.get("/api/classes/admin", headers=auth_headers(admin_user)).json()
        assert [c["id"] for c in admin_view] == [math_class.id]


class TestRequestFlow:
    def test_submit_review_notify(self, client, admin_user, student_user, math_class, auth_headers):
        user_h, admin_h = auth_headers(student_user), auth_headers(admin_user)

        res = client.post("/api/requests", json={"class_id": math_class.id, "message": "exam prep"}, headers=user_h)
        assert res.status_code == 201
        req = res.json()
        assert req["status"] == "PENDING"
        assert req["class_name"] == "Mathematics"
        assert req["requester_email"] == student_user.email

        dup = client.post("/api/requests", json={"class_id": math_class.id}, headers=user_h)
        assert dup.status_code == 409
        assert dup.json()["detail"]["code"] == "duplicate_pending"

        admin_notes = client.get("/api/notifications", headers=admin_h).json()
        assert [n["kind"] for n in admin_notes] == ["request_submitted"]

        pending = client.get("/api/requests", params={"status_filter": "pending"}, headers=admin_h).json()
        assert [r["id"] for r in pending] == [req["id"]]

        res = client.patch(
            f"/api/requests/{req['id']}",
            json={"status": "REJECTED", "reason": "capacity full"},
            headers=admin_h,
        )
        assert res.status_code == 200
        body = res.json()
        assert body["status"] == "REJECTED"
        assert body["decided_by_id"] == admin_user.id
        assert body["reason"] == "capacity full"

        again = client.patch(
            f"/api/requests/{req['id']}",
            json={"status": "REJECTED", "reason": "capacity full"},
            headers=admin_h,
        )
        assert again.status_code == 409
        assert again.json()["detail"]["code"] == "already_decided"

        notes = client.get("/api/notifications", headers=user_h).json()
        assert len(notes) == 1
        assert notes[0]["kind"] == "request_rejected"
        assert notes[0]["is_read"] is False
        assert client.get("/api/notifications/unread-count", headers=user_h).json() == {"count": 1}

        # Only the recipient can mark it read.
        assert client.post(f"/api/notifications/{notes[0]['id']}/read", headers=admin_h).status_code == 403
        marked = client.post(f"/api/notifications/{notes[0]['id']}/read", headers=user_h).json()
        assert marked["is_read"] is True
        assert client.get("/api/notifications/unread-count", headers=user_h).json() == {"count": 0}

    def test_user_cannot_review(self, client, student_user, other_student_user, math_class, auth_headers):
        req = client.post(
            "/api/requests", json={"class_id": math_class.id}, headers=auth_headers(other_student_user)
        ).json()
        res = client.patch(
            f"/api/requests/{req['id']}", json={"status": "APPROVED"}, headers=auth_headers(student_user)
        )
        assert res.status_code == 403
        assert res.json()["detail"]["code"] == "forbidden_role"

    def test_reading_someone_elses_request(self, client, student_user, other_student_user, math_class, auth_headers):
        req = client.post(
            "/api/requests", json={"class_id": math_class.id}, headers=auth_headers(other_student_user)
        ).json()
        res = client.get(f"/api/requests/{req['id']}", headers=auth_headers(student_user))
        assert res.status_code == 403
        assert client.get("/api/requests", headers=auth_headers(student_user)).json() == []

    def test_unknown_class(self, client, student_user, auth_headers):
        res = client.post("/api/requests", json={"class_id": "nope"}, headers=auth_headers(student_user))
        assert res.status_code == 404
        assert res.json()["detail"]["code"] == "unknown_class"

    def test_reject_without_reason(self, client, admin_user, student_user, math_class, auth_headers):
        req = client.post(
            "/api/requests", json={"class_id": math_class.id}, headers=auth_headers(student_user)
        ).json()
        res = client.patch(f"/api/requests/{req['id']}", json={"status": "REJECTED"}, headers=auth_headers(admin_user))
        assert res.status_code == 422
        assert res.json()["detail"]["field"] == "reason"

    def test_reasonless_reject_after_approval(self, client, admin_user, student_user, math_class, auth_headers):
        admin_h = auth_headers(admin_user)
        req = client.post(
            "/api/requests", json={"class_id": math_class.id}, headers=auth_headers(student_user)
        ).json()
        client.patch(f"/api/requests/{req['id']}", json={"status": "APPROVED"}, headers=admin_h)
        res = client.patch(f"/api/requests/{req['id']}", json={"status": "REJECTED"}, headers=admin_h)
        assert res.status_code == 409
        assert res.json()["detail"]["code"] == "already_decided"

    def test_unknown_status_filter(self, client, student_user, auth_headers):
        res = client.get("/api/requests", params={"status_filter": "archived"}, headers=auth_headers(student_user))
        assert res.status_code == 400

    def test_review_status_must_be_decision(self, client, admin_user, student_user, math_class, auth_headers):
        req = client.post(
            "/api/requests", json={"class_id": math_class.id}, headers=auth_headers(student_user)
        ).json()
        res = client.patch(f"/api/requests/{req['id']}", json={"status": "PENDING"}, headers=auth_headers(admin_user))
        assert res.status_code == 422


class TestDashboards:
    def test_user_dashboard(self, client, admin_user, student_user, math_class, auth_headers):
        user_h = auth_headers(student_user)
        req = client.post("/api/requests", json={"class_id": math_class.id}, headers=user_h).json()
        client.patch(f"/api/requests/{req['id']}", json={"status": "APPROVED"}, headers=auth_headers(admin_user))

        data = client.get("/api/dashboard", headers=user_h).json()
        assert data["pending_requests_count"] == 0
        assert data["unread_notifications_count"] == 1
        assert [r["status"] for r in data["recent_requests"]] == ["APPROVED"]
        assert [n["kind"] for n in data["recent_notifications"]] == ["request_approved"]

    def test_admin_dashboard_and_audit(self, client, admin_user, student_user, math_class, auth_headers):
        admin_h = auth_headers(admin_user)
        client.post("/api/requests", json={"class_id": math_class.id}, headers=auth_headers(student_user))

        data = client.get("/api/dashboard/admin", headers=admin_h).json()
        assert data["pending_requests_count"] == 1
        assert data["active_classes_count"] == 1
        assert [e["action"] for e in data["recent_audit_logs"]] == ["create_class"]

        logs = client.get("/api/audit-logs", params={"entity_type": "class"}, headers=admin_h).json()
        assert logs[0]["details"] == {"allowed_file_types": ["pdf", "xlsx"]}
        assert client.get("/api/audit-logs", params={"action": "nope"}, headers=admin_h).status_code == 400

    def test_admin_dashboard_forbidden_for_users(self, client, student_user, auth_headers):
        res = client.get("/api/dashboard/admin", headers=auth_headers(student_user))
        assert res.status_code == 403
        assert res.json()["detail"]["code"] == "forbidden_role"
