"""Administrator account management."""
from mailportal.application.services import auth_service
from mailportal.domain.models.admin import AdminRole, AdminUser


def test_create_admin_hashes_password(admin_client, db, admin, audit_rows):
    response = admin_client.post(
        "/admin/admins", json={"email": "second@example.com", "password": "second-pass-1"}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "second"
    assert body["role_name"] == "admin"
    assert body["created_by"] == admin.id
    assert "password_hash" not in body

    stored = db.query(AdminUser).filter(AdminUser.email == "second@example.com").one()
    assert auth_service.verify_password("second-pass-1", stored.password_hash)
    assert len(audit_rows("admin_created")) == 1


def test_create_admin_duplicate_email(admin_client, admin):
    response = admin_client.post("/admin/admins", json={"email": admin.email, "password": "whatever-1"})
    assert response.status_code == 400


def test_create_admin_with_role(admin_client, db):
    role = AdminRole(name="support", permissions={"tickets": ["read", "write"]})
    db.add(role)
    db.commit()

    response = admin_client.post(
        "/admin/admins",
        json={"email": "helper@example.com", "password": "helper-pass", "role_id": role.id},
    )

    assert response.json()["role_name"] == "support"
    assert response.json()["permissions"] == {"tickets": ["read", "write"]}


def test_create_admin_unknown_role(admin_client):
    response = admin_client.post(
        "/admin/admins",
        json={"email": "helper@example.com", "password": "helper-pass", "role_id": "nope"},
    )
    assert response.status_code == 404


def test_update_admin_password(admin_client, db, make_admin):
    other = make_admin(email="other@example.com")

    response = admin_client.put(f"/admin/admins/{other.id}", json={"password": "changed-pass-1"})

    assert response.status_code == 200
    db.refresh(other)
    assert auth_service.verify_password("changed-pass-1", other.password_hash)


def test_admin_cannot_delete_self(admin_client, admin):
    response = admin_client.delete(f"/admin/admins/{admin.id}")

    assert response.status_code == 400
    assert response.json() == {"error": "Cannot delete your own admin account"}


def test_delete_other_admin(admin_client, db, make_admin):
    other = make_admin(email="other@example.com")

    assert admin_client.delete(f"/admin/admins/{other.id}").json() == {"success": True}
    assert admin_client.get(f"/admin/admins/{other.id}").status_code == 404
