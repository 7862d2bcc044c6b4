from __future__ import annotations

from flask import Flask, session

from ..audit.middleware import audit_action
from ..common.http import admin_required, client_ip, current_role, current_user_id, json_body, login_required, ok
from ..common.validators import parse_optional_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    @audit_action("login")
    def login():
        body = json_body()
        s_user = container.auth_service.authenticate(body.get("username", ""), body.get("password", ""), client_ip())

        session.clear()
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        session["machine_id"] = s_user.machine_id

        return ok({"user": s_user}, message="Login successful")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    @login_required
    @audit_action("logout")
    def logout():
        session.clear()
        return ok(message="Logout successful")

    @app.route("/api/auth/change-password", methods=["POST"], endpoint="change_password")
    @login_required
    @audit_action("password_change")
    def change_password():
        body = json_body()
        container.auth_service.change_password(
            user_id=current_user_id(),
            current_password=body.get("current_password", ""),
            new_password=body.get("new_password", ""),
        )
        return ok(message="Password changed successfully")

    @app.route("/api/admin/users", methods=["GET"], endpoint="list_users")
    @admin_required
    def list_users():
        return ok(container.user_service.list_users())

    @app.route("/api/admin/users", methods=["POST"], endpoint="create_user")
    @admin_required
    @audit_action("user_create")
    def create_user():
        body = json_body()
        user_id = container.user_service.create_user(
            name=body.get("name", ""),
            username=body.get("username", ""),
            password=body.get("password", ""),
            role=body.get("role", ""),
            machine_id=parse_optional_int(body.get("machine_id"), "machine_id"),
            department=body.get("department"),
        )
        return ok({"id": user_id}, status=201, message="User created successfully")

    @app.route("/api/admin/users/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    @admin_required
    @audit_action("user_delete")
    def delete_user(user_id: int):
        container.user_service.delete_user(current_role=current_role(), user_id=user_id)
        return ok(message="User deleted")
