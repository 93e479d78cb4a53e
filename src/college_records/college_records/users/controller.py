from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.web import json_body, principal_required
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.principal import Principal


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        data = json_body()
        container.user_service.register(
            full_name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=data.get("role", ""),
            details=data,
        )
        return jsonify({"message": "Registered successfully"}), 201

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("rememberMe"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value

        return jsonify({"user": {"id": s_user.user_id, "name": s_user.full_name, "role": s_user.role.value}})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def auth_logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @principal_required()
    def auth_me(principal: Principal):
        return jsonify({"id": principal.user_id, "name": session.get("name"), "role": principal.role.value})

    @app.route("/api/users/students", methods=["GET"], endpoint="users_students")
    @principal_required(Role.TEACHER, Role.HOD)
    def users_students(principal: Principal):
        return jsonify([u.as_public_dict() for u in container.user_service.list_students(principal)])

    @app.route("/api/users/teachers", methods=["GET"], endpoint="users_teachers")
    @principal_required(Role.HOD)
    def users_teachers(principal: Principal):
        return jsonify([u.as_public_dict() for u in container.user_service.list_teachers(principal)])
