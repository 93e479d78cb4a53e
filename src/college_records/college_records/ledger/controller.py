from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.web import json_body, principal_required
from ..container import Container
from ..core.enums import Role
from ..core.principal import Principal
from .service import LedgerService


def _register_ledger(
    app: Flask,
    service: LedgerService,
    *,
    prefix: str,
    owner_field: str,
    payer_roles: tuple[Role, ...],
    self_pay: bool,
) -> None:
    """Mount set/pay/me/all/<owner> routes for one ledger kind."""
    name = service.kind.value

    @app.route(f"{prefix}/set", methods=["POST"], endpoint=f"{name}_set")
    @principal_required(service.setter_role)
    def ledger_set(principal: Principal):
        data = json_body()
        due = data.get("dueDate")
        view = service.open_account(
            principal,
            owner_id=data.get(owner_field),
            total=data.get("total"),
            due_date=parse_iso_date(due) if due else None,
        )
        return jsonify(view.as_dict()), 201

    @app.route(f"{prefix}/pay", methods=["POST"], endpoint=f"{name}_pay")
    @principal_required(*payer_roles)
    def ledger_pay(principal: Principal):
        data = json_body()
        owner_id = principal.user_id if self_pay else data.get(owner_field)
        view = service.record_payment(principal, owner_id=owner_id, amount=data.get("amount"))
        return jsonify({"message": f"{name.capitalize()} paid", name: view.as_dict()})

    @app.route(f"{prefix}/me", methods=["GET"], endpoint=f"{name}_me")
    @principal_required(service.owner_role)
    def ledger_me(principal: Principal):
        return jsonify(service.get_account(principal, owner_id=principal.user_id).as_dict())

    @app.route(f"{prefix}/all", methods=["GET"], endpoint=f"{name}_all")
    @principal_required(service.setter_role)
    def ledger_all(principal: Principal):
        return jsonify([v.as_dict() for v in service.list_accounts(principal)])

    @app.route(f"{prefix}/<int:owner_id>", methods=["GET"], endpoint=f"{name}_get")
    @principal_required()
    def ledger_get(owner_id: int, principal: Principal):
        return jsonify(service.get_account(principal, owner_id=owner_id).as_dict())


def register(app: Flask, container: Container) -> None:
    _register_ledger(
        app,
        container.fee_service,
        prefix="/api/fee",
        owner_field="student",
        payer_roles=(Role.STUDENT,),
        self_pay=True,
    )
    _register_ledger(
        app,
        container.salary_service,
        prefix="/api/salary",
        owner_field="staff",
        payer_roles=(Role.HOD,),
        self_pay=False,
    )
