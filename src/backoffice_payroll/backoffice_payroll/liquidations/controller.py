from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import error_response, json_body, ok
from ..container import Container
from ..core.constants import DEFAULT_LIQUIDATION_PAYMENT_CONCEPT, DEFAULT_LIQUIDATION_PAYMENT_METHOD
from ..core.enums import RegenerationMode
from ..core.exceptions import DomainError, InfrastructureError, ValidationError


def _as_bool(data: dict, key: str) -> bool:
    if key not in data:
        raise ValidationError(f"{key} is required")
    value = data[key]
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll/liquidation", methods=["GET"], endpoint="liquidation_pending")
    def liquidation_pending():
        try:
            return ok(list(container.liquidation_service.list_pending()))
        except (DomainError, InfrastructureError) as e:
            return error_response(e)

    @app.route("/api/payroll/liquidation/payments", methods=["GET"], endpoint="liquidation_payments")
    def liquidation_payments():
        """Settlement payment history, optionally for one ``liquidation_id``."""
        try:
            liquidation_id = request.args.get("liquidation_id")
            if liquidation_id is not None:
                try:
                    liquidation_id = int(liquidation_id)
                except ValueError as exc:
                    raise ValidationError("liquidation_id must be an integer") from exc
            return ok(list(container.liquidation_service.payment_history(liquidation_id)))
        except (DomainError, InfrastructureError) as e:
            return error_response(e)

    @app.route("/api/payroll/liquidation/<int:liquidation_id>", methods=["GET"], endpoint="liquidation_detail")
    def liquidation_detail(liquidation_id: int):
        try:
            return ok(container.liquidation_service.get(liquidation_id))
        except (DomainError, InfrastructureError) as e:
            return error_response(e)

    @app.route("/api/payroll/liquidation/generate", methods=["POST"], endpoint="liquidation_generate")
    def liquidation_generate():
        try:
            return ok(container.liquidation_service.generate_for_terminated())
        except (DomainError, InfrastructureError) as e:
            return error_response(e)

    @app.route("/api/payroll/liquidation/regenerate", methods=["POST"], endpoint="liquidation_regenerate")
    def liquidation_regenerate():
        try:
            data = json_body()
            if data.get("liquidation_id") is None:
                raise ValidationError("liquidation_id is required")
            try:
                mode = RegenerationMode(data["mode"]) if data.get("mode") else None
                expected = int(data["expected_version"]) if data.get("expected_version") is not None else None
                liquidation_id = int(data["liquidation_id"])
            except (TypeError, ValueError) as exc:
                raise ValidationError("Invalid liquidation_id, mode or expected_version") from exc

            liq = container.regeneration_workflow.regenerate(liquidation_id, mode=mode, expected_version=expected)
            return ok(liq)
        except (DomainError, InfrastructureError) as e:
            return error_response(e)

    @app.route(
        "/api/payroll/liquidation/<int:liquidation_id>/inclusions",
        methods=["POST"],
        endpoint="liquidation_inclusions",
    )
    def liquidation_inclusions(liquidation_id: int):
        try:
            data = json_body()
            liq = container.liquidation_service.set_inclusions(
                liquidation_id,
                include_vacation=_as_bool(data, "include_vacation"),
                include_bonus=_as_bool(data, "include_bonus"),
            )
            return ok(liq)
        except (DomainError, InfrastructureError) as e:
            return error_response(e)

    @app.route("/api/payroll/liquidation/<int:liquidation_id>/pay", methods=["POST"], endpoint="liquidation_pay")
    def liquidation_pay(liquidation_id: int):
        try:
            data = json_body()
            try:
                paid_on = parse_iso_date(data["payment_date"]) if data.get("payment_date") else None
            except (TypeError, ValueError) as exc:
                raise ValidationError("payment_date must use the YYYY-MM-DD format") from exc

            liq = container.liquidation_service.confirm_payment(
                liquidation_id,
                amount=data.get("amount"),
                paid_on=paid_on,
                method=str(data.get("payment_method") or DEFAULT_LIQUIDATION_PAYMENT_METHOD),
                concept=str(data.get("concept") or DEFAULT_LIQUIDATION_PAYMENT_CONCEPT),
                notes=str(data["notes"]) if data.get("notes") is not None else None,
            )
            return ok(liq)
        except (DomainError, InfrastructureError) as e:
            return error_response(e)
