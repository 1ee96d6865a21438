from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date, parse_period
from ..common.http import error_response, json_body, ok, to_jsonable
from ..container import Container
from ..core.enums import PaymentChannel
from ..core.exceptions import DomainError, InfrastructureError, ValidationError
from .model import Payroll

_STATUS_FILTERS = {"all": None, "paid": True, "pending": False}


def payroll_json(payroll: Payroll) -> dict:
    data = to_jsonable(payroll)
    data["is_paid"] = payroll.is_paid
    return data


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll", methods=["GET"], endpoint="payroll_list")
    def payroll_list():
        """Payrolls of a period; ``status`` is paid, pending or all."""
        try:
            month, year = parse_period(request.args.get("period", ""))
            status = (request.args.get("status") or "all").lower()
            if status not in _STATUS_FILTERS:
                raise ValidationError("status must be one of: paid, pending, all")
            payrolls = container.payroll_service.list_for_period(month, year, is_paid=_STATUS_FILTERS[status])
            return ok([payroll_json(p) for p in payrolls])
        except (DomainError, InfrastructureError) as e:
            return error_response(e)

    @app.route("/api/payroll/<int:payroll_id>/payments", methods=["GET"], endpoint="payroll_payments")
    def payroll_payments(payroll_id: int):
        try:
            return ok(list(container.payroll_service.payment_history(payroll_id)))
        except (DomainError, InfrastructureError) as e:
            return error_response(e)

    @app.route("/api/payroll/calculate", methods=["GET"], endpoint="payroll_calculate")
    def payroll_calculate():
        """Preview one employee's payroll for a period without storing it."""
        try:
            month, year = parse_period(request.args.get("period", ""))
            employee_id = request.args.get("employee_id", type=int)
            if employee_id is None:
                raise ValidationError("employee_id is required")
            calc, validation = container.payroll_service.calculate(employee_id, month, year)
            return ok({"calculation": calc, "validation": validation})
        except (DomainError, InfrastructureError) as e:
            return error_response(e)

    @app.route("/api/payroll/generate", methods=["POST"], endpoint="payroll_generate")
    def payroll_generate():
        try:
            data = json_body()
            month, year = parse_period(str(data.get("period", "")))
            employee_ids = data.get("employee_ids")
            if employee_ids is None:
                employee_ids = container.employees_repo.list_active_ids()
            elif not isinstance(employee_ids, list):
                raise ValidationError("employee_ids must be a list")
            else:
                try:
                    employee_ids = [int(e) for e in employee_ids]
                except (TypeError, ValueError) as exc:
                    raise ValidationError("employee_ids must contain integer ids") from exc

            results = container.payroll_batch.generate_for_period(
                employee_ids,
                month,
                year,
                force_regenerate=bool(data.get("regenerate", False)),
            )
        except (DomainError, InfrastructureError) as e:
            return error_response(e)

        items = []
        for r in results:
            item = {"employee_id": r.employee_id, "success": r.success}
            if r.payroll is not None:
                item["payroll"] = payroll_json(r.payroll)
            if r.error:
                item["error"] = r.error
            if r.warnings:
                item["warnings"] = list(r.warnings)
            items.append(item)

        generated = sum(1 for r in results if r.success)
        return ok(
            {
                "period": f"{year:04d}-{month:02d}",
                "generated": generated,
                "failed": len(results) - generated,
                "results": items,
            }
        )

    @app.route("/api/payroll/confirm-payment", methods=["POST"], endpoint="payroll_confirm_payment")
    def payroll_confirm_payment():
        try:
            data = json_body()
            if data.get("payroll_id") is None:
                raise ValidationError("payroll_id is required")
            try:
                channel = PaymentChannel(str(data.get("channel", "")).lower())
            except ValueError as exc:
                raise ValidationError("channel must be one of: hand, bank, both") from exc
            try:
                payroll_id = int(data["payroll_id"])
                paid_on = parse_iso_date(data["payment_date"]) if data.get("payment_date") else None
            except (TypeError, ValueError) as exc:
                raise ValidationError("payroll_id and payment_date must be valid values") from exc
            reference = data.get("payment_reference")

            payroll = container.payroll_service.confirm_payment(
                payroll_id,
                channel,
                paid_on=paid_on,
                method=str(data["payment_method"]).lower() if data.get("payment_method") else None,
                reference=str(reference) if reference else None,
            )
            return ok(payroll_json(payroll))
        except (DomainError, InfrastructureError) as e:
            return error_response(e)
