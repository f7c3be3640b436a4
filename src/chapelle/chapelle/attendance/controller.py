from __future__ import annotations

import io
import logging
from datetime import date

from flask import Flask, flash, redirect, render_template, request, send_file, url_for

from ..common.datetime_utils import format_long_fr, parse_iso_date
from ..container import Container
from ..core.exceptions import ValidationError
from ..users.guards import build_guards, current_user
from .model import presence_status
from .service import day_summary

logger = logging.getLogger(__name__)


def _selected_date(container: Container, value: str | None) -> date:
    if value:
        try:
            return parse_iso_date(value.strip())
        except ValueError:
            flash("Date invalide, dimanche prochain sélectionné", "warning")
    return container.attendance_service.default_date()


def register(app: Flask, container: Container) -> None:
    login_required, _ = build_guards(container.auth_service)

    @app.route("/presences", endpoint="attendance")
    @login_required
    def attendance():
        selected = _selected_date(container, request.args.get("date"))
        try:
            members = container.member_service.list_members()
            marks = container.attendance_service.marks_for_date(selected)
            dates = container.attendance_service.available_dates()
        except Exception:
            logger.exception("Loading attendance for %s failed", selected)
            flash("Erreur lors du chargement des données", "danger")
            members, marks, dates = [], {}, []

        rows = [(m, presence_status(marks.get(m.member_id))) for m in members]
        return render_template(
            "presences.html",
            user=current_user(),
            selected_date=selected,
            selected_label=format_long_fr(selected),
            rows=rows,
            summary=day_summary([m.member_id for m in members], marks),
            available_dates=dates,
            can_download=bool(members),
            active_page="attendance",
        )

    @app.route("/presences/mark", methods=["POST"], endpoint="mark_attendance")
    @login_required
    def mark_attendance():
        raw_date = request.form.get("date", "")
        try:
            service_date = parse_iso_date(raw_date.strip())
        except ValueError:
            flash("Date invalide", "warning")
            return redirect(url_for("attendance"))

        try:
            container.attendance_service.mark(
                request.form.get("member_id", ""),
                service_date,
                request.form.get("present") == "1",
            )
            flash("Présence enregistrée", "success")
        except ValidationError as e:
            flash(str(e), "warning")
        except Exception:
            logger.exception("Marking attendance failed")
            flash("Erreur lors de l'enregistrement", "danger")
        return redirect(url_for("attendance", date=service_date.isoformat()))

    @app.route("/presences/report.pdf", endpoint="attendance_report")
    @login_required
    def attendance_report():
        selected = _selected_date(container, request.args.get("date"))
        try:
            report = container.report_service.build(selected)
        except Exception:
            logger.exception("Building attendance report for %s failed", selected)
            flash("Erreur lors de la génération du PDF", "danger")
            return redirect(url_for("attendance", date=selected.isoformat()))

        return send_file(
            io.BytesIO(report.content),
            mimetype=report.mimetype,
            as_attachment=True,
            download_name=report.filename,
        )
