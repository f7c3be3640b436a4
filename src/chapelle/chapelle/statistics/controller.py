from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, url_for

from ..container import Container
from ..users.guards import build_guards, current_user

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    _, pastor_required = build_guards(container.auth_service)

    @app.route("/statistiques", endpoint="statistics")
    @pastor_required("statistics")
    def statistics():
        try:
            stats = container.statistics_service.current()
        except Exception:
            logger.exception("Computing statistics failed")
            flash("Erreur lors du chargement des données", "danger")
            return redirect(url_for("dashboard"))

        recent_dates = sorted(stats.per_date, reverse=True)[:10]
        return render_template(
            "statistiques.html",
            user=current_user(),
            stats=stats,
            recent_dates=recent_dates,
            by_role=sorted(stats.present_by_role.items(), key=lambda kv: kv[1], reverse=True),
            by_ministry=sorted(stats.present_by_ministry.items(), key=lambda kv: kv[1], reverse=True),
            active_page="statistics",
        )
