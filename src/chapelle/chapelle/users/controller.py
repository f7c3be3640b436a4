from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .guards import build_guards, current_user
from .service import SIGN_IN_ERROR, SIGN_UP_ERROR

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    login_required, _ = build_guards(container.auth_service)

    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        if "user_id" in session:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            email = request.form.get("email", "")
            password = request.form.get("password", "")
            remember = request.form.get("remember_me")

            try:
                s_user = container.auth_service.sign_in(email, password)

                session.permanent = bool(remember)
                app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

                session["user_id"] = s_user.account_id
                session["email"] = email.strip().lower()

                flash("Connexion réussie !", "success")
                return redirect(url_for("dashboard"))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Sign-in failed")
                flash(SIGN_IN_ERROR, "danger")

        return render_template("login.html", roles=list(Role), show_signup=request.args.get("signup") == "1")

    @app.route("/signup", methods=["POST"], endpoint="signup")
    def signup():
        try:
            container.auth_service.sign_up(
                name=request.form.get("name", ""),
                email=request.form.get("email", ""),
                password=request.form.get("password", ""),
                role=request.form.get("role", Role.ENUMERATOR.value),
            )
            flash("Compte créé avec succès ! Vous pouvez maintenant vous connecter.", "success")
            return redirect(url_for("login"))
        except (AuthenticationError, ValidationError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Sign-up failed")
            flash(SIGN_UP_ERROR, "danger")
        return redirect(url_for("login", signup="1"))

    @app.route("/logout", endpoint="logout")
    def logout():
        container.auth_service.sign_out(session.get("user_id"))
        session.clear()
        flash("Déconnexion réussie", "info")
        return redirect(url_for("login"))

    @app.route("/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        user = current_user()
        return render_template("dashboard.html", user=user, is_pastor=user.is_pastor, active_page="dashboard")
