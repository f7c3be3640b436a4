from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, flash, redirect, render_template, request, url_for
from werkzeug.exceptions import RequestEntityTooLarge

from ..container import Container
from ..core.constants import MINISTRIES, ROLE_TAGS
from ..core.exceptions import StorageError, ValidationError
from ..users.guards import build_guards, current_user
from .filters import MemberFilter, available_tags, filter_members
from .model import MemberForm, PhotoUpload
from .service import photo_too_large_message

logger = logging.getLogger(__name__)


def _form_from_request() -> MemberForm:
    f = request.form
    return MemberForm(
        last_name=f.get("nom", ""),
        first_name=f.get("prenom", ""),
        joined_on=f.get("dateAdhesion", ""),
        role_tag=f.get("fonction", ""),
        ministry=f.get("service", ""),
        phone=f.get("telephone", ""),
        residence=f.get("lieuResidence", ""),
    )


def _photo_from_request() -> Optional[PhotoUpload]:
    file = request.files.get("photo")
    if not file or not file.filename:
        return None
    return PhotoUpload(filename=file.filename, content_type=file.mimetype or "", data=file.read())


def _merge(base: tuple, extra: list) -> list:
    return list(base) + [t for t in extra if t not in base]


def register(app: Flask, container: Container) -> None:
    _, pastor_required = build_guards(container.auth_service)

    @app.errorhandler(RequestEntityTooLarge)
    def upload_too_large(e):
        # Raised while parsing the body, before any view code runs.
        flash(photo_too_large_message(container.member_service.max_photo_bytes), "warning")
        return redirect(url_for("members"))

    @app.route("/fideles", endpoint="members")
    @pastor_required("members")
    def members():
        criteria = MemberFilter.from_args(request.args)
        try:
            all_members = container.member_service.list_members()
        except Exception:
            logger.exception("Loading members failed")
            flash("Erreur lors du chargement des fidèles", "danger")
            all_members = []

        editing = None
        edit_id = request.args.get("edit")
        if edit_id:
            editing = next((m for m in all_members if m.member_id == edit_id), None)

        roles_in_data, ministries_in_data = available_tags(all_members)
        return render_template(
            "fideles.html",
            user=current_user(),
            members=filter_members(all_members, criteria),
            total=len(all_members),
            criteria=criteria,
            editing=editing,
            role_tags=_merge(ROLE_TAGS, roles_in_data),
            ministries=_merge(MINISTRIES, ministries_in_data),
            active_page="members",
        )

    @app.route("/fideles/add", methods=["POST"], endpoint="add_member")
    @pastor_required("members")
    def add_member():
        form, photo = _form_from_request(), _photo_from_request()
        try:
            container.member_service.create_member(form, photo)
            flash("Fidèle ajouté avec succès", "success")
        except ValidationError as e:
            flash(str(e), "warning")
        except StorageError:
            logger.exception("Uploading photo failed")
            flash("Erreur lors de l'envoi de la photo", "danger")
        except Exception:
            logger.exception("Saving member failed")
            flash("Erreur lors de la sauvegarde", "danger")
        return redirect(url_for("members"))

    @app.route("/fideles/<member_id>/edit", methods=["POST"], endpoint="edit_member")
    @pastor_required("members")
    def edit_member(member_id: str):
        form, photo = _form_from_request(), _photo_from_request()
        try:
            container.member_service.update_member(
                member_id,
                form,
                photo,
                remove_photo=request.form.get("remove_photo") == "1",
            )
            flash("Fidèle modifié avec succès", "success")
        except ValidationError as e:
            flash(str(e), "warning")
            return redirect(url_for("members", edit=member_id))
        except Exception:
            logger.exception("Updating member %s failed", member_id)
            flash("Erreur lors de la sauvegarde", "danger")
        return redirect(url_for("members"))

    @app.route("/fideles/<member_id>/delete", methods=["POST"], endpoint="delete_member")
    @pastor_required("members")
    def delete_member(member_id: str):
        if request.form.get("confirm") != "1":
            flash("Suppression annulée", "info")
            return redirect(url_for("members"))
        try:
            container.member_service.delete_member(member_id)
            flash("Fidèle supprimé", "success")
        except ValidationError as e:
            flash(str(e), "warning")
        except Exception:
            logger.exception("Deleting member %s failed", member_id)
            flash("Erreur lors de la suppression", "danger")
        return redirect(url_for("members"))
