from __future__ import annotations

import logging
import time
from dataclasses import replace
from datetime import date
from typing import Callable, List, Optional

from werkzeug.utils import secure_filename

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import optional_text, require_non_empty
from ..core.constants import MAX_PHOTO_BYTES, PHOTO_FOLDER
from ..core.exceptions import PhotoRejectedError, ValidationError
from ..storage.store import ObjectStore
from .model import Member, MemberForm, PhotoUpload
from .repository import MemberRepository

logger = logging.getLogger(__name__)


def photo_too_large_message(max_bytes: int = MAX_PHOTO_BYTES) -> str:
    return f"L'image ne doit pas dépasser {max_bytes // (1024 * 1024)} Mo"


def validate_photo(photo: PhotoUpload, *, max_bytes: int = MAX_PHOTO_BYTES) -> None:
    if not (photo.content_type or "").startswith("image/"):
        raise PhotoRejectedError("Veuillez sélectionner une image")
    if len(photo.data) > max_bytes:
        raise PhotoRejectedError(photo_too_large_message(max_bytes))


class MemberService:
    """Use case: gérer les fidèles (pasteur uniquement)."""

    def __init__(
        self,
        members: MemberRepository,
        store: ObjectStore,
        *,
        max_photo_bytes: int = MAX_PHOTO_BYTES,
        millis: Callable[[], int] | None = None,
    ):
        self._members = members
        self._store = store
        self._max_photo_bytes = int(max_photo_bytes)
        self._millis = millis or (lambda: int(time.time() * 1000))

    @property
    def max_photo_bytes(self) -> int:
        return self._max_photo_bytes

    def list_members(self) -> List[Member]:
        members = list(self._members.list_all())
        members.sort(key=lambda m: (m.last_name.lower(), m.first_name.lower()))
        return members

    def get_member(self, member_id: str) -> Member:
        member = self._members.get_by_id(member_id)
        if not member:
            raise ValidationError("Fidèle introuvable")
        return member

    def _validated_fields(self, form: MemberForm) -> dict:
        last_name = require_non_empty(form.last_name, "Le nom")
        first_name = require_non_empty(form.first_name, "Le prénom")

        joined_on: date
        if form.joined_on and form.joined_on.strip():
            try:
                joined_on = parse_iso_date(form.joined_on.strip())
            except ValueError:
                raise ValidationError("Date d'adhésion invalide (AAAA-MM-JJ)")
        else:
            joined_on = now_local().date()

        return dict(
            last_name=last_name,
            first_name=first_name,
            joined_on=joined_on,
            role_tag=optional_text(form.role_tag),
            ministry=optional_text(form.ministry),
            phone=optional_text(form.phone),
            residence=optional_text(form.residence),
        )

    def _upload_photo(self, photo: PhotoUpload) -> str:
        filename = secure_filename(photo.filename or "") or "photo"
        location = self._store.put(f"{PHOTO_FOLDER}/{self._millis()}_{filename}", photo.data, photo.content_type)
        return self._store.download_url(location)

    def create_member(self, form: MemberForm, photo: Optional[PhotoUpload] = None) -> str:
        fields = self._validated_fields(form)
        if photo is not None:
            validate_photo(photo, max_bytes=self._max_photo_bytes)

        photo_url = self._upload_photo(photo) if photo is not None else ""
        member = Member(member_id="", photo=photo_url, created_at=now_local(), **fields)
        member_id = self._members.add(member)
        logger.info("Member %s created (%s)", member_id, member.full_name)
        return member_id

    def update_member(
        self,
        member_id: str,
        form: MemberForm,
        photo: Optional[PhotoUpload] = None,
        *,
        remove_photo: bool = False,
    ) -> Member:
        fields = self._validated_fields(form)
        if photo is not None:
            validate_photo(photo, max_bytes=self._max_photo_bytes)

        current = self.get_member(member_id)

        photo_url = current.photo
        if remove_photo:
            photo_url = ""
        if photo is not None:
            photo_url = self._upload_photo(photo)

        updated = replace(current, photo=photo_url, **fields)
        self._members.update(updated)
        logger.info("Member %s updated", member_id)
        return updated

    def delete_member(self, member_id: str) -> None:
        member = self.get_member(member_id)

        if member.photo and self._store.owns(member.photo):
            try:
                self._store.delete(self._store.location_for(member.photo))
            except Exception:
                logger.warning("Could not delete photo of member %s", member_id, exc_info=True)

        if not self._members.delete_by_id(member_id):
            raise ValidationError("Suppression du fidèle échouée")
        logger.info("Member %s deleted", member_id)
