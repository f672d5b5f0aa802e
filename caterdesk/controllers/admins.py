"""
Administrator accounts.

Rules on top of the generic controller:
1. A password is required when creating an admin; on edit a blank password
   keeps the stored hash.
2. Passwords are hashed before any write; plaintext never reaches the gateway.
3. The signed-in admin cannot delete their own row (checked before any call),
   and the last remaining admin cannot be deleted.
4. Editing the signed-in admin refreshes the gate's session record.

These checks run in this process only. Anyone with direct database access
bypasses them; enforcing them for real needs server-side policies.
"""

from typing import Optional

from loguru import logger

from caterdesk.auth.gate import AuthGate
from caterdesk.auth.security import hash_password
from caterdesk.controllers.base import EntityController
from caterdesk.errors import LastAdminForbidden, SelfDeleteForbidden, ValidationError
from caterdesk.notifications import Notifier
from caterdesk.storage.gateway import PersistenceGateway
from caterdesk.storage.schemas import (
    ADMIN_TABLE,
    Admin,
    AdminForm,
    admin_from_row,
    admin_to_row,
)
from caterdesk.uploads import ADMIN_AVATARS_BUCKET, UploadPipeline


class AdminController(EntityController):
    entity_label = "Admin"
    plural_label = "admins"
    form_model = AdminForm
    upload_field = "profile_picture_url"

    def __init__(
        self,
        gateway: PersistenceGateway,
        notifier: Notifier,
        gate: AuthGate,
        pipeline: Optional[UploadPipeline] = None,
        bucket: str = ADMIN_AVATARS_BUCKET,
    ):
        self.gate = gate
        super().__init__(gateway, notifier, ADMIN_TABLE, pipeline=pipeline, bucket=bucket)

    def from_row(self, row: dict) -> Admin:
        return admin_from_row(row)

    def to_row(self, values: dict) -> dict:
        return admin_to_row(values)

    def empty_form(self) -> dict:
        return {"username": "", "email": "", "password": "", "profile_picture_url": ""}

    def form_from(self, entity: Admin) -> dict:
        form = super().form_from(entity)
        form["password"] = ""
        return form

    def validate(self, form: dict, editing_id: Optional[str]) -> dict:
        values = super().validate(form, editing_id)
        if not editing_id and not values.get("password"):
            raise ValidationError("Password is required for new admin", field="password")
        return values

    async def prepare(self, values: dict, editing_id: Optional[str]) -> dict:
        values = dict(values)
        password = values.pop("password", None)
        if password:
            values["password_hash"] = hash_password(password)
        return values

    async def check_delete(self, id: str) -> None:
        current = self.gate.current_user
        if current is not None and current.id == id:
            raise SelfDeleteForbidden()

        rows = await self.gateway.select(ADMIN_TABLE.table, columns=["id"])
        if len(rows) <= 1:
            raise LastAdminForbidden()

    async def after_save(self, editing_id: Optional[str]) -> None:
        current = self.gate.current_user
        if not editing_id or current is None or current.id != editing_id:
            return

        admin = self.find(editing_id)
        if admin is not None:
            self.gate.set_current_user(admin.to_session())
            logger.info(f"Session refreshed for {admin.email}")
