"""
Entity List/Form Controller

One controller instance backs one list view with its create/edit dialog:

- load():   fetch all rows, most recent first; on failure keep prior rows
- submit(): validate -> (upload) -> insert or update -> close dialog -> reload
- delete(): guard checks -> delete -> reload

Every operation returns an ``ActionResult``. Errors are converted to
notifications here and never escape to the view.
"""

from dataclasses import dataclass
from typing import Any, Optional

from loguru import logger

from caterdesk.errors import (
    CaterDeskException,
    DeleteError,
    FetchError,
    FileTooLarge,
    InvalidFileType,
    LastAdminForbidden,
    NotFoundError,
    SaveError,
    SelfDeleteForbidden,
    UploadError,
    ValidationError,
)
from caterdesk.notifications import Notifier
from caterdesk.storage.gateway import Order, PersistenceGateway
from caterdesk.storage.schemas import FormModel, TableSpec, parse_form
from caterdesk.uploads import UploadedFile, UploadPipeline


# Errors that already describe the problem to the user; everything else from
# the backend is wrapped in the operation's own error type.
CLIENT_ERRORS = (
    ValidationError,
    InvalidFileType,
    FileTooLarge,
    UploadError,
    SelfDeleteForbidden,
    LastAdminForbidden,
    NotFoundError,
)


@dataclass
class ActionResult:
    """Outcome of one controller action."""

    ok: bool
    error: Optional[CaterDeskException] = None
    busy: bool = False

    @property
    def status_code(self) -> int:
        if self.ok:
            return 200
        if self.busy:
            return 409
        return self.error.status_code if self.error else 500


class EntityController:
    """
    Base controller; subclasses bind a table, a form and the row mapping.

    Subclass hooks:
        from_row(row)                  -> entity
        to_row(values)                 -> column dict
        empty_form() / form_from(entity)
        prepare(values, editing_id)    -> values ready to write
        check_delete(id)               -> raise a guard error to refuse
    """

    entity_label: str = "Item"
    plural_label: str = "items"
    form_model: Optional[type[FormModel]] = None

    # Where an uploaded file's public URL goes in the payload
    upload_field: Optional[str] = None

    def __init__(
        self,
        gateway: PersistenceGateway,
        notifier: Notifier,
        table: TableSpec,
        pipeline: Optional[UploadPipeline] = None,
        bucket: Optional[str] = None,
    ):
        self.gateway = gateway
        self.notifier = notifier
        self.table = table
        self.pipeline = pipeline
        self.bucket = bucket

        self.rows: list[Any] = []
        self.loading = False
        self.loaded = False
        self.saving = False
        self.dialog_open = False
        self.editing_id: Optional[str] = None
        self.form: dict = self.empty_form()
        self.last_error: Optional[CaterDeskException] = None

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def from_row(self, row: dict) -> Any:
        raise NotImplementedError

    def to_row(self, values: dict) -> dict:
        return dict(values)

    def empty_form(self) -> dict:
        return {}

    def form_from(self, entity: Any) -> dict:
        data = entity.model_dump(mode="json")
        if self.form_model is None:
            data.pop("id", None)
            return data
        return {k: v for k, v in data.items() if k in self.form_model.model_fields}

    async def prepare(self, values: dict, editing_id: Optional[str]) -> dict:
        return values

    async def check_delete(self, id: str) -> None:
        return None

    async def after_save(self, editing_id: Optional[str]) -> None:
        return None

    # -------------------------------------------------------------------------
    # View state
    # -------------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        """Loaded successfully and there is nothing to show."""
        return self.loaded and not self.rows

    def find(self, id: str) -> Optional[Any]:
        return next((row for row in self.rows if row.id == id), None)

    def open_create(self) -> None:
        self.editing_id = None
        self.form = self.empty_form()
        self.dialog_open = True

    def open_edit(self, id: str) -> ActionResult:
        entity = self.find(id)
        if entity is None:
            return self._fail(NotFoundError(self.entity_label, id))
        self.editing_id = id
        self.form = self.form_from(entity)
        self.dialog_open = True
        return ActionResult(ok=True)

    def close_dialog(self) -> None:
        self.dialog_open = False
        self.editing_id = None
        self.form = self.empty_form()

    def _fail(self, error: CaterDeskException, title: str = "Error") -> ActionResult:
        self.last_error = error
        self.notifier.error(title, error.message)
        return ActionResult(ok=False, error=error)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def load(self) -> ActionResult:
        """Fetch all rows, newest first. Prior rows survive a failure."""
        self.loading = True
        try:
            rows = await self.gateway.select(
                self.table.table,
                order=Order(self.table.recency_column, descending=True),
            )
            entities = [self.from_row(row) for row in rows]
        except CaterDeskException as e:
            return self._fail(FetchError(self.plural_label, e.detail or e.message))
        except Exception as e:
            logger.exception(f"Unexpected error loading {self.plural_label}")
            return self._fail(FetchError(self.plural_label, str(e)))
        finally:
            self.loading = False

        self.rows = entities
        self.loaded = True
        self.last_error = None
        return ActionResult(ok=True)

    def validate(self, form: dict, editing_id: Optional[str]) -> dict:
        if self.form_model is None:
            return dict(form)
        # Edits patch only the fields the form actually carries
        return parse_form(self.form_model, form).model_dump(exclude_unset=bool(editing_id))

    async def submit(
        self,
        form: dict,
        editing_id: Optional[str] = None,
        upload: Optional[UploadedFile] = None,
    ) -> ActionResult:
        """
        Create (no ``editing_id``) or update a row from form data.

        Nothing reaches the gateway until the form validates and any upload
        has produced its public URL.
        """
        if self.saving:
            return ActionResult(ok=False, busy=True)

        self.saving = True
        self.dialog_open = True
        self.editing_id = editing_id
        self.form = dict(form)

        try:
            values = self.validate(form, editing_id)
            if upload is not None:
                values = await self._attach_upload(values, upload)
            values = await self.prepare(values, editing_id)

            if editing_id:
                await self.gateway.update(self.table.table, editing_id, self.to_row(values))
            else:
                await self.gateway.insert(self.table.table, self.to_row(values))
        except CLIENT_ERRORS as e:
            return self._fail(e)
        except CaterDeskException as e:
            return self._fail(SaveError(self.entity_label.lower(), e.detail or e.message))
        except Exception as e:
            logger.exception(f"Unexpected error saving {self.entity_label.lower()}")
            return self._fail(SaveError(self.entity_label.lower(), str(e)))
        finally:
            self.saving = False

        action = "updated" if editing_id else "created"
        self.notifier.success(f"{self.entity_label} {action} successfully")
        self.close_dialog()
        await self.load()
        await self.after_save(editing_id)
        return ActionResult(ok=True)

    async def _attach_upload(self, values: dict, upload: UploadedFile) -> dict:
        if self.pipeline is None or not self.upload_field or not self.bucket:
            raise ValidationError(f"{self.entity_label} does not accept file uploads")
        url = await self.pipeline.run(upload, self.bucket)
        return {**values, self.upload_field: url}

    async def patch(self, id: str, patch: dict, message: str) -> ActionResult:
        """Write a partial update outside the dialog (e.g. a toggle)."""
        try:
            await self.gateway.update(self.table.table, id, self.to_row(patch))
        except CaterDeskException as e:
            return self._fail(SaveError(self.entity_label.lower(), e.detail or e.message))
        except Exception as e:
            logger.exception(f"Unexpected error updating {self.entity_label.lower()} {id}")
            return self._fail(SaveError(self.entity_label.lower(), str(e)))

        self.notifier.success(message)
        await self.load()
        return ActionResult(ok=True)

    async def delete(self, id: str) -> ActionResult:
        try:
            await self.check_delete(id)
            await self.gateway.delete(self.table.table, id)
        except CLIENT_ERRORS as e:
            return self._fail(e)
        except CaterDeskException as e:
            return self._fail(DeleteError(self.entity_label.lower(), e.detail or e.message))
        except Exception as e:
            logger.exception(f"Unexpected error deleting {self.entity_label.lower()}")
            return self._fail(DeleteError(self.entity_label.lower(), str(e)))

        self.notifier.success(f"{self.entity_label} deleted successfully")
        await self.load()
        return ActionResult(ok=True)

    def snapshot(self) -> dict:
        """Serializable view state."""
        return {
            "rows": [row.model_dump(mode="json") for row in self.rows],
            "loading": self.loading,
            "loaded": self.loaded,
            "empty": self.is_empty,
            "saving": self.saving,
            "dialog_open": self.dialog_open,
            "editing_id": self.editing_id,
            "form": self.form,
            "error": self.last_error.message if self.last_error else None,
        }
