"""Exception types raised by the patcher."""

from __future__ import annotations

from tome_level_patcher.models.records import FormKey


class PatcherError(Exception):
    """Base class for all patcher errors."""


class DumpFormatError(PatcherError, ValueError):
    """A plugin dump is missing a field or has one of the wrong shape."""

    def __init__(self, plugin: str, message: str) -> None:
        super().__init__(f"{plugin}: {message}")
        self.plugin = plugin


class SettingsError(PatcherError, ValueError):
    """The settings file could not be understood."""


class RecordError(PatcherError):
    """A failure while patching one record, tagged with where it came from.

    The original exception is kept as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        mod_key: str,
        form_key: FormKey,
        editor_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.mod_key = mod_key
        self.form_key = form_key
        self.editor_id = editor_id

    @classmethod
    def enrich(
        cls,
        exc: BaseException,
        mod_key: str,
        form_key: FormKey,
        editor_id: str | None = None,
    ) -> "RecordError":
        err = cls(
            f"{type(exc).__name__}: {exc}",
            mod_key=mod_key,
            form_key=form_key,
            editor_id=editor_id,
        )
        err.__cause__ = exc
        return err

    def __str__(self) -> str:
        label = f"{self.editor_id} [{self.form_key}]" if self.editor_id else f"[{self.form_key}]"
        return f"{self.mod_key} :: {label} :: {self.args[0]}"
