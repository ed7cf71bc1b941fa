"""Record identity shared by every model: plugin keys and FormKeys."""

from dataclasses import dataclass


PLUGIN_EXTENSIONS: tuple[str, ...] = (".esm", ".esp", ".esl")


def mod_name(mod_key: str) -> str:
    """Plugin file name without its extension ("Skyrim.esm" -> "Skyrim")."""
    lowered = mod_key.lower()
    for ext in PLUGIN_EXTENSIONS:
        if lowered.endswith(ext):
            return mod_key[: -len(ext)]
    return mod_key


def same_mod(a: str, b: str) -> bool:
    """Plugin names compare case-insensitively, as the game does."""
    return a.lower() == b.lower()


@dataclass(frozen=True, slots=True)
class FormKey:
    """A record identifier: local form ID plus the plugin that defines it.

    Text form is "0937A5:Skyrim.esm" (6 hex digits, colon, plugin file name).
    """
    id: int
    mod_key: str

    def __post_init__(self) -> None:
        if not 0 <= self.id <= 0xFFFFFF:
            raise ValueError(f"Form ID out of range: 0x{self.id:X}")
        if not self.mod_key:
            raise ValueError("FormKey requires a plugin name")

    @classmethod
    def parse(cls, text: str) -> "FormKey":
        raw_id, sep, plugin = text.strip().partition(":")
        if not sep or not raw_id or not plugin:
            raise ValueError(f"Malformed FormKey: {text!r}")
        try:
            form_id = int(raw_id, 16)
        except ValueError:
            raise ValueError(f"Malformed FormKey id: {text!r}") from None
        return cls(form_id, plugin)

    @property
    def mod_name(self) -> str:
        return mod_name(self.mod_key)

    def __str__(self) -> str:
        return f"{self.id:06X}:{self.mod_key}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FormKey):
            return NotImplemented
        return self.id == other.id and same_mod(self.mod_key, other.mod_key)

    def __hash__(self) -> int:
        return hash((self.id, self.mod_key.lower()))

    # Immutable: copies can share the instance.
    def __copy__(self) -> "FormKey":
        return self

    def __deepcopy__(self, memo: dict) -> "FormKey":
        return self
