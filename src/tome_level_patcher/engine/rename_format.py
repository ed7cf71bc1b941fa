"""Book-name template rendering.

Recognised tokens are replaced literally, in the fixed order
level -> plugin -> school -> spell. A substituted value that itself contains
a later token will have that token replaced too.
"""

LEVEL_TOKEN = "<level>"
SPELL_TOKEN = "<spell>"
PLUGIN_TOKEN = "<plugin>"
SCHOOL_TOKEN = "<school>"


def requires_spell_info(fmt: str) -> bool:
    """True when the template needs a school or level to be rendered."""
    return SCHOOL_TOKEN in fmt or LEVEL_TOKEN in fmt


def render_name(fmt: str, *, level: str, spell: str, plugin: str, school: str) -> str:
    return (
        fmt.replace(LEVEL_TOKEN, level)
        .replace(PLUGIN_TOKEN, plugin)
        .replace(SCHOOL_TOKEN, school)
        .replace(SPELL_TOKEN, spell)
    )
