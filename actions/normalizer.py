"""
Alias Normalizer

Maps caller-supplied field aliases (table, tableName, indexName, processId, ...)
onto the canonical names an action declares, before schema validation runs.

Callers also send flags either at top level or nested under an "options"
object ({"options": {"full": true}}); the nested keys are lifted to top level
first so every later stage sees one flat shape.
"""

from typing import Any, Mapping

OPTIONS_KEY = "options"


def lift_options(fields: Mapping[str, Any]) -> dict[str, Any]:
    """
    Copy keys of a nested `options` mapping to top level.

    Top-level values win over nested ones. The `options` key is removed once
    lifted; a non-mapping `options` value is left for validation to reject.
    """
    result = dict(fields)
    options = result.get(OPTIONS_KEY)
    if isinstance(options, Mapping):
        del result[OPTIONS_KEY]
        for key, value in options.items():
            # one level only
            if key != OPTIONS_KEY:
                result.setdefault(key, value)
    return result


def normalize(raw_fields: Mapping[str, Any], alias_map: Mapping[str, str]) -> dict[str, Any]:
    """
    Resolve aliases onto canonical field names.

    For each (alias, canonical) pair, if the canonical field is absent and the
    alias is present, the alias value fills the canonical slot. An explicitly
    supplied canonical value is never overwritten. Consumed alias keys are
    dropped; unknown fields pass through for schema validation to judge.

    The input is not modified, and normalize(normalize(x)) == normalize(x).
    """
    result = lift_options(raw_fields or {})

    for alias, canonical in alias_map.items():
        if alias not in result:
            continue
        value = result.pop(alias)
        if result.get(canonical) is None:
            result[canonical] = value

    return result
