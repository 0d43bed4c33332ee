"""
Context rewriter: namespace a material's own placeholders.

    id 'buttons.primary', front matter {label: Go}
    {{label}}            → {{buttons-primary.label}}
    {{#label}}…{{/label}} → {{#buttons-primary.label}}…{{/buttons-primary.label}}

Materials share one rendering context, so their local fields are addressed
through the material's namespace. Only the in-memory partial source changes;
files on disk are never touched. Already-namespaced placeholders are left
alone, so rewriting twice is the same as rewriting once.
"""

import re
from collections.abc import Mapping
from typing import Any

from fabassemble.domain.constants import FIELD_NOTES


def namespace_for(material_id: str) -> str:
    """'buttons.primary' → 'buttons-primary'"""
    return material_id.replace(".", "-")


def placeholder_pattern(key: str) -> re.Pattern[str]:
    """
    Matches {{key}}, {{#key}} and {{/key}}, one optional space inside.

    Groups: 1 = opener ('{{', '{{#', '{{/'), 2 = key, 3 = '}}'
    """
    return re.compile(r"(\{\{[#/]?)\s?(" + re.escape(key) + r")\s?(\}\})")


def rewrite(content: str, local_data: Mapping[str, Any], namespace: str) -> str:
    """
    Rewrite bare placeholders of local_data keys into namespace.key.

    Args:
        content: Material body
        local_data: Material front matter (`notes` is skipped)
        namespace: namespace_for(material id)

    Returns:
        Rewritten content
    """
    for key in local_data:
        if key == FIELD_NOTES:
            continue
        content = placeholder_pattern(str(key)).sub(
            lambda m: f"{m.group(1)}{namespace}.{m.group(2)}{m.group(3)}",
            content,
        )
    return content
