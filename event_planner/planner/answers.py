from __future__ import annotations

from typing import Any, Mapping

from event_planner.planner.errors import TimelineValidationError


def normalize_answers(answers: Mapping[str, Any] | None) -> frozenset[str]:
    """Collapse an answers map into the set of selected option labels.

    Checkbox-style answers arrive as ``{option: True}``; single and
    multi-select questions may instead arrive as ``{question_id: option}`` or
    ``{question_id: [options]}``. Both shapes select the same options.
    """
    if answers is None:
        return frozenset()
    if not isinstance(answers, Mapping):
        raise TimelineValidationError("answers must be an object")

    selected: set[str] = set()
    for key, value in answers.items():
        if not isinstance(key, str):
            raise TimelineValidationError("answers keys must be strings")

        if isinstance(value, bool):
            if value:
                selected.add(key)
        elif isinstance(value, str):
            if value.strip():
                selected.add(key)
                selected.add(value.strip())
        elif isinstance(value, (list, tuple)):
            options = {item.strip() for item in value if isinstance(item, str) and item.strip()}
            if options:
                selected.add(key)
                selected.update(options)
        elif value:
            selected.add(key)

    return frozenset(selected)
