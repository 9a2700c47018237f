"""
Template configuration normalization.

Turns any partial, legacy-keyed or partly invalid configuration into a
total ``TemplateConfiguration``. This is the only place where defaults
are applied; renderers receive normalized input and never re-default.

Pipeline:

1. canonicalize keys (camelCase and legacy ``show*`` / ``size`` /
   ``legalMentionsType`` spellings -> snake_case field names), dropping
   unknown keys
2. validate against ``TemplateConfiguration``; missing fields take
   their declared defaults
3. for every invalid leaf reported by validation, drop the leaf so it
   falls back to its default, and validate again

Design guarantees:
- never raises for configuration content
- idempotent: normalize(normalize(c)) == normalize(c)
- every replaced leaf is logged at WARNING level
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Type, Union

from pydantic import AliasChoices, BaseModel, ValidationError

from invoice_engine.app.schemas.template_config import TemplateConfiguration

logger = logging.getLogger(__name__)

RawConfiguration = Union[None, Mapping[str, Any], TemplateConfiguration]

# Each pass removes at least one leaf; the model has far fewer leaves.
_MAX_REPAIR_PASSES = 64


# ---------------------------------------------------------------------------
# Key canonicalization
# ---------------------------------------------------------------------------


def _accepted_keys(model: Type[BaseModel]) -> Dict[str, str]:
    """Map every accepted input key of ``model`` to its field name."""
    keys: Dict[str, str] = {}
    for name, field in model.model_fields.items():
        keys[name] = name
        if field.alias:
            keys.setdefault(field.alias, name)
        alias = field.validation_alias
        if isinstance(alias, str):
            keys.setdefault(alias, name)
        elif isinstance(alias, AliasChoices):
            for choice in alias.choices:
                if isinstance(choice, str):
                    keys.setdefault(choice, name)
    return keys


def _submodel(model: Type[BaseModel], name: str) -> Optional[Type[BaseModel]]:
    annotation = model.model_fields[name].annotation
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    return None


def _canonicalize(
    model: Type[BaseModel],
    raw: Any,
    path: Tuple[str, ...] = (),
) -> Dict[str, Any]:
    if isinstance(raw, BaseModel):
        raw = raw.model_dump()

    if raw is None:
        return {}

    if not isinstance(raw, Mapping):
        logger.warning(
            "Template configuration %s is not an object (%r); using defaults",
            ".".join(path) or "<root>",
            raw,
        )
        return {}

    accepted = _accepted_keys(model)
    result: Dict[str, Any] = {}
    canonical_hits = set()

    for key, value in raw.items():
        name = accepted.get(key)
        if name is None:
            logger.debug(
                "Ignoring unknown template configuration key %s",
                ".".join(path + (str(key),)),
            )
            continue

        # The snake_case spelling wins over aliases of the same field.
        if name in canonical_hits and key != name:
            continue
        if key == name:
            canonical_hits.add(name)

        sub = _submodel(model, name)
        if sub is not None:
            value = _canonicalize(sub, value, path + (name,))

        result[name] = value

    return result


# ---------------------------------------------------------------------------
# Invalid leaf repair
# ---------------------------------------------------------------------------


def _drop_leaf(data: Dict[str, Any], loc: Tuple[Any, ...]) -> Optional[str]:
    """
    Remove the value addressed by a validation error location.

    Returns the dotted path actually removed, or None if nothing matched.
    """
    node: Any = data
    model: Optional[Type[BaseModel]] = TemplateConfiguration
    walked = []

    for index, part in enumerate(loc):
        if not isinstance(node, dict) or model is None:
            break

        name = _accepted_keys(model).get(str(part), str(part))
        if name not in node:
            break

        walked.append(name)
        is_last = index == len(loc) - 1
        sub = _submodel(model, name)

        if is_last or sub is None or not isinstance(node[name], dict):
            del node[name]
            return ".".join(walked)

        node = node[name]
        model = sub

    return None


def _validate_with_repair(data: Dict[str, Any]) -> TemplateConfiguration:
    for _ in range(_MAX_REPAIR_PASSES):
        try:
            return TemplateConfiguration.model_validate(data)
        except ValidationError as exc:
            removed_any = False
            for error in exc.errors():
                removed = _drop_leaf(data, tuple(error["loc"]))
                if removed is None:
                    continue
                removed_any = True
                logger.warning(
                    "Invalid template configuration value at %s (%s); "
                    "using default",
                    removed,
                    error.get("msg", "invalid"),
                )
            if not removed_any:
                break

    logger.warning(
        "Template configuration could not be repaired; using defaults"
    )
    return TemplateConfiguration()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize_configuration(raw: RawConfiguration = None) -> TemplateConfiguration:
    """
    Return the total configuration for ``raw``.

    Args:
        raw:
            None, a (possibly partial, camelCase or legacy-keyed) mapping,
            or an already built ``TemplateConfiguration``.
    """
    if isinstance(raw, TemplateConfiguration):
        return raw

    data = _canonicalize(TemplateConfiguration, raw)
    return _validate_with_repair(data)


def canonicalize_configuration(raw: RawConfiguration) -> Dict[str, Any]:
    """
    Return ``raw`` with every key rewritten to its snake_case field name.

    Unknown keys are dropped; values are not validated.
    """
    return _canonicalize(TemplateConfiguration, raw)


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def merge_configuration(
    base: RawConfiguration,
    overrides: RawConfiguration,
) -> Dict[str, Any]:
    """
    Deep-merge user ``overrides`` onto a ``base`` configuration.

    Both sides are canonicalized first, so a camelCase override replaces
    the matching snake_case base value. ``None`` override values mean
    "not set" and keep the base value. The result is a raw mapping meant
    to be passed to ``normalize_configuration``.
    """
    return _deep_merge(
        canonicalize_configuration(base),
        canonicalize_configuration(overrides),
    )
