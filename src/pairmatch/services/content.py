from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from pairmatch.engine.types import (
    DIFFICULTIES,
    AchievementDef,
    Catalog,
    Color,
    Difficulty,
    DifficultySpec,
    IconDef,
)


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def _load_schema(path: Path) -> object:
    return _load_json(path)


def schema_errors(instance: object, schema: object) -> list[str]:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: e.path)
    out: list[str] = []
    for err in errors[:10]:
        loc = "/".join(str(p) for p in err.absolute_path)
        out.append(f"- {loc}: {err.message}")
    return out


def validate_json(instance: object, schema: object, *, context: str) -> None:
    errors = schema_errors(instance, schema)
    if errors:
        raise ContentError("\n".join([f"Schema validation failed for {context}:", *errors]))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


def _require_number(obj: Mapping[str, object], key: str) -> float:
    v = obj.get(key)
    if not isinstance(v, (int, float)):
        raise ContentError(f"Expected number for {key}")
    return float(v)


def _parse_color(raw: object) -> Color:
    if not isinstance(raw, list) or len(raw) != 3 or not all(isinstance(c, int) for c in raw):
        raise ContentError("color must be three integers")
    return (raw[0], raw[1], raw[2])


def _parse_difficulties(raw: object) -> dict[Difficulty, DifficultySpec]:
    if not isinstance(raw, dict):
        raise ContentError("catalog.difficulties must be an object")
    out: dict[Difficulty, DifficultySpec] = {}
    for name in DIFFICULTIES:
        item = raw.get(name)
        if not isinstance(item, dict):
            raise ContentError(f"Missing difficulty: {name}")
        out[name] = DifficultySpec(pairs=_require_int(item, "pairs"), grid_size=_require_int(item, "grid_size"))
    return out


def _parse_icons(raw: object) -> tuple[IconDef, ...]:
    if not isinstance(raw, list):
        raise ContentError("catalog.icons must be a list")
    icons: list[IconDef] = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, dict):
            continue
        icon_id = _require_str(item, "id")
        if icon_id in seen:
            raise ContentError(f"Duplicate icon id: {icon_id}")
        seen.add(icon_id)
        icons.append(IconDef(id=icon_id, label=_require_str(item, "label"), color=_parse_color(item.get("color"))))
    return tuple(icons)


def _parse_achievements(raw: object) -> tuple[AchievementDef, ...]:
    if not isinstance(raw, list):
        raise ContentError("catalog.achievements must be a list")
    out: list[AchievementDef] = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, dict):
            continue
        ach_id = _require_str(item, "id")
        if ach_id in seen:
            raise ContentError(f"Duplicate achievement id: {ach_id}")
        seen.add(ach_id)
        out.append(
            AchievementDef(
                id=ach_id,
                name=_require_str(item, "name"),
                description=_require_str(item, "description"),
                kind=_require_str(item, "kind"),  # type: ignore[arg-type]  # schema restricts values
                threshold=_require_number(item, "threshold"),
                points=_require_int(item, "points"),
            )
        )
    return tuple(out)


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_catalog(self) -> Catalog:
        path = self._data_dir / "catalog.json"
        schema = _load_schema(self._schema_dir / "catalog.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError("catalog.json must be an object")

        catalog = Catalog(
            difficulties=_parse_difficulties(raw.get("difficulties")),
            icons=_parse_icons(raw.get("icons")),
            achievements=_parse_achievements(raw.get("achievements")),
        )
        # A difficulty that can never be dealt is a configuration error.
        for name, spec in catalog.difficulties.items():
            if spec.pairs > len(catalog.icons):
                raise ContentError(f"Difficulty {name} needs {spec.pairs} icons, catalog has {len(catalog.icons)}.")
        return catalog

    def load_progress_schema(self) -> object:
        return _load_schema(self._schema_dir / "progress.schema.json")

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_catalog()
        _ = self.load_progress_schema()
