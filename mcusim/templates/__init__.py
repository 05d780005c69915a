"""Catalog of bundled example programs.

Templates are loaded once from ``catalog.yaml`` next to this module:

    from mcusim.templates import get_template

    sim.execute_code(get_template("led-blink").code)
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml  # type: ignore[import-untyped]

from mcusim.core.exceptions import ConfigurationError, TemplateNotFoundError

CATEGORIES = ("basic", "sensor", "control", "display", "communication")

_CATALOG_PATH = Path(__file__).parent / "catalog.yaml"


@dataclass(frozen=True)
class ProjectTemplate:
    id: str
    name: str
    description: str
    icon: str
    code: str
    category: str

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "code": self.code,
            "category": self.category,
        }


class TemplateRegistry:
    """Ordered registry of templates keyed by id."""

    def __init__(self):
        self._templates: dict[str, ProjectTemplate] = {}

    def register(self, template: ProjectTemplate) -> None:
        if template.id in self._templates:
            raise ValueError(f"Template '{template.id}' already registered")
        if template.category not in CATEGORIES:
            raise ValueError(f"Template '{template.id}' has unknown category '{template.category}'")
        self._templates[template.id] = template

    def get(self, template_id: str) -> ProjectTemplate:
        if template_id not in self._templates:
            raise TemplateNotFoundError(template_id, list(self._templates))
        return self._templates[template_id]

    def list_templates(self) -> list[ProjectTemplate]:
        return list(self._templates.values())

    def by_category(self, category: str) -> list[ProjectTemplate]:
        return [t for t in self._templates.values() if t.category == category]


def _parse_template(raw: dict[str, Any]) -> ProjectTemplate:
    return ProjectTemplate(
        id=str(raw["id"]),
        name=str(raw["name"]),
        description=str(raw.get("description", "")),
        icon=str(raw.get("icon", "")),
        code=str(raw["code"]),
        category=str(raw["category"]),
    )


def load_catalog(path: Optional[Path] = None) -> TemplateRegistry:
    """Build a registry from a YAML catalog file.

    Raises:
        ConfigurationError: on parse errors, missing keys or duplicates
    """
    catalog_path = path or _CATALOG_PATH
    try:
        with catalog_path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except Exception as exc:
        raise ConfigurationError("templates", f"Failed to parse catalog: {exc}") from exc

    registry = TemplateRegistry()
    try:
        for entry in raw["templates"]:
            registry.register(_parse_template(entry))
    except KeyError as exc:
        raise ConfigurationError("templates", f"Missing required key: {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise ConfigurationError("templates", str(exc)) from exc
    return registry


_REGISTRY: Optional[TemplateRegistry] = None
_REGISTRY_LOCK = threading.RLock()


def _registry() -> TemplateRegistry:
    global _REGISTRY  # pylint: disable=global-statement
    with _REGISTRY_LOCK:
        if _REGISTRY is None:
            _REGISTRY = load_catalog()
        return _REGISTRY


def list_templates() -> list[ProjectTemplate]:
    """All bundled templates in catalog order."""
    return _registry().list_templates()


def get_template(template_id: str) -> ProjectTemplate:
    """Return one template.

    Raises:
        TemplateNotFoundError: if template_id is unknown
    """
    return _registry().get(template_id)


def templates_by_category(category: str) -> list[ProjectTemplate]:
    return _registry().by_category(category)


__all__ = [
    "CATEGORIES",
    "ProjectTemplate",
    "TemplateRegistry",
    "get_template",
    "list_templates",
    "load_catalog",
    "templates_by_category",
]
