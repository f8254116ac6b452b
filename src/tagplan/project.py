"""Loading of declarative project files into planning resources."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping

import yaml
from pydantic import Field

from .models import RecordModel, Resource
from .specs import TagValueError, parse_tag_value


class ProjectError(ValueError):
    """Raised when a project file cannot be turned into resources."""


class Project(RecordModel):
    """Named collection of resources to place together."""

    name: str
    resources: List[Resource] = Field(default_factory=list)


def project_from_mapping(data: Mapping[str, Any], *, default_name: str = "project") -> Project:
    """Validate a parsed project mapping and convert its tag values."""
    name = str(data.get("name") or default_name).strip() or default_name
    raw_resources = data.get("resources")
    if raw_resources is None:
        raw_resources = []
    if not isinstance(raw_resources, list):
        raise ProjectError("'resources' must be a list")

    resources: List[Resource] = []
    for position, entry in enumerate(raw_resources, start=1):
        if not isinstance(entry, Mapping):
            raise ProjectError(f"resource #{position} must be a mapping")
        resource_name = str(entry.get("name") or "").strip()
        if not resource_name:
            raise ProjectError(f"resource #{position} is missing a name")
        tag_value = entry.get("tag", 0)
        try:
            spec = parse_tag_value(tag_value)
        except TagValueError as error:
            raise ProjectError(f"resource '{resource_name}': {error}") from error
        resources.append(Resource(name=resource_name, spec=spec))

    return Project(name=name, resources=resources)


def load_project(path: Path | str) -> Project:
    """Load a YAML project file from disk."""
    project_path = Path(path)
    if not project_path.exists():
        raise ProjectError(f"Project file not found: {project_path}")
    try:
        with project_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise ProjectError(f"Failed to parse project file {project_path}: {error}") from error

    if not isinstance(data, Mapping):
        raise ProjectError("Project file must be a mapping at the top level.")
    return project_from_mapping(data, default_name=project_path.stem)


__all__ = ["Project", "ProjectError", "load_project", "project_from_mapping"]
