"""Loading collaborators and input files named on the command line."""

from __future__ import annotations

import importlib
import inspect
import json
from pathlib import Path
from typing import Any

import yaml

from episodeforge.exceptions import CollaboratorLoadError, ValidationError


def load_collaborator(spec: str) -> Any:
    """Import a collaborator from a ``package.module:attribute`` path.

    Classes and zero-argument factories are called; any other attribute is
    returned as is.

    Args:
        spec: Import path of the collaborator

    Returns:
        The collaborator instance

    Raises:
        CollaboratorLoadError: If the path is malformed or cannot be imported
    """
    module_name, sep, attr_path = spec.partition(":")
    if not sep or not module_name or not attr_path:
        raise CollaboratorLoadError(
            f"Invalid collaborator path '{spec}'",
            hint="Use the form 'package.module:attribute'",
        )

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise CollaboratorLoadError(
            f"Cannot import module '{module_name}'",
            hint="Check that the module is installed or on PYTHONPATH",
            details={"error": str(e)},
        ) from e

    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise CollaboratorLoadError(
                f"Module '{module_name}' has no attribute '{attr_path}'"
            ) from e

    if inspect.isclass(target) or (
        callable(target) and not inspect.iscoroutinefunction(target)
    ):
        try:
            return target()
        except TypeError as e:
            raise CollaboratorLoadError(
                f"Cannot create collaborator from '{spec}'",
                hint="Collaborator factories must take no arguments",
                details={"error": str(e)},
            ) from e
    return target


def load_data_file(path: Path) -> Any:
    """Read a JSON or YAML input file.

    Raises:
        ValidationError: If the file is missing, has an unknown suffix or
            cannot be parsed
    """
    if not path.is_file():
        raise ValidationError(f"File not found: {path}")

    suffix = path.suffix.lower()
    try:
        with path.open(encoding="utf-8") as f:
            if suffix in {".yml", ".yaml"}:
                return yaml.safe_load(f)
            if suffix == ".json":
                return json.load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValidationError(
            f"Cannot parse {path.name}", details={"error": str(e)}
        ) from e
    raise ValidationError(
        f"Unsupported input file format: {suffix}",
        hint="Use a .json, .yml or .yaml file",
    )
