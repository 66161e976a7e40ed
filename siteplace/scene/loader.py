"""
Scene Snapshot Loader

Reads a scene snapshot exported by the layout editor, as YAML or as JSON
(files with a .json suffix):

```yaml
name: North farm
objects:
  - id: container-1
    name: Antspace HD5
    type: container
    position: {x: -10.0, y: 1.45, z: 0.0}
    dimensions: {width: 12192, height: 2896, depth: 2438}
    scale: {x: 1, y: 1, z: 1}
```

A bare list of objects is accepted as well. ``category`` may be used in
place of ``type``. Unknown keys are ignored, so full editor exports
(colors, rotation, lock flags) load unchanged.
"""

from pathlib import Path
from typing import Any, Dict, Union
import json
import logging

import yaml

from .abstraction import Extents, PlacedObject, Scene, Vector3

logger = logging.getLogger(__name__)


class SceneFormatError(ValueError):
    """Raised when a snapshot file cannot be interpreted as a scene."""


def _vector(data: Any, default: float, field_name: str, object_id: str) -> Vector3:
    if data is None:
        return Vector3(default, default, default)
    if not isinstance(data, dict):
        raise SceneFormatError(f"Object '{object_id}': '{field_name}' must be a mapping")
    try:
        return Vector3(
            x=float(data.get("x", default)),
            y=float(data.get("y", default)),
            z=float(data.get("z", default)),
        )
    except (TypeError, ValueError) as e:
        raise SceneFormatError(f"Object '{object_id}': invalid '{field_name}': {e}") from e


def _extents(data: Any, object_id: str) -> Extents:
    if data is None:
        return Extents()
    if not isinstance(data, dict):
        raise SceneFormatError(f"Object '{object_id}': 'dimensions' must be a mapping")
    try:
        return Extents(
            width=float(data.get("width", 0.0)),
            height=float(data.get("height", 0.0)),
            depth=float(data.get("depth", 0.0)),
        )
    except (TypeError, ValueError) as e:
        raise SceneFormatError(f"Object '{object_id}': invalid 'dimensions': {e}") from e


def object_from_dict(data: Dict[str, Any]) -> PlacedObject:
    """
    Build a PlacedObject from an editor export entry.

    Raises:
        SceneFormatError: If the entry has no id or malformed geometry
    """
    if not isinstance(data, dict):
        raise SceneFormatError(f"Scene object must be a mapping, got {type(data).__name__}")

    object_id = data.get("id")
    if object_id is None or str(object_id) == "":
        raise SceneFormatError("Scene object is missing an 'id'")
    object_id = str(object_id)

    category = data.get("category", data.get("type", ""))

    return PlacedObject(
        id=object_id,
        category=str(category or ""),
        name=str(data.get("name") or ""),
        position=_vector(data.get("position"), 0.0, "position", object_id),
        extents=_extents(data.get("dimensions"), object_id),
        scale=_vector(data.get("scale"), 1.0, "scale", object_id),
    )


def scene_from_data(data: Any, name: str = "") -> Scene:
    """
    Build a Scene from parsed YAML/JSON data.

    Raises:
        SceneFormatError: If the data is not a scene
    """
    if data is None:
        return Scene(name=name)

    if isinstance(data, list):
        entries = data
    elif isinstance(data, dict):
        name = str(data.get("name") or name)
        entries = data.get("objects") or []
        if not isinstance(entries, list):
            raise SceneFormatError("'objects' must be a list")
    else:
        raise SceneFormatError(f"Unsupported scene document: {type(data).__name__}")

    scene = Scene(name=name)
    for entry in entries:
        obj = object_from_dict(entry)
        if scene.get_object(obj.id) is not None:
            raise SceneFormatError(f"Duplicate object id '{obj.id}'")
        scene.add_object(obj)
    return scene


def load_scene(path: Union[str, Path]) -> Scene:
    """
    Load a scene snapshot from a YAML or JSON file.

    Args:
        path: Path to the snapshot file

    Returns:
        Scene with objects in file order

    Raises:
        FileNotFoundError: If the file does not exist
        SceneFormatError: If the file cannot be parsed as a scene
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scene file not found: {path}")

    text = path.read_text()
    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SceneFormatError(f"Failed to parse scene file {path}: {e}") from e
    else:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise SceneFormatError(f"Failed to parse scene file {path}: {e}") from e

    scene = scene_from_data(data, name=path.stem)
    logger.info(f"Loaded scene '{scene.name}' from {path} ({len(scene)} objects)")
    return scene
