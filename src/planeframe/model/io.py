"""
Input/Output Manager (JSON)
Handles saving and loading structural models to .json files.
"""
from __future__ import annotations

import json
import logging
from importlib.metadata import version, PackageNotFoundError
from typing import Any

from planeframe.model.errors import InvalidArgumentError, ModelFormatError
from planeframe.model.geometry_primitives import WorldPoint
from planeframe.model.structure import (
    Constraints, ElementKind, LineElement, Loads, Node, StructuralModel, default_element_properties,
    validate_model
)

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("planeframe")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"

MODEL_TYPE = "structural"
FORMAT_VERSION = "1.0"


def serialize_model(model: StructuralModel) -> dict[str, Any]:
    """Convert the model into plain JSON-compatible data."""
    return {
        "id": model.id,
        "version": model.version or FORMAT_VERSION,
        "modelType": MODEL_TYPE,
        "name": model.name,
        "generator": f"planeframe {APP_VERSION}",
        "nodes": [
            {
                "id": node.id,
                "label": node.label,
                "coordinates": {"x": node.coordinates.x, "z": node.coordinates.z},
                "constraints": {"x": node.constraints.x, "z": node.constraints.z, "r": node.constraints.r},
                "loads": {"fx": node.loads.fx, "fz": node.loads.fz, "m": node.loads.m},
            }
            for node in model.nodes
        ],
        "beams": [
            {
                "id": element.id,
                "label": element.label,
                "type": str(element.kind),
                "startNode": element.start_node,
                "endNode": element.end_node,
                "properties": dict(element.properties),
            }
            for element in model.elements
        ],
    }


def _node_from_dict(data: dict[str, Any]) -> Node:
    coords = data["coordinates"]
    constraints = data.get("constraints", {})
    loads = data.get("loads", {})
    return Node(
        id=str(data["id"]),
        label=data.get("label", ""),
        coordinates=WorldPoint(float(coords["x"]), float(coords["z"])),
        constraints=Constraints(
            x=constraints.get("x", False),
            z=constraints.get("z", False),
            r=constraints.get("r", False),
        ),
        loads=Loads(
            fx=float(loads.get("fx", 0.0)),
            fz=float(loads.get("fz", 0.0)),
            m=float(loads.get("m", 0.0)),
        ),
    )


def _element_from_dict(data: dict[str, Any]) -> LineElement:
    properties = default_element_properties()
    properties.update(data.get("properties") or {})
    return LineElement(
        id=str(data["id"]),
        label=data.get("label", ""),
        kind=ElementKind(data.get("type", ElementKind.BEAM)),
        start_node=str(data["startNode"]),
        end_node=str(data["endNode"]),
        properties=properties,
    )


def deserialize_model(data: dict[str, Any]) -> StructuralModel:
    """
    Build a model from JSON data, filling in missing top-level fields.

    Raises:
        ModelFormatError: If the data is malformed or the model is invalid.
    """
    if not isinstance(data, dict):
        raise ModelFormatError(f"Expected a JSON object, got {type(data).__name__}.")

    try:
        nodes = [_node_from_dict(n) for n in data.get("nodes", [])]
        elements = [_element_from_dict(e) for e in data.get("beams", [])]
    except (KeyError, TypeError, ValueError, InvalidArgumentError) as e:
        raise ModelFormatError(f"Malformed model data: {e}") from e

    model = StructuralModel(
        id=str(data.get("id") or StructuralModel().id),
        name=data.get("name", ""),
        version=data.get("version", FORMAT_VERSION),
        nodes=nodes,
        elements=elements,
    )

    errors = validate_model(model)
    if errors:
        raise ModelFormatError(f"Model validation failed: {', '.join(errors)}")
    return model


class IOManager:

    @staticmethod
    def save_model(model: StructuralModel, filepath: str) -> None:
        logger.info(f"Saving model to: {filepath}")
        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(serialize_model(model), f, indent=2)
        except OSError as e:
            logger.exception(f"Failed to save model: {e}")
            raise
        logger.info(f"Model saved to: {filepath}")

    @staticmethod
    def load_model(filepath: str) -> StructuralModel:
        logger.info(f"Loading model from: {filepath}")
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            msg = f"File '{filepath}' is not a valid UTF-8 JSON document: {e}"
            logger.error(msg)
            raise ModelFormatError(msg) from e

        model = deserialize_model(data)
        logger.info(f"Loaded '{model.name}' with {len(model.nodes)} nodes and {len(model.elements)} elements.")
        return model
