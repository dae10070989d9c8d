import json

import pytest

from planeframe.model import structure
from planeframe.model.errors import ModelFormatError
from planeframe.model.geometry_primitives import WorldPoint
from planeframe.model.io import IOManager, deserialize_model, serialize_model
from planeframe.model.structure import Constraints, ElementKind, Loads, StructuralModel


@pytest.fixture
def model():
    model = StructuralModel(name="Portal")
    a = structure.add_node(model, WorldPoint(0.0, 0.0))
    b = structure.add_node(model, WorldPoint(5.0, -2.5))
    structure.update_node(model, a.id, constraints=Constraints(x=True, z=True), label="A")
    structure.update_node(model, b.id, loads=Loads(fx=12.5))
    structure.add_line_element(model, a.id, b.id, ElementKind.BEAM)
    return model


def test_serialized_layout(model):
    data = serialize_model(model)

    assert data["modelType"] == "structural"
    assert data["name"] == "Portal"
    assert data["nodes"][0]["coordinates"] == {"x": 0.0, "z": 0.0}
    beam = data["beams"][0]
    assert beam["type"] == "beam"
    assert beam["startNode"] == model.nodes[0].id
    assert beam["endNode"] == model.nodes[1].id
    json.dumps(data)


def test_save_and_load(model, tmp_path):
    path = tmp_path / "portal.json"

    IOManager.save_model(model, str(path))
    loaded = IOManager.load_model(str(path))

    assert loaded.id == model.id
    assert loaded.name == model.name
    assert loaded.nodes == model.nodes
    assert loaded.elements == model.elements
    assert loaded.elements[0].properties == model.elements[0].properties


def test_missing_fields_get_defaults():
    loaded = deserialize_model({
        "nodes": [
            {"id": "a", "coordinates": {"x": 0, "z": 0}},
            {"id": "b", "coordinates": {"x": 1, "z": 0}},
        ],
        "beams": [{"id": "e", "startNode": "a", "endNode": "b"}],
    })

    assert loaded.id
    assert loaded.name == f"Model {loaded.id}"
    assert loaded.version == "1.0"
    assert loaded.nodes[0].constraints == Constraints()
    assert loaded.elements[0].kind == ElementKind.BEAM


def test_partial_element_properties_are_completed():
    loaded = deserialize_model({
        "nodes": [
            {"id": "a", "coordinates": {"x": 0, "z": 0}},
            {"id": "b", "coordinates": {"x": 1, "z": 0}},
        ],
        "beams": [{"id": "e", "startNode": "a", "endNode": "b", "properties": {"width": 0.4, "grade": "S355"}}],
    })

    props = loaded.elements[0].properties
    assert props["width"] == 0.4
    assert props["grade"] == "S355"
    assert props["material"] == "steel"
    assert props["elasticModulus"] == 200000


@pytest.mark.parametrize("data", [
    [],
    {"nodes": [{"id": "a"}]},
    {"nodes": [{"id": "a", "coordinates": {"x": "left", "z": 0}}]},
    {"nodes": [{"id": "a", "coordinates": {"x": 0, "z": 0}}],
     "beams": [{"id": "e", "startNode": "a", "endNode": "ghost"}]},
    {"beams": [{"id": "e", "type": "cable", "startNode": "a", "endNode": "b"}]},
])
def test_malformed_data_is_rejected(data):
    with pytest.raises(ModelFormatError):
        deserialize_model(data)


def test_invalid_json_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ModelFormatError):
        IOManager.load_model(str(path))


def test_non_utf8_file(tmp_path):
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"name": "\xff\xfe"}')

    with pytest.raises(ModelFormatError):
        IOManager.load_model(str(path))


def test_missing_file(tmp_path):
    with pytest.raises(OSError):
        IOManager.load_model(str(tmp_path / "nope.json"))
