import math

import numpy as np
import pytest

from director.scene import (
    CameraController,
    SceneNode,
    Transform,
    compose_matrix,
    find_object_by_name,
    parse_color,
)


def test_find_by_name_is_depth_first(scene):
    # A second "Arm_R" later in the tree must not win
    scene.add_child(SceneNode("Arm_R"))
    arm = find_object_by_name(scene, "Arm_R")
    assert arm.parent.name == "Hero"


def test_find_missing_returns_none(scene):
    assert find_object_by_name(scene, "Nope") is None
    assert find_object_by_name(None, "Hero") is None
    assert find_object_by_name(scene, None) is None


def test_node_ids_are_unique(scene):
    ids = [node.node_id for node in scene.walk()]
    assert len(ids) == len(set(ids))


def test_meshes_skip_groups(scene):
    names = [node.name for node in scene.meshes()]
    assert names == ["Hero", "Arm_R", "Satellite", "Marker"]


def test_world_position_includes_parents(scene):
    arm = scene.find_by_name("Arm_R")
    assert np.allclose(arm.world_position(), [1.5, 2.0, 0.0])

    scene.transform.pos[:] = (0.0, 1.0, 0.0)
    assert np.allclose(arm.world_position(), [1.5, 3.0, 0.0])


def test_world_position_follows_parent_rotation():
    parent = SceneNode("Pivot", transform=Transform(rot_euler=(0.0, math.pi / 2, 0.0)))
    child = parent.add_child(SceneNode("Tip", transform=Transform(pos=(1.0, 0.0, 0.0))))
    assert np.allclose(child.world_position(), [0.0, 0.0, -1.0], atol=1e-9)


def test_traverse_matches_world_matrix(scene):
    seen = {}
    scene.traverse(lambda node, world: seen.__setitem__(node.name, world))
    arm = scene.find_by_name("Arm_R")
    assert np.allclose(seen["Arm_R"], arm.world_matrix())


def test_compose_matrix_scale_then_translate():
    m = compose_matrix(Transform(pos=(1.0, 2.0, 3.0), scale=(2.0, 2.0, 2.0)))
    point = m @ np.array([1.0, 0.0, 0.0, 1.0])
    assert np.allclose(point[:3], [3.0, 2.0, 3.0])


def test_reparenting_moves_node(scene):
    arm = scene.find_by_name("Arm_R")
    sat = scene.find_by_name("Satellite")
    sat.add_child(arm)
    assert arm.parent is sat
    assert arm not in scene.find_by_name("Hero").children
    assert list(arm.ancestors()) == [sat, scene]


@pytest.mark.parametrize("value, expected", [
    ("#ff0000", (1.0, 0.0, 0.0)),
    ("#0f0", (0.0, 1.0, 0.0)),
    ("0x0000ff", (0.0, 0.0, 1.0)),
    ("rgb(255, 255, 0)", (1.0, 1.0, 0.0)),
    ("White", (1.0, 1.0, 1.0)),
    ((0.2, 0.4, 0.6), (0.2, 0.4, 0.6)),
])
def test_parse_color(value, expected):
    assert np.allclose(parse_color(value), expected)


@pytest.mark.parametrize("value", ["#12", "not-a-color", "#gggggg"])
def test_parse_color_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_color(value)


def test_camera_rig_is_aimed_at_target():
    rig = CameraController.create(position=(0.0, 0.0, 10.0), target=(0.0, 0.0, 0.0))
    assert np.allclose(rig.camera.get_world_direction(), [0.0, 0.0, -1.0])
    assert rig.controls.update_count == 1

    rig.controls.target[:] = (10.0, 0.0, 10.0)
    rig.controls.update()
    assert np.allclose(rig.camera.get_world_direction(), [1.0, 0.0, 0.0])


def test_view_matrix_moves_camera_to_origin():
    rig = CameraController.create(position=(0.0, 0.0, 5.0))
    view = rig.camera.view_matrix()
    eye = view @ np.array([0.0, 0.0, 5.0, 1.0])
    assert np.allclose(eye[:3], [0.0, 0.0, 0.0], atol=1e-6)


def test_compose_matrix_rotates_x_before_z():
    m = compose_matrix(Transform(rot_euler=(math.pi / 2, 0.0, math.pi / 2)))
    # X turns +Y into +Z, which Z then leaves alone
    assert np.allclose(m[:3, :3] @ [0.0, 1.0, 0.0], [0.0, 0.0, 1.0], atol=1e-9)
    # Z alone turns +X into +Y
    assert np.allclose(m[:3, :3] @ [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], atol=1e-9)
