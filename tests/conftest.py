import numpy as np
import pytest

from director.audio import AudioConfig, AudioEngine, SoundBoard
from director.context import ExecutionContext
from director.scene import CameraController, Material, MaterialKind, MeshRenderer, SceneNode, Transform
from director.systems import PhysicsWorld


@pytest.fixture(autouse=True)
def seeded_random():
    np.random.seed(1234)


def make_mesh(name, pos=(0.0, 0.0, 0.0), kind=MaterialKind.STANDARD):
    return SceneNode(
        name,
        transform=Transform(pos=pos),
        mesh=MeshRenderer(mesh_id="box", material=Material(kind=kind)),
    )


@pytest.fixture
def scene():
    """Root group with a Hero mesh, two satellites and an unlit marker."""
    root = SceneNode("Root")
    hero = root.add_child(make_mesh("Hero", (1.0, 2.0, 0.0)))
    hero.add_child(make_mesh("Arm_R", (0.5, 0.0, 0.0)))
    root.add_child(make_mesh("Satellite", (0.0, 0.0, 1.5)))
    root.add_child(make_mesh("Marker", (0.0, 0.0, -5.0), kind=MaterialKind.BASIC))
    root.add_child(SceneNode("EmptyGroup"))
    return root


@pytest.fixture
def rig():
    return CameraController.create()


@pytest.fixture
def sound_board():
    return SoundBoard(AudioEngine(AudioConfig(output_enabled=False)))


@pytest.fixture
def ctx(scene, rig, sound_board):
    return ExecutionContext(scene=scene, camera=rig, sound=sound_board, physics=PhysicsWorld())


@pytest.fixture
def mesh_factory():
    return make_mesh
