"""
Director Demo - run the canned direction against a small scene.

Run: python director_demo.py [--silent] [--cancel-on-stop] [--stop-after SECONDS]
"""

import argparse
import asyncio
import logging

from director import (
    AudioConfig,
    AudioEngine,
    CameraController,
    DirectionEngine,
    EngineConfig,
    ExecutionContext,
    Material,
    MeshRenderer,
    PhysicsWorld,
    SceneNode,
    SignalBridge,
    SoundBoard,
    Transform,
    create_demo_direction,
    parse_direction,
    prepare_task_queue,
)
from director.core.signal import SIGNAL_VFX_CHANGED

logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(levelname)-8s  %(message)s", datefmt="%H:%M:%S")
logger = logging.getLogger("director_demo")


def _args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run a direction against a demo scene.")
    p.add_argument("--silent", action="store_true", help="do not open an audio device")
    p.add_argument("--cancel-on-stop", action="store_true",
                   help="stop() also cancels in-flight tweens")
    p.add_argument("--stop-after", type=float, default=None,
                   help="call stop() after this many seconds")
    p.add_argument("--direction", default=None,
                   help="JSON file with a direction to run instead of the demo")
    p.add_argument("--verbose", action="store_true")
    return p.parse_args()


def build_scene() -> SceneNode:
    root = SceneNode("Root")
    hero = root.add_child(SceneNode("Hero", Transform(pos=(0.0, 1.0, 0.0)),
                                    MeshRenderer("box", Material(color=(0.9, 0.3, 0.2)))))
    hero.add_child(SceneNode("Arm_R", Transform(pos=(0.8, 0.0, 0.0)), MeshRenderer("cylinder")))
    for i, pos in enumerate([(2.0, 0.5, 0.0), (-1.5, 0.5, 1.0), (0.0, 0.5, -2.5), (4.0, 0.0, 4.0)]):
        root.add_child(SceneNode(f"Satellite_{i}", Transform(pos=pos), MeshRenderer("sphere")))
    return root


async def run(args: argparse.Namespace):
    signals = SignalBridge()
    signals.connect(SIGNAL_VFX_CHANGED, lambda state: logger.debug(f"VFX: {state}"))

    scene = build_scene()
    logger.info("Scene:\n" + scene.format_tree())

    audio = AudioEngine(AudioConfig(output_enabled=not args.silent))
    ctx = ExecutionContext(
        scene=scene,
        camera=CameraController.create(),
        sound=SoundBoard(audio),
        physics=PhysicsWorld(),
        on_task_start=lambda t: logger.info(f"-> {t.command.type.value}: {t.command}"),
        on_task_complete=lambda t: logger.info(f"<- {t.status.value} ({t.outcome})"),
        on_all_complete=lambda: logger.info("All tasks complete"),
    )

    if args.direction:
        with open(args.direction, encoding="utf-8") as f:
            direction = parse_direction(f.read())
    else:
        direction = create_demo_direction()
    logger.info(f"Direction: {direction.description} ({len(direction.commands)} commands)")

    engine = DirectionEngine(EngineConfig(cancel_in_flight_on_stop=args.cancel_on_stop), signals)
    engine.set_context(ctx)
    engine.add_tasks(prepare_task_queue(direction.commands))

    runner = asyncio.ensure_future(engine.execute())
    if args.stop_after is not None:
        await asyncio.sleep(args.stop_after)
        engine.stop()
    await runner

    rig = ctx.camera
    logger.info(f"Camera at {rig.position.round(3)}, looking at {rig.target.round(3)}")
    for node in scene.meshes():
        logger.info(f"  {node.name:<12} pos={node.position.round(3)}")

    ctx.sound.dispose()
    audio.stop()


def main() -> None:
    args = _args()
    if args.verbose:
        logging.getLogger("director").setLevel(logging.DEBUG)
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
