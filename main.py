# main.py
"""
Main entry point for the particle tween animation.

This script orchestrates the entire animation lifecycle:
1. Loads configuration from `config.json` (or the path given as the first
   command-line argument).
2. Initializes the logging system.
3. Generates the particle dataset and sets up the rendering backend.
4. Runs the perpetual ping-pong frame loop.
5. Handles clean shutdown.
"""
import logging
import sys
from utils import setup_logging, load_config, animation_params
import cProfile
import pstats
import io

def main(config_path: str = 'config.json') -> int:
    """
    The main function to run the animation. Returns a process exit code.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return 1

    setup_logging(config)

    logging.info("--- Particle Tween Animation Starting ---")

    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})
    try:
        anim_params = animation_params(config)
    except ValueError:
        return 1

    from particle import ParticleDataset
    from render import BackendError, HeadlessBackend, RenderStage
    from scheduler import FixedStepFrameLoop
    from animation import AnimationController
    from constants import FPS, WINDOW_TITLE, DEFAULT_LOG_THROTTLE_FRAMES

    width = anim_params['stage_width']
    height = anim_params['stage_height']
    fps = vis_params.get('fps', FPS)

    # --- Component Initialization ---
    dataset = ParticleDataset(anim_params, width, height)

    try:
        if vis_params.get('headless', False):
            backend = HeadlessBackend(width, height)
            frame_loop = FixedStepFrameLoop(backend, fps)
        else:
            from visualization import PygameBackend, PygameFrameLoop
            backend = PygameBackend(width, height, vis_params.get('window_title', WINDOW_TITLE))
            frame_loop = PygameFrameLoop(backend, fps)

        render_stage = RenderStage(dataset, backend, anim_params)
        render_stage.compile()
    except BackendError as e:
        logging.critical(f"Rendering backend could not be initialized: {e}")
        return 1

    controller_params = dict(anim_params)
    controller_params['log_throttle_frames'] = run_params.get(
        'log_throttle_frames', DEFAULT_LOG_THROTTLE_FRAMES
    )
    controller = AnimationController(dataset, render_stage, frame_loop, controller_params)

    profiler = cProfile.Profile() if run_params.get('profile', False) else None
    max_frames = run_params.get('max_frames', 0)

    controller.animate()
    if profiler:
        profiler.enable()
    try:
        frame_loop.run(max_frames)
    finally:
        if profiler:
            profiler.disable()
        controller.stop()
        backend.close()

    logging.info(
        f"Frame loop finished: {frame_loop.frame_count} frames, "
        f"{controller.cycle_count} completed cycles."
    )

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Tween Animation Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
