# main.py
"""
Main entry point for the Last Flag Standing arena.

This script orchestrates the application lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Builds the arena and the round controller, and starts the first round.
4. Runs the main loop, windowed or headless.
5. Handles clean shutdown.
"""
import logging
from utils import setup_logging, load_config
import cProfile
import pstats
import io

from constants import DEFAULT_CONTESTANTS

DEFAULT_CONFIG = {
    'arena': {},
    'round': {},
    'run_control': {},
    'visualization': {},
    'logging': {},
}


def contestants_from(round_params):
    """The configured contestants, or the defaults when the key is absent or null."""
    contestants = round_params.get('contestants')
    if contestants is None:
        return list(DEFAULT_CONTESTANTS)
    return list(contestants)


def log_throttle_from(run_params) -> int:
    return max(int(run_params.get('log_throttle_steps', 600)), 1)


def main():
    """
    The main function to run the contest.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json', DEFAULT_CONFIG)
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Last Flag Standing Starting ---")

    arena_params = config['arena']
    round_params = config['round']
    run_params = config['run_control']
    vis_params = config['visualization']

    from arena import Arena
    from simulation import RoundController

    try:
        arena = Arena.from_config(arena_params)
    except ValueError:
        logging.info("--- Last Flag Standing Shutting Down ---")
        return

    winners = []
    controller = RoundController(arena, round_params, on_winner=winners.append)
    controller.init_round(contestants_from(round_params))

    headless = run_params.get('headless', False)
    visualizer = None
    if not headless:
        from visualization import Visualizer
        visualizer = Visualizer(
            arena,
            image_dir=vis_params.get('token_image_dir'),
            colors=vis_params.get('token_colors')
        )

    profiler = cProfile.Profile()

    log_throttle = log_throttle_from(run_params)
    max_steps = run_params.get('max_steps', 100000)
    max_rounds = run_params.get('max_rounds', 0)

    running = True
    step_num = 0

    profiler.enable()
    while running:
        # Headless runs advance one nominal frame per step.
        dt_ms = visualizer.wait_frame() if visualizer is not None else None
        report = controller.tick(dt_ms)
        step_num += 1

        if visualizer is not None and not visualizer.draw(controller):
            running = False

        # Hot loops must throttle logs
        if step_num % log_throttle == 0:
            logging.info(
                f"Step {step_num}/{max_steps} | Round {controller.round_number} | "
                f"{controller.get_remaining_count()} remaining"
            )
            logging.debug(f"Step {step_num} | Reflections: {report.reflections}, Collisions: {report.collisions}")

        if max_rounds and report.reset and controller.round_number > max_rounds:
            logging.info(f"Completed {max_rounds} round(s). Stopping.")
            running = False

        if step_num >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
            running = False
    profiler.disable()

    if visualizer is not None:
        visualizer.close()
    logging.info(f"Main loop finished. Winners this session: {', '.join(winners) or 'none'}.")

    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20)
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Last Flag Standing Shutting Down ---")


if __name__ == "__main__":
    main()
