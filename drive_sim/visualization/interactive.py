"""Interactive driving in a matplotlib window.

Key events from the figure feed a KeyboardController and a canvas timer
calls ``TickScheduler.tick()`` once per period, so ticks, input and drawing
all run on the GUI thread.
"""

import matplotlib.pyplot as plt
from loguru import logger

from ..input.controllers import KeyboardController
from ..simulation.tick_scheduler import TickScheduler
from .field_renderer import FieldRenderer


def attach_keyboard(fig, controller: KeyboardController):
    """Forward key events of a figure to the controller.

    matplotlib's default key bindings (q quits, s saves, ...) are
    disconnected so the drive keys only steer the robot. Leaving the figure
    releases every key, since the matching release event never arrives.

    Returns:
        The matplotlib connection ids
    """
    canvas = fig.canvas
    manager = getattr(canvas, 'manager', None)
    if manager is not None and getattr(manager, 'key_press_handler_id', None) is not None:
        canvas.mpl_disconnect(manager.key_press_handler_id)
        manager.key_press_handler_id = None

    return [
        canvas.mpl_connect('key_press_event', lambda event: controller.press(event.key)),
        canvas.mpl_connect('key_release_event', lambda event: controller.release(event.key)),
        canvas.mpl_connect('figure_leave_event', lambda event: controller.release_all()),
    ]


def run_interactive(scheduler: TickScheduler):
    """Open the scheduler's field window and tick until it is closed.

    Raises:
        ValueError: If the scheduler does not publish to a FieldRenderer
    """
    renderer = scheduler.renderer
    if not isinstance(renderer, FieldRenderer):
        raise ValueError("Interactive mode needs a scheduler publishing to a FieldRenderer")

    fig = renderer.fig
    controller = scheduler.controller
    if isinstance(controller, KeyboardController):
        attach_keyboard(fig, controller)

    interval_ms = max(1, int(round(scheduler.period * 1000)))
    timer = fig.canvas.new_timer(interval=interval_ms)

    def on_timer():
        scheduler.tick()
        fig.canvas.draw_idle()

    def on_close(event):
        timer.stop()
        if isinstance(controller, KeyboardController):
            controller.release_all()

    timer.add_callback(on_timer)
    fig.canvas.mpl_connect('close_event', on_close)

    # Draw the start pose before the first tick
    renderer.publish(scheduler.latest_snapshot)

    logger.info("Interactive mode: W/S forward/back, A/D strafe, Q/E rotate. Close the window to exit.")
    timer.start()
    plt.show()
    timer.stop()
    logger.info(f"Window closed after {scheduler.tick_count} ticks")
