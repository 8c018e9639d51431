import json
import logging
from gettext import gettext as _

import cv2

from shape_annotator.config import load_config
from shape_annotator.core.annotation import Tool
from shape_annotator.interfaces import CanvasAdapter

logger = logging.getLogger(__name__)

WINDOW_NAME = "shape_annotator"
FRAME_INTERVAL_MS = 16

_MOUSE_EVENTS = {
    cv2.EVENT_LBUTTONDOWN: "down",
    cv2.EVENT_MOUSEMOVE: "move",
    cv2.EVENT_LBUTTONUP: "up",
}


def _actions(adapter: CanvasAdapter):
    return {
        ord("v"): lambda: adapter.set_tool(Tool.SELECT),
        ord("r"): lambda: adapter.set_tool(Tool.RECTANGLE),
        ord("c"): lambda: adapter.set_tool(Tool.CIRCLE),
        ord("+"): adapter.zoom_in,
        ord("="): adapter.zoom_in,
        ord("-"): adapter.zoom_out,
        ord("0"): adapter.reset_view,
        ord("f"): adapter.fit_to_screen,
        ord("x"): adapter.delete_selected,
        127: adapter.delete_selected,
    }


QUIT_KEYS = (ord("q"), 27)


def dispatch_key(adapter: CanvasAdapter, key: int) -> bool:
    """
    Run the action bound to a key.

    Returns:
        False when the key asks to quit
    """
    if key in QUIT_KEYS:
        return False
    action = _actions(adapter).get(key)
    if action is not None:
        action()
    return True


def handle(args):
    assert args.input.is_file(), _("Input image must be an existing file")
    image = cv2.imread(str(args.input), cv2.IMREAD_COLOR)
    assert image is not None, _("Could not decode image '{path}'").format(
        path=args.input
    )
    image = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)

    def show(frame):
        cv2.imshow(WINDOW_NAME, cv2.cvtColor(frame, cv2.COLOR_RGB2BGR))

    adapter = CanvasAdapter(
        (args.width, args.height),
        config=load_config(),
        update_image_callback=show,
    )
    adapter.show_labels = args.labels
    adapter.load_image(image)

    def on_mouse(event, x, y, flags, param):
        kind = _MOUSE_EVENTS.get(event)
        if kind is not None:
            adapter.pointer(kind, x, y)

    cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_AUTOSIZE)
    cv2.setMouseCallback(WINDOW_NAME, on_mouse)
    logger.debug(
        _("Previewing {path} ({width}x{height})").format(
            path=args.input, width=image.shape[1], height=image.shape[0]
        )
    )

    try:
        while True:
            adapter.clock.tick()
            key = cv2.waitKey(FRAME_INTERVAL_MS) & 0xFF
            if key != 0xFF and not dispatch_key(adapter, key):
                break
            if cv2.getWindowProperty(WINDOW_NAME, cv2.WND_PROP_VISIBLE) < 1:
                break
    finally:
        adapter.close()
        cv2.destroyWindow(WINDOW_NAME)

    print(json.dumps([a.to_dict() for a in adapter.annotations], indent=2))
