# flake8: noqa E501

from gettext import gettext as _
from pathlib import Path

COMMAND_DESCRIPTION = _("Draw and edit shape annotations on an image")


def command(subparser):
    subparser.add_argument("input", type=Path, help=_("Image to annotate"))
    subparser.add_argument("--width", type=int, default=1024, help=_("Window width"))
    subparser.add_argument("--height", type=int, default=768, help=_("Window height"))
    subparser.add_argument(
        "--labels",
        action="store_true",
        help=_("Show annotation labels on the canvas"),
    )

    def handle(args):
        from .viewer import handle as viewer_handle

        viewer_handle(args)

    return handle
