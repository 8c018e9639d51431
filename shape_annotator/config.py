"""
Default configuration for the annotation canvas.

Every entry can be overridden from the environment, see
``shape_annotator.utils.env.load_cfg_from_env``.
"""

import os
from typing import Mapping, Optional

from easydict import EasyDict as edict

from .utils.env import load_cfg_from_env


def get_default_config() -> edict:
    cfg = edict()

    # Interaction
    cfg.handle_tolerance = 8.0
    cfg.rotation_handle_offset = 30.0
    cfg.min_size = 10.0
    # Drafts are kept only when both sides exceed this
    cfg.commit_min_size = 5.0
    # "bounds" hits circles on their bounding box, "ellipse" on the inscribed
    # ellipse. Legacy circles loaded with migration get bounds too, so under
    # "bounds" they are hit on that box rather than on center and radius.
    cfg.circle_hit_policy = "bounds"

    # View
    cfg.zoom_step = 1.2
    cfg.min_scale = 0.1
    cfg.max_scale = 5.0

    # Rendering, sizes are in screen pixels
    cfg.render = edict()
    cfg.render.line_width = 2.0
    cfg.render.selected_line_width = 3.0
    cfg.render.dash = 5.0
    cfg.render.fill_alpha = 0x20 / 255
    cfg.render.selection_color = "#3B82F6"
    cfg.render.handle_size = 8.0
    cfg.render.handle_fill_color = "#3B82F6"
    cfg.render.handle_stroke_color = "#1E40AF"
    cfg.render.label_font_size = 12.0
    cfg.render.label_padding = 4.0
    cfg.render.label_height = 16.0
    cfg.render.label_background = "#000000CC"
    cfg.render.label_text_color = "#FFFFFF"

    return cfg


def load_config(env: Optional[Mapping[str, str]] = None) -> edict:
    """Default configuration with environment overrides applied."""
    return load_cfg_from_env(get_default_config(), os.environ if env is None else env)
