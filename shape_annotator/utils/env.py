import logging
from gettext import gettext as _
from typing import Mapping

from easydict import EasyDict as edict

logger = logging.getLogger(__name__)

ENV_PREFIX = "SHAPE_ANNOTATOR_"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _coerce(value, default):
    """Convert an environment string to the type of the value it replaces."""
    if not isinstance(value, str) or default is None or isinstance(default, str):
        return value
    if isinstance(default, bool):
        return value.strip().lower() in _TRUE_VALUES
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    return value


def load_cfg_from_env(cfg: edict, env: Mapping[str, str]):
    for k, v in env.items():
        if k.startswith(ENV_PREFIX):
            cfgkey = k[len(ENV_PREFIX):].lower().replace("__", ".")
            logger.warning(
                _(
                    "Changing configuration entry from environment variable: {k}={v}"
                ).format(k=cfgkey, v=v)
            )
            *parts, last = cfgkey.split(".")
            this_cfg = cfg
            for part in parts:
                if this_cfg.get(part) is None:
                    this_cfg[part] = edict()
                this_cfg = this_cfg[part]
            this_cfg[last] = _coerce(v, this_cfg.get(last))
    return cfg
