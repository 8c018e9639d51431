import importlib.util
import sys
from pathlib import Path
from typing import Optional


def load_module(script_path, module_name: Optional[str] = None):
    """
    Import a Python file as a module, registering it under ``module_name``.

    A package ``__init__.py`` is loaded as a package, so relative imports
    inside it keep working.
    """
    script_path = Path(script_path)
    if module_name is None:
        module_name = (
            script_path.parent.name
            if script_path.name == "__init__.py"
            else script_path.stem
        )

    search_locations = None
    if script_path.name == "__init__.py":
        search_locations = [str(script_path.parent)]

    spec = importlib.util.spec_from_file_location(
        module_name, str(script_path), submodule_search_locations=search_locations
    )
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module
