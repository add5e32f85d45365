"""Load generated validator modules at runtime.

Generated file names such as ``usersIDOrders.get.requestValidator.py``
contain dots, so they cannot be imported with a plain ``import`` statement.
:func:`load_generated_module` imports one from its path instead::

    from specval.runtime import load_generated_module

    module = load_generated_module("out/users.get.responsesValidator.py")
    module.validate({"statusCode": 200, "contentType": "application/json", "body": []})
"""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Union

from specval.exceptions import FileSystemError


def load_generated_module(path: Union[str, Path]) -> ModuleType:
    """Import the generated module at *path* and return it.

    The module is registered in ``sys.modules`` under a name derived from
    its file name. Loading a file again re-executes it and replaces the
    registered module.

    Raises:
        FileSystemError: If *path* is not an existing file.
    """
    file_path = Path(path).resolve()
    if not file_path.is_file():
        raise FileSystemError(f"file {file_path} does not exist")

    name = "specval_generated." + file_path.stem.replace(".", "_")
    spec = importlib.util.spec_from_file_location(name, file_path)
    if spec is None or spec.loader is None:
        raise FileSystemError(f"cannot load generated module {file_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    return module
