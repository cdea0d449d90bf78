# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import sys

# plugin subpackages to initialize
from types import ModuleType
from typing import Dict

from sshmount.mounting.notify.protocol import Notifier

from sshmount.mounting.notify.utils import discover, Factory, make_register, Register

registry: Dict[str, Factory[Notifier]] = {}
register: Register[Notifier] = make_register(registry)

current_module = sys.modules[__name__]

discovered_plugins: Dict[str, ModuleType] = {}
discovered_plugins.update(discover(current_module))
