"""Interfaces/abstracciones del Core.

- Contratos (Protocol) que implementan los adaptadores concretos (fly, API).
- El Core depende de abstracciones; los tests usan dobles deterministas.
"""

from core.interfaces.fly import FlyConnection
from core.interfaces.pipeline_api import PipelineAPI

__all__ = [
    "FlyConnection",
    "PipelineAPI",
]
