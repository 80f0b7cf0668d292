# -- Live Parameter Surface -- #

'''
Named scalar tunables exposed to an external tuning UI.

Writes go straight into the simulation's SimulationConfig (or the
controller's enabled flag) and take effect at the next step, which
snapshots the configuration when it starts. Values are not range
checked; the ranges below are only slider hints.
'''

from __future__ import annotations

import logging
from dataclasses import dataclass

from sphFluid.interface.controller import SimulationController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParameterSpec:
    '''
    Slider metadata for one tunable.

    Parameters:
    -----------
    name : str
        Attribute name on SimulationConfig (or 'enabled')
    minimum : float
        Suggested slider minimum
    maximum : float
        Suggested slider maximum
    '''

    name: str
    minimum: float
    maximum: float


PARAMETERS: dict[str, ParameterSpec] = {
    spec.name: spec for spec in (
        ParameterSpec('smoothingRadius', 0.001, 0.5),
        ParameterSpec('targetDensity', 0.0, 500.0),
        # Negative values keep the fluid stable; positive values clump it
        ParameterSpec('pressureMultiplier', -100.0, 100.0),
        ParameterSpec('gravity', 0.0, 20.0),
        ParameterSpec('viscosity', 0.0, 1.0),
        ParameterSpec('boundaryDamping', -1.0, 0.0),
        ParameterSpec('timeScale', 0.0, 2.0),
        ParameterSpec('enabled', 0.0, 1.0),
    )
}


class ParameterSurface:
    '''
    Read/write access to the live tunables of a controlled simulation.

    Parameters:
    -----------
    controller : SimulationController
        Controller whose simulation config (and enabled flag) is exposed
    '''

    def __init__(self, controller: SimulationController) -> None:
        self._controller = controller

    def names(self) -> list[str]:
        '''Names of all exposed tunables.'''
        return list(PARAMETERS)

    def spec(self, name: str) -> ParameterSpec:
        '''Slider metadata for a tunable.'''
        self._check(name)
        return PARAMETERS[name]

    def get(self, name: str) -> float | bool:
        '''Current value of a tunable.'''
        self._check(name)
        if name == 'enabled':
            return self._controller.enabled
        return getattr(self._controller.simulation.config, name)

    def set(self, name: str, value: float | bool) -> None:
        '''
        Write a tunable; applies from the next step on.

        Raises:
        -------
        KeyError : If the name is not an exposed tunable
        '''
        self._check(name)
        if name == 'enabled':
            self._controller.enabled = bool(value)
        else:
            setattr(self._controller.simulation.config, name, float(value))
        logger.debug('Parameter %s set to %s', name, value)

    def values(self) -> dict[str, float | bool]:
        '''All tunables and their current values.'''
        return {name: self.get(name) for name in PARAMETERS}

    @staticmethod
    def _check(name: str) -> None:
        if name not in PARAMETERS:
            raise KeyError(f'Unknown parameter: {name}')
