# -- SPH Simulation Protocols -- #

'''
Configuration, state snapshot, and solver protocol for the SPH core.

SimulationConfig is the single bag of tunables the orchestrator owns.
It may be edited between steps (e.g. from a tuning surface); the
solver takes a snapshot at the start of every step so that one step
always sees one consistent set of values.
'''

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Protocol, TYPE_CHECKING

import numpy as np

from sphFluid import constants as const

if TYPE_CHECKING:
    from sphFluid.sph.particles import ParticleSystem


INTEGRATORS = ('semiImplicitEuler', 'leapfrog')
PRESSURE_MODES = ('acceleration', 'velocityOverride')


######################################################################
# -- Simulation Configuration -- #
######################################################################

@dataclass
class SimulationConfig:
    '''
    Tunables for an SPH simulation.

    Parameters:
    -----------
    smoothingRadius : float
        Smoothing radius h (kernel support is 2h)
    particleMass : float
        Mass shared by every particle
    targetDensity : float
        Baseline density of the equation of state
    pressureMultiplier : float
        Stiffness of the equation of state
    viscosity : float
        Relative-velocity damping coefficient (0 disables)
    gravity : float
        Gravity magnitude, applied along -y
    halfExtent : np.ndarray
        Per-axis half-extent of the containing box, shape (3,)
    boundaryDamping : float
        Velocity multiplier on wall contact (negative)
    timeStep : float
        Default step size used when step() is called without dt
    timeScale : float
        Multiplier applied to every step size
    integrator : str
        'semiImplicitEuler' or 'leapfrog'
    pressureMode : str
        'acceleration' (integrate through velocity) or
        'velocityOverride' (pressure term replaces velocity)
    legacyNormalization : bool
        Use the historical h-independent kernel volume
    gridDimension : int
        Particles per side of the initial cube
    spawnFloor : float
        Lowest y of the initial block
    jitter : float
        Amplitude of the random x offset on reset
    seed : int
        Seed of the reset jitter
    '''

    smoothingRadius: float = const.smoothingRadius
    particleMass: float = const.particleMass
    targetDensity: float = const.targetDensity
    pressureMultiplier: float = const.pressureMultiplier
    viscosity: float = const.viscosity
    gravity: float = const.gravity
    halfExtent: np.ndarray = field(default_factory=lambda: np.array(const.halfExtent))
    boundaryDamping: float = const.boundaryDamping
    timeStep: float = const.timeStep
    timeScale: float = 1.0
    integrator: str = 'semiImplicitEuler'
    pressureMode: str = 'acceleration'
    legacyNormalization: bool = False
    gridDimension: int = const.gridDimension
    spawnFloor: float = const.spawnFloor
    jitter: float = const.jitter
    seed: int = const.seed

    def __post_init__(self) -> None:
        self.halfExtent = np.asarray(self.halfExtent, dtype=float).reshape(3)

        if self.integrator not in INTEGRATORS:
            raise ValueError(f'Unknown integrator: {self.integrator}')
        if self.pressureMode not in PRESSURE_MODES:
            raise ValueError(f'Unknown pressure mode: {self.pressureMode}')

    @property
    def supportRadius(self) -> float:
        '''Kernel support radius 2h (kernel is zero beyond this).'''
        return 2.0 * self.smoothingRadius

    @property
    def domainMin(self) -> np.ndarray:
        '''Lower corner of the containing box.'''
        return -self.halfExtent

    @property
    def domainMax(self) -> np.ndarray:
        '''Upper corner of the containing box.'''
        return self.halfExtent.copy()

    @property
    def particleCount(self) -> int:
        '''Number of particles a grid reset produces.'''
        return self.gridDimension ** 3

    @property
    def gravityVector(self) -> np.ndarray:
        '''Gravity as a 3-vector along -y.'''
        return np.array([0.0, -self.gravity, 0.0])

    def snapshot(self) -> SimulationConfig:
        '''Independent copy used to read the tunables once per step.'''
        return copy.deepcopy(self)

    @classmethod
    def small(cls) -> SimulationConfig:
        '''
        Small cube for quick runs.

        125 particles, steps in milliseconds.
        '''
        return cls(gridDimension=5, smoothingRadius=0.3)

    @classmethod
    def standard(cls) -> SimulationConfig:
        '''
        Standard 8x8x8 cube (512 particles).
        '''
        return cls()

    @classmethod
    def fromJson(cls, configPath: str) -> SimulationConfig:
        '''
        Load configuration from a JSON file.

        Reads the 'simulation', 'sph', 'fluid', and 'domain' sections.
        Missing keys fall back to the defaults in constants.

        Parameters:
        -----------
        configPath : str
            Path to the JSON configuration file

        Returns:
        --------
        SimulationConfig : Loaded configuration

        Raises:
        -------
        ValueError : If the file is not valid JSON or names an
            unknown integrator / pressure mode
        '''
        with open(configPath, 'r') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f'Invalid configuration file {configPath}: {e}') from e

        simSection = data.get('simulation', {})
        sphSection = data.get('sph', {})
        fluidSection = data.get('fluid', {})
        domainSection = data.get('domain', {})

        return cls(
            smoothingRadius=sphSection.get('smoothingRadius', const.smoothingRadius),
            particleMass=fluidSection.get('particleMass', const.particleMass),
            targetDensity=fluidSection.get('targetDensity', const.targetDensity),
            pressureMultiplier=fluidSection.get('pressureMultiplier', const.pressureMultiplier),
            viscosity=fluidSection.get('viscosity', const.viscosity),
            gravity=fluidSection.get('gravity', const.gravity),
            halfExtent=np.array(domainSection.get('halfExtent', const.halfExtent)),
            boundaryDamping=domainSection.get('boundaryDamping', const.boundaryDamping),
            timeStep=simSection.get('timeStep', const.timeStep),
            timeScale=simSection.get('timeScale', 1.0),
            integrator=simSection.get('integrator', 'semiImplicitEuler'),
            pressureMode=sphSection.get('pressureMode', 'acceleration'),
            legacyNormalization=sphSection.get('legacyNormalization', False),
            gridDimension=simSection.get('gridDimension', const.gridDimension),
            spawnFloor=domainSection.get('spawnFloor', const.spawnFloor),
            jitter=simSection.get('jitter', const.jitter),
            seed=simSection.get('seed', const.seed),
        )


######################################################################
# -- Simulation State -- #
######################################################################

@dataclass
class SimulationState:
    '''
    Diagnostics snapshot after a step.

    Parameters:
    -----------
    time : float
        Accumulated simulation time
    step : int
        Number of completed steps
    dt : float
        Step size used for the last step
    kineticEnergy : float
        Total kinetic energy
    potentialEnergy : float
        Gravitational potential energy measured from the floor
    maxVelocity : float
        Largest particle speed
    minDensity : float
        Smallest particle density
    maxDensity : float
        Largest particle density
    maxDensityError : float
        Largest |rho - rho_0| / rho_0
    nonFiniteCount : int
        Particles with a NaN/Inf position or velocity component
    '''

    time: float
    step: int
    dt: float
    kineticEnergy: float
    potentialEnergy: float
    maxVelocity: float
    minDensity: float
    maxDensity: float
    maxDensityError: float
    nonFiniteCount: int = 0

    @property
    def totalEnergy(self) -> float:
        '''Total mechanical energy (KE + PE).'''
        return self.kineticEnergy + self.potentialEnergy


######################################################################
# -- Solver Protocol -- #
######################################################################

class SphSolver(Protocol):
    '''
    Protocol for SPH step orchestrators.

    config is the live configuration; edits apply from the next step.
    '''

    config: SimulationConfig

    def reset(self) -> None:
        '''Re-seed particle state without reallocating.'''
        ...

    def step(self, dt: float | None = None) -> SimulationState:
        '''Advance one time step and return the new state.'''
        ...

    @property
    def currentState(self) -> SimulationState:
        '''Current simulation state snapshot.'''
        ...

    @property
    def particles(self) -> ParticleSystem:
        '''Access the particle system.'''
        ...
