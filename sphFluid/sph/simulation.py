# -- SPH Simulation Orchestrator -- #

'''
Sequences the SPH phases for one tick.

Algorithm per time step:
    1. Snapshot the configuration
    2. Compute every density (all-pairs kernel summation)
    3. Compute every pressure / viscosity contribution
    4. Integrate every particle and enforce the box boundary

Each phase finishes for all particles before the next starts, because
the pressure of any particle depends on the densities of all others.

Degenerate numerics are guarded where they occur. A step that still
produces NaN/Inf values is reported through the logger and the run
continues.
'''

from __future__ import annotations

import logging

import numpy as np

from sphFluid.sph.protocols import SimulationConfig, SimulationState
from sphFluid.sph.kernels import QuarticKernel
from sphFluid.sph.particles import ParticleSystem
from sphFluid.sph.pairSearch import AllPairsSearch
from sphFluid.sph.density import DensityEstimator
from sphFluid.sph.pressure import PressureForceSolver
from sphFluid.sph.boundaryHandling import BoxBoundary
from sphFluid.sph.timeIntegration import createIntegrator

logger = logging.getLogger(__name__)


class SphSimulation:
    '''
    Owns the particle store and configuration and advances them.

    Parameters:
    -----------
    config : SimulationConfig
        Tunables; may be edited between steps
    particles : ParticleSystem | None
        Pre-built particle store (defaults to a gridDimension^3 cube)
    '''

    def __init__(
        self,
        config: SimulationConfig,
        particles: ParticleSystem | None = None,
    ) -> None:
        self.config = config
        if particles is None:
            particles = ParticleSystem.allocate(config.gridDimension)
        self._particles = particles
        self._pairSearch = AllPairsSearch()

        self._time: float = 0.0
        self._step: int = 0
        self._dt: float = 0.0

    ######################################################################
    # -- Lifecycle -- #
    ######################################################################

    @classmethod
    def create(
        cls,
        config: SimulationConfig | None = None,
        particles: ParticleSystem | None = None,
    ) -> SphSimulation:
        '''
        Allocate the particle store and perform the first reset.

        Parameters:
        -----------
        config : SimulationConfig | None
            Tunables (defaults to SimulationConfig())
        particles : ParticleSystem | None
            Pre-built particle store

        Returns:
        --------
        SphSimulation : Ready-to-step simulation
        '''
        simulation = cls(config or SimulationConfig(), particles)
        simulation.reset()
        return simulation

    def reset(self) -> None:
        '''
        Re-seed positions and zero dynamic state without reallocating.

        Densities are recomputed so that the first frame can be drawn.
        '''
        config = self.config.snapshot()
        self._particles.reset(config)
        self._time = 0.0
        self._step = 0
        self._dt = 0.0

        kernel = QuarticKernel(legacyNormalization=config.legacyNormalization)
        DensityEstimator(kernel, self._pairSearch).compute(
            self._particles, config.smoothingRadius, config.particleMass,
        )

        logger.debug('Reset %d particles', self._particles.nParticles)

    ######################################################################
    # -- Main Time Step -- #
    ######################################################################

    def step(self, dt: float | None = None) -> SimulationState:
        '''
        Advance one time step.

        Parameters:
        -----------
        dt : float | None
            Step size before timeScale (defaults to config.timeStep)

        Returns:
        --------
        SimulationState : Diagnostics after the step
        '''
        config = self.config.snapshot()
        stepDt = (config.timeStep if dt is None else dt) * config.timeScale
        p = self._particles

        kernel = QuarticKernel(legacyNormalization=config.legacyNormalization)

        # 1. Densities (all particles)
        DensityEstimator(kernel, self._pairSearch).compute(
            p, config.smoothingRadius, config.particleMass,
        )

        # 2. Pressure / viscosity (all particles)
        PressureForceSolver(kernel, self._pairSearch).apply(p, config, stepDt)

        # 3. Integration and containment (all particles)
        createIntegrator(config.integrator).integrate(p, stepDt)
        contacts = BoxBoundary(config.halfExtent, config.boundaryDamping).enforceBoundary(p)

        self._time += stepDt
        self._step += 1
        self._dt = stepDt

        state = self._buildState(config)
        if state.nonFiniteCount > 0:
            logger.warning(
                'Step %d: %d particle(s) have non-finite position or velocity',
                state.step, state.nonFiniteCount,
            )
        logger.debug('Step %d: dt=%.3e, wall contacts=%d', self._step, stepDt, contacts)

        return state

    ######################################################################
    # -- Diagnostics -- #
    ######################################################################

    def _buildState(self, config: SimulationConfig) -> SimulationState:
        '''Collect diagnostics using the given configuration.'''
        p = self._particles
        minDensity, maxDensity = p.densityRange()

        return SimulationState(
            time=self._time,
            step=self._step,
            dt=self._dt,
            kineticEnergy=p.kineticEnergy(config.particleMass),
            potentialEnergy=p.potentialEnergy(
                config.particleMass, config.gravity, float(config.domainMin[1]),
            ),
            maxVelocity=p.maxSpeed(),
            minDensity=minDensity,
            maxDensity=maxDensity,
            maxDensityError=p.maxDensityError(config.targetDensity),
            nonFiniteCount=p.nonFiniteCount(),
        )

    @property
    def currentState(self) -> SimulationState:
        '''Current simulation state snapshot.'''
        return self._buildState(self.config)

    def densityRange(self) -> tuple[float, float]:
        '''(min, max) density of the current frame.'''
        return self._particles.densityRange()

    @property
    def particles(self) -> ParticleSystem:
        '''Access the particle system.'''
        return self._particles

    @property
    def time(self) -> float:
        '''Accumulated simulation time.'''
        return self._time

    @property
    def stepCount(self) -> int:
        '''Number of completed steps since the last reset.'''
        return self._step
