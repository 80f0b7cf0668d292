# -- SPH Engine Package -- #

'''
Core Smoothed Particle Hydrodynamics (SPH) engine.

Provides the smoothing kernel, particle store, density estimator,
pressure force solver, time integrators, box boundary, and the step
orchestrator.
'''

from sphFluid.sph.protocols import SimulationConfig, SimulationState
from sphFluid.sph.kernels import QuarticKernel
from sphFluid.sph.particles import ParticleSystem
from sphFluid.sph.pressure import PressureForceSolver
from sphFluid.sph.density import DensityEstimator
from sphFluid.sph.simulation import SphSimulation
