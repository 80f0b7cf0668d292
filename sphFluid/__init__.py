# -- sphFluid Package -- #

'''
Brute-force Smoothed Particle Hydrodynamics (SPH) fluid simulation.

A cube of particles falls under gravity inside a box, with pressure
and viscosity forces from a quartic smoothing kernel, an interactive
controller, and Plotly output of recorded frames.
'''

__version__ = '0.1.0'

from sphFluid.sph.protocols import SimulationConfig
from sphFluid.sph.simulation import SphSimulation
