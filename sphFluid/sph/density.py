# -- SPH Density Estimator -- #

'''
Density by kernel-weighted summation over all particles.

    rho_i = sum_j m * W(|x_i - x_j|, h)

The sum includes the self term j = i, which adds m * W(0, h) to every
particle. This is the most expensive phase: N^2 kernel evaluations.
'''

from __future__ import annotations

import numpy as np

from sphFluid.sph.kernels import SphKernel
from sphFluid.sph.pairSearch import PairSearch, AllPairsSearch
from sphFluid.sph.particles import ParticleSystem


class DensityEstimator:
    '''
    Computes every particle density before any force is derived.

    Parameters:
    -----------
    kernel : SphKernel
        Smoothing kernel
    pairSearch : PairSearch | None
        Pair enumeration (defaults to AllPairsSearch)
    '''

    def __init__(self, kernel: SphKernel, pairSearch: PairSearch | None = None) -> None:
        self._kernel = kernel
        self._pairSearch = AllPairsSearch() if pairSearch is None else pairSearch

    def compute(self, particles: ParticleSystem, h: float, mass: float) -> None:
        '''
        Overwrite particles.densities with the SPH summation.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle system (positions read, densities written)
        h : float
            Smoothing radius
        mass : float
            Uniform particle mass
        '''
        for block in self._pairSearch.blocks(particles.positions):
            wij = self._kernel.evaluateBatch(block.distances, h)
            particles.densities[block.rows] = mass * np.sum(wij, axis=1)
