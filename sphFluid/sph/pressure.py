# -- SPH Pressure Force Solver -- #

'''
Linear equation of state and the symmetrized pressure term.

Equation of state:
    p(rho) = (rho - rho_0) * k

Pair pressure (identical seen from either particle, so pair forces
are equal and opposite when the densities match):
    p_ij = (p(rho_i) + p(rho_j)) / 2

Pressure term for particle i, with r = x_i - x_j:
    P_i = sum_j (r / |r|) * dW/dr * p_ij * m / rho_j

Viscosity term (Morris et al. 1997 form):
    V_i = sum_j (m / rho_j) * mu * (v_j - v_i) * (-(r . gradW)) / (|r|^2 + eps^2)

With k > 0 a pair below the target density pushes apart and a pair
above it pulls together; k < 0 reverses both.

The pressure term is applied in one of two modes:
    'acceleration'      a_i = P_i / rho_i + V_i + g, integrated through v
    'velocityOverride'  v_i = P_i * dt / rho_i + g * dt, prior v discarded

References:
-----------
Monaghan (1992) -- Smoothed Particle Hydrodynamics
Morris et al. (1997) -- Modeling low Reynolds number incompressible flows
'''

from __future__ import annotations

import numpy as np

from sphFluid import constants as const
from sphFluid.sph.kernels import SphKernel
from sphFluid.sph.pairSearch import PairSearch, AllPairsSearch
from sphFluid.sph.particles import ParticleSystem
from sphFluid.sph.protocols import SimulationConfig


######################################################################
# -- Equation of State -- #
######################################################################

def pressure(
    density: float | np.ndarray,
    targetDensity: float,
    pressureMultiplier: float,
) -> float | np.ndarray:
    '''
    Linear equation of state p = (rho - rho_0) * k.

    Parameters:
    -----------
    density : float | np.ndarray
        Particle density (scalar or array)
    targetDensity : float
        Equation-of-state baseline
    pressureMultiplier : float
        Equation-of-state stiffness

    Returns:
    --------
    float | np.ndarray : Pressure, same shape as density
    '''
    return (density - targetDensity) * pressureMultiplier


def sharedPressure(
    densityA: float | np.ndarray,
    densityB: float | np.ndarray,
    targetDensity: float,
    pressureMultiplier: float,
) -> float | np.ndarray:
    '''
    Symmetrized pair pressure (p(rho_a) + p(rho_b)) / 2.

    Parameters:
    -----------
    densityA, densityB : float | np.ndarray
        Densities of the two particles (broadcastable)
    targetDensity : float
        Equation-of-state baseline
    pressureMultiplier : float
        Equation-of-state stiffness

    Returns:
    --------
    float | np.ndarray : Pair pressure
    '''
    pA = pressure(densityA, targetDensity, pressureMultiplier)
    pB = pressure(densityB, targetDensity, pressureMultiplier)
    return 0.5 * (pA + pB)


######################################################################
# -- Pressure Force Solver -- #
######################################################################

class PressureForceSolver:
    '''
    Derives per-particle pressure and viscosity contributions.

    Requires every density of the current step to be final.

    Parameters:
    -----------
    kernel : SphKernel
        Smoothing kernel (gradient used)
    pairSearch : PairSearch | None
        Pair enumeration (defaults to AllPairsSearch)
    '''

    def __init__(self, kernel: SphKernel, pairSearch: PairSearch | None = None) -> None:
        self._kernel = kernel
        self._pairSearch = AllPairsSearch() if pairSearch is None else pairSearch

    def computeTerms(
        self, particles: ParticleSystem, config: SimulationConfig
    ) -> tuple[np.ndarray, np.ndarray]:
        '''
        Accumulate the pressure and viscosity sums for every particle.

        Also stores the equation-of-state pressures on the particles.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle system with final densities
        config : SimulationConfig
            Step snapshot of the tunables

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] :
            (pressureTerm, viscosityTerm), each shape (N, 3)
        '''
        h = config.smoothingRadius
        mass = config.particleMass
        densities = particles.densities
        velocities = particles.velocities

        particles.pressures[:] = pressure(
            densities, config.targetDensity, config.pressureMultiplier,
        )

        # m / rho_j, zero where rho_j cannot be a denominator
        validJ = densities > const.densityEpsilon
        massOverRhoJ = np.where(validJ, mass / np.where(validJ, densities, 1.0), 0.0)

        etaSq = const.viscositySoftening * h * h

        pressureTerm = np.zeros_like(particles.positions)
        viscosityTerm = np.zeros_like(particles.positions)

        for block in self._pairSearch.blocks(particles.positions):
            rows = block.rows
            gradW = self._kernel.gradientBatch(block.drVecs, block.distances, h)

            # p_ij for every (i in block, j)
            pairPressure = sharedPressure(
                densities[rows, np.newaxis], densities[np.newaxis, :],
                config.targetDensity, config.pressureMultiplier,
            )
            coeff = pairPressure * massOverRhoJ[np.newaxis, :]
            pressureTerm[rows] = np.sum(coeff[..., np.newaxis] * gradW, axis=1)

            if config.viscosity != 0.0:
                # r . gradW = |r| * dW/dr <= 0 inside the support
                rDotGrad = np.sum(block.drVecs * gradW, axis=2)
                distSq = block.distances * block.distances
                viscCoeff = (
                    -config.viscosity * massOverRhoJ[np.newaxis, :] * rDotGrad
                    / (distSq + etaSq)
                )
                dv = velocities[np.newaxis, :, :] - velocities[rows, np.newaxis, :]
                viscosityTerm[rows] = np.sum(viscCoeff[..., np.newaxis] * dv, axis=1)

        return (pressureTerm, viscosityTerm)

    def apply(
        self, particles: ParticleSystem, config: SimulationConfig, dt: float
    ) -> None:
        '''
        Turn the pressure term into accelerations or velocities.

        In 'acceleration' mode the accelerations are overwritten and
        velocities are left to the integrator. In 'velocityOverride'
        mode velocities are overwritten and accelerations zeroed.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle system with final densities
        config : SimulationConfig
            Step snapshot of the tunables
        dt : float
            Step size
        '''
        pressureTerm, viscosityTerm = self.computeTerms(particles, config)

        densities = particles.densities
        validI = densities > const.densityEpsilon
        invRhoI = np.where(validI, 1.0 / np.where(validI, densities, 1.0), 0.0)
        perDensity = pressureTerm * invRhoI[:, np.newaxis]
        gravity = config.gravityVector

        if config.pressureMode == 'velocityOverride':
            particles.velocities[:] = perDensity * dt + gravity * dt
            particles.accelerations[:] = 0.0
        else:
            particles.accelerations[:] = perDensity + viscosityTerm + gravity
