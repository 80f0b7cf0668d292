# -- SPH Particle Store -- #

'''
Structure-of-arrays particle storage.

Positions, velocities, accelerations, densities and pressures are
contiguous NumPy arrays sharing one index space. They are allocated
once and only ever written in place, so references handed to
renderers or tests stay valid for the whole run.
'''

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from sphFluid.sph.protocols import SimulationConfig


@dataclass
class ParticleSystem:
    '''
    SPH particle state.

    Vector arrays have shape (nParticles, 3), scalar arrays (nParticles,).

    Parameters:
    -----------
    positions : np.ndarray
        Particle positions, shape (N, 3)
    velocities : np.ndarray
        Particle velocities, shape (N, 3)
    accelerations : np.ndarray
        Per-step accelerations, shape (N, 3)
    densities : np.ndarray
        Particle densities, shape (N,)
    pressures : np.ndarray
        Equation-of-state pressures, shape (N,)
    dimension : int | None
        Grid side length for grid-seeded systems, None otherwise
    seedPositions : np.ndarray | None
        Positions restored by reset() when dimension is None
    '''

    positions: np.ndarray
    velocities: np.ndarray
    accelerations: np.ndarray
    densities: np.ndarray
    pressures: np.ndarray
    dimension: int | None = None
    seedPositions: np.ndarray | None = None

    @property
    def nParticles(self) -> int:
        '''Number of particles.'''
        return self.positions.shape[0]

    @classmethod
    def allocate(cls, dimension: int) -> ParticleSystem:
        '''
        Allocate storage for a dimension x dimension x dimension cube.

        Arrays are zero-filled; call reset() to place particles.

        Parameters:
        -----------
        dimension : int
            Particles per side

        Returns:
        --------
        ParticleSystem : Zeroed system with dimension^3 slots
        '''
        if dimension < 1:
            raise ValueError(f'Grid dimension must be at least 1, got {dimension}')

        n = dimension ** 3
        return cls(
            positions=np.zeros((n, 3)),
            velocities=np.zeros((n, 3)),
            accelerations=np.zeros((n, 3)),
            densities=np.zeros(n),
            pressures=np.zeros(n),
            dimension=dimension,
        )

    @classmethod
    def fromPositions(cls, positions: np.ndarray) -> ParticleSystem:
        '''
        Create a system at explicit positions, at rest.

        reset() on such a system restores these positions.

        Parameters:
        -----------
        positions : np.ndarray
            Initial positions, shape (N, 3)

        Returns:
        --------
        ParticleSystem : System with N particles
        '''
        seed = np.array(positions, dtype=float).reshape(-1, 3)
        n = seed.shape[0]
        return cls(
            positions=seed.copy(),
            velocities=np.zeros((n, 3)),
            accelerations=np.zeros((n, 3)),
            densities=np.zeros(n),
            pressures=np.zeros(n),
            seedPositions=seed,
        )

    def reset(self, config: SimulationConfig) -> None:
        '''
        Place particles on a jittered grid and zero all dynamic state.

        x and z run linearly over [-1, 1]; x receives a random offset
        jitter * u with u in [-1, 1], clipped back into [-1, 1]. y runs
        over [spawnFloor, spawnFloor + 2]. The jitter generator is
        re-seeded on every call, so equal configs give equal states.

        Parameters:
        -----------
        config : SimulationConfig
            Supplies spawnFloor, jitter and seed
        '''
        if self.dimension is None:
            self.positions[:] = self.seedPositions
        else:
            self.positions[:] = gridPositions(
                self.dimension, config.spawnFloor, config.jitter, config.seed,
            )

        self.velocities[:] = 0.0
        self.accelerations[:] = 0.0
        self.densities[:] = 0.0
        self.pressures[:] = 0.0

    ######################################################################
    # -- Diagnostics -- #
    ######################################################################

    def kineticEnergy(self, mass: float) -> float:
        '''
        Total kinetic energy, KE = (1/2) * m * sum |v_i|^2.

        Parameters:
        -----------
        mass : float
            Uniform particle mass

        Returns:
        --------
        float : Kinetic energy
        '''
        speedsSq = np.sum(self.velocities * self.velocities, axis=1)
        return float(0.5 * mass * np.sum(speedsSq))

    def potentialEnergy(self, mass: float, gravity: float, floor: float) -> float:
        '''
        Gravitational potential energy above the floor.

        PE = sum_i m * g * (y_i - floor)

        Parameters:
        -----------
        mass : float
            Uniform particle mass
        gravity : float
            Gravity magnitude
        floor : float
            Reference height (lower y bound of the domain)

        Returns:
        --------
        float : Potential energy
        '''
        heights = self.positions[:, 1] - floor
        return float(np.sum(mass * gravity * heights))

    def maxSpeed(self) -> float:
        '''Largest particle speed.'''
        if self.nParticles == 0:
            return 0.0
        return float(np.max(np.linalg.norm(self.velocities, axis=1)))

    def densityRange(self) -> tuple[float, float]:
        '''(min, max) of the current densities.'''
        if self.nParticles == 0:
            return (0.0, 0.0)
        return (float(np.min(self.densities)), float(np.max(self.densities)))

    def maxDensityError(self, referenceDensity: float) -> float:
        '''
        Largest relative density deviation |rho_i - rho_0| / rho_0.

        Returns 0 for a non-positive reference density.
        '''
        if self.nParticles == 0 or referenceDensity <= 0.0:
            return 0.0
        errors = np.abs(self.densities - referenceDensity) / referenceDensity
        return float(np.max(errors))

    def nonFiniteCount(self) -> int:
        '''Particles with any NaN/Inf position or velocity component.'''
        finite = np.isfinite(self.positions).all(axis=1) & np.isfinite(self.velocities).all(axis=1)
        return int(np.count_nonzero(~finite))


######################################################################
# -- Grid Placement -- #
######################################################################

def gridPositions(
    dimension: int,
    spawnFloor: float,
    jitter: float,
    seed: int,
) -> np.ndarray:
    '''
    Positions of a jittered dimension^3 grid.

    Parameters:
    -----------
    dimension : int
        Particles per side
    spawnFloor : float
        Lowest y of the block
    jitter : float
        Amplitude of the random x offset
    seed : int
        Seed for numpy.random.default_rng

    Returns:
    --------
    np.ndarray : Positions, shape (dimension^3, 3)
    '''
    axis = np.linspace(-1.0, 1.0, dimension)
    xx, yy, zz = np.meshgrid(axis, axis, axis, indexing='ij')

    rng = np.random.default_rng(seed)
    offsets = rng.uniform(-1.0, 1.0, size=xx.size)

    x = np.clip(xx.ravel() + jitter * offsets, -1.0, 1.0)
    # Shift [-1, 1] so the block starts at the floor
    y = yy.ravel() + 1.0 + spawnFloor
    z = zz.ravel()

    return np.column_stack([x, y, z])
