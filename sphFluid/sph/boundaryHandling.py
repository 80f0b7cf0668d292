# -- SPH Boundary Conditions -- #

'''
Axis-aligned box containment with damped bounces.

The box is centred at the origin with a per-axis half-extent H. Each
axis is handled on its own: a particle past -H or +H is put back
exactly on the wall and that velocity component is multiplied by the
damping factor (negative, so the component reverses and shrinks). A
corner hit clamps several axes in the same call.
'''

from __future__ import annotations

import numpy as np

from sphFluid.sph.particles import ParticleSystem


class BoxBoundary:
    '''
    Clamp particles into [-halfExtent, +halfExtent] on every axis.

    Parameters:
    -----------
    halfExtent : np.ndarray
        Per-axis half-extent, shape (3,)
    damping : float
        Velocity multiplier on contact (e.g. -0.5)
    '''

    def __init__(self, halfExtent: np.ndarray, damping: float) -> None:
        self._halfExtent = np.asarray(halfExtent, dtype=float).reshape(3)
        self._damping = damping

    @property
    def halfExtent(self) -> np.ndarray:
        '''Per-axis half-extent.'''
        return self._halfExtent

    @property
    def damping(self) -> float:
        '''Velocity multiplier on contact.'''
        return self._damping

    def enforceBoundary(self, particles: ParticleSystem) -> int:
        '''
        Clamp positions and damp velocities of escaping particles.

        Parameters:
        -----------
        particles : ParticleSystem
            The particle system to contain

        Returns:
        --------
        int : Number of (particle, axis) wall contacts this call
        '''
        positions = particles.positions
        velocities = particles.velocities
        contacts = 0

        for d in range(3):
            lower = -self._halfExtent[d]
            upper = self._halfExtent[d]

            belowMin = positions[:, d] < lower
            positions[belowMin, d] = lower
            velocities[belowMin, d] *= self._damping

            aboveMax = positions[:, d] > upper
            positions[aboveMax, d] = upper
            velocities[aboveMax, d] *= self._damping

            contacts += int(np.count_nonzero(belowMin) + np.count_nonzero(aboveMax))

        return contacts
