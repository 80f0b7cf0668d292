# -- SPH Smoothing Kernel -- #

'''
Quartic (Wendland-type) smoothing kernel and its gradient.

With q = r / h, t0 = 1 - q/2 and t1 = 2q + 1:

    W~(q)     = t0^4 * t1                 for q < 2, else 0
    dW~/dq    = 2 * t0^3 * (t0 - t1)      for q < 2, else 0

The dimensionless shape is scaled by sigma(h) = 21 / (16 * pi * h^3)
so that summed weights carry density units in 3D. The kernel support
is 2h.

Legacy normalization reproduces an older revision which divided by
the kernel volume (7 / 4pi) / h * h. That expression does not depend
on h at all; it is only kept for comparing against historical output.

References:
-----------
Wendland (1995) -- Piecewise polynomial, positive definite and
    compactly supported radial functions of minimal degree
Dehnen & Aly (2012) -- Improving convergence in SPH simulations
    without pairing instability
'''

from __future__ import annotations

import math
from typing import Protocol

import numpy as np

from sphFluid import constants as const


# Gradient direction used when two particles coincide
FALLBACK_DIRECTION = np.array([1.0, 0.0, 0.0])


######################################################################
# -- Kernel Protocol -- #
######################################################################

class SphKernel(Protocol):
    '''Protocol for SPH smoothing kernel functions.'''

    def evaluate(self, r: float, h: float) -> float:
        '''Evaluate W(r, h).'''
        ...

    def gradientMagnitude(self, r: float, h: float) -> float:
        '''Evaluate dW/dr.'''
        ...

    def evaluateBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        '''Evaluate W for an array of distances.'''
        ...

    def gradientBatch(
        self, drVecs: np.ndarray, distances: np.ndarray, h: float
    ) -> np.ndarray:
        '''Evaluate gradient vectors for an array of separations.'''
        ...


######################################################################
# -- Quartic Kernel -- #
######################################################################

class QuarticKernel:
    '''
    Quartic smoothing kernel with compact support at q = 2.

    Parameters:
    -----------
    legacyNormalization : bool
        If True, divide by the historical h-independent kernel volume
        instead of applying sigma(h) = 21 / (16 * pi * h^3)
    '''

    def __init__(self, legacyNormalization: bool = False) -> None:
        self._legacyNormalization = legacyNormalization

    @property
    def legacyNormalization(self) -> bool:
        '''Whether the historical normalization is in use.'''
        return self._legacyNormalization

    def normalization(self, h: float) -> float:
        '''
        Scale factor applied to the dimensionless kernel shape.

        Parameters:
        -----------
        h : float
            Smoothing radius

        Returns:
        --------
        float : sigma(h), or 0 for a non-positive radius
        '''
        if h <= 0.0:
            return 0.0

        if self._legacyNormalization:
            # Operator precedence makes this evaluate to the constant itself
            kernelVolume = const.legacyKernelConstant / h * h
            return 1.0 / kernelVolume

        return 21.0 / (16.0 * math.pi * h * h * h)

    def evaluate(self, r: float, h: float) -> float:
        '''
        Evaluate W(r, h).

        Parameters:
        -----------
        r : float
            Distance between particles
        h : float
            Smoothing radius

        Returns:
        --------
        float : Kernel value (0 beyond 2h)
        '''
        if h <= 0.0:
            return 0.0

        q = r / h
        if q >= 2.0:
            return 0.0

        t0 = 1.0 - 0.5 * q
        t1 = 2.0 * q + 1.0
        return self.normalization(h) * t0 ** 4 * t1

    def gradientMagnitude(self, r: float, h: float) -> float:
        '''
        Compute dW/dr, the scalar part of the kernel gradient.

        Non-positive inside the support; zero at r = 0 and for r >= 2h.

        Parameters:
        -----------
        r : float
            Distance between particles
        h : float
            Smoothing radius

        Returns:
        --------
        float : dW/dr
        '''
        if h <= 0.0:
            return 0.0

        q = r / h
        if q >= 2.0:
            return 0.0

        t0 = 1.0 - 0.5 * q
        t1 = 2.0 * q + 1.0
        dwdq = 2.0 * t0 ** 3 * (t0 - t1)
        return self.normalization(h) * dwdq / h

    def gradient(self, rVec: np.ndarray, r: float, h: float) -> np.ndarray:
        '''
        Evaluate the kernel gradient vector (dW/dr) * rVec / |rVec|.

        Parameters:
        -----------
        rVec : np.ndarray
            Separation vector, shape (3,)
        r : float
            Distance |rVec|
        h : float
            Smoothing radius

        Returns:
        --------
        np.ndarray : Gradient vector, shape (3,)
        '''
        if r < const.separationEpsilon:
            direction = FALLBACK_DIRECTION.copy()
        else:
            direction = rVec / r

        return self.gradientMagnitude(r, h) * direction

    ######################################################################
    # -- Vectorized (Batch) Operations -- #
    ######################################################################

    def evaluateBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        '''
        Evaluate W for an array of distances of any shape.

        Parameters:
        -----------
        distances : np.ndarray
            Distances, any shape
        h : float
            Smoothing radius

        Returns:
        --------
        np.ndarray : Kernel values, same shape as distances
        '''
        distances = np.asarray(distances, dtype=float)
        result = np.zeros_like(distances)
        if h <= 0.0:
            return result

        q = distances / h
        active = q < 2.0
        qActive = q[active]
        t0 = 1.0 - 0.5 * qActive
        t1 = 2.0 * qActive + 1.0
        result[active] = self.normalization(h) * t0 ** 4 * t1

        return result

    def gradientMagnitudeBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        '''
        Compute dW/dr for an array of distances of any shape.

        Parameters:
        -----------
        distances : np.ndarray
            Distances, any shape
        h : float
            Smoothing radius

        Returns:
        --------
        np.ndarray : dW/dr values, same shape as distances
        '''
        distances = np.asarray(distances, dtype=float)
        result = np.zeros_like(distances)
        if h <= 0.0:
            return result

        q = distances / h
        active = q < 2.0
        qActive = q[active]
        t0 = 1.0 - 0.5 * qActive
        t1 = 2.0 * qActive + 1.0
        result[active] = self.normalization(h) * 2.0 * t0 ** 3 * (t0 - t1) / h

        return result

    def gradientBatch(
        self, drVecs: np.ndarray, distances: np.ndarray, h: float
    ) -> np.ndarray:
        '''
        Evaluate kernel gradient vectors for many separations.

        Coincident pairs take FALLBACK_DIRECTION as their direction.

        Parameters:
        -----------
        drVecs : np.ndarray
            Separation vectors, shape (..., 3)
        distances : np.ndarray
            Their lengths, shape (...)
        h : float
            Smoothing radius

        Returns:
        --------
        np.ndarray : Gradient vectors, shape (..., 3)
        '''
        dwdr = self.gradientMagnitudeBatch(distances, h)

        coincident = distances < const.separationEpsilon
        safeDistances = np.where(coincident, 1.0, distances)
        directions = drVecs / safeDistances[..., np.newaxis]
        directions[coincident] = FALLBACK_DIRECTION

        return dwdr[..., np.newaxis] * directions
