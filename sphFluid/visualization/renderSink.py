# -- Render Sink Adapter -- #

'''
Hands each frame to a host draw function.

For every particle the sink receives (x, y, z, normalized) where
normalized maps the frame's density range onto [0, 1]. A flat density
field (max == min) maps every particle to 0.
'''

from __future__ import annotations

from typing import Callable

import numpy as np

from sphFluid.sph.particles import ParticleSystem


DrawFunction = Callable[[float, float, float, float], None]

# Density spans at or below this are treated as flat
FLAT_RANGE_EPSILON = 1e-12


def normalizeDensities(densities: np.ndarray) -> np.ndarray:
    '''
    Map densities onto [0, 1] using the frame's own min and max.

    Parameters:
    -----------
    densities : np.ndarray
        Particle densities, shape (N,)

    Returns:
    --------
    np.ndarray : Normalized densities, zeros for a flat field
    '''
    densities = np.asarray(densities, dtype=float)
    if densities.size == 0:
        return np.zeros(0)

    minDensity = float(np.min(densities))
    span = float(np.max(densities)) - minDensity
    if not np.isfinite(span) or span <= FLAT_RANGE_EPSILON:
        return np.zeros_like(densities)

    return (densities - minDensity) / span


def pushFrame(particles: ParticleSystem, draw: DrawFunction) -> np.ndarray:
    '''
    Call draw(x, y, z, normalized) once per particle.

    Parameters:
    -----------
    particles : ParticleSystem
        Particle system after a step
    draw : DrawFunction
        Host-provided per-particle draw function

    Returns:
    --------
    np.ndarray : The normalized densities that were pushed
    '''
    normalized = normalizeDensities(particles.densities)
    for (x, y, z), value in zip(particles.positions, normalized):
        draw(float(x), float(y), float(z), float(value))
    return normalized


class FrameRecorder:
    '''
    Draw function that collects pushed particles into frames.

    Usage:
        recorder = FrameRecorder()
        pushFrame(simulation.particles, recorder)
        recorder.endFrame()

    Each recorded frame is an (N, 4) array of x, y, z, normalized.
    '''

    def __init__(self) -> None:
        self._current: list[tuple[float, float, float, float]] = []
        self._frames: list[np.ndarray] = []

    def __call__(self, x: float, y: float, z: float, value: float) -> None:
        self._current.append((x, y, z, value))

    def endFrame(self) -> np.ndarray:
        '''Close the frame being drawn and return it.'''
        frame = np.array(self._current, dtype=float).reshape(-1, 4)
        self._frames.append(frame)
        self._current = []
        return frame

    @property
    def frames(self) -> list[np.ndarray]:
        '''Completed frames, oldest first.'''
        return self._frames

    @property
    def nFrames(self) -> int:
        '''Number of completed frames.'''
        return len(self._frames)
