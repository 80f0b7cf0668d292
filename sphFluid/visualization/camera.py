# -- Orbit Camera -- #

'''
View-projection matrix for an orbit camera looking at the origin.

The camera sits `distance` along +z, is rotated by the incline about
x and by the azimuth about y, and the view is the inverse of that
placement. Matrices are row-major 4x4 NumPy arrays acting on column
vectors.
'''

from __future__ import annotations

import math

import numpy as np


FIELD_OF_VIEW = 0.8
ASPECT_RATIO = 1.0
NEAR_PLANE = 0.01
FAR_PLANE = 100.0


def rotationX(theta: float) -> np.ndarray:
    '''Rotation about the x axis.'''
    s, c = math.sin(theta), math.cos(theta)
    return np.array([
        [1.0, 0.0, 0.0, 0.0],
        [0.0, c, -s, 0.0],
        [0.0, s, c, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])


def rotationY(theta: float) -> np.ndarray:
    '''Rotation about the y axis.'''
    s, c = math.sin(theta), math.cos(theta)
    return np.array([
        [c, 0.0, s, 0.0],
        [0.0, 1.0, 0.0, 0.0],
        [-s, 0.0, c, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])


def perspective(
    fov: float = FIELD_OF_VIEW,
    aspect: float = ASPECT_RATIO,
    near: float = NEAR_PLANE,
    far: float = FAR_PLANE,
) -> np.ndarray:
    '''
    OpenGL-style perspective projection.

    Parameters:
    -----------
    fov : float
        Vertical field of view [rad]
    aspect : float
        Width / height
    near, far : float
        Clip plane distances

    Returns:
    --------
    np.ndarray : Projection matrix, shape (4, 4)
    '''
    tanHalfFov = math.tan(0.5 * fov)
    projection = np.zeros((4, 4))
    projection[0, 0] = 1.0 / (aspect * tanHalfFov)
    projection[1, 1] = 1.0 / tanHalfFov
    projection[2, 2] = -(far + near) / (far - near)
    projection[2, 3] = -2.0 * far * near / (far - near)
    projection[3, 2] = -1.0
    return projection


def makeViewProjection(azimuth: float, incline: float, distance: float = 10.0) -> np.ndarray:
    '''
    Combined view-projection matrix for the orbit camera.

    Parameters:
    -----------
    azimuth : float
        Rotation about the vertical axis [rad]
    incline : float
        Rotation about the horizontal axis [rad]
    distance : float
        Distance from the origin

    Returns:
    --------
    np.ndarray : projection @ view, shape (4, 4)
    '''
    translation = np.identity(4)
    translation[2, 3] = distance

    cameraToWorld = rotationY(-azimuth) @ rotationX(-incline) @ translation
    view = np.linalg.inv(cameraToWorld)

    return perspective() @ view
