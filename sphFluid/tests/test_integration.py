# -- Time Integration Tests -- #

'''
Tests for the semi-implicit Euler and leapfrog update formulas.
'''

import numpy as np
import pytest

from sphFluid.sph.particles import ParticleSystem
from sphFluid.sph.timeIntegration import Leapfrog, SemiImplicitEuler, createIntegrator


def _movingParticle() -> ParticleSystem:
    particles = ParticleSystem.fromPositions([[0.0, 0.0, 0.0]])
    particles.velocities[0] = [1.0, 0.0, -1.0]
    particles.accelerations[0] = [2.0, 0.0, 0.0]
    return particles


def testSemiImplicitEulerDriftsWithUpdatedVelocity():
    particles = _movingParticle()
    SemiImplicitEuler().integrate(particles, 0.1)

    assert np.allclose(particles.velocities[0], [1.2, 0.0, -1.0])
    assert np.allclose(particles.positions[0], [0.12, 0.0, -0.1])


def testLeapfrogUsesHalfKicks():
    particles = _movingParticle()
    Leapfrog().integrate(particles, 0.1)

    assert np.allclose(particles.velocities[0], [1.2, 0.0, -1.0])
    assert np.allclose(particles.positions[0], [0.11, 0.0, -0.1])


def testIntegratorsLeaveAccelerationUntouched():
    for integrator in (SemiImplicitEuler(), Leapfrog()):
        particles = _movingParticle()
        integrator.integrate(particles, 0.05)
        assert np.array_equal(particles.accelerations[0], [2.0, 0.0, 0.0])


def testCreateIntegrator():
    assert isinstance(createIntegrator('semiImplicitEuler'), SemiImplicitEuler)
    assert isinstance(createIntegrator('leapfrog'), Leapfrog)
    with pytest.raises(ValueError):
        createIntegrator('rk4')
