# -- Simulation Orchestrator Tests -- #

'''
End-to-end tests of the step pipeline: density, pressure, integration
and containment.
'''

import json
import logging

import numpy as np
import pytest

from sphFluid.sph.kernels import QuarticKernel
from sphFluid.sph.particles import ParticleSystem
from sphFluid.sph.protocols import SimulationConfig, SimulationState
from sphFluid.sph.simulation import SphSimulation


def testCreateResetsAndComputesDensities():
    simulation = SphSimulation.create(SimulationConfig.small())
    particles = simulation.particles

    assert particles.nParticles == 125
    assert simulation.stepCount == 0
    assert simulation.time == 0.0
    assert np.all(particles.densities > 0.0)
    lo, hi = simulation.densityRange()
    assert 0.0 < lo <= hi


def testPairUnderTargetDensityRepels():
    '''Two particles h apart, below the target density, move apart when k > 0.'''
    config = SimulationConfig(gravity=0.0, viscosity=0.0, targetDensity=1000.0,
                              pressureMultiplier=10.0)
    h = config.smoothingRadius
    particles = ParticleSystem.fromPositions([[-0.5 * h, 0.0, 0.0], [0.5 * h, 0.0, 0.0]])
    simulation = SphSimulation.create(config, particles)

    simulation.step()

    separation = particles.positions[1, 0] - particles.positions[0, 0]
    assert separation > h
    assert particles.velocities[0, 0] < 0.0 < particles.velocities[1, 0]


def testPairAttractsWithNegativeMultiplier():
    config = SimulationConfig(gravity=0.0, viscosity=0.0, targetDensity=1000.0,
                              pressureMultiplier=-10.0)
    h = config.smoothingRadius
    particles = ParticleSystem.fromPositions([[-0.5 * h, 0.0, 0.0], [0.5 * h, 0.0, 0.0]])
    simulation = SphSimulation.create(config, particles)

    simulation.step()

    assert particles.positions[1, 0] - particles.positions[0, 0] < h


def testFallingParticleBouncesOffFloor():
    '''v_y after a floor hit is (v_y - g * dt) * damping.'''
    config = SimulationConfig(gravity=1.0, boundaryDamping=-0.5)
    particles = ParticleSystem.fromPositions([[0.0, -2.0 + 1e-6, 0.0]])
    simulation = SphSimulation.create(config, particles)

    dt = 0.01
    simulation.step(dt)

    assert particles.positions[0, 1] == -2.0
    assert particles.velocities[0, 1] == pytest.approx((0.0 - 1.0 * dt) * -0.5)


def testLeapfrogFallingParticleBouncesOffFloor():
    '''Leapfrog ends the step at v_y - g * dt, then the floor damps it.'''
    config = SimulationConfig(gravity=1.0, boundaryDamping=-0.5, integrator='leapfrog')
    particles = ParticleSystem.fromPositions([[0.0, -2.0 + 1e-6, 0.0]])
    simulation = SphSimulation.create(config, particles)

    dt = 0.01
    simulation.step(dt)

    assert particles.positions[0, 1] == -2.0
    assert particles.velocities[0, 1] == pytest.approx((0.0 - 1.0 * dt) * -0.5)


@pytest.mark.parametrize('pressureMultiplier, grows', [(10.0, True), (-10.0, False)])
def testVelocityOverridePairFollowsMultiplierSign(pressureMultiplier, grows):
    '''In velocityOverride mode the pair separation follows the sign of k.'''
    config = SimulationConfig(gravity=0.0, viscosity=0.0, targetDensity=1000.0,
                              pressureMultiplier=pressureMultiplier,
                              pressureMode='velocityOverride')
    h = config.smoothingRadius
    particles = ParticleSystem.fromPositions([[-0.5 * h, 0.0, 0.0], [0.5 * h, 0.0, 0.0]])
    simulation = SphSimulation.create(config, particles)

    simulation.step()

    separation = particles.positions[1, 0] - particles.positions[0, 0]
    assert (separation > h) == grows
    assert separation != pytest.approx(h)
    assert np.all(particles.accelerations == 0.0)


def testStandardRunStaysFluid():
    '''The default cube settles without collapsing into point clusters.'''
    config = SimulationConfig.standard()
    simulation = SphSimulation.create(config)
    h = config.smoothingRadius

    for i in range(300):
        state = simulation.step()

        if (i + 1) % 50 == 0:
            positions = simulation.particles.positions
            dr = positions[:, np.newaxis, :] - positions[np.newaxis, :, :]
            distances = np.sqrt(np.sum(dr * dr, axis=2))
            np.fill_diagonal(distances, np.inf)

            assert state.maxDensity < 4.0 * config.targetDensity
            assert distances.min() > 0.1 * h
            assert state.nonFiniteCount == 0


def testParticlesStayInsideBox():
    config = SimulationConfig.small()
    simulation = SphSimulation.create(config)
    for _ in range(20):
        state = simulation.step()

    positions = simulation.particles.positions
    assert np.all(positions <= config.domainMax)
    assert np.all(positions >= config.domainMin)
    assert state.nonFiniteCount == 0


def testStepReturnsState():
    simulation = SphSimulation.create(SimulationConfig.small())
    state = simulation.step(0.005)

    assert isinstance(state, SimulationState)
    assert state.step == 1
    assert state.dt == pytest.approx(0.005)
    assert state.time == pytest.approx(0.005)
    assert state.totalEnergy == pytest.approx(state.kineticEnergy + state.potentialEnergy)


def testTimeScaleMultipliesStep():
    config = SimulationConfig.small()
    config.timeScale = 0.5
    simulation = SphSimulation.create(config)
    state = simulation.step(0.01)

    assert state.dt == pytest.approx(0.005)


def testLeapfrogRunStaysFinite():
    config = SimulationConfig(gridDimension=4, integrator='leapfrog')
    simulation = SphSimulation.create(config)
    for _ in range(10):
        state = simulation.step()
    assert state.nonFiniteCount == 0


def testResetRestoresInitialState():
    simulation = SphSimulation.create(SimulationConfig.small())
    initial = simulation.particles.positions.copy()
    positionsArray = simulation.particles.positions

    for _ in range(5):
        simulation.step()
    simulation.reset()

    assert simulation.particles.positions is positionsArray
    assert np.array_equal(simulation.particles.positions, initial)
    assert np.all(simulation.particles.velocities == 0.0)
    assert simulation.stepCount == 0


def testConfigEditsApplyFromNextStep():
    '''Edits between steps are picked up; the snapshot is independent.'''
    config = SimulationConfig(gravity=0.0, viscosity=0.0)
    particles = ParticleSystem.fromPositions([[0.0, 0.0, 0.0]])
    simulation = SphSimulation.create(config, particles)

    simulation.step(0.01)
    assert particles.velocities[0, 1] == 0.0

    simulation.config.gravity = 2.0
    simulation.step(0.01)
    assert particles.velocities[0, 1] == pytest.approx(-0.02)

    snapshot = config.snapshot()
    snapshot.halfExtent[0] = 10.0
    assert config.halfExtent[0] == 2.0


def testLegacyNormalizationChangesDensityScale():
    config = SimulationConfig(legacyNormalization=True)
    particles = ParticleSystem.fromPositions([[0.0, 0.0, 0.0]])
    SphSimulation.create(config, particles)

    expected = config.particleMass * QuarticKernel(legacyNormalization=True).evaluate(0.0, config.smoothingRadius)
    assert particles.densities[0] == pytest.approx(expected)


def testNonFiniteValuesAreReported(caplog):
    config = SimulationConfig(viscosity=0.0)
    particles = ParticleSystem.fromPositions([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
    simulation = SphSimulation.create(config, particles)
    particles.velocities[1, 0] = np.nan

    with caplog.at_level(logging.WARNING, logger='sphFluid.sph.simulation'):
        state = simulation.step()

    assert state.nonFiniteCount == 1
    assert 'non-finite' in caplog.text


def testUnknownNamesAreRejected():
    with pytest.raises(ValueError):
        SimulationConfig(integrator='verlet')
    with pytest.raises(ValueError):
        SimulationConfig(pressureMode='implicit')


def testConfigFromJson(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text(json.dumps({
        'simulation': {'gridDimension': 3, 'timeStep': 0.002, 'integrator': 'leapfrog'},
        'sph': {'smoothingRadius': 0.25, 'pressureMode': 'velocityOverride'},
        'fluid': {'targetDensity': 50.0, 'gravity': 9.81},
        'domain': {'halfExtent': [1.0, 2.0, 3.0], 'boundaryDamping': -0.8},
    }))

    config = SimulationConfig.fromJson(str(path))

    assert config.gridDimension == 3
    assert config.particleCount == 27
    assert config.timeStep == 0.002
    assert config.integrator == 'leapfrog'
    assert config.smoothingRadius == 0.25
    assert config.supportRadius == 0.5
    assert config.pressureMode == 'velocityOverride'
    assert config.targetDensity == 50.0
    assert np.array_equal(config.halfExtent, [1.0, 2.0, 3.0])
    assert config.boundaryDamping == -0.8
    # Unspecified keys fall back to defaults
    assert config.particleMass == SimulationConfig().particleMass


def testConfigFromInvalidJson(tmp_path):
    path = tmp_path / 'broken.json'
    path.write_text('{not json')
    with pytest.raises(ValueError):
        SimulationConfig.fromJson(str(path))
