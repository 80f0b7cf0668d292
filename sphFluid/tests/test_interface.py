# -- Controller, Render Sink and Plot Tests -- #

'''
Tests for key handling, live parameters, the render sink, the orbit
camera, the Plotly figures, and the CLI runner.
'''

import math

import numpy as np
import plotly.graph_objects as go
import pytest

from sphFluid.interface.controller import KeyEvent, SimulationController
from sphFluid.interface.parameters import ParameterSurface, PARAMETERS
from sphFluid.runner import SphRunner, buildParser
from sphFluid.sph.particles import ParticleSystem
from sphFluid.sph.protocols import SimulationConfig, SimulationState
from sphFluid.sph.simulation import SphSimulation
from sphFluid.visualization.camera import makeViewProjection
from sphFluid.visualization.particlePlots import plotDiagnostics, plotFrameAnimation, plotParticleFrame
from sphFluid.visualization.renderSink import FrameRecorder, normalizeDensities, pushFrame


@pytest.fixture
def controller():
    simulation = SphSimulation.create(SimulationConfig(gridDimension=3))
    return SimulationController(simulation)


######################################################################
# -- Key Handling -- #
######################################################################

def testOnlyKeyDownIsHandled(controller):
    assert not controller.handleKey(KeyEvent('up', ' '))
    assert not controller.handleKey(KeyEvent('repeat', ' '))
    assert not controller.handleKey(KeyEvent('down', 'x'))
    assert controller.pendingCommands == []

    assert controller.handleKey(KeyEvent('down', ' '))
    assert controller.pendingCommands == ['toggle']


def testCharacterCodesAndCase():
    assert KeyEvent('down', ord('S')).character == 's'
    assert KeyEvent('down', 'R').character == 'r'
    assert KeyEvent('down', 32).character == ' '


def testToggleStopsStepping(controller):
    controller.handleKey(KeyEvent('down', ' '))
    state = controller.tick()

    assert not controller.enabled
    assert state is None
    assert controller.simulation.stepCount == 0


def testSingleStepWhileDisabled(controller):
    controller.enabled = False
    controller.handleKey(KeyEvent('down', 's'))

    state = controller.tick()
    assert state is not None
    assert controller.simulation.stepCount == 1
    assert not controller.enabled

    assert controller.tick() is None
    assert controller.simulation.stepCount == 1


def testResetKey(controller):
    controller.tick()
    controller.tick()
    assert controller.simulation.stepCount == 2

    controller.enabled = False
    controller.handleKey(KeyEvent('down', ord('r')))
    controller.tick()

    assert controller.simulation.stepCount == 0
    assert controller.pendingCommands == []


def testTickPushesFrameToDraw(controller):
    recorder = FrameRecorder()
    controller.draw = recorder
    controller.tick()
    controller.tick()

    assert recorder.nFrames == 2
    assert recorder.frames[0].shape == (27, 4)


class _CountingSolver:
    '''Minimal SphSolver: counts calls, holds two static particles.'''

    def __init__(self):
        self.config = SimulationConfig(gridDimension=2)
        self.resets = 0
        self.steps = 0
        self._particles = ParticleSystem.fromPositions([[0.0, 0.0, 0.0], [0.5, 0.0, 0.0]])

    def reset(self):
        self.resets += 1

    def step(self, dt=None):
        self.steps += 1
        return self.currentState

    @property
    def currentState(self):
        return SimulationState(time=0.0, step=self.steps, dt=0.0, kineticEnergy=0.0,
                               potentialEnergy=0.0, maxVelocity=0.0, minDensity=0.0,
                               maxDensity=0.0, maxDensityError=0.0)

    @property
    def particles(self):
        return self._particles


def testControllerDrivesAnySolver():
    '''The controller and parameter surface only rely on the SphSolver protocol.'''
    solver = _CountingSolver()
    recorder = FrameRecorder()
    controller = SimulationController(solver, draw=recorder)

    controller.handleKey(KeyEvent('down', 'r'))
    state = controller.tick()
    ParameterSurface(controller).set('gravity', 4.0)

    assert solver.resets == 1
    assert state.step == 1
    assert recorder.nFrames == 1
    assert solver.config.gravity == 4.0


######################################################################
# -- Parameter Surface -- #
######################################################################

def testParameterSurfaceWritesConfig(controller):
    surface = ParameterSurface(controller)

    surface.set('gravity', 3)
    surface.set('pressureMultiplier', -5.0)
    assert controller.simulation.config.gravity == 3.0
    assert surface.get('pressureMultiplier') == -5.0

    surface.set('enabled', 0)
    assert controller.enabled is False
    assert surface.values()['enabled'] is False


def testParameterSurfaceNames(controller):
    surface = ParameterSurface(controller)
    assert set(surface.names()) == set(PARAMETERS)
    assert 'smoothingRadius' in surface.names()
    assert surface.spec('viscosity').minimum == 0.0

    with pytest.raises(KeyError):
        surface.get('colour')
    with pytest.raises(KeyError):
        surface.set('colour', 1.0)


######################################################################
# -- Render Sink -- #
######################################################################

def testNormalizeDensities():
    assert np.allclose(normalizeDensities(np.array([10.0, 15.0, 20.0])), [0.0, 0.5, 1.0])


def testFlatDensityFieldNormalizesToZero():
    assert np.all(normalizeDensities(np.full(5, 42.0)) == 0.0)
    assert normalizeDensities(np.array([])).size == 0


def testPushFrameCallsDrawPerParticle(controller):
    calls = []
    normalized = pushFrame(controller.simulation.particles, lambda x, y, z, v: calls.append((x, y, z, v)))

    assert len(calls) == 27
    assert all(0.0 <= v <= 1.0 for *_, v in calls)
    assert calls[0][:3] == tuple(controller.simulation.particles.positions[0])
    assert normalized.shape == (27,)


######################################################################
# -- Camera -- #
######################################################################

def testOriginDepthEqualsCameraDistance():
    '''The origin projects to the screen centre with w = distance.'''
    for azimuth, incline in ((0.0, 0.0), (0.7, 0.3), (math.pi, -0.4)):
        clip = makeViewProjection(azimuth, incline, 10.0) @ np.array([0.0, 0.0, 0.0, 1.0])
        assert clip[3] == pytest.approx(10.0)
        assert clip[0] == pytest.approx(0.0, abs=1e-12)
        assert clip[1] == pytest.approx(0.0, abs=1e-12)


######################################################################
# -- Plots and Runner -- #
######################################################################

def testParticleFigures():
    config = SimulationConfig(gridDimension=3)
    frame = np.zeros((27, 4))

    single = plotParticleFrame(frame, config)
    assert isinstance(single, go.Figure)
    assert len(single.data) == 1

    animation = plotFrameAnimation([frame, frame, frame], config)
    assert len(animation.frames) == 3

    with pytest.raises(ValueError):
        plotFrameAnimation([], config)


def testDiagnosticsFigure(controller):
    states = [controller.tick() for _ in range(3)]
    fig = plotDiagnostics(states)
    assert len(fig.data) == 5


def testParserDefaults():
    args = buildParser().parse_args([])
    assert args.preset == 'standard'
    assert args.steps == 200
    assert args.integrator is None

    args = buildParser().parse_args(['--preset', 'small', '--integrator', 'leapfrog',
                                     '--pressure-mode', 'velocityOverride'])
    assert args.preset == 'small'
    assert args.pressure_mode == 'velocityOverride'


def testRunnerWritesHtml(tmp_path):
    config = SimulationConfig(gridDimension=3)
    htmlPath = tmp_path / 'out' / 'run.html'

    summary = SphRunner().run(config, nSteps=4, frameInterval=2, htmlPath=str(htmlPath))

    assert summary['finalState'].step == 4
    # Initial frame plus steps 2 and 4
    assert summary['nFrames'] == 3
    assert htmlPath.exists()
    assert (tmp_path / 'out' / 'run_diagnostics.html').exists()
