# -- SPH Fluid Simulation Runner -- #

'''
Command-line entry point for running the SPH fluid core.

Builds a configuration from a preset or JSON file, runs a fixed number
of steps through the SimulationController, prints progress, and
optionally writes a Plotly animation of the recorded frames.

Usage:
    python -m sphFluid                                 # Standard 8x8x8 cube
    python -m sphFluid --preset small --steps 100
    python -m sphFluid --config configs/cube.json --html output/cube.html
    python -m sphFluid --integrator leapfrog --pressure-mode velocityOverride
'''

from __future__ import annotations

import argparse
import logging
import os
import time as timeModule

from sphFluid.loggingConfig import setupLogging
from sphFluid.sph.protocols import SimulationConfig, SimulationState, INTEGRATORS, PRESSURE_MODES
from sphFluid.sph.simulation import SphSimulation
from sphFluid.interface.controller import SimulationController
from sphFluid.visualization.renderSink import FrameRecorder, pushFrame
from sphFluid.visualization.particlePlots import plotFrameAnimation, plotDiagnostics


#--------------------------------------------------------------------#
# -- CLI Argument Parser -- #
#--------------------------------------------------------------------#

def buildParser() -> argparse.ArgumentParser:
    '''Build the CLI argument parser.'''
    parser = argparse.ArgumentParser(
        description='sphFluid -- brute-force SPH fluid simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--config', type=str, default=None,
        help='Path to JSON configuration file',
    )
    parser.add_argument(
        '--preset', type=str, default='standard',
        choices=['small', 'standard'],
        help='Configuration preset (default: standard)',
    )
    parser.add_argument(
        '--steps', type=int, default=200,
        help='Number of steps to run (default: 200)',
    )
    parser.add_argument(
        '--dt', type=float, default=None,
        help='Step size (default: config timeStep)',
    )
    parser.add_argument(
        '--integrator', type=str, default=None, choices=list(INTEGRATORS),
        help='Override the time integration scheme',
    )
    parser.add_argument(
        '--pressure-mode', type=str, default=None, choices=list(PRESSURE_MODES),
        help='Override how the pressure term is applied',
    )
    parser.add_argument(
        '--frame-interval', type=int, default=5,
        help='Record every Nth step for the animation (default: 5)',
    )
    parser.add_argument(
        '--html', type=str, default=None,
        help='Write a Plotly animation of the run to this HTML file',
    )
    parser.add_argument(
        '--verbose', action='store_true',
        help='Enable debug logging',
    )

    return parser


#--------------------------------------------------------------------#
# -- Runner Class -- #
#--------------------------------------------------------------------#

class SphRunner:
    '''
    Runs an SPH simulation and keeps its history.

    Handles the pipeline: setup, the stepping loop with progress
    reporting, frame recording, and optional Plotly output.
    '''

    def __init__(self) -> None:
        self._states: list[SimulationState] = []
        self._recorder: FrameRecorder = FrameRecorder()

    @property
    def states(self) -> list[SimulationState]:
        '''Per-step diagnostics of the last run.'''
        return self._states

    @property
    def recorder(self) -> FrameRecorder:
        '''Frames recorded during the last run.'''
        return self._recorder

    def run(
        self,
        config: SimulationConfig,
        nSteps: int,
        dt: float | None = None,
        frameInterval: int = 5,
        htmlPath: str | None = None,
    ) -> dict:
        '''
        Run a simulation for a fixed number of steps.

        Parameters:
        -----------
        config : SimulationConfig
            Simulation configuration
        nSteps : int
            Number of steps
        dt : float | None
            Step size (defaults to config.timeStep)
        frameInterval : int
            Record a frame every this many steps
        htmlPath : str | None
            If given, write a Plotly animation + diagnostics here

        Returns:
        --------
        dict : Run summary
        '''
        print()
        print('=' * 62)
        print('  SPHFLUID -- SPH SIMULATION')
        print('=' * 62)
        print()

        #--------------------------------------------------------------------#
        # Setup
        #--------------------------------------------------------------------#
        print('-' * 62)
        print('  SETUP')
        print('-' * 62)

        simulation = SphSimulation.create(config)
        controller = SimulationController(simulation)
        particles = simulation.particles

        print(f'  Particles:         {particles.nParticles:8d}')
        print(f'  Smoothing Radius:  {config.smoothingRadius:8.4f}')
        print(f'  Particle Mass:     {config.particleMass:8.4f}')
        print(f'  Target Density:    {config.targetDensity:8.2f}')
        print(f'  Pressure Mult.:    {config.pressureMultiplier:8.2f}')
        print(f'  Gravity:           {config.gravity:8.3f}')
        print(f'  Integrator:        {config.integrator:>18}')
        print(f'  Pressure Mode:     {config.pressureMode:>18}')
        print(f'  Initial Density:   {simulation.densityRange()[0]:8.2f} .. {simulation.densityRange()[1]:.2f}')
        print()

        self._states = [simulation.currentState]
        self._recordFrame(controller)

        #--------------------------------------------------------------------#
        # Simulation Loop
        #--------------------------------------------------------------------#
        print('-' * 62)
        print('  RUNNING SIMULATION')
        print('-' * 62)
        print()
        print(f'  {"Time":>8}  {"Step":>8}  {"MaxVel":>8}  {"MinRho":>8}  {"MaxRho":>8}  {"Energy":>10}')
        print('  ' + '-' * 58)

        wallClockStart = timeModule.time()
        printInterval = max(1, nSteps // 20)

        for i in range(nSteps):
            state = controller.tick(dt)
            self._states.append(state)

            if state.step % frameInterval == 0:
                self._recordFrame(controller)

            if state.step % printInterval == 0 or i == nSteps - 1:
                print(
                    f'  {state.time:8.4f}  {state.step:8d}  {state.maxVelocity:8.4f}  '
                    f'{state.minDensity:8.2f}  {state.maxDensity:8.2f}  '
                    f'{state.totalEnergy:10.4f}'
                )

        wallClockSeconds = timeModule.time() - wallClockStart
        finalState = simulation.currentState

        print()
        print('  Simulation complete.')
        print(f'  Total steps:       {finalState.step:8d}')
        print(f'  Wall-clock time:   {wallClockSeconds:8.1f} s')
        print(f'  Frames recorded:   {self._recorder.nFrames:8d}')
        print()

        #--------------------------------------------------------------------#
        # Plotly Output
        #--------------------------------------------------------------------#
        if htmlPath:
            outputDir = os.path.dirname(htmlPath)
            if outputDir:
                os.makedirs(outputDir, exist_ok=True)

            animation = plotFrameAnimation(self._recorder.frames, config)
            animation.write_html(htmlPath)

            diagnosticsPath = os.path.splitext(htmlPath)[0] + '_diagnostics.html'
            plotDiagnostics(self._states).write_html(diagnosticsPath)

            print(f'  Animation:         {htmlPath}')
            print(f'  Diagnostics:       {diagnosticsPath}')
            print()

        #--------------------------------------------------------------------#
        # Summary
        #--------------------------------------------------------------------#
        print('=' * 62)
        print('  SIMULATION SUMMARY')
        print('=' * 62)
        print(f'  Final KE:          {finalState.kineticEnergy:10.6f}')
        print(f'  Final PE:          {finalState.potentialEnergy:10.6f}')
        print(f'  Final Total E:     {finalState.totalEnergy:10.6f}')
        print(f'  Max Density Error: {finalState.maxDensityError * 100:8.3f} %')
        print(f'  Max Velocity:      {finalState.maxVelocity:8.4f}')
        print('=' * 62)
        print()

        return {
            'finalState': finalState,
            'wallClockSeconds': wallClockSeconds,
            'nFrames': self._recorder.nFrames,
            'htmlPath': htmlPath,
        }

    def _recordFrame(self, controller: SimulationController) -> None:
        '''Push the current particles into the frame recorder.'''
        pushFrame(controller.simulation.particles, self._recorder)
        self._recorder.endFrame()


#--------------------------------------------------------------------#
# -- CLI Entry Point -- #
#--------------------------------------------------------------------#

def main() -> None:
    '''CLI entry point.'''
    parser = buildParser()
    args = parser.parse_args()

    setupLogging(logging.DEBUG if args.verbose else logging.INFO)

    if args.config:
        config = SimulationConfig.fromJson(args.config)
    else:
        presets = {
            'small': SimulationConfig.small,
            'standard': SimulationConfig.standard,
        }
        config = presets[args.preset]()

    if args.integrator:
        config.integrator = args.integrator
    if args.pressure_mode:
        config.pressureMode = args.pressure_mode

    SphRunner().run(
        config,
        nSteps=args.steps,
        dt=args.dt,
        frameInterval=max(1, args.frame_interval),
        htmlPath=args.html,
    )


if __name__ == '__main__':
    main()
