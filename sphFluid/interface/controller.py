# -- Simulation Controller -- #

'''
Drives a simulation from an external tick and key events.

Key-down events are turned into commands and queued; they are applied
at the start of the next tick so that a toggle or reset never lands
in the middle of a step. Key-up and auto-repeat events are ignored.

    ' '  toggle simulation on/off
    's'  run one step on the next tick, even while disabled
    'r'  reset particle positions
'''

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

from sphFluid.sph.protocols import SimulationState, SphSolver
from sphFluid.visualization.renderSink import DrawFunction, pushFrame

logger = logging.getLogger(__name__)


KEY_TOGGLE = ' '
KEY_STEP = 's'
KEY_RESET = 'r'

KEY_COMMANDS = {
    KEY_TOGGLE: 'toggle',
    KEY_STEP: 'step',
    KEY_RESET: 'reset',
}


@dataclass
class KeyEvent:
    '''
    A keyboard event from the host.

    Parameters:
    -----------
    kind : str
        'down', 'up', or 'repeat'
    key : str | int
        Single character, or its character code
    '''

    kind: str
    key: str | int

    @property
    def character(self) -> str:
        '''The key as a lower-case single character.'''
        if isinstance(self.key, int):
            return chr(self.key).lower()
        return self.key.lower()


class SimulationController:
    '''
    Couples a simulation to a tick source, key events and a render sink.

    Parameters:
    -----------
    simulation : SphSolver
        Simulation to drive (e.g. SphSimulation)
    draw : DrawFunction | None
        Per-particle draw function fed after every tick
    enabled : bool
        Whether ticks advance the simulation
    '''

    def __init__(
        self,
        simulation: SphSolver,
        draw: DrawFunction | None = None,
        enabled: bool = True,
    ) -> None:
        self.simulation = simulation
        self.draw = draw
        self.enabled = enabled
        self._pending: deque[str] = deque()

    @property
    def pendingCommands(self) -> list[str]:
        '''Commands queued for the next tick.'''
        return list(self._pending)

    def handleKey(self, event: KeyEvent) -> bool:
        '''
        Queue the command bound to a key-down event.

        Parameters:
        -----------
        event : KeyEvent
            Host key event

        Returns:
        --------
        bool : True if a command was queued
        '''
        if event.kind != 'down':
            return False

        command = KEY_COMMANDS.get(event.character)
        if command is None:
            return False

        self._pending.append(command)
        return True

    def tick(self, dt: float | None = None) -> SimulationState | None:
        '''
        Apply queued commands, step if enabled, and push the frame.

        Parameters:
        -----------
        dt : float | None
            Step size (defaults to the simulation's configured step)

        Returns:
        --------
        SimulationState | None : State after the step, or None if
            no step ran this tick
        '''
        singleStep = False
        while self._pending:
            command = self._pending.popleft()
            if command == 'toggle':
                self.enabled = not self.enabled
                logger.info('Simulation %s', 'enabled' if self.enabled else 'paused')
            elif command == 'reset':
                self.simulation.reset()
                logger.info('Simulation reset')
            elif command == 'step':
                singleStep = True

        state = None
        if self.enabled or singleStep:
            state = self.simulation.step(dt)

        if self.draw is not None:
            pushFrame(self.simulation.particles, self.draw)
            # Frame-collecting sinks (e.g. FrameRecorder) close the frame here
            endFrame = getattr(self.draw, 'endFrame', None)
            if endFrame is not None:
                endFrame()

        return state
