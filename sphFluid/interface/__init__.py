# -- Interactive Interface Package -- #

'''
Live parameter tuning and key-event control of a running simulation.
'''

from sphFluid.interface.controller import KeyEvent, SimulationController
from sphFluid.interface.parameters import ParameterSurface
