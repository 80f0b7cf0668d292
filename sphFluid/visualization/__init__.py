# -- Visualization Package -- #

'''
Render-sink adapter, orbit camera, and Plotly particle figures.
'''

from sphFluid.visualization.renderSink import FrameRecorder, normalizeDensities, pushFrame
from sphFluid.visualization.camera import makeViewProjection
