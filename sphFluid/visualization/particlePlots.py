# -- Particle Visualizations -- #

'''
Plotly figures for recorded SPH frames and step diagnostics.

Frames come from FrameRecorder: (N, 4) arrays of x, y, z and the
frame-normalized density used for coloring.
'''

from __future__ import annotations

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from sphFluid.sph.protocols import SimulationConfig, SimulationState
from sphFluid.visualization import theme


def _particleTrace(frame: np.ndarray) -> go.Scatter3d:
    '''3D scatter of one frame, colored by normalized density.'''
    return go.Scatter3d(
        x=frame[:, 0], y=frame[:, 2], z=frame[:, 1],
        mode='markers',
        marker=dict(
            size=theme.PARTICLE_SIZE,
            color=frame[:, 3],
            colorscale=theme.DENSITY_COLORSCALE,
            cmin=0.0, cmax=1.0,
            colorbar=dict(title='Density'),
        ),
        name='Particles',
    )


def _sceneLayout(config: SimulationConfig) -> dict:
    '''Fixed axis ranges matching the simulation box (y drawn upward).'''
    hx, hy, hz = config.halfExtent
    return dict(
        xaxis=dict(range=[-hx, hx], title='x'),
        yaxis=dict(range=[-hz, hz], title='z'),
        zaxis=dict(range=[-hy, hy], title='y'),
        aspectmode='manual',
        aspectratio=dict(x=hx, y=hz, z=hy),
    )


def plotParticleFrame(
    frame: np.ndarray,
    config: SimulationConfig,
    title: str = 'SPH Particles',
) -> go.Figure:
    '''
    Single-frame 3D particle plot.

    Parameters:
    -----------
    frame : np.ndarray
        Recorded frame, shape (N, 4)
    config : SimulationConfig
        Configuration (box extents)
    title : str
        Figure title

    Returns:
    --------
    go.Figure : Plotly figure
    '''
    fig = go.Figure(data=[_particleTrace(frame)])
    fig.update_layout(
        title=title,
        scene=_sceneLayout(config),
        template=theme.TEMPLATE,
        height=600,
    )
    return fig


def plotFrameAnimation(
    frames: list[np.ndarray],
    config: SimulationConfig,
    frameDurationMs: int = 50,
) -> go.Figure:
    '''
    Animated 3D particle plot with play/pause controls and a slider.

    Parameters:
    -----------
    frames : list[np.ndarray]
        Recorded frames, each shape (N, 4)
    config : SimulationConfig
        Configuration (box extents)
    frameDurationMs : int
        Display time per frame [ms]

    Returns:
    --------
    go.Figure : Plotly figure
    '''
    if not frames:
        raise ValueError('No frames to animate')

    fig = go.Figure(
        data=[_particleTrace(frames[0])],
        frames=[
            go.Frame(data=[_particleTrace(frame)], name=str(i))
            for i, frame in enumerate(frames)
        ],
    )

    playArgs = dict(frame=dict(duration=frameDurationMs, redraw=True), fromcurrent=True)
    pauseArgs = dict(frame=dict(duration=0, redraw=False), mode='immediate')

    fig.update_layout(
        title=f'SPH Particles ({len(frames)} frames)',
        scene=_sceneLayout(config),
        template=theme.TEMPLATE,
        height=650,
        updatemenus=[dict(
            type='buttons',
            buttons=[
                dict(label='Play', method='animate', args=[None, playArgs]),
                dict(label='Pause', method='animate', args=[[None], pauseArgs]),
            ],
        )],
        sliders=[dict(
            steps=[
                dict(method='animate', label=str(i), args=[[str(i)], pauseArgs])
                for i in range(len(frames))
            ],
        )],
    )

    return fig


def plotDiagnostics(states: list[SimulationState]) -> go.Figure:
    '''
    Energy and density-range history of a run.

    Parameters:
    -----------
    states : list[SimulationState]
        Per-step diagnostics

    Returns:
    --------
    go.Figure : Plotly figure with 2 subplots (energy, density)
    '''
    times = [s.time for s in states]

    fig = make_subplots(
        rows=1, cols=2,
        subplot_titles=('Energy', 'Density Range'),
    )

    fig.add_trace(
        go.Scatter(x=times, y=[s.kineticEnergy for s in states], mode='lines',
                   name='Kinetic', line=dict(color=theme.RED, width=2)),
        row=1, col=1,
    )
    fig.add_trace(
        go.Scatter(x=times, y=[s.potentialEnergy for s in states], mode='lines',
                   name='Potential', line=dict(color=theme.BLUE, width=2)),
        row=1, col=1,
    )
    fig.add_trace(
        go.Scatter(x=times, y=[s.totalEnergy for s in states], mode='lines',
                   name='Total', line=dict(color=theme.REFERENCE_LINE, dash='dash', width=1)),
        row=1, col=1,
    )
    fig.add_trace(
        go.Scatter(x=times, y=[s.minDensity for s in states], mode='lines',
                   name='Min density', line=dict(color=theme.GREEN, width=2)),
        row=1, col=2,
    )
    fig.add_trace(
        go.Scatter(x=times, y=[s.maxDensity for s in states], mode='lines',
                   name='Max density', line=dict(color=theme.ORANGE, width=2)),
        row=1, col=2,
    )

    fig.update_xaxes(title_text='Time', row=1, col=1)
    fig.update_xaxes(title_text='Time', row=1, col=2)
    fig.update_layout(
        title='Simulation Diagnostics',
        template=theme.TEMPLATE,
        height=400,
    )

    return fig
