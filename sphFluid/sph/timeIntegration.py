# -- SPH Time Integration Schemes -- #

'''
Time integration methods for the SPH particle system.

Semi-implicit (symplectic) Euler:
    v(t+dt) = v(t) + a(t) * dt      (kick)
    x(t+dt) = x(t) + v(t+dt) * dt   (drift)

Leapfrog (half-step kick-drift-kick):
    v_half  = v(t) + a(t) * dt/2
    x(t+dt) = x(t) + v_half * dt
    v(t+dt) = v_half + a(t) * dt/2

Both use the acceleration computed for the current step; the
pressure phase is not re-evaluated between the two half kicks.

References:
-----------
Monaghan (2005) -- Smoothed Particle Hydrodynamics
Hairer et al. (2003) -- Geometric Numerical Integration
'''

from __future__ import annotations

from typing import Protocol

from sphFluid.sph.particles import ParticleSystem


######################################################################
# -- Time Integrator Protocol -- #
######################################################################

class TimeIntegrator(Protocol):
    '''Protocol for time integration schemes.'''

    def integrate(self, particles: ParticleSystem, dt: float) -> None:
        '''
        Advance all particles by one time step.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle system to advance
        dt : float
            Time step size
        '''
        ...


######################################################################
# -- Semi-Implicit Euler Integrator -- #
######################################################################

class SemiImplicitEuler:
    '''
    Symplectic (semi-implicit) Euler integrator.

    The drift uses the *updated* velocity, which is what makes this
    scheme symplectic.
    '''

    def integrate(self, particles: ParticleSystem, dt: float) -> None:
        '''Kick then drift.'''
        particles.velocities += particles.accelerations * dt
        particles.positions += particles.velocities * dt


######################################################################
# -- Leapfrog Integrator -- #
######################################################################

class Leapfrog:
    '''Kick-drift-kick leapfrog integrator.'''

    def integrate(self, particles: ParticleSystem, dt: float) -> None:
        '''Half kick, drift, half kick.'''
        halfKick = particles.accelerations * (0.5 * dt)

        particles.velocities += halfKick
        particles.positions += particles.velocities * dt
        particles.velocities += halfKick


def createIntegrator(name: str) -> TimeIntegrator:
    '''
    Create an integrator by name.

    Parameters:
    -----------
    name : str
        'semiImplicitEuler' or 'leapfrog'

    Returns:
    --------
    TimeIntegrator : Integrator instance

    Raises:
    -------
    ValueError : If the name is unknown
    '''
    if name == 'semiImplicitEuler':
        return SemiImplicitEuler()
    elif name == 'leapfrog':
        return Leapfrog()
    else:
        raise ValueError(f'Unknown integrator: {name}')
