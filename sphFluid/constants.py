# -- Default Tunables for the SPH Fluid Core -- #

'''
Default values for the SPH tunables and numerical guards.

Units are arbitrary simulation units: the domain is a box a few units
across centred at the origin, and the kernel constants and equation
of state are tuning heuristics rather than calibrated physics.
'''

#--------------------------------------------------------------------#
# -- Fluid Properties -- #
#--------------------------------------------------------------------#

# Uniform particle mass
particleMass: float = 1.0

# Density baseline used by the linear equation of state
targetDensity: float = 80.0

# Stiffness of the equation of state: p = (rho - rho_0) * k
# k < 0 pushes over-dense regions apart (stable fluid); k > 0 clumps them
pressureMultiplier: float = -10.0

# Viscosity coefficient (mu) for relative-velocity damping
viscosity: float = 0.05

# Gravitational acceleration magnitude, acting along -y
gravity: float = 1.0

#--------------------------------------------------------------------#
# -- SPH Numerical Parameters -- #
#--------------------------------------------------------------------#

# Smoothing radius h; kernel support is 2h
smoothingRadius: float = 0.2

# Fixed time step [s]
timeStep: float = 0.01

# Kernel volume constant of the historical normalization (7 / 4pi)
legacyKernelConstant: float = 0.557042300822

# Softening term for the viscosity denominator: eps^2 = factor * h^2
viscositySoftening: float = 0.01

# Densities at or below this value are never used as a denominator
densityEpsilon: float = 1e-12

# Separations below this length use the fallback gradient direction
separationEpsilon: float = 1e-12

# Rows per block for all-pairs evaluation (memory ~ block * n * 3 floats)
pairBlockSize: int = 256

#--------------------------------------------------------------------#
# -- Domain and Boundary -- #
#--------------------------------------------------------------------#

# Box half-extent per axis (x, y, z)
halfExtent: tuple[float, float, float] = (2.0, 2.0, 2.0)

# Velocity multiplier on wall contact (negative = inelastic bounce)
boundaryDamping: float = -0.5

#--------------------------------------------------------------------#
# -- Initial Placement -- #
#--------------------------------------------------------------------#

# Particles per side of the initial cube (count = dimension^3)
gridDimension: int = 8

# Lowest y of the spawned block
spawnFloor: float = -0.5

# Amplitude of the random x offset applied on reset
jitter: float = 0.01

# Seed for the reset jitter
seed: int = 0xACE1
