# -- Visualization Theme -- #

'''
Shared dark-mode theme for the particle Plotly figures.
'''

# Plotly template
TEMPLATE = 'plotly_dark'

# Series colors
BLUE = '#42A5F5'
RED = '#EF5350'
GREEN = '#66BB6A'
ORANGE = '#FFA726'

# Neutrals
REFERENCE_LINE = '#888888'

# Normalized-density color scale for particles
DENSITY_COLORSCALE = 'Inferno'

# Marker size for particles in 3D scatter plots
PARTICLE_SIZE = 3
