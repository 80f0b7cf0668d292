# -- sphFluid CLI -- #

from sphFluid.runner import main

main()
