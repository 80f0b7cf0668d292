# -- All-Pairs Particle Search -- #

'''
Brute-force O(N^2) pair enumeration for the SPH phases.

Every particle interacts with every other particle; the kernel's
compact support zeroes out distant pairs. Rows are processed in
blocks so that the (block, N, 3) separation tensor stays bounded in
memory while each block is still fully vectorized.
'''

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Protocol

import numpy as np

from sphFluid import constants as const


@dataclass
class PairBlock:
    '''
    Separations between a block of rows and all particles.

    Parameters:
    -----------
    rows : slice
        Particle indices i covered by this block
    drVecs : np.ndarray
        x_i - x_j, shape (nRows, N, 3)
    distances : np.ndarray
        |x_i - x_j|, shape (nRows, N)
    '''

    rows: slice
    drVecs: np.ndarray
    distances: np.ndarray


class PairSearch(Protocol):
    '''Protocol for pair enumeration strategies.'''

    def blocks(self, positions: np.ndarray) -> Iterator[PairBlock]:
        '''Yield PairBlocks covering every (i, j) combination.'''
        ...


class AllPairsSearch:
    '''
    Enumerate every (i, j) pair, including i == j.

    Parameters:
    -----------
    blockSize : int
        Rows per block
    '''

    def __init__(self, blockSize: int = const.pairBlockSize) -> None:
        self._blockSize = max(1, int(blockSize))

    @property
    def blockSize(self) -> int:
        '''Rows per block.'''
        return self._blockSize

    def blocks(self, positions: np.ndarray) -> Iterator[PairBlock]:
        '''
        Yield separations block by block.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 3)

        Yields:
        -------
        PairBlock : Separations for consecutive row ranges
        '''
        n = positions.shape[0]
        for start in range(0, n, self._blockSize):
            rows = slice(start, min(start + self._blockSize, n))
            drVecs = positions[rows, np.newaxis, :] - positions[np.newaxis, :, :]
            distances = np.sqrt(np.sum(drVecs * drVecs, axis=2))
            yield PairBlock(rows=rows, drVecs=drVecs, distances=distances)
