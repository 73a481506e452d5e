"""Interfaces for group control strategies"""

from .allocation_strategy import IAllocationStrategy

__all__ = ['IAllocationStrategy']
