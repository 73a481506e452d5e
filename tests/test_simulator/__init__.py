"""
Simulator Tests

Tests for the core entities: floors, elevators, the building and the
event/timer infrastructure.
"""
