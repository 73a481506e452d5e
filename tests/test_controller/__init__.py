"""
Controller Tests

Door timers, panel commands, interrupt handling and full system runs.
"""
