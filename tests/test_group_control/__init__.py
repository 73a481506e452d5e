"""Allocation strategy and scheduler tests"""
