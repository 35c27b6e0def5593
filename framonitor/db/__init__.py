"""
Document store access for FRA Monitor.
"""
