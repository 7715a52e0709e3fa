"""Simulation loop module."""

from .tick_scheduler import TickScheduler, SchedulerState, RenderTarget

__all__ = ['TickScheduler', 'SchedulerState', 'RenderTarget']
