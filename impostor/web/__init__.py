"""
Presentation-facing module: event fan-out and the web server.
"""

from .event_emitter import EventEmitter

__all__ = ['EventEmitter']
