"""CLI package for Reading Companion"""
from .main import cli

__all__ = ['cli']
