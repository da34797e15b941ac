"""
Stackctl - Operator command dispatcher for the containerized application stack.

This package provides a CLI that forwards service verbs to docker compose
for the development and production configurations, with presets, guarded
destructive actions, database backups and a health probe on top.
"""

__version__ = "0.1.0"
__author__ = "Stackctl Maintainers"
