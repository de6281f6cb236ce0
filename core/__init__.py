"""Core application for the A Casa backend.

This package contains the module registry, models, serializers, views and
route registrations behind the administrative API.
"""
