"""
Core configuration, logging, errors and Celery wiring.
"""
