"""
Celery tasks.
"""
