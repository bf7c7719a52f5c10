"""
Core utilities: exceptions and logging.
"""
