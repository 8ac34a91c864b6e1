"""
Command line tasks for secret-stack.
"""
