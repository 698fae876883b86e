"""
Command handlers for the instruction-hub CLI.
"""
