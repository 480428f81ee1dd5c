"""
Command line interface for Batch Insert
"""
