"""
Shared infrastructure: logging, database access and the exception taxonomy.
"""
