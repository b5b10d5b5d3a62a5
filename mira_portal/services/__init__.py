"""
MIRA Portal - Services
"""
