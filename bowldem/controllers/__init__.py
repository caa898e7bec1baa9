"""
Controllers Package

HTTP blueprints for the game API.
"""
