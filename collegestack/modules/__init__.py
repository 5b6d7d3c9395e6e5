"""
Feature modules of the forum.
Each module keeps its models, schemas, services and API router together.
"""
