"""
Service Layer - Business Logic

Services validate input, enforce business rules and call repositories.

Author: TM3
"""
