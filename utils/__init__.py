"""
Utility helpers shared by models and routes
"""
