"""
Page routers of the console, one module per section.
"""
