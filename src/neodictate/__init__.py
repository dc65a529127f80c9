"""
neodictate - color dictate server for addressable LED controllers
"""

__version__ = "1.0.0"
