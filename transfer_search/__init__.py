"""
Transfer Search & Dynamic Pricing Engine
Airport transfer quotes from independently operated local suppliers
"""

__version__ = "1.0.0"
