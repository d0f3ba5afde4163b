"""
Kernel: persistence models and the domain services built on them.
"""
