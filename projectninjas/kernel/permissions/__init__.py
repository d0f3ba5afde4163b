"""
Access control for project files.
"""

from projectninjas.kernel.permissions.authorization_gate import AuthorizationGate, is_entitled

__all__ = ["AuthorizationGate", "is_entitled"]
