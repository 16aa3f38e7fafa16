from .auth_handler import AuthHandler, BasicAuthHandler, StaticAuthHandler, create_auth_handler

__all__ = ["AuthHandler", "BasicAuthHandler", "StaticAuthHandler", "create_auth_handler"]
