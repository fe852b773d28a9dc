from .stack import EndpointAccessStack

__all__ = ["EndpointAccessStack"]
